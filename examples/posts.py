#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from pullcaps import Client, Filter, SortType


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Search Pushshift for Reddit posts")
    p.add_argument("subreddit", nargs="?", default="askreddit")
    p.add_argument("limit", nargs="?", type=int, default=20)
    p.add_argument("--author")
    p.add_argument("--after", type=int, help="epoch seconds")
    p.add_argument("--before", type=int, help="epoch seconds")
    p.add_argument("--sort", choices=[s.value for s in SortType])
    return p.parse_args()


async def main() -> None:
    args = parse_args()

    query = Filter().subreddit(args.subreddit).limit(args.limit)
    if args.author:
        query = query.author(args.author)
    if args.after is not None:
        query = query.after(args.after)
    if args.before is not None:
        query = query.before(args.before)
    if args.sort:
        query = query.sort_type(args.sort)

    async with Client() as client:
        print(f"Posts in r/{args.subreddit} (up to {args.limit}):")
        print(f"{'Created':25} | {'Score':>6} | {'Author':20} | Title")
        print("-" * 100)
        async for post in client.get_posts(query):
            created = post.created.isoformat()
            print(f"{created:25} | {post.attrs.score:>6} | {post.author.name:20} | {post.title[:60]}")


if __name__ == "__main__":
    asyncio.run(main())
