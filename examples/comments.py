#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from pullcaps import Client, Filter


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream Reddit comments by author from Pushshift")
    p.add_argument("author")
    p.add_argument("limit", nargs="?", type=int, default=50)
    p.add_argument("--subreddit")
    p.add_argument("-v", "--verbose", action="store_true", help="log retrieval progress")
    return p.parse_args()


def report_error(endpoint_id: str, params: dict, error: BaseException) -> None:
    print(f"! {endpoint_id} {params}: {error}")


async def main() -> None:
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(message)s")

    query = Filter().author(args.author).limit(args.limit)
    if args.subreddit:
        query = query.subreddit(args.subreddit)

    count = 0
    async with Client(on_error=report_error) as client:
        async for comment in client.get_comments(query):
            count += 1
            body = comment.body.replace("\n", " ")[:80]
            print(f"{comment.created.isoformat():25} | r/{comment.subreddit.name:15} | {body}")
    print(f"{count} comments")


if __name__ == "__main__":
    asyncio.run(main())
