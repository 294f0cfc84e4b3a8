"""Response envelope returned by the search endpoints."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from .content import ContentBase

ItemT = TypeVar("ItemT", bound=ContentBase)


class PageMetadata(BaseModel):
    """Optional metadata block, present when ``metadata=true`` was requested."""

    total_results: int | None = None

    model_config = ConfigDict(frozen=True)


class Page(BaseModel, Generic[ItemT]):
    """One batch of search results."""

    data: list[ItemT]
    metadata: PageMetadata | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def total(self) -> int | None:
        """Total number of matches reported by the server, if requested."""
        return self.metadata.total_results if self.metadata else None

    def __len__(self) -> int:
        return len(self.data)

    @property
    def last(self) -> ItemT | None:
        return self.data[-1] if self.data else None
