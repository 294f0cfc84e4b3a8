"""Core enumerations shared by filters, endpoints and the retrieval engine.

Key Types:
    - SortType: Field the server sorts matches by
    - SortOrder: Direction of that sort (used by bounds probes)
    - Resource: The two searchable content kinds
"""

from enum import Enum


class SortType(str, Enum):
    """Server-side sort key.

    Only ``CREATED_UTC`` supports time-range partitioning; queries sorted by
    any other key are always walked by a single paginator.
    """

    CREATED_UTC = "created_utc"
    SCORE = "score"
    NUM_COMMENTS = "num_comments"

    def __str__(self) -> str:
        return self.value


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"

    def __str__(self) -> str:
        return self.value


class Resource(str, Enum):
    """Searchable content kinds."""

    SUBMISSION = "submission"
    COMMENT = "comment"

    @property
    def search_path(self) -> str:
        """Path of the search endpoint for this resource."""
        return f"/reddit/{self.value}/search/"

    def __str__(self) -> str:
        return self.value
