"""
Pagination DTO shared by paged queries.
"""
from dataclasses import dataclass


@dataclass
class PaginationDTO:
    """DTO for pagination metadata."""

    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0
