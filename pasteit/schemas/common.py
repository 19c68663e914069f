"""
Common Pydantic schemas for API request/response handling.

This module provides:
- Pagination parameters
- Pagination metadata and the generic paginated response
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

# Type variable for generic paginated responses
DataT = TypeVar("DataT")

MAX_PAGE_SIZE = 100


class PaginationParams(BaseModel):
    """
    Query parameters for paginated list endpoints.

    Attributes:
        page: Page number (1-indexed)
        limit: Number of items per page (max 100)
    """

    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    limit: int = Field(
        default=20,
        ge=1,
        le=MAX_PAGE_SIZE,
        description="Number of items per page (max 100)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "page": 1,
                "limit": 20,
            }
        }
    )

    @property
    def offset(self) -> int:
        """
        Calculate SQL OFFSET from page number.

        Example:
            >>> PaginationParams(page=2, limit=20).offset
            20
        """
        return (self.page - 1) * self.limit

    @staticmethod
    def calculate_total_pages(total: int, limit: int) -> int:
        """
        Calculate total pages from total count, i.e. ceil(total / limit).

        Example:
            >>> PaginationParams.calculate_total_pages(95, 20)
            5
            >>> PaginationParams.calculate_total_pages(0, 20)
            0
        """
        return (total + limit - 1) // limit if total > 0 else 0


class PaginationMeta(BaseModel):
    """
    Metadata for paginated responses.

    Attributes:
        total: Total number of items matching the filter
        page: Current page number
        limit: Number of items per page
        pages: Total number of pages
    """

    total: int = Field(description="Total number of items")
    page: int = Field(description="Current page number")
    limit: int = Field(description="Number of items per page")
    pages: int = Field(description="Total number of pages")

    @classmethod
    def build(cls, total: int, pagination: PaginationParams) -> "PaginationMeta":
        """Build metadata for a page of results."""
        return cls(
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            pages=PaginationParams.calculate_total_pages(total, pagination.limit),
        )


class PaginatedResponse(BaseModel, Generic[DataT]):
    """
    Generic paginated response wrapper.

    Attributes:
        items: Items of the current page, in order
        pagination: Pagination metadata
    """

    items: list[DataT]
    pagination: PaginationMeta


class MessageResponse(BaseModel):
    """Acknowledgement for operations without a resource to return."""

    message: str
    success: bool = True
