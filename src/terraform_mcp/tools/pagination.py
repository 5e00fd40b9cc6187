"""Optional page_number / page_size parameters shared by list tools."""

from dataclasses import dataclass
from typing import Any

from .base import ToolParameter, ToolRequest

DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

PAGINATION_PARAMETERS = (
    ToolParameter(
        "page_number",
        type="number",
        description="Page number to retrieve, starting from 1",
        default=DEFAULT_PAGE_NUMBER,
        minimum=1,
    ),
    ToolParameter(
        "page_size",
        type="number",
        description=f"Number of items per page (max {MAX_PAGE_SIZE})",
        default=DEFAULT_PAGE_SIZE,
        minimum=1,
        maximum=MAX_PAGE_SIZE,
    ),
)


class PaginationError(ValueError):
    """Raised when page_number or page_size is not a valid positive integer."""


@dataclass(frozen=True)
class Pagination:
    page: int = DEFAULT_PAGE_NUMBER
    page_size: int = DEFAULT_PAGE_SIZE


def _as_int(name: str, value: Any) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool):
        raise PaginationError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise PaginationError(f"{name} must be an integer, got {value!r}")
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise PaginationError(f"{name} must be an integer, got {value!r}")
    raise PaginationError(f"{name} must be an integer, got {value!r}")


def optional_pagination_params(request: ToolRequest) -> Pagination:
    """
    Read optional pagination parameters from a request.

    Raises:
        PaginationError: If a value is not an integer or is out of range
    """
    page = request.arguments.get("page_number")
    page_size = request.arguments.get("page_size")

    page = DEFAULT_PAGE_NUMBER if page is None else _as_int("page_number", page)
    page_size = DEFAULT_PAGE_SIZE if page_size is None else _as_int("page_size", page_size)

    if page < 1:
        raise PaginationError(f"page_number must be at least 1, got {page}")
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise PaginationError(
            f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}"
        )
    return Pagination(page=page, page_size=page_size)
