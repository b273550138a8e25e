"""Return containers shared by the workflow application services."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

from buildermatch.domain.events.base import DomainEvent
from buildermatch.domain.exceptions import ValidationError

T = TypeVar("T")

MAX_PAGE_SIZE = 100


@dataclass
class WorkflowResult(Generic[T]):
    """Primary effect of an operation plus the events it wants delivered.

    Events are handed to the dispatcher after the transition is stored; a
    delivery failure never changes ``value``.
    """

    value: T
    events: List[DomainEvent] = field(default_factory=list)


@dataclass
class Page(Generic[T]):
    """Paginated result returned to the API layer."""

    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages


def page_window(page: int, limit: int) -> int:
    """Validate 1-based pagination and return the row offset."""
    if page < 1:
        raise ValidationError("page must be 1 or greater")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    return (page - 1) * limit


__all__ = ["MAX_PAGE_SIZE", "Page", "WorkflowResult", "page_window"]
