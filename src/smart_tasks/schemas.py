from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from smart_tasks.services.parser import ParseResult


class Category(str, Enum):
    WORK = "Work"
    PERSONAL = "Personal"
    HEALTH = "Health"
    FINANCE = "Finance"
    SHOPPING = "Shopping"
    OTHER = "Other"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Recurrence(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def as_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def generate_id(created_at: datetime) -> str:
    """Millisecond timestamp of the creation instant."""
    return str(int(as_utc(created_at).timestamp() * 1000))


class Task(BaseModel):
    id: str
    title: str
    category: Category = Category.OTHER
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    due_time: str | None = None
    recurring: Recurrence = Recurrence.NONE
    completed: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, value: datetime) -> datetime:
        return as_utc(value)

    @classmethod
    def from_parse(cls, result: ParseResult, created_at: datetime | None = None) -> Task:
        created_at = as_utc(created_at or datetime.now(UTC))
        return cls(
            id=generate_id(created_at),
            title=result.title,
            category=result.category,
            priority=result.priority,
            due_date=result.due_date,
            due_time=result.due_time,
            recurring=result.recurring,
            created_at=created_at,
        )
