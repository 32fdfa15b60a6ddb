"""Rule-based natural-language task parser.

Turns free text such as "Buy milk tomorrow at 3pm" into a category, priority,
due date, due time, recurrence and a cleaned title. Every stage is a pure
function of the input text and the reference day, so a parse never fails:
when nothing matches, the field keeps its default.

Precedence differs by stage:
- category, priority, recurrence and time words: first match wins
- relative date phrases: first match wins; "in N days" and an explicit
  month/day then overwrite whatever came before
- time words overwrite any numeric time
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

import pytz

from smart_tasks.config import settings
from smart_tasks.schemas import Category, Priority, Recurrence
from smart_tasks.services.keywords import (
    CATEGORY_KEYWORDS,
    HIGH_PRIORITY_KEYWORDS,
    LOW_PRIORITY_KEYWORDS,
    RECURRENCE_KEYWORDS,
    TIME_WORDS,
    WEEKDAYS,
)

logger = logging.getLogger(__name__)

# ASCII digits only; a fullwidth "３pm" is not a time
IN_DAYS_PATTERN = re.compile(r"in (\d+) days?", re.ASCII)
MONTH_DAY_PATTERN = re.compile(r"(\d{1,2})[/-](\d{1,2})", re.ASCII)
TWELVE_HOUR_PATTERN = re.compile(r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)", re.ASCII | re.IGNORECASE)
TWENTY_FOUR_HOUR_PATTERN = re.compile(r"(\d{1,2}):(\d{2})", re.ASCII)

TITLE_STRIP_PATTERNS = [
    r"\b(?:urgent|asap|important|critical|immediately|priority)\b",
    r"\b(?:tomorrow|today|next week|this weekend)\b",
    r"\bin \d+ days?\b",
    r"\d{1,2}:\d{2}\s*(?:am|pm)?",
    r"\d{1,2}\s*(?:am|pm)",
    r"\bat\s",
    r"\bon\s",
    r"\b(?:every day|daily|every week|weekly|every month|monthly)\b",
]
TITLE_STRIP_REGEXES = [re.compile(p, re.ASCII | re.IGNORECASE) for p in TITLE_STRIP_PATTERNS]

DateRule = Callable[[str, str, datetime], datetime | None]


@dataclass
class ParseResult:
    title: str
    category: Category = Category.OTHER
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    due_time: str | None = None  # "HH:MM", 24-hour
    recurring: Recurrence = Recurrence.NONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "category": self.category.value,
            "priority": self.priority.value,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "due_time": self.due_time,
            "recurring": self.recurring.value,
        }


def _day_of_week(day: datetime) -> int:
    """Sunday-first day index (Sunday=0 ... Saturday=6)."""
    return (day.weekday() + 1) % 7


def _days_until(target: int, today: datetime) -> int:
    """Days until the next ``target`` weekday, never zero."""
    return (target - _day_of_week(today) + 7) % 7 or 7


def _calendar_date(year: int, month_index: int, day: int) -> datetime:
    """Build a date, letting out-of-range month/day values roll over.

    Month 12 (zero-based) becomes January of the next year and day 0 becomes
    the last day of the previous month.
    """
    year += month_index // 12
    return datetime(year, month_index % 12 + 1, 1) + timedelta(days=day - 1)


def _next_year(value: datetime) -> datetime:
    try:
        return value.replace(year=value.year + 1)
    except ValueError:
        # Feb 29 has no counterpart next year
        return datetime(value.year + 1, 3, 1)


def _rule_tomorrow(lowered: str, text: str, today: datetime) -> datetime | None:
    return today + timedelta(days=1) if "tomorrow" in lowered else None


def _rule_today(lowered: str, text: str, today: datetime) -> datetime | None:
    return today if "today" in lowered else None


def _rule_next_week(lowered: str, text: str, today: datetime) -> datetime | None:
    return today + timedelta(days=7) if "next week" in lowered else None


def _rule_weekend(lowered: str, text: str, today: datetime) -> datetime | None:
    if any(word in lowered for word in ("weekend", "saturday", "sunday")):
        return today + timedelta(days=_days_until(6, today))
    return None


def _rule_weekday(lowered: str, text: str, today: datetime) -> datetime | None:
    for index, name in enumerate(WEEKDAYS):
        if name in lowered:
            return today + timedelta(days=_days_until(index, today))
    return None


def _rule_in_days(lowered: str, text: str, today: datetime) -> datetime | None:
    match = IN_DAYS_PATTERN.search(lowered)
    if not match:
        return None
    try:
        return today + timedelta(days=int(match.group(1)))
    except OverflowError:
        logger.debug(f"Ignoring out-of-range day offset: {match.group(0)!r}")
        return None


def _rule_month_day(lowered: str, text: str, today: datetime) -> datetime | None:
    match = MONTH_DAY_PATTERN.search(text)
    if not match:
        return None
    month_index = int(match.group(1)) - 1
    day = int(match.group(2))
    specific = _calendar_date(today.year, month_index, day)
    if specific < today:
        specific = _next_year(specific)
    return specific


class Parser:
    """Extracts structured task fields from free text."""

    # Tried in order until one matches
    RELATIVE_DATE_RULES: list[DateRule] = [
        _rule_tomorrow,
        _rule_today,
        _rule_next_week,
        _rule_weekend,
        _rule_weekday,
    ]
    # Each match overwrites the result so far
    OVERRIDE_DATE_RULES: list[DateRule] = [
        _rule_in_days,
        _rule_month_day,
    ]

    def __init__(
        self,
        timezone: str | None = None,
        category_keywords: dict[Category, list[str]] | None = None,
        high_priority_keywords: list[str] | None = None,
        low_priority_keywords: list[str] | None = None,
        recurrence_keywords: dict[Recurrence, list[str]] | None = None,
    ):
        """Initialize parser.

        Args:
            timezone: IANA timezone used to decide what "today" is when no
                reference is passed. Defaults to settings.user_timezone.
            category_keywords: Ordered category -> keywords table.
            high_priority_keywords: Words that make a task High priority.
            low_priority_keywords: Words that make a task Low priority.
            recurrence_keywords: Ordered recurrence -> keywords table.
        """
        self.timezone = pytz.timezone(timezone or settings.user_timezone)
        self.category_keywords = category_keywords or CATEGORY_KEYWORDS
        self.high_priority_keywords = high_priority_keywords or HIGH_PRIORITY_KEYWORDS
        self.low_priority_keywords = low_priority_keywords or LOW_PRIORITY_KEYWORDS
        self.recurrence_keywords = recurrence_keywords or RECURRENCE_KEYWORDS

    def parse(self, text: str, reference: date | datetime | None = None) -> ParseResult:
        """Parse one task description.

        Args:
            text: Raw user input.
            reference: The day relative phrases are resolved against. Defaults
                to the current day in the configured timezone.

        Returns:
            ParseResult with defaults for anything not found in the text.
        """
        today = self.reference_day(reference)

        result = ParseResult(
            title=self.clean_title(text),
            category=self.classify_category(text),
            priority=self.classify_priority(text),
            due_date=self.extract_date(text, today),
            due_time=self.extract_time(text),
            recurring=self.detect_recurrence(text),
        )
        logger.debug(
            f"Parsed {text!r}: category={result.category.value} "
            f"priority={result.priority.value} due={result.due_date} {result.due_time} "
            f"recurring={result.recurring.value}"
        )
        return result

    def reference_day(self, reference: date | datetime | None = None) -> datetime:
        """Midnight of the reference day, as a naive datetime."""
        if reference is None:
            reference = datetime.now(self.timezone)
        return datetime(reference.year, reference.month, reference.day)

    def classify_category(self, text: str) -> Category:
        lowered = text.lower()
        for category, keywords in self.category_keywords.items():
            if any(keyword in lowered for keyword in keywords):
                return category
        return Category.OTHER

    def classify_priority(self, text: str) -> Priority:
        lowered = text.lower()
        if any(keyword in lowered for keyword in self.high_priority_keywords):
            return Priority.HIGH
        if any(keyword in lowered for keyword in self.low_priority_keywords):
            return Priority.LOW
        return Priority.MEDIUM

    def extract_date(self, text: str, today: date | datetime | None = None) -> datetime | None:
        """Resolve the due date.

        The first relative phrase found (tomorrow, today, next week, weekend,
        weekday name) sets the date; "in N days" and then a month/day such as
        "3/15" overwrite it when present.
        """
        today = self.reference_day(today)
        lowered = text.lower()

        due_date = None
        for rule in self.RELATIVE_DATE_RULES:
            due_date = rule(lowered, text, today)
            if due_date is not None:
                break

        for rule in self.OVERRIDE_DATE_RULES:
            value = rule(lowered, text, today)
            if value is not None:
                due_date = value
        return due_date

    def extract_time(self, text: str) -> str | None:
        """Resolve the due time as "HH:MM".

        A 24-hour "HH:MM" is only considered when no am/pm time is present,
        and a time word such as "evening" overrides both.
        """
        lowered = text.lower()
        clock: tuple[int, int] | None = None

        match = TWELVE_HOUR_PATTERN.search(text)
        if match:
            hour = int(match.group(1))
            minute = int(match.group(2) or 0)
            meridiem = match.group(3).lower()
            if meridiem == "pm" and hour != 12:
                hour += 12
            elif meridiem == "am" and hour == 12:
                hour = 0
            if 0 <= hour < 24 and 0 <= minute < 60:
                clock = (hour, minute)
        else:
            match = TWENTY_FOUR_HOUR_PATTERN.search(text)
            if match:
                hour = int(match.group(1))
                minute = int(match.group(2))
                if 0 <= hour < 24 and 0 <= minute < 60:
                    clock = (hour, minute)

        for word, value in TIME_WORDS:
            if word in lowered:
                clock = value
                break

        if clock is None:
            return None
        return f"{clock[0]:02d}:{clock[1]:02d}"

    def detect_recurrence(self, text: str) -> Recurrence:
        lowered = text.lower()
        for recurrence, keywords in self.recurrence_keywords.items():
            if any(keyword in lowered for keyword in keywords):
                return recurrence
        return Recurrence.NONE

    def clean_title(self, text: str) -> str:
        """Strip priority, date, time and recurrence phrases from the text.

        Weekday names and category words are left in place. Falls back to the
        trimmed input when nothing would be left.
        """
        title = text
        for regex in TITLE_STRIP_REGEXES:
            title = regex.sub("", title)

        title = re.sub(r"\s+", " ", title).strip()
        if not title:
            title = text.strip()

        return title[:1].upper() + title[1:]


_parser: Parser | None = None


def get_parser() -> Parser:
    """Get the shared Parser instance."""
    global _parser
    if _parser is None:
        _parser = Parser()
    return _parser


def parse(text: str, reference: date | datetime | None = None) -> ParseResult:
    """Parse text with the shared Parser."""
    return get_parser().parse(text, reference)
