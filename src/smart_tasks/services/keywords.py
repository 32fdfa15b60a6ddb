"""Keyword tables used by the rule-based parser.

Matching is plain substring containment on lowercased text, so order matters:
categories are tried top to bottom and the first hit wins.
"""

from smart_tasks.schemas import Category, Recurrence

CATEGORY_KEYWORDS: dict[Category, list[str]] = {
    Category.WORK: [
        "meeting",
        "presentation",
        "report",
        "project",
        "client",
        "deadline",
        "email",
        "call",
        "conference",
    ],
    Category.PERSONAL: [
        "birthday",
        "anniversary",
        "family",
        "friend",
        "party",
        "dinner",
        "lunch",
        "movie",
    ],
    Category.HEALTH: [
        "doctor",
        "dentist",
        "gym",
        "workout",
        "exercise",
        "medicine",
        "appointment",
        "health",
        "hospital",
    ],
    Category.FINANCE: [
        "pay",
        "bill",
        "rent",
        "mortgage",
        "tax",
        "invoice",
        "budget",
        "bank",
        "payment",
    ],
    Category.SHOPPING: [
        "buy",
        "purchase",
        "shop",
        "store",
        "grocery",
        "groceries",
        "mall",
        "order",
        "get",
    ],
}

HIGH_PRIORITY_KEYWORDS = ["urgent", "asap", "important", "critical", "immediately", "priority", "must"]
LOW_PRIORITY_KEYWORDS = ["maybe", "someday", "eventually", "when possible", "if time"]

RECURRENCE_KEYWORDS: dict[Recurrence, list[str]] = {
    Recurrence.DAILY: ["every day", "daily"],
    Recurrence.WEEKLY: ["every week", "weekly"],
    Recurrence.MONTHLY: ["every month", "monthly"],
}

# Sunday-first, matching the day-of-week index used for date offsets
WEEKDAYS = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]

# First hit wins; "afternoon" contains "noon" and so never reaches its own entry
TIME_WORDS: list[tuple[str, tuple[int, int]]] = [
    ("noon", (12, 0)),
    ("midnight", (0, 0)),
    ("morning", (9, 0)),
    ("afternoon", (14, 0)),
    ("evening", (18, 0)),
    ("night", (20, 0)),
]
