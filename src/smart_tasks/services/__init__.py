"""Smart Tasks services module.

This module provides the natural-language parser, task persistence and list
filtering. Imports are lazy so the CLI only loads what a command needs.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS: dict[str, tuple[str, str]] = {
    # Parser
    "Parser": ("smart_tasks.services.parser", "Parser"),
    "ParseResult": ("smart_tasks.services.parser", "ParseResult"),
    "get_parser": ("smart_tasks.services.parser", "get_parser"),
    "parse": ("smart_tasks.services.parser", "parse"),
    # Task store
    "TaskNotFoundError": ("smart_tasks.services.task_store", "TaskNotFoundError"),
    "TaskStore": ("smart_tasks.services.task_store", "TaskStore"),
    "TaskStoreError": ("smart_tasks.services.task_store", "TaskStoreError"),
    # Filtering
    "filter_tasks": ("smart_tasks.services.task_filters", "filter_tasks"),
    "sort_tasks": ("smart_tasks.services.task_filters", "sort_tasks"),
}

__all__ = list(_EXPORTS)


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr = _EXPORTS[name]
    value = getattr(import_module(module_name), attr)
    globals()[name] = value
    return value
