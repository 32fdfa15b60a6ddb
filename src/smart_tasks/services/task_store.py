"""JSON file persistence for tasks.

Tasks are kept newest first in a single JSON list, one object per task in the
shape of ``Task.model_dump(mode="json")``. Every mutation rewrites the whole
file through a temporary file so a crash never leaves a half-written list.
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path

from pydantic import ValidationError

from smart_tasks.config import settings
from smart_tasks.schemas import Task
from smart_tasks.sentry import add_breadcrumb
from smart_tasks.services.parser import Parser, get_parser

logger = logging.getLogger(__name__)


class TaskStoreError(Exception):
    """The task file could not be read or written."""


class TaskNotFoundError(TaskStoreError):
    """No task with the requested id."""

    def __init__(self, task_id: str):
        super().__init__(f"No task with id {task_id}")
        self.task_id = task_id


class TaskStore:
    def __init__(self, path: Path | None = None, parser: Parser | None = None):
        self.path = path or settings.tasks_path
        self.parser = parser or get_parser()

    def load(self) -> list[Task]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise TaskStoreError(f"{self.path} does not contain a task list")
            return [Task.model_validate(item) for item in raw]
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise TaskStoreError(f"Could not read tasks from {self.path}: {e}") from e

    def save(self, tasks: list[Task]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")

        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump([task.model_dump(mode="json") for task in tasks], f, indent=2)
            tmp_path.replace(self.path)
        except OSError as e:
            raise TaskStoreError(f"Could not write tasks to {self.path}: {e}") from e

        logger.debug(f"Saved {len(tasks)} tasks to {self.path}")

    def add(
        self,
        text: str,
        reference: date | datetime | None = None,
        created_at: datetime | None = None,
    ) -> Task:
        """Parse text and store it as a new task at the top of the list."""
        tasks = self.load()
        task = Task.from_parse(self.parser.parse(text, reference), created_at=created_at)

        # Ids come from the creation millisecond; bump on collision
        existing = {t.id for t in tasks}
        while task.id in existing:
            task.id = str(int(task.id) + 1)

        tasks.insert(0, task)
        self.save(tasks)

        add_breadcrumb(f"Task {task.id} added", category="store")
        logger.info(f"Added task {task.id}: {task.title!r} ({task.category.value}, {task.priority.value})")
        return task

    def get(self, task_id: str) -> Task:
        for task in self.load():
            if task.id == task_id:
                return task
        raise TaskNotFoundError(task_id)

    def toggle(self, task_id: str) -> Task:
        """Flip a task's completion flag."""
        tasks = self.load()
        index = self._index_of(tasks, task_id)
        task = tasks[index].model_copy(update={"completed": not tasks[index].completed})
        tasks[index] = task
        self.save(tasks)

        logger.info(f"Task {task_id} marked {'done' if task.completed else 'not done'}")
        return task

    def edit(self, task_id: str, text: str, reference: date | datetime | None = None) -> Task:
        """Replace a task's parsed fields by re-parsing new text.

        Id, completion flag and creation time are kept.
        """
        tasks = self.load()
        index = self._index_of(tasks, task_id)
        result = self.parser.parse(text, reference)
        task = tasks[index].model_copy(
            update={
                "title": result.title,
                "category": result.category,
                "priority": result.priority,
                "due_date": result.due_date,
                "due_time": result.due_time,
                "recurring": result.recurring,
            }
        )
        tasks[index] = task
        self.save(tasks)

        logger.info(f"Edited task {task_id}: {task.title!r}")
        return task

    def delete(self, task_id: str) -> Task:
        tasks = self.load()
        index = self._index_of(tasks, task_id)
        task = tasks.pop(index)
        self.save(tasks)

        add_breadcrumb(f"Task {task_id} deleted", category="store")
        logger.info(f"Deleted task {task_id}")
        return task

    @staticmethod
    def _index_of(tasks: list[Task], task_id: str) -> int:
        for index, task in enumerate(tasks):
            if task.id == task_id:
                return index
        raise TaskNotFoundError(task_id)
