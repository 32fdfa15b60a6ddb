import argparse
import json
import logging
import sys

from smart_tasks.config import settings
from smart_tasks.schemas import Task
from smart_tasks.sentry import capture_exception, init_sentry
from smart_tasks.sentry import flush as sentry_flush


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    due = ""
    if task.due_date:
        due = f" due {task.due_date:%Y-%m-%d}"
        if task.due_time:
            due += f" {task.due_time}"
    elif task.due_time:
        due = f" at {task.due_time}"
    repeat = f" ({task.recurring.value})" if task.recurring.value != "none" else ""
    return f"[{mark}] {task.id}  {task.title}  [{task.category.value}/{task.priority.value}]{due}{repeat}"


def parse_text(text: str) -> None:
    from smart_tasks.services.parser import parse

    print(json.dumps(parse(text).to_dict()))


def add_task(text: str) -> None:
    from smart_tasks.services.task_store import TaskStore

    if not text.strip():
        print("Error: task text is empty")
        sys.exit(1)

    task = TaskStore().add(text)
    print(f"Added: {format_task(task)}")


def list_tasks(filter_name: str, sort_key: str) -> None:
    from smart_tasks.services.task_filters import filter_tasks, sort_tasks
    from smart_tasks.services.task_store import TaskStore

    tasks = sort_tasks(filter_tasks(TaskStore().load(), filter_name), sort_key)
    if not tasks:
        print("No tasks")
        return

    for task in tasks:
        print(format_task(task))

    remaining = sum(1 for t in tasks if not t.completed)
    print(f"\n{len(tasks)} task(s), {remaining} remaining")


def toggle_task(task_id: str) -> None:
    from smart_tasks.services.task_store import TaskStore

    task = TaskStore().toggle(task_id)
    print(format_task(task))


def edit_task(task_id: str, text: str) -> None:
    from smart_tasks.services.task_store import TaskStore

    if not text.strip():
        print("Error: task text is empty")
        sys.exit(1)

    task = TaskStore().edit(task_id, text)
    print(f"Updated: {format_task(task)}")


def delete_task(task_id: str) -> None:
    from smart_tasks.services.task_store import TaskStore

    task = TaskStore().delete(task_id)
    print(f"Deleted: {task.title}")


def check_config() -> None:
    print("Smart Tasks Configuration Check\n")
    print(f"  Timezone: {settings.user_timezone}")
    print(f"  Log level: {settings.log_level}")
    print(f"  Task file: {settings.tasks_path}")
    status = "OK" if settings.has_sentry else "MISSING (error tracking disabled)"
    symbol = "+" if settings.has_sentry else "-"
    print(f"  [{symbol}] Sentry DSN: {status}")


def main() -> None:
    from smart_tasks.services.task_filters import FILTERS, SORT_KEYS
    from smart_tasks.services.task_store import TaskNotFoundError, TaskStoreError

    parser = argparse.ArgumentParser(description="Smart Tasks natural-language task list")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    parse_cmd = subparsers.add_parser("parse", help="Show what the parser extracts")
    parse_cmd.add_argument("text")
    add_cmd = subparsers.add_parser("add", help="Parse and store a task")
    add_cmd.add_argument("text")
    list_cmd = subparsers.add_parser("list", help="List tasks")
    list_cmd.add_argument("--filter", default="all", type=str.lower, choices=FILTERS)
    list_cmd.add_argument("--sort", default="date", choices=SORT_KEYS)
    done_cmd = subparsers.add_parser("done", help="Toggle a task's completion")
    done_cmd.add_argument("task_id")
    edit_cmd = subparsers.add_parser("edit", help="Re-parse a task from new text")
    edit_cmd.add_argument("task_id")
    edit_cmd.add_argument("text")
    delete_cmd = subparsers.add_parser("delete", help="Delete a task")
    delete_cmd.add_argument("task_id")
    subparsers.add_parser("check", help="Check configuration")

    args = parser.parse_args()

    setup_logging()

    # Disabled if no DSN configured
    init_sentry(
        dsn=settings.sentry_dsn if settings.has_sentry else None,
        environment=settings.sentry_environment,
    )

    try:
        if args.command == "parse":
            parse_text(args.text)
        elif args.command == "add":
            add_task(args.text)
        elif args.command == "list":
            list_tasks(args.filter, args.sort)
        elif args.command == "done":
            toggle_task(args.task_id)
        elif args.command == "edit":
            edit_task(args.task_id, args.text)
        elif args.command == "delete":
            delete_task(args.task_id)
        elif args.command == "check":
            check_config()
        else:
            parser.print_help()
    except TaskNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except TaskStoreError as e:
        capture_exception(e)
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        sentry_flush(timeout=2.0)


if __name__ == "__main__":
    main()
