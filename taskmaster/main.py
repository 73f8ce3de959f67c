"""
Main application entry point
"""

import argparse
import sys
from typing import Callable, Dict, List, Optional

from taskmaster.config.settings import settings
from taskmaster.models.response import Failure, Result
from taskmaster.models.task import Task, TaskStatus, Priority
from taskmaster.services.storage import FileStorage
from taskmaster.services.task_manager import TaskManager
from taskmaster.utils.error_handler import TaskMasterError, handle_error, format_error_message
from taskmaster.utils.formatters import format_task_table, format_task_detail, format_statistics
from taskmaster.utils.logger import logger, setup_logger
from taskmaster.utils.validator import validate_date_string

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def parse_tags(raw: Optional[str]) -> Optional[List[str]]:
    """Split comma separated tag input, dropping blanks"""
    if raw is None:
        return None
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


class TaskMasterApp:
    """Command line application"""

    def __init__(self, storage: FileStorage, confirm: Optional[Callable[[str], bool]] = None):
        """
        Initialize application

        Args:
            storage: File storage for the task collection
            confirm: Yes/no prompt used before destructive commands
        """
        self.storage = storage
        self.task_manager = TaskManager(storage)
        self.confirm = confirm or prompt_confirm
        self.logger = logger

    def execute_command(self, args: argparse.Namespace) -> int:
        """
        Execute parsed command

        Args:
            args: Parsed command line arguments

        Returns:
            Process exit code
        """
        handlers: Dict[str, Callable[[argparse.Namespace], int]] = {
            "add": self.handle_add,
            "list": self.handle_list,
            "show": self.handle_show,
            "update": self.handle_update,
            "done": self.handle_done,
            "delete": self.handle_delete,
            "search": self.handle_search,
            "filter": self.handle_filter,
            "stats": self.handle_stats,
            "backup": self.handle_backup,
            "backups": self.handle_backups,
            "restore": self.handle_restore,
        }
        handler = handlers.get(args.command)
        if handler is None:
            print("No command given. Use --help for usage.", file=sys.stderr)
            return EXIT_USAGE

        try:
            return handler(args)
        except TaskMasterError as e:
            return self._report(handle_error(e))

    def _report(self, result: Result, show_task: bool = False) -> int:
        if isinstance(result, Failure):
            print(f"Error: {format_error_message(result)}", file=sys.stderr)
            return EXIT_FAILURE
        if result.message:
            print(result.message)
        if show_task and isinstance(result.data, Task):
            print(format_task_detail(result.data))
        return EXIT_OK

    def handle_add(self, args: argparse.Namespace) -> int:
        task_input = {
            "title": args.title,
            "description": args.description or None,
            "priority": args.priority,
            "tags": parse_tags(args.tags) or [],
            "due_date": validate_date_string(args.due),
        }
        return self._report(self.task_manager.add_task(task_input), show_task=True)

    def handle_list(self, args: argparse.Namespace) -> int:
        print(format_task_table(self.task_manager.get_all_tasks()))
        return EXIT_OK

    def handle_show(self, args: argparse.Namespace) -> int:
        result = self.task_manager.get_task_by_id(args.id)
        return self._report(result, show_task=True)

    def handle_update(self, args: argparse.Namespace) -> int:
        updates = {}
        if args.title is not None:
            updates["title"] = args.title
        if args.clear_description:
            updates["description"] = None
        elif args.description is not None:
            updates["description"] = args.description
        if args.status is not None:
            updates["status"] = args.status
        if args.priority is not None:
            updates["priority"] = args.priority
        if args.tags is not None:
            updates["tags"] = parse_tags(args.tags)
        if args.clear_due:
            updates["due_date"] = None
        elif args.due is not None:
            updates["due_date"] = validate_date_string(args.due)

        if not updates:
            print("Nothing to update. See 'update --help'.", file=sys.stderr)
            return EXIT_USAGE

        return self._report(self.task_manager.update_task(args.id, updates), show_task=True)

    def handle_done(self, args: argparse.Namespace) -> int:
        result = self.task_manager.update_task(args.id, {"status": TaskStatus.DONE})
        return self._report(result)

    def handle_delete(self, args: argparse.Namespace) -> int:
        found = self.task_manager.get_task_by_id(args.id)
        if isinstance(found, Failure):
            return self._report(found)

        if not args.yes:
            print(format_task_detail(found.data))
            if not self.confirm("Delete this task?"):
                print("Cancelled")
                return EXIT_OK

        return self._report(self.task_manager.delete_task(args.id))

    def handle_search(self, args: argparse.Namespace) -> int:
        print(format_task_table(self.task_manager.search_tasks(args.keyword)))
        return EXIT_OK

    def handle_filter(self, args: argparse.Namespace) -> int:
        task_filter = {
            "status": args.status,
            "priority": args.priority,
            "tags": args.tag or None,
            "keyword": args.keyword,
            "is_overdue": True if args.overdue else None,
            "due_date_from": validate_date_string(args.due_from),
            "due_date_to": validate_date_string(args.due_to),
        }
        print(format_task_table(self.task_manager.filter_tasks(task_filter)))
        return EXIT_OK

    def handle_stats(self, args: argparse.Namespace) -> int:
        print(format_statistics(self.task_manager.get_statistics()))
        return EXIT_OK

    def handle_backup(self, args: argparse.Namespace) -> int:
        result = self.storage.backup()
        if isinstance(result, Failure):
            return self._report(result)
        print(f"Backup: {result.data}")
        return EXIT_OK

    def handle_backups(self, args: argparse.Namespace) -> int:
        backups = self.storage.list_backups()
        if not backups:
            print("No backups")
        for name in backups:
            print(name)
        return EXIT_OK

    def handle_restore(self, args: argparse.Namespace) -> int:
        if not args.yes and not self.confirm(f"Overwrite current tasks with {args.name}?"):
            print("Cancelled")
            return EXIT_OK
        return self._report(self.storage.restore(args.name))


def prompt_confirm(message: str) -> bool:
    """Ask a yes/no question on the terminal (default no)"""
    try:
        answer = input(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def build_parser() -> argparse.ArgumentParser:
    statuses = [status.value for status in TaskStatus]
    priorities = [priority.value for priority in Priority]

    parser = argparse.ArgumentParser(prog="taskmaster", description="Local task manager")
    parser.add_argument("--data", help="Path to the tasks JSON file", default=None)
    parser.add_argument("--backup-dir", help="Directory for backups", default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    p_add = sub.add_parser("add", help="Add a new task")
    p_add.add_argument("title", help="Task title")
    p_add.add_argument("--description", "-d", default=None)
    p_add.add_argument("--priority", "-p", choices=priorities, default=Priority.MEDIUM.value)
    p_add.add_argument("--tags", "-t", default=None, help="Comma-separated tags")
    p_add.add_argument("--due", default=None, help="Due date (YYYY-MM-DD, today, tomorrow, ISO)")

    sub.add_parser("list", help="List all tasks")

    p_show = sub.add_parser("show", help="Show task details")
    p_show.add_argument("id")

    p_update = sub.add_parser("update", help="Update a task")
    p_update.add_argument("id")
    p_update.add_argument("--title", default=None)
    p_update.add_argument("--description", "-d", default=None)
    p_update.add_argument("--clear-description", action="store_true")
    p_update.add_argument("--status", "-s", choices=statuses, default=None)
    p_update.add_argument("--priority", "-p", choices=priorities, default=None)
    p_update.add_argument("--tags", "-t", default=None, help="Comma-separated tags (replaces existing)")
    p_update.add_argument("--due", default=None)
    p_update.add_argument("--clear-due", action="store_true")

    p_done = sub.add_parser("done", help="Mark a task as done")
    p_done.add_argument("id")

    p_delete = sub.add_parser("delete", help="Delete a task")
    p_delete.add_argument("id")
    p_delete.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    p_search = sub.add_parser("search", help="Search title, description and tags")
    p_search.add_argument("keyword", nargs="?", default="")

    p_filter = sub.add_parser("filter", help="Filter tasks")
    p_filter.add_argument("--status", "-s", choices=statuses, default=None)
    p_filter.add_argument("--priority", "-p", choices=priorities, default=None)
    p_filter.add_argument("--tag", "-t", action="append", default=None, help="Match any of these tags")
    p_filter.add_argument("--keyword", "-k", default=None)
    p_filter.add_argument("--overdue", action="store_true")
    p_filter.add_argument("--from", dest="due_from", default=None, help="Due on or after")
    p_filter.add_argument("--to", dest="due_to", default=None, help="Due on or before")

    sub.add_parser("stats", help="Show task statistics")
    sub.add_parser("backup", help="Back up the tasks file")
    sub.add_parser("backups", help="List backups, newest first")

    p_restore = sub.add_parser("restore", help="Restore tasks from a backup")
    p_restore.add_argument("name", help="Backup file name (see 'backups')")
    p_restore.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the taskmaster console script"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logger(level="DEBUG")

    try:
        settings.validate()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    storage = FileStorage(
        args.data or settings.DATA_PATH,
        args.backup_dir or settings.BACKUP_DIR,
        keep_backups=settings.BACKUP_KEEP,
    )
    app = TaskMasterApp(storage)
    return app.execute_command(args)


if __name__ == "__main__":
    sys.exit(main())
