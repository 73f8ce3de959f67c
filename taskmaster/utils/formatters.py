"""
Message formatting utilities
"""

from typing import List, Optional
from datetime import datetime
from taskmaster.config.constants import (
    TABLE_TITLE_WIDTH,
    TABLE_ID_WIDTH,
    TABLE_MAX_TAGS,
    DISPLAY_DATE_FORMAT,
    DISPLAY_DATETIME_FORMAT,
)
from taskmaster.models.task import Task, TaskStatus, Priority, TaskStatistics

STATUS_LABELS = {
    TaskStatus.TODO: "todo",
    TaskStatus.IN_PROGRESS: "in progress",
    TaskStatus.DONE: "done",
}

PRIORITY_LABELS = {
    Priority.LOW: "low",
    Priority.MEDIUM: "medium",
    Priority.HIGH: "high",
}


def format_status(status: TaskStatus) -> str:
    """Human-readable status label"""
    return STATUS_LABELS.get(status, str(status))


def format_priority(priority: Priority) -> str:
    """Human-readable priority label"""
    return PRIORITY_LABELS.get(priority, str(priority))


def format_date(date: Optional[datetime], with_time: bool = False) -> str:
    """
    Format datetime for display

    Args:
        date: Datetime or None
        with_time: Include the time of day

    Returns:
        Formatted date string, or "-" when absent
    """
    if date is None:
        return "-"
    return date.strftime(DISPLAY_DATETIME_FORMAT if with_time else DISPLAY_DATE_FORMAT)


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[:width] + "..."


def format_task_table(tasks: List[Task]) -> str:
    """
    Format tasks as a plain text table

    Args:
        tasks: Tasks to show

    Returns:
        Table text with a trailing count line
    """
    if not tasks:
        return "No tasks"

    headers = ["#", "ID", "Title", "Status", "Priority", "Tags", "Due"]
    rows = []
    for index, task in enumerate(tasks, start=1):
        rows.append([
            str(index),
            _truncate(task.id, TABLE_ID_WIDTH),
            _truncate(task.title, TABLE_TITLE_WIDTH),
            format_status(task.status),
            format_priority(task.priority),
            ", ".join(task.tags[:TABLE_MAX_TAGS]),
            format_date(task.due_date),
        ])

    widths = [max(len(row[col]) for row in [headers] + rows) for col in range(len(headers))]
    lines = [
        "  ".join(cell.ljust(widths[col]) for col, cell in enumerate(headers)).rstrip(),
        "  ".join("-" * width for width in widths),
    ]
    for row in rows:
        lines.append("  ".join(cell.ljust(widths[col]) for col, cell in enumerate(row)).rstrip())

    lines.append("")
    lines.append(f"{len(tasks)} task(s)")
    return "\n".join(lines)


def format_task_detail(task: Task) -> str:
    """
    Format all fields of a single task

    Args:
        task: Task to show

    Returns:
        Multi-line detail text
    """
    lines = [
        f"Title:       {task.title}",
        f"ID:          {task.id}",
    ]
    if task.description:
        lines.append(f"Description: {task.description}")
    lines.append(f"Status:      {format_status(task.status)}")
    lines.append(f"Priority:    {format_priority(task.priority)}")
    if task.tags:
        lines.append(f"Tags:        {', '.join(task.tags)}")
    if task.due_date:
        lines.append(f"Due:         {format_date(task.due_date)}")
    lines.append(f"Created:     {format_date(task.created_at, with_time=True)}")
    lines.append(f"Updated:     {format_date(task.updated_at, with_time=True)}")
    if task.completed_at:
        lines.append(f"Completed:   {format_date(task.completed_at, with_time=True)}")
    return "\n".join(lines)


def format_statistics(stats: TaskStatistics) -> str:
    """
    Format task statistics

    Args:
        stats: Statistics to show

    Returns:
        Multi-line statistics text
    """
    lines = [f"Total tasks: {stats.total}"]
    for status in TaskStatus:
        lines.append(f"  {format_status(status)}: {stats.by_status.get(status, 0)}")
    lines.append("By priority:")
    for priority in Priority:
        lines.append(f"  {format_priority(priority)}: {stats.by_priority.get(priority, 0)}")
    lines.append(f"Completion rate: {stats.completion_rate:.1f}%")
    lines.append(f"Overdue: {stats.overdue_count}")
    lines.append(f"Due today: {stats.due_today_count}")
    lines.append(f"Due this week: {stats.due_this_week_count}")
    return "\n".join(lines)
