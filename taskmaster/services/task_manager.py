"""
Task management service
"""

from typing import List, Dict, Any, Union
from pydantic import ValidationError as PydanticValidationError

from taskmaster.config.constants import DUE_SOON_DAYS
from taskmaster.models.task import (
    Task,
    TaskCreate,
    TaskUpdate,
    TaskFilter,
    TaskStatistics,
    TaskStatus,
    Priority,
)
from taskmaster.models.response import Success, Result
from taskmaster.services.storage import FileStorage
from taskmaster.utils.date_utils import get_current_datetime, is_overdue, is_due_soon, is_today
from taskmaster.utils.error_handler import TaskMasterError, TaskNotFoundError, handle_error
from taskmaster.utils.id_generator import generate_task_id
from taskmaster.utils.logger import logger
from taskmaster.utils.validator import validate_title, validate_description


class TaskManager:
    """
    Service for managing tasks

    Every operation reads the full collection from storage and writes the
    full collection back. Nothing is cached between calls, so changes made
    to the data file between one call's read and write are lost
    (last write wins).
    """

    def __init__(self, storage: FileStorage):
        """
        Initialize task manager

        Args:
            storage: File storage holding the task collection
        """
        self.storage = storage
        self.logger = logger

    def _new_task_id(self, tasks: List[Task]) -> str:
        existing = {task.id for task in tasks}
        task_id = generate_task_id()
        while task_id in existing:
            task_id = generate_task_id()
        return task_id

    @staticmethod
    def _find_index(tasks: List[Task], task_id: str) -> int:
        for index, task in enumerate(tasks):
            if task.id == task_id:
                return index
        raise TaskNotFoundError(task_id)

    def add_task(self, task_input: Union[TaskCreate, Dict[str, Any]]) -> Result:
        """
        Create a new task

        Status always starts as todo; any status in the input is ignored.

        Args:
            task_input: Task fields (TaskCreate or mapping)

        Returns:
            Success with the created Task, or Failure
        """
        try:
            if not isinstance(task_input, TaskCreate):
                task_input = TaskCreate.model_validate(task_input)

            validate_title(task_input.title)
            validate_description(task_input.description)

            tasks = self.storage.read_all()
            now = get_current_datetime()
            task = Task(
                id=self._new_task_id(tasks),
                title=task_input.title,
                description=task_input.description,
                status=TaskStatus.TODO,
                priority=task_input.priority,
                tags=list(task_input.tags),
                due_date=task_input.due_date,
                created_at=now,
                updated_at=now,
            )
        except (TaskMasterError, PydanticValidationError) as e:
            return handle_error(e)

        tasks.append(task)
        save_result = self.storage.write_all(tasks)
        if not save_result.success:
            return save_result

        self.logger.info(f"Task created: id='{task.id}', title='{task.title}'")
        return Success(data=task, message="Task created")

    def get_all_tasks(self) -> List[Task]:
        """Return the full collection in storage order"""
        return self.storage.read_all()

    def get_task_by_id(self, task_id: str) -> Result:
        """
        Get task by id

        Args:
            task_id: Task id

        Returns:
            Success with the Task, or a not-found Failure
        """
        tasks = self.storage.read_all()
        try:
            index = self._find_index(tasks, task_id)
        except TaskNotFoundError as e:
            return handle_error(e)
        return Success(data=tasks[index])

    def update_task(self, task_id: str, updates: Union[TaskUpdate, Dict[str, Any]]) -> Result:
        """
        Update a task

        The supplied fields are merged over the stored task and updated_at is
        refreshed. The first time the merged status is done, completed_at is
        recorded; it is never cleared afterwards. id and created_at never
        change.

        Args:
            task_id: Task id
            updates: Fields to change (TaskUpdate or mapping)

        Returns:
            Success with the updated Task, or Failure
        """
        try:
            # Unknown ids fail as not found regardless of the payload
            tasks = self.storage.read_all()
            index = self._find_index(tasks, task_id)
            current = tasks[index]

            if not isinstance(updates, TaskUpdate):
                updates = TaskUpdate.model_validate(updates)
            changes = updates.changes()

            if "title" in changes:
                validate_title(changes["title"])
            if "description" in changes:
                validate_description(changes["description"])

            now = get_current_datetime()
            merged = current.model_dump()
            merged.update(changes)
            merged["id"] = current.id
            merged["created_at"] = current.created_at
            merged["updated_at"] = max(now, current.created_at)
            if merged["status"] == TaskStatus.DONE and current.completed_at is None:
                merged["completed_at"] = now

            updated_task = Task.model_validate(merged)
        except (TaskMasterError, PydanticValidationError) as e:
            return handle_error(e)

        tasks[index] = updated_task
        save_result = self.storage.write_all(tasks)
        if not save_result.success:
            return save_result

        self.logger.info(f"Task updated: id='{task_id}', fields={sorted(changes)}")
        return Success(data=updated_task, message="Task updated")

    def delete_task(self, task_id: str) -> Result:
        """
        Delete a task

        Args:
            task_id: Task id

        Returns:
            Success, or a not-found Failure
        """
        tasks = self.storage.read_all()
        try:
            index = self._find_index(tasks, task_id)
        except TaskNotFoundError as e:
            return handle_error(e)

        removed = tasks.pop(index)
        save_result = self.storage.write_all(tasks)
        if not save_result.success:
            return save_result

        self.logger.info(f"Task deleted: id='{task_id}', title='{removed.title}'")
        return Success(message="Task deleted")

    def search_tasks(self, keyword: str) -> List[Task]:
        """
        Case-insensitive substring search over title, description and tags

        An empty keyword matches every task.

        Args:
            keyword: Search text

        Returns:
            Matching tasks in storage order
        """
        needle = (keyword or "").lower()
        return [
            task for task in self.storage.read_all()
            if needle in task.title.lower()
            or (task.description is not None and needle in task.description.lower())
            or any(needle in tag.lower() for tag in task.tags)
        ]

    def filter_tasks(self, task_filter: Union[TaskFilter, Dict[str, Any], None] = None) -> List[Task]:
        """
        Filter tasks; present predicates are combined with AND

        - status / priority: exact match
        - tags: task has at least one of the filter tags
        - keyword: case-insensitive substring of title or description
        - is_overdue: has a due date before now and is not done
        - due_date_from / due_date_to: inclusive due date bounds

        Args:
            task_filter: Filter (TaskFilter or mapping); None returns everything

        Returns:
            Matching tasks in storage order
        """
        if task_filter is None:
            task_filter = TaskFilter()
        elif not isinstance(task_filter, TaskFilter):
            task_filter = TaskFilter.model_validate(task_filter)

        tasks = self.storage.read_all()

        if task_filter.status is not None:
            tasks = [t for t in tasks if t.status == task_filter.status]

        if task_filter.priority is not None:
            tasks = [t for t in tasks if t.priority == task_filter.priority]

        if task_filter.tags:
            wanted = set(task_filter.tags)
            tasks = [t for t in tasks if any(tag in wanted for tag in t.tags)]

        if task_filter.keyword:
            keyword = task_filter.keyword.lower()
            tasks = [
                t for t in tasks
                if keyword in t.title.lower()
                or (t.description is not None and keyword in t.description.lower())
            ]

        if task_filter.is_overdue:
            now = get_current_datetime()
            tasks = [t for t in tasks if is_overdue(t.due_date, t.status, now)]

        if task_filter.due_date_from is not None:
            tasks = [t for t in tasks if t.due_date is not None and t.due_date >= task_filter.due_date_from]

        if task_filter.due_date_to is not None:
            tasks = [t for t in tasks if t.due_date is not None and t.due_date <= task_filter.due_date_to]

        return tasks

    def get_statistics(self) -> TaskStatistics:
        """
        Aggregate counts over the whole collection

        Returns:
            TaskStatistics
        """
        tasks = self.storage.read_all()
        now = get_current_datetime()

        by_status = {status: 0 for status in TaskStatus}
        by_priority = {priority: 0 for priority in Priority}
        overdue = due_today = due_this_week = 0

        for task in tasks:
            by_status[task.status] += 1
            by_priority[task.priority] += 1
            if is_overdue(task.due_date, task.status, now):
                overdue += 1
            if task.due_date is not None and is_today(task.due_date, now):
                due_today += 1
            if is_due_soon(task.due_date, DUE_SOON_DAYS, now):
                due_this_week += 1

        total = len(tasks)
        completion_rate = round(by_status[TaskStatus.DONE] / total * 100, 1) if total else 0.0

        return TaskStatistics(
            total=total,
            by_status=by_status,
            by_priority=by_priority,
            completion_rate=completion_rate,
            overdue_count=overdue,
            due_today_count=due_today,
            due_this_week_count=due_this_week,
        )
