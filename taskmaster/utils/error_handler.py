"""
Error handling utilities
"""

from typing import Any, Optional
from pydantic import ValidationError as PydanticValidationError
from taskmaster.models.response import Failure
from taskmaster.utils.logger import logger


class TaskMasterError(Exception):
    """Base exception for expected task manager failures"""
    
    error_code: str = "error"
    
    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class ValidationError(TaskMasterError):
    """Invalid task input"""
    error_code = "validation_error"


class TaskNotFoundError(TaskMasterError):
    """No task with the requested id"""
    error_code = "not_found"
    
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class BackupNotFoundError(TaskMasterError):
    """No backup with the requested file name"""
    error_code = "backup_not_found"
    
    def __init__(self, backup_filename: str):
        self.backup_filename = backup_filename
        super().__init__(f"Backup not found: {backup_filename}")


class StorageError(TaskMasterError):
    """Read/write/backup/restore failure"""
    error_code = "storage_error"


def _describe_pydantic_error(error: PydanticValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "input"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)


def handle_error(error: Exception) -> Failure:
    """
    Handle error and return a Failure result
    
    Args:
        error: Exception to handle
        
    Returns:
        Failure with user-friendly message
    """
    if isinstance(error, TaskMasterError):
        if isinstance(error, StorageError):
            logger.error(f"Storage error: {error.message} ({error.details})")
        else:
            logger.info(f"{error.error_code}: {error.message}")
        return Failure(
            error=error.message,
            error_code=error.error_code,
            details=error.details,
        )
    
    if isinstance(error, PydanticValidationError):
        message = f"Invalid input: {_describe_pydantic_error(error)}"
        logger.info(f"validation_error: {message}")
        return Failure(
            error=message,
            error_code=ValidationError.error_code,
            details=error.errors(),
        )
    
    logger.error(f"Unexpected error: {error}", exc_info=True)
    # Generic error message
    return Failure(
        error="Unexpected error. Check the log for details.",
        details=error,
    )


def format_error_message(failure: Failure) -> str:
    """
    Format failure message for the user
    
    Args:
        failure: Failure result to format
        
    Returns:
        User-friendly error message
    """
    if failure.details is not None and failure.error_code == StorageError.error_code:
        return f"{failure.error}: {failure.details}"
    return failure.error
