"""
Task model
"""

from enum import Enum
from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator

from taskmaster.utils.date_utils import ensure_aware


class TaskStatus(str, Enum):
    """Task lifecycle status"""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class Priority(str, Enum):
    """Task priority"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(BaseModel):
    """Task model"""
    
    model_config = ConfigDict(populate_by_name=True)
    
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    tags: List[str] = Field(default_factory=list)
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    completed_at: Optional[datetime] = Field(None, alias="completedAt")
    
    @field_validator("due_date", "created_at", "updated_at", "completed_at")
    @classmethod
    def _aware_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(value)
    
    def to_storage(self) -> Dict[str, Any]:
        """Serialize for the data file: camelCase keys, ISO dates, absent fields omitted"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
    
    @classmethod
    def from_storage(cls, data: Dict[str, Any]) -> "Task":
        """Build a task from a data file record"""
        return cls.model_validate(data)


class TaskCreate(BaseModel):
    """Task creation model"""
    
    model_config = ConfigDict(populate_by_name=True)
    
    title: str
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    tags: List[str] = Field(default_factory=list)
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    
    @field_validator("due_date")
    @classmethod
    def _aware_due_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(value)


class TaskUpdate(BaseModel):
    """Task update model (only explicitly set fields are applied)"""
    
    model_config = ConfigDict(populate_by_name=True)
    
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    tags: Optional[List[str]] = None
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    
    @field_validator("due_date")
    @classmethod
    def _aware_due_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(value)
    
    def changes(self) -> Dict[str, Any]:
        """Fields the caller explicitly set, keyed by field name"""
        return {name: getattr(self, name) for name in self.model_fields_set}


class TaskFilter(BaseModel):
    """Task filter; present predicates are combined with AND"""
    
    model_config = ConfigDict(populate_by_name=True)
    
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    tags: Optional[List[str]] = None
    keyword: Optional[str] = None
    is_overdue: Optional[bool] = Field(None, alias="isOverdue")
    due_date_from: Optional[datetime] = Field(None, alias="dueDateFrom")
    due_date_to: Optional[datetime] = Field(None, alias="dueDateTo")
    
    @field_validator("due_date_from", "due_date_to")
    @classmethod
    def _aware_bounds(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(value)


class TaskStatistics(BaseModel):
    """Aggregate counts over the task collection"""
    
    total: int = 0
    by_status: Dict[TaskStatus, int] = Field(default_factory=dict)
    by_priority: Dict[Priority, int] = Field(default_factory=dict)
    completion_rate: float = 0.0
    overdue_count: int = 0
    due_today_count: int = 0
    due_this_week_count: int = 0
