"""
Result models returned by storage and task manager operations
"""

from typing import Any, Literal, Optional, Union
from pydantic import BaseModel


class Success(BaseModel):
    """Successful operation carrying its value"""
    
    success: Literal[True] = True
    data: Any = None
    message: Optional[str] = None


class Failure(BaseModel):
    """Failed operation carrying a user-facing error"""
    
    success: Literal[False] = False
    error: str
    error_code: Optional[str] = None
    details: Any = None


Result = Union[Success, Failure]
