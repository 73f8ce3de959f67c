"""
Task id generation
"""

import time
import uuid
from taskmaster.config.constants import TASK_ID_PREFIX, TASK_ID_RANDOM_LENGTH

_last_timestamp_ms = 0


def generate_task_id() -> str:
    """
    Generate a task id
    
    Format: task_<milliseconds>_<random hex>. The millisecond part never
    goes backwards within the process, even if the wall clock does.
    
    Returns:
        New task id
    """
    global _last_timestamp_ms
    
    timestamp_ms = max(int(time.time() * 1000), _last_timestamp_ms)
    _last_timestamp_ms = timestamp_ms
    random_part = uuid.uuid4().hex[:TASK_ID_RANDOM_LENGTH]
    return f"{TASK_ID_PREFIX}_{timestamp_ms}_{random_part}"
