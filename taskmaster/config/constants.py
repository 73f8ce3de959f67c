"""
Application constants
"""

# Storage
DEFAULT_DATA_PATH = "data/tasks.json"
DEFAULT_BACKUP_DIR = "data/backups"
BACKUP_PREFIX = "tasks_backup_"
BACKUP_SUFFIX = ".json"
BACKUP_KEEP_COUNT = 10  # Number of backups kept after pruning
JSON_INDENT = 2

# Task validation
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000

# Task ids
TASK_ID_PREFIX = "task"
TASK_ID_RANDOM_LENGTH = 8

# Due date helpers
DUE_SOON_DAYS = 7

# Display
TABLE_TITLE_WIDTH = 25
TABLE_ID_WIDTH = 12
TABLE_MAX_TAGS = 2
DISPLAY_DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
