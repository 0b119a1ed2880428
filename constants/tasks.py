"""
Centralized constants for tasks and categories
"""

# Task constraints
MAX_TITLE_LENGTH = 500
MAX_DESCRIPTION_LENGTH = 5000

# Category constraints
MAX_CATEGORY_NAME_LENGTH = 100

# Ordering: reorder assigns dense 1-based positions
FIRST_ORDER_POSITION = 1
ORDER_STEP = 1.0

# Client notifications (seconds a toast stays visible)
NOTIFICATION_TTL_SECONDS = 4.0

# Error messages
ERROR_TASK_NOT_FOUND = "Task {id} not found"
ERROR_CATEGORY_NOT_FOUND = "Category {id} not found"
ERROR_CATEGORY_EXISTS = 'Category "{name}" already exists'
ERROR_CATEGORY_INVALID = "Category name is empty after normalization"
ERROR_CATEGORY_TOO_LONG = "Category name is too long (max {max} characters)"
ERROR_TITLE_REQUIRED = "Title is required"
ERROR_DESCRIPTION_REQUIRED = "Description is required"
ERROR_REORDER_FAILED = "Failed to save the new order"
