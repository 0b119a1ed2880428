"""
Taskboard Constants Package
Application-wide constants and configuration values
"""

# ============ Application Info ============

APP_NAME = "Taskboard"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Personal task tracking with optimistic client sync"


# ============ Error Codes ============

class ErrorCodes:
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    # Client side only: the request never got a response
    TRANSPORT_ERROR = "TRANSPORT_ERROR"

    ALL = [BAD_REQUEST, NOT_FOUND, CONFLICT, INTERNAL_SERVER_ERROR, TOO_MANY_REQUESTS, TRANSPORT_ERROR]


__all__ = [
    'APP_NAME',
    'APP_VERSION',
    'APP_DESCRIPTION',
    'ErrorCodes',
]
