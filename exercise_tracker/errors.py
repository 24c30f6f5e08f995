# exercise_tracker/errors.py
"""
Error kinds raised by the handlers.

Each one carries the HTTP status it maps to; the application translates
them into `{"error": <message>}` bodies (see `exercise_tracker.main`).
"""

from typing import Optional


class TrackerError(Exception):
    status_code = 500
    message = "Server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(TrackerError):
    status_code = 400
    message = "Invalid request"


class NotFoundError(TrackerError):
    status_code = 404
    message = "User not found"


class StoreError(TrackerError):
    # Never carries store details; the cause is chained and logged instead.
    status_code = 500
    message = "Server error"
