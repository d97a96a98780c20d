"""Domain exceptions raised by the lifecycle services.

Every error is an ``HTTPException`` so FastAPI and the global handler in
``app.middleware.exceptions`` render it without extra wiring. ``error_code``
is the machine readable code placed in the response envelope and ``hint`` an
optional pointer for the client on how to recover.
"""
from typing import Any, List, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code_default: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "BAD_REQUEST"

    def __init__(self, message: str, *, hint: Optional[str] = None, data: Any = None,
                 status_code: Optional[int] = None, error_code: Optional[str] = None):
        super().__init__(status_code=status_code or self.status_code_default, detail=message)
        self.message = message
        self.hint = hint
        self.data = data
        if error_code:
            self.error_code = error_code


class NotFoundError(AppError):
    status_code_default = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any = None):
        message = f"{entity} not found." if entity_id is None else f"{entity} {entity_id} not found."
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class PersistenceError(AppError):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "PERSISTENCE_ERROR"


class BusinessRuleError(AppError):
    status_code_default = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "BUSINESS_RULE_VIOLATION"


class DuplicateOrderError(BusinessRuleError):
    error_code = "DUPLICATE_ORDER"


class AlreadyEnrolledError(BusinessRuleError):
    error_code = "ALREADY_ENROLLED"

    def __init__(self, learner_id: int, course_id: int):
        super().__init__(
            "This learner is already enrolled in this course.",
            hint="Update the existing enrollment instead of creating a new one.",
        )
        self.learner_id = learner_id
        self.course_id = course_id


class CourseNotEnrollableError(BusinessRuleError):
    error_code = "COURSE_NOT_ENROLLABLE"

    def __init__(self, course_id: int):
        super().__init__(
            "Course is not available for enrollment. It must be published and its course type active.",
        )
        self.course_id = course_id


class CourseNotPublishableError(BusinessRuleError):
    error_code = "COURSE_NOT_PUBLISHABLE"

    def __init__(self, reasons: List[str]):
        super().__init__(
            "Course cannot be published.",
            hint="; ".join(reasons),
            data={"reasons": reasons},
        )
        self.reasons = reasons


class ActiveAttemptInProgressError(BusinessRuleError):
    status_code_default = status.HTTP_409_CONFLICT
    error_code = "ACTIVE_ATTEMPT_IN_PROGRESS"


class DeletionBlockedError(BusinessRuleError):
    status_code_default = status.HTTP_409_CONFLICT
    error_code = "DELETION_BLOCKED"


class InvalidStatusTransitionError(BusinessRuleError):
    error_code = "INVALID_STATUS_TRANSITION"

    def __init__(self, current: str, requested: str, allowed: Optional[List[str]] = None):
        super().__init__(
            f"Cannot change status from '{current}' to '{requested}'.",
            hint=f"Allowed: {', '.join(allowed)}" if allowed else None,
        )
        self.current = current
        self.requested = requested


class QuizNotStartableError(BusinessRuleError):
    error_code = "QUIZ_NOT_STARTABLE"


class AttemptTimeOverError(BusinessRuleError):
    error_code = "ATTEMPT_TIME_OVER"

    def __init__(self):
        super().__init__("Attempt time is over.")


class InvalidAnswerError(BusinessRuleError):
    error_code = "INVALID_ANSWER"
