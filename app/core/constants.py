from enum import Enum


class CourseStatusEnum(str, Enum):
    DRAFT = "draft"
    REVIEW = "review"
    PUBLISHED = "published"
    ARCHIVED = "archived"

class LessonTypeEnum(str, Enum):
    TEXT = "text"
    VIDEO = "video"
    QUIZ = "quiz"

class EnrollmentTypeEnum(str, Enum):
    SELF = "self"
    ASSIGNED = "assigned"

class EnrollmentStatusEnum(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"
    SUSPENDED = "suspended"

# completed is only reached through completion detection
ENROLLMENT_TRANSITIONS = {
    EnrollmentStatusEnum.ACTIVE: {
        EnrollmentStatusEnum.COMPLETED,
        EnrollmentStatusEnum.DROPPED,
        EnrollmentStatusEnum.SUSPENDED,
    },
    EnrollmentStatusEnum.DROPPED: {EnrollmentStatusEnum.ACTIVE},
    EnrollmentStatusEnum.SUSPENDED: {EnrollmentStatusEnum.ACTIVE},
    EnrollmentStatusEnum.COMPLETED: set(),
}

class QuizStatusEnum(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

class QuestionTypeEnum(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    TEXT = "text"

class AttemptStatusEnum(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    GRADED = "graded"
