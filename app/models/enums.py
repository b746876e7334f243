"""
Enumerations shared by models and schemas
"""

import enum


class UserRole(str, enum.Enum):
    """User roles"""
    ADMIN = "admin"
    STUDENT = "student"


class SocialProvider(str, enum.Enum):
    """Supported social login providers"""
    GOOGLE = "google"
    LINKEDIN = "linkedin"


class SubjectName(str, enum.Enum):
    """Subjects offered by the catalog"""
    HTML = "HTML"
    CSS = "CSS"
    JAVASCRIPT = "JavaScript"
    ANGULAR = "Angular"
    REACT = "React"
    NEXTJS = "NextJS"
    NESTJS = "NestJS"
    NODEJS = "NodeJS"


class QuizLevel(str, enum.Enum):
    """Quiz difficulty tiers"""
    BEGINNER = "beginner"
    MIDDLE = "middle"
    INTERMEDIATE = "intermediate"


class QuestionType(str, enum.Enum):
    """Question types"""
    MCQ = "mcq"


class QuizSessionStatus(str, enum.Enum):
    """Lifecycle of an in-progress quiz"""
    ACTIVE = "active"
    SUBMITTED = "submitted"
    ABANDONED = "abandoned"


class ArticleProvider(str, enum.Enum):
    """Where a suggested article is hosted"""
    MDN = "MDN"
    FREECODECAMP = "FreeCodeCamp"
    BLOG = "Blog"
    W3SCHOOLS = "W3Schools"
    STACKOVERFLOW = "StackOverflow"


def enum_values(enum_cls):
    """Store enum values rather than member names in enum columns"""
    return [member.value for member in enum_cls]
