"""AI schemas"""

from pydantic import Field

from app.models.enums import QuizLevel, SubjectName
from app.schemas.common import CamelModel


class QuizGenerationRequest(CamelModel):
    subject: SubjectName
    level: QuizLevel
    count: int = Field(5, ge=1, le=50)
