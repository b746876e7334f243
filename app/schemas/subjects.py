"""Subject schemas"""

from typing import Optional

from app.models.enums import SubjectName
from app.schemas.common import CamelModel


class SubjectCreate(CamelModel):
    name: SubjectName
    description: Optional[str] = None


class SubjectResponse(CamelModel):
    id: str
    name: SubjectName
    description: Optional[str] = None
