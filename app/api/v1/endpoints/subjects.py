"""
Subject catalog endpoints
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import TokenData, require_admin
from app.schemas.subjects import SubjectCreate, SubjectResponse
from app.services.subjects import subject_service

router = APIRouter()


@router.get("", response_model=List[SubjectResponse])
async def list_subjects(db: Session = Depends(get_db)):
    """All subjects"""
    return subject_service.list_subjects(db)


@router.get("/{subject_id}", response_model=SubjectResponse)
async def get_subject(subject_id: str, db: Session = Depends(get_db)):
    return subject_service.get_subject(db, subject_id)


@router.post("", response_model=SubjectResponse, status_code=201)
async def create_subject(
    data: SubjectCreate,
    admin: TokenData = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create subject (admins only)"""
    return subject_service.create_subject(db, data.name, data.description)
