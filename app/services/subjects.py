"""
Subject catalog service for CodeZetta
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestException, NotFoundException
from app.models.enums import SubjectName
from app.models.subject import Subject

logger = logging.getLogger(__name__)


class SubjectService:
    """Subject catalog"""

    @staticmethod
    def list_subjects(db: Session) -> List[Subject]:
        """All subjects, seeding the catalog from SubjectName on first use"""
        subjects = db.scalars(select(Subject).order_by(Subject.created_at, Subject.name)).all()
        if subjects:
            return list(subjects)

        for name in SubjectName:
            db.add(Subject(name=name, description=f"{name.value} subject"))
        try:
            db.commit()
            logger.info("Seeded subject catalog", extra={"count": len(SubjectName)})
        except IntegrityError:
            # Another request seeded concurrently
            db.rollback()

        return list(db.scalars(select(Subject).order_by(Subject.created_at, Subject.name)).all())

    @staticmethod
    def get_subject(db: Session, subject_id: str) -> Subject:
        subject = db.get(Subject, subject_id)
        if not subject:
            raise NotFoundException("Subject")
        return subject

    @staticmethod
    def find_by_name(db: Session, name: SubjectName) -> Optional[Subject]:
        return db.scalar(select(Subject).where(Subject.name == name))

    @staticmethod
    def create_subject(db: Session, name: SubjectName, description: Optional[str] = None) -> Subject:
        if SubjectService.find_by_name(db, name):
            raise BadRequestException(f"Subject {name.value} already exists")

        subject = Subject(name=name, description=description)
        db.add(subject)
        db.commit()
        db.refresh(subject)
        return subject

    @staticmethod
    def get_or_create(db: Session, name: SubjectName, description: Optional[str] = None) -> Subject:
        """Existing subject by name, created (uncommitted) when missing"""
        subject = SubjectService.find_by_name(db, name)
        if subject is None:
            subject = Subject(name=name, description=description or f"{name.value} subject")
            db.add(subject)
            db.flush()
        return subject


subject_service = SubjectService()
