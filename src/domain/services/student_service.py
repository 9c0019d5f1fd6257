"""Student service layer: registration, login and profile management."""

from collections.abc import Callable
from datetime import datetime
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    StudentNotFoundError,
)
from domain.entities.student import SocialLink, Student
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.password_hasher import hash_password, verify_password
from infrastructure.auth.provider import IAuthProvider, TokenUser

logger = structlog.get_logger()


class StudentService:
    """Service layer for the student identity store."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        auth_provider: IAuthProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._auth = auth_provider

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        department: str,
    ) -> tuple[Student, str]:
        """Register a new student.

        Returns:
            Tuple of (Student, access_token).

        Raises:
            DuplicateEmailError: If the email is already registered.
        """
        email = email.strip().lower()
        async with self._uow_factory() as uow:
            if await uow.students.get_by_email(email):
                raise DuplicateEmailError(email)

            student = Student(
                first_name=first_name,
                last_name=last_name,
                email=email,
                password_hash=hash_password(password),
                department=department,
            )
            created = await uow.students.create(student)
            await uow.commit()

        logger.info("student_registered", student_id=str(created.id))
        return created, self._issue_token(created)

    async def login(self, email: str, password: str) -> tuple[Student, str]:
        """Check credentials and issue a token.

        Unknown email and wrong password fail the same way.
        """
        email = email.strip().lower()
        async with self._uow_factory() as uow:
            student = await uow.students.get_by_email(email)

        if not student or not verify_password(password, student.password_hash):
            logger.info("login_failed", email=email)
            raise InvalidCredentialsError()

        return student, self._issue_token(student)

    async def get_by_id(self, student_id: UUID) -> Student:
        """Get a student by ID."""
        async with self._uow_factory() as uow:
            student = await uow.students.get(student_id)
            if not student:
                raise StudentNotFoundError(str(student_id))
            return student

    async def update_profile(
        self,
        student_id: UUID,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_picture: Optional[str] = None,
        department: Optional[str] = None,
        bio: Optional[str] = None,
        interests: Optional[list[str]] = None,
        social_links: Optional[list[SocialLink]] = None,
    ) -> Student:
        """Update profile fields. Email and password are not editable here.

        An empty ``social_links`` list keeps the existing links.
        """
        async with self._uow_factory() as uow:
            student = await uow.students.get(student_id)
            if not student:
                raise StudentNotFoundError(str(student_id))

            if first_name is not None:
                student.first_name = first_name
            if last_name is not None:
                student.last_name = last_name
            if profile_picture is not None:
                student.profile_picture = profile_picture
            if department is not None:
                student.department = department
            if bio is not None:
                student.bio = bio
            if interests is not None:
                student.interests = interests
            if social_links:
                student.social_links = social_links

            student.updated_at = datetime.utcnow()
            updated = await uow.students.update(student)
            await uow.commit()
            return updated

    def _issue_token(self, student: Student) -> str:
        return self._auth.create_token(
            TokenUser(
                id=student.id,
                email=student.email,
                display_name=student.full_name,
            )
        )
