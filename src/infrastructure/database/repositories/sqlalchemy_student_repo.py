"""SQLAlchemy implementation of Student repository."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateEmailError
from domain.entities.student import SocialLink, Student
from infrastructure.database.models import StudentModel


class SQLAlchemyStudentRepository:
    """SQLAlchemy implementation of IStudentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Student | None:
        """Get a student by ID."""
        stmt = select(StudentModel).where(StudentModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Student | None:
        """Get a student by email address."""
        stmt = select(StudentModel).where(StudentModel.email == email)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_many(self, ids: Iterable[UUID]) -> list[Student]:
        """Get students by ID, preserving the order of ``ids``.

        IDs with no matching student are skipped.
        """
        id_list = list(ids)
        if not id_list:
            return []

        stmt = select(StudentModel).where(StudentModel.id.in_(id_list))
        result = await self._session.execute(stmt)
        by_id = {model.id: model for model in result.scalars()}
        return [self._to_entity(by_id[id_]) for id_ in id_list if id_ in by_id]

    async def create(self, student: Student) -> Student:
        """Create a new student.

        Raises:
            DuplicateEmailError: If the email is taken, including by a
                concurrent registration that committed first.
        """
        model = self._to_model(student)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise DuplicateEmailError(student.email) from e
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, student: Student) -> Student:
        """Update an existing student's profile fields."""
        stmt = select(StudentModel).where(StudentModel.id == student.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Student {student.id} not found")

        model.first_name = student.first_name
        model.last_name = student.last_name
        model.department = student.department
        model.profile_picture = student.profile_picture
        model.bio = student.bio
        model.interests = list(student.interests)
        model.social_links = [
            {"platform": link.platform, "url": link.url} for link in student.social_links
        ]
        model.updated_at = student.updated_at

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: StudentModel) -> Student:
        """Convert ORM model to domain entity."""
        return Student(
            id=model.id,
            first_name=model.first_name,
            last_name=model.last_name,
            email=model.email,
            password_hash=model.password_hash,
            department=model.department,
            profile_picture=model.profile_picture,
            bio=model.bio,
            interests=list(model.interests or []),
            social_links=[
                SocialLink(platform=link["platform"], url=link["url"])
                for link in model.social_links or []
            ],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Student) -> StudentModel:
        """Convert domain entity to ORM model."""
        return StudentModel(
            id=entity.id,
            first_name=entity.first_name,
            last_name=entity.last_name,
            email=entity.email,
            password_hash=entity.password_hash,
            department=entity.department,
            profile_picture=entity.profile_picture,
            bio=entity.bio,
            interests=list(entity.interests),
            social_links=[
                {"platform": link.platform, "url": link.url} for link in entity.social_links
            ],
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
