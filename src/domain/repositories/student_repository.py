"""Student repository protocol."""

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from domain.entities.student import Student


class IStudentRepository(Protocol):
    """Repository interface for Student entities."""

    async def get(self, id: UUID) -> Student | None:
        """Get a student by ID."""
        ...

    async def get_by_email(self, email: str) -> Student | None:
        """Get a student by email address."""
        ...

    async def get_many(self, ids: Iterable[UUID]) -> list[Student]:
        """Get the students with the given IDs, in the given order."""
        ...

    async def create(self, student: Student) -> Student:
        """Create a new student. Raises DuplicateEmailError if the email is taken."""
        ...

    async def update(self, student: Student) -> Student:
        """Update an existing student."""
        ...
