"""Two signups racing for the same email.

Both can pass the ``get_by_email`` check before either commits. The unique
index on ``students.email`` decides the winner; the loser must still see a
409 duplicate-email error rather than a generic storage failure.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import DuplicateEmailError
from domain.entities.student import Student
from domain.services.student_service import StudentService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.password_hasher import hash_password
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

EMAIL = "dana@example.com"


def _student(first_name: str) -> Student:
    return Student(
        first_name=first_name,
        last_name="Racer",
        email=EMAIL,
        password_hash=hash_password("correct-horse-battery"),
        department="Mathematics",
    )


class TestConcurrentSignups:
    async def test_losing_signup_gets_duplicate_email(
        self,
        factory: async_sessionmaker[AsyncSession],
        auth_provider: JWTAuthProvider,
    ):
        service = StudentService(lambda: SQLAlchemyUnitOfWork(factory), auth_provider)

        async with SQLAlchemyUnitOfWork(factory) as uow:
            assert await uow.students.get_by_email(EMAIL) is None

            winner, _ = await service.register(
                first_name="Dana",
                last_name="First",
                email=EMAIL,
                password="correct-horse-battery",
                department="Physics",
            )

            with pytest.raises(DuplicateEmailError) as exc_info:
                await uow.students.create(_student("Dane"))

        assert exc_info.value.status_code == 409
        assert exc_info.value.details == {"email": EMAIL}

        async with SQLAlchemyUnitOfWork(factory) as uow:
            stored = await uow.students.get_by_email(EMAIL)

        assert stored is not None
        assert stored.id == winner.id
        assert stored.first_name == "Dana"

    async def test_duplicate_insert_in_one_transaction(
        self, factory: async_sessionmaker[AsyncSession]
    ):
        async with SQLAlchemyUnitOfWork(factory) as uow:
            await uow.students.create(_student("Dana"))

            with pytest.raises(DuplicateEmailError):
                await uow.students.create(_student("Dane"))
