"""Dependency injection factories for API v1.

Services hold no state beyond their unit-of-work factory, so a fresh
instance is built for each request.
"""

from typing import Callable

from fastapi import Depends

from api.dependencies.auth import get_auth_provider
from domain.services.group_service import GroupService
from domain.services.membership_service import MembershipService
from domain.services.student_service import StudentService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


def get_group_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = Depends(get_uow_factory),
) -> GroupService:
    """Get Group service instance."""
    return GroupService(uow_factory)


def get_membership_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = Depends(get_uow_factory),
) -> MembershipService:
    """Get Membership service instance."""
    return MembershipService(uow_factory)


def get_student_service(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = Depends(get_uow_factory),
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> StudentService:
    """Get Student service instance."""
    return StudentService(uow_factory, auth_provider)
