"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.group import Group, GroupType


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.groups = AsyncMock()
        self.students = AsyncMock()
        self.committed = False
        self.rolled_back = False

        # Saving a group echoes it back, as the real repository does
        self.groups.update.side_effect = lambda group: group
        self.groups.create.side_effect = lambda group: group

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def admin_id() -> UUID:
    """The creator and sole admin of the test groups."""
    return uuid4()


@pytest.fixture
def student_id() -> UUID:
    """A student distinct from the admin."""
    return uuid4()


@pytest.fixture
def public_group(admin_id: UUID) -> Group:
    return Group.create(name="Algorithms", creator_id=admin_id)


@pytest.fixture
def private_group(admin_id: UUID) -> Group:
    return Group.create(
        name="Thesis Club", creator_id=admin_id, group_type=GroupType.PRIVATE
    )
