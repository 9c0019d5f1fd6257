"""Concurrent writes to the same group document.

Two requests that load the same group and both save it would otherwise
race, with the later write silently discarding the earlier one. The
version column turns the losing write into ``GroupConflictError``.
"""

from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import GroupConflictError
from domain.entities.group import Group, GroupType, JoinRequest, JoinRequestStatus
from domain.services import membership_rules as rules
from domain.services.membership_service import MembershipService
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


@pytest.fixture
async def seeded_group(factory: async_sessionmaker[AsyncSession]) -> Group:
    """A private group with two pending join requests."""
    group = Group.create(name="Topology", creator_id=uuid4(), group_type=GroupType.PRIVATE)
    group.requests = [JoinRequest(student_id=uuid4()), JoinRequest(student_id=uuid4())]
    async with SQLAlchemyUnitOfWork(factory) as uow:
        created = await uow.groups.create(group)
        await uow.commit()
    return created


class TestConcurrentApprovals:
    async def test_second_interleaved_write_is_detected(
        self, factory: async_sessionmaker[AsyncSession], seeded_group: Group
    ):
        admin_id = seeded_group.owner
        first_request, second_request = seeded_group.requests

        async with SQLAlchemyUnitOfWork(factory) as uow_a, SQLAlchemyUnitOfWork(factory) as uow_b:
            group_a = await uow_a.groups.get(seeded_group.id)
            group_b = await uow_b.groups.get(seeded_group.id)
            assert group_a is not None and group_b is not None

            rules.approve_join_request(group_a, admin_id, first_request.id)
            await uow_a.groups.update(group_a)
            await uow_a.commit()

            rules.approve_join_request(group_b, admin_id, second_request.id)
            with pytest.raises(GroupConflictError):
                await uow_b.groups.update(group_b)

        async with SQLAlchemyUnitOfWork(factory) as uow:
            stored = await uow.groups.get(seeded_group.id)

        assert stored is not None
        # The first approval survived; the second was refused, not lost
        assert stored.members == [admin_id, first_request.student_id]
        assert [r.status for r in stored.requests] == [
            JoinRequestStatus.ACCEPTED,
            JoinRequestStatus.PENDING,
        ]

    async def test_sequential_approvals_both_apply(
        self, factory: async_sessionmaker[AsyncSession], seeded_group: Group
    ):
        admin_id = seeded_group.owner
        first_request, second_request = seeded_group.requests
        service = MembershipService(lambda: SQLAlchemyUnitOfWork(factory))

        await service.approve_request(seeded_group.id, admin_id, first_request.id)
        await service.approve_request(seeded_group.id, admin_id, second_request.id)

        group, _ = await service.get_members(seeded_group.id)
        assert group.members == [
            admin_id,
            first_request.student_id,
            second_request.student_id,
        ]

    async def test_version_increments_on_every_save(
        self, factory: async_sessionmaker[AsyncSession], seeded_group: Group
    ):
        service = MembershipService(lambda: SQLAlchemyUnitOfWork(factory))
        start = seeded_group.version

        await service.promote(seeded_group.id, seeded_group.owner, uuid4())
        group, _ = await service.get_members(seeded_group.id)

        assert group.version == start + 1
