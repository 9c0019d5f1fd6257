"""Membership service: loads a group, applies a membership rule, saves it."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import GroupNotFoundError
from domain.entities.group import Group, JoinRequest
from domain.entities.student import Student
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services import membership_rules as rules
from domain.services.membership_rules import JoinOutcome

logger = structlog.get_logger()


class MembershipService:
    """Service layer for joining, leaving and role changes within a group.

    Every mutating call is one read/modify/write of the group document inside
    a single unit of work. A concurrent write to the same group surfaces as
    ``GroupConflictError`` from the repository.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    # --- Join / leave ---

    async def join(
        self, group_id: UUID, student_id: UUID
    ) -> tuple[Group, JoinOutcome, JoinRequest | None]:
        """Join a public group or send a request to a private one.

        Returns the saved group, the outcome and, for a private group, the
        pending request that was created.
        """
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            outcome, request = rules.join_group(group, student_id)

            updated = await uow.groups.update(group)
            await uow.commit()

        logger.info(
            "group_joined" if outcome == JoinOutcome.JOINED else "join_request_sent",
            group_id=str(group_id),
            student_id=str(student_id),
        )
        return updated, outcome, request

    async def cancel_request(
        self, group_id: UUID, student_id: UUID, request_id: UUID
    ) -> Group:
        """Withdraw the caller's own pending join request."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            rules.cancel_join_request(group, student_id, request_id)

            updated = await uow.groups.update(group)
            await uow.commit()

        logger.info(
            "join_request_cancelled",
            group_id=str(group_id),
            request_id=str(request_id),
        )
        return updated

    async def leave(self, group_id: UUID, student_id: UUID) -> Group:
        """Leave a group."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            rules.leave_group(group, student_id)

            updated = await uow.groups.update(group)
            await uow.commit()

        logger.info("group_left", group_id=str(group_id), student_id=str(student_id))
        return updated

    # --- Join request review ---

    async def get_pending_requests(
        self, group_id: UUID, user_id: UUID
    ) -> list[JoinRequest]:
        """List pending join requests. Admin only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            return rules.pending_requests(group, user_id)

    async def approve_request(
        self, group_id: UUID, user_id: UUID, request_id: UUID
    ) -> JoinRequest:
        """Accept a pending join request. Admin only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            request = rules.approve_join_request(group, user_id, request_id)

            await uow.groups.update(group)
            await uow.commit()

        logger.info(
            "join_request_approved",
            group_id=str(group_id),
            request_id=str(request_id),
            student_id=str(request.student_id),
            approved_by=str(user_id),
        )
        return request

    async def reject_request(
        self, group_id: UUID, user_id: UUID, request_id: UUID
    ) -> JoinRequest:
        """Reject a pending join request. Admin only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            request = rules.reject_join_request(group, user_id, request_id)

            await uow.groups.update(group)
            await uow.commit()

        logger.info(
            "join_request_rejected",
            group_id=str(group_id),
            request_id=str(request_id),
            rejected_by=str(user_id),
        )
        return request

    # --- Members ---

    async def get_members(self, group_id: UUID) -> tuple[Group, list[Student]]:
        """Get a group and the profiles of its members, in join order."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            students = await uow.students.get_many(group.members)
            return group, students

    async def remove_member(
        self, group_id: UUID, user_id: UUID, member_id: UUID
    ) -> Group:
        """Remove a member from the group. Admin only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            rules.remove_member(group, user_id, member_id)

            updated = await uow.groups.update(group)
            await uow.commit()

        logger.info(
            "group_member_removed",
            group_id=str(group_id),
            member_id=str(member_id),
            removed_by=str(user_id),
        )
        return updated

    # --- Roles ---

    async def promote(self, group_id: UUID, user_id: UUID, member_id: UUID) -> Group:
        """Make a student an admin. Admin only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            rules.promote_member(group, user_id, member_id)

            updated = await uow.groups.update(group)
            await uow.commit()

        logger.info(
            "group_admin_promoted",
            group_id=str(group_id),
            member_id=str(member_id),
            promoted_by=str(user_id),
        )
        return updated

    async def demote(self, group_id: UUID, user_id: UUID, member_id: UUID) -> Group:
        """Remove a student's admin role. Primary admin only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            rules.demote_member(group, user_id, member_id)

            updated = await uow.groups.update(group)
            await uow.commit()

        logger.info(
            "group_admin_demoted",
            group_id=str(group_id),
            member_id=str(member_id),
            demoted_by=str(user_id),
        )
        return updated

    async def demote_self(self, group_id: UUID, user_id: UUID) -> Group:
        """Step down from admin while another admin remains."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            rules.demote_self(group, user_id)

            updated = await uow.groups.update(group)
            await uow.commit()

        logger.info("group_admin_stepped_down", group_id=str(group_id), student_id=str(user_id))
        return updated

    async def transfer_ownership(
        self, group_id: UUID, user_id: UUID, new_owner_id: UUID
    ) -> Group:
        """Transfer the owner field to another member. Owner only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            rules.transfer_ownership(group, user_id, new_owner_id)

            updated = await uow.groups.update(group)
            await uow.commit()

        logger.info(
            "group_ownership_transferred",
            group_id=str(group_id),
            previous_owner=str(user_id),
            new_owner=str(new_owner_id),
        )
        return updated

    # --- Internal helpers ---

    @staticmethod
    async def _get_group(uow: IUnitOfWork, group_id: UUID) -> Group:
        group = await uow.groups.get(group_id)
        if not group:
            raise GroupNotFoundError(str(group_id))
        return group
