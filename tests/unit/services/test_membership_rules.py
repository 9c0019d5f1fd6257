"""Unit tests for the membership and role rules."""

from datetime import datetime
from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    AlreadyAGroupMemberError,
    AlreadyAnAdminError,
    DuplicateJoinRequestError,
    GroupMemberNotFoundError,
    InsufficientPermissionsError,
    JoinRequestNotFoundError,
    NotAGroupMemberError,
    NotAnAdminError,
    RequestAlreadyProcessedError,
    SoleAdminError,
    WrongGroupTypeError,
)
from domain.entities.group import Group, JoinRequest, JoinRequestStatus
from domain.services import membership_rules as rules
from domain.services.membership_rules import JoinOutcome


def _request_for(group: Group, student_id: UUID) -> JoinRequest:
    return next(r for r in group.requests if r.student_id == student_id)


# --- join_group ---


class TestJoinGroup:
    def test_public_group_adds_member_without_request(
        self, public_group: Group, student_id: UUID
    ):
        outcome, request = rules.join_group(public_group, student_id)

        assert outcome == JoinOutcome.JOINED
        assert request is None
        assert student_id in public_group.members
        assert public_group.requests == []

    def test_private_group_queues_pending_request(
        self, private_group: Group, admin_id: UUID, student_id: UUID
    ):
        now = datetime(2026, 3, 1, 12, 0)

        outcome, request = rules.join_group(private_group, student_id, now=now)

        assert outcome == JoinOutcome.REQUESTED
        assert private_group.members == [admin_id]
        assert request is _request_for(private_group, student_id)
        assert request.status == JoinRequestStatus.PENDING
        assert request.requested_at == now

    def test_existing_member_cannot_join(self, public_group: Group, admin_id: UUID):
        with pytest.raises(AlreadyAGroupMemberError):
            rules.join_group(public_group, admin_id)

    def test_second_pending_request_is_rejected(
        self, private_group: Group, student_id: UUID
    ):
        rules.join_group(private_group, student_id)

        with pytest.raises(DuplicateJoinRequestError):
            rules.join_group(private_group, student_id)

        assert len(private_group.requests) == 1

    def test_can_request_again_after_rejection(
        self, private_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.join_group(private_group, student_id)
        rules.reject_join_request(
            private_group, admin_id, _request_for(private_group, student_id).id
        )

        outcome, _ = rules.join_group(private_group, student_id)

        assert outcome == JoinOutcome.REQUESTED
        assert [r.status for r in private_group.requests] == [
            JoinRequestStatus.REJECTED,
            JoinRequestStatus.PENDING,
        ]


# --- cancel_join_request ---


class TestCancelJoinRequest:
    def test_removes_request_record(self, private_group: Group, student_id: UUID):
        rules.join_group(private_group, student_id)
        request_id = private_group.requests[0].id

        cancelled = rules.cancel_join_request(private_group, student_id, request_id)

        assert cancelled.id == request_id
        assert private_group.requests == []

    def test_public_group_raises_wrong_group_type(
        self, public_group: Group, student_id: UUID
    ):
        with pytest.raises(WrongGroupTypeError):
            rules.cancel_join_request(public_group, student_id, uuid4())

    def test_unknown_request_raises_not_found(
        self, private_group: Group, student_id: UUID
    ):
        with pytest.raises(JoinRequestNotFoundError):
            rules.cancel_join_request(private_group, student_id, uuid4())

    def test_other_students_request_raises_not_found(
        self, private_group: Group, student_id: UUID
    ):
        rules.join_group(private_group, student_id)
        request_id = private_group.requests[0].id

        with pytest.raises(JoinRequestNotFoundError):
            rules.cancel_join_request(private_group, uuid4(), request_id)

        assert len(private_group.requests) == 1

    def test_processed_request_cannot_be_cancelled(
        self, private_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.join_group(private_group, student_id)
        request_id = private_group.requests[0].id
        rules.approve_join_request(private_group, admin_id, request_id)

        with pytest.raises(RequestAlreadyProcessedError):
            rules.cancel_join_request(private_group, student_id, request_id)


# --- leave_group ---


class TestLeaveGroup:
    def test_removes_member(self, public_group: Group, admin_id: UUID, student_id: UUID):
        rules.join_group(public_group, student_id)

        rules.leave_group(public_group, student_id)

        assert public_group.members == [admin_id]

    def test_non_member_raises(self, public_group: Group, student_id: UUID):
        with pytest.raises(NotAGroupMemberError):
            rules.leave_group(public_group, student_id)

    def test_leaving_admin_keeps_admin_role(self, public_group: Group, admin_id: UUID):
        rules.leave_group(public_group, admin_id)

        assert admin_id not in public_group.members
        assert public_group.admins == [admin_id]


# --- approve / reject ---


class TestReviewJoinRequest:
    def test_approve_marks_accepted_and_adds_member(
        self, private_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.join_group(private_group, student_id)
        request_id = private_group.requests[0].id

        request = rules.approve_join_request(private_group, admin_id, request_id)

        assert request.status == JoinRequestStatus.ACCEPTED
        assert private_group.members == [admin_id, student_id]

    def test_reject_marks_rejected_without_membership_change(
        self, private_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.join_group(private_group, student_id)
        request_id = private_group.requests[0].id

        request = rules.reject_join_request(private_group, admin_id, request_id)

        assert request.status == JoinRequestStatus.REJECTED
        assert private_group.members == [admin_id]

    @pytest.mark.parametrize(
        "first, second",
        [
            (rules.approve_join_request, rules.approve_join_request),
            (rules.approve_join_request, rules.reject_join_request),
            (rules.reject_join_request, rules.approve_join_request),
            (rules.reject_join_request, rules.reject_join_request),
        ],
    )
    def test_request_is_processed_exactly_once(
        self, private_group: Group, admin_id: UUID, student_id: UUID, first, second
    ):
        rules.join_group(private_group, student_id)
        request_id = private_group.requests[0].id
        first(private_group, admin_id, request_id)
        status_after_first = private_group.requests[0].status

        with pytest.raises(RequestAlreadyProcessedError):
            second(private_group, admin_id, request_id)

        assert private_group.requests[0].status == status_after_first

    def test_non_admin_cannot_approve(self, private_group: Group, student_id: UUID):
        rules.join_group(private_group, student_id)

        with pytest.raises(InsufficientPermissionsError):
            rules.approve_join_request(
                private_group, student_id, private_group.requests[0].id
            )

    def test_non_admin_cannot_reject(self, private_group: Group, student_id: UUID):
        rules.join_group(private_group, student_id)

        with pytest.raises(InsufficientPermissionsError):
            rules.reject_join_request(
                private_group, student_id, private_group.requests[0].id
            )

    def test_unknown_request_raises_not_found(self, private_group: Group, admin_id: UUID):
        with pytest.raises(JoinRequestNotFoundError):
            rules.approve_join_request(private_group, admin_id, uuid4())

    def test_approve_does_not_duplicate_existing_member(
        self, private_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.join_group(private_group, student_id)
        request_id = private_group.requests[0].id
        # Student got in by another route while the request was pending
        private_group.members.append(student_id)

        rules.approve_join_request(private_group, admin_id, request_id)

        assert private_group.members == [admin_id, student_id]

    def test_pending_requests_filters_processed(
        self, private_group: Group, admin_id: UUID
    ):
        accepted, pending = uuid4(), uuid4()
        rules.join_group(private_group, accepted)
        rules.join_group(private_group, pending)
        rules.approve_join_request(private_group, admin_id, private_group.requests[0].id)

        result = rules.pending_requests(private_group, admin_id)

        assert [r.student_id for r in result] == [pending]

    def test_pending_requests_is_admin_only(self, private_group: Group, student_id: UUID):
        with pytest.raises(InsufficientPermissionsError):
            rules.pending_requests(private_group, student_id)


# --- remove_member ---


class TestRemoveMember:
    def test_admin_removes_member(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.join_group(public_group, student_id)

        rules.remove_member(public_group, admin_id, student_id)

        assert student_id not in public_group.members

    def test_missing_member_raises_not_found(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        with pytest.raises(GroupMemberNotFoundError) as exc_info:
            rules.remove_member(public_group, admin_id, student_id)

        assert exc_info.value.message == "Member not found in this group"

    def test_non_admin_cannot_remove(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.join_group(public_group, student_id)

        with pytest.raises(InsufficientPermissionsError):
            rules.remove_member(public_group, student_id, admin_id)


# --- promote / demote ---


class TestPromoteMember:
    def test_appends_to_admins(self, public_group: Group, admin_id: UUID, student_id: UUID):
        rules.join_group(public_group, student_id)

        rules.promote_member(public_group, admin_id, student_id)

        assert public_group.admins == [admin_id, student_id]

    def test_already_admin_raises(self, public_group: Group, admin_id: UUID):
        with pytest.raises(AlreadyAnAdminError):
            rules.promote_member(public_group, admin_id, admin_id)

    def test_non_admin_cannot_promote(self, public_group: Group, student_id: UUID):
        rules.join_group(public_group, student_id)

        with pytest.raises(InsufficientPermissionsError):
            rules.promote_member(public_group, student_id, student_id)

    def test_non_member_can_be_promoted(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.promote_member(public_group, admin_id, student_id)

        assert student_id in public_group.admins
        assert student_id not in public_group.members


class TestDemoteMember:
    def test_primary_admin_demotes_other_admin(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.promote_member(public_group, admin_id, student_id)

        rules.demote_member(public_group, admin_id, student_id)

        assert public_group.admins == [admin_id]

    def test_secondary_admin_cannot_demote(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.promote_member(public_group, admin_id, student_id)

        with pytest.raises(InsufficientPermissionsError) as exc_info:
            rules.demote_member(public_group, student_id, admin_id)

        assert exc_info.value.details == {"required_role": "primary_admin"}

    def test_target_not_admin_raises(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        with pytest.raises(NotAnAdminError):
            rules.demote_member(public_group, admin_id, student_id)

    def test_sole_primary_admin_cannot_demote_self(
        self, public_group: Group, admin_id: UUID
    ):
        with pytest.raises(SoleAdminError):
            rules.demote_member(public_group, admin_id, admin_id)

        assert public_group.admins == [admin_id]


class TestDemoteSelf:
    def test_sole_admin_raises(self, public_group: Group, admin_id: UUID):
        with pytest.raises(SoleAdminError):
            rules.demote_self(public_group, admin_id)

    def test_secondary_admin_steps_down(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.promote_member(public_group, admin_id, student_id)

        rules.demote_self(public_group, student_id)

        assert public_group.admins == [admin_id]

    def test_non_admin_raises_forbidden(self, public_group: Group, student_id: UUID):
        with pytest.raises(InsufficientPermissionsError):
            rules.demote_self(public_group, student_id)

    def test_primary_admin_steps_down_and_next_becomes_primary(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.promote_member(public_group, admin_id, student_id)

        rules.demote_self(public_group, admin_id)

        assert public_group.primary_admin == student_id


# --- transfer_ownership ---


class TestTransferOwnership:
    def test_owner_transfers_to_member(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.join_group(public_group, student_id)

        rules.transfer_ownership(public_group, admin_id, student_id)

        assert public_group.owner == student_id
        assert public_group.admins == [admin_id]

    def test_non_owner_raises_forbidden(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.join_group(public_group, student_id)

        with pytest.raises(InsufficientPermissionsError):
            rules.transfer_ownership(public_group, student_id, student_id)

    @pytest.mark.parametrize("caller_is_owner", [True, False])
    def test_new_owner_must_be_member(
        self, public_group: Group, admin_id: UUID, caller_is_owner: bool
    ):
        caller = admin_id if caller_is_owner else uuid4()
        exc_type = NotAGroupMemberError if caller_is_owner else InsufficientPermissionsError

        with pytest.raises(exc_type):
            rules.transfer_ownership(public_group, caller, uuid4())

        assert public_group.owner == admin_id

    def test_owner_and_primary_admin_can_diverge(
        self, public_group: Group, admin_id: UUID, student_id: UUID
    ):
        rules.join_group(public_group, student_id)
        rules.promote_member(public_group, admin_id, student_id)
        rules.transfer_ownership(public_group, admin_id, student_id)

        # Primary admin still decides demotions; the owner decides transfers
        assert public_group.primary_admin == admin_id
        assert public_group.owner == student_id
        with pytest.raises(InsufficientPermissionsError):
            rules.demote_member(public_group, student_id, admin_id)
        with pytest.raises(InsufficientPermissionsError):
            rules.transfer_ownership(public_group, admin_id, admin_id)


# --- Scenarios ---


class TestScenarios:
    def test_private_join_approve_then_leave(self, private_group: Group, admin_id: UUID):
        student_b = uuid4()

        outcome, request = rules.join_group(private_group, student_b)
        assert outcome == JoinOutcome.REQUESTED
        assert request is not None
        assert request.status == JoinRequestStatus.PENDING

        rules.approve_join_request(private_group, admin_id, request.id)
        assert request.status == JoinRequestStatus.ACCEPTED
        assert private_group.members == [admin_id, student_b]

        rules.leave_group(private_group, student_b)
        assert private_group.members == [admin_id]
        assert len(private_group.requests) == 1
        assert private_group.requests[0].status == JoinRequestStatus.ACCEPTED

    def test_promote_non_member_then_step_down(self, public_group: Group, admin_id: UUID):
        student_b = uuid4()

        with pytest.raises(SoleAdminError):
            rules.demote_self(public_group, admin_id)

        rules.promote_member(public_group, admin_id, student_b)
        assert public_group.admins == [admin_id, student_b]
        assert student_b not in public_group.members

        rules.demote_self(public_group, admin_id)
        assert public_group.admins == [student_b]
