"""Membership and role rules for groups.

Pure functions over a ``Group``: each one checks the caller's rights and the
group's current state, mutates the group in memory, or raises a named
``AppException``. Loading and persisting the group is the caller's job
(see ``MembershipService``).

Two notions of "superadmin" coexist:
demoting another admin requires the *primary admin* (``admins[0]``), while
transferring ownership requires the ``owner`` field. Transferring ownership
does not reorder ``admins``, so the two can diverge.
"""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

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
from domain.entities.group import Group, GroupType, JoinRequest, JoinRequestStatus


class JoinOutcome(StrEnum):
    """Result of a join attempt."""

    JOINED = "joined"
    REQUESTED = "requested"


# --- Guards ---


def require_admin(group: Group, caller_id: UUID) -> None:
    """Raise unless the caller is one of the group's admins."""
    if not group.is_admin(caller_id):
        raise InsufficientPermissionsError("admin")


def require_primary_admin(group: Group, caller_id: UUID) -> None:
    """Raise unless the caller is the first admin."""
    if group.primary_admin != caller_id:
        raise InsufficientPermissionsError("primary_admin")


def require_owner(group: Group, caller_id: UUID) -> None:
    """Raise unless the caller is the recorded owner."""
    if group.owner != caller_id:
        raise InsufficientPermissionsError("owner")


def require_participant(group: Group, caller_id: UUID) -> None:
    """Raise unless the caller is a member or an admin."""
    if not (group.is_member(caller_id) or group.is_admin(caller_id)):
        raise NotAGroupMemberError(str(caller_id))


def _pending_request(request: JoinRequest | None, request_id: UUID) -> JoinRequest:
    if request is None:
        raise JoinRequestNotFoundError(str(request_id))
    if not request.is_pending:
        raise RequestAlreadyProcessedError(str(request_id), request.status.value)
    return request


# --- Join / leave / cancel ---


def join_group(
    group: Group, caller_id: UUID, now: datetime | None = None
) -> tuple[JoinOutcome, JoinRequest | None]:
    """Join a public group directly, or queue a request for a private one.

    The queued ``JoinRequest`` is returned with the outcome so the requester
    can refer to it later, e.g. to cancel it.
    """
    if group.is_member(caller_id):
        raise AlreadyAGroupMemberError(str(caller_id))

    if group.group_type == GroupType.PRIVATE:
        if any(r.student_id == caller_id and r.is_pending for r in group.requests):
            raise DuplicateJoinRequestError(str(caller_id))
        request = JoinRequest(
            student_id=caller_id,
            status=JoinRequestStatus.PENDING,
            requested_at=now or datetime.utcnow(),
        )
        group.requests.append(request)
        return JoinOutcome.REQUESTED, request

    group.members.append(caller_id)
    return JoinOutcome.JOINED, None


def cancel_join_request(group: Group, caller_id: UUID, request_id: UUID) -> JoinRequest:
    """Withdraw the caller's own pending request. Private groups only."""
    if group.group_type != GroupType.PRIVATE:
        raise WrongGroupTypeError(GroupType.PRIVATE.value)

    request = group.find_request(request_id)
    if request is not None and request.student_id != caller_id:
        # Someone else's request is indistinguishable from a missing one
        request = None
    request = _pending_request(request, request_id)

    group.requests = [r for r in group.requests if r.id != request_id]
    return request


def leave_group(group: Group, caller_id: UUID) -> None:
    """Remove the caller from members. Admin status is left untouched."""
    if not group.is_member(caller_id):
        raise NotAGroupMemberError(str(caller_id))
    group.members.remove(caller_id)


# --- Request review ---


def approve_join_request(group: Group, caller_id: UUID, request_id: UUID) -> JoinRequest:
    """Accept a pending request and add its student to members."""
    require_admin(group, caller_id)
    request = _pending_request(group.find_request(request_id), request_id)

    request.status = JoinRequestStatus.ACCEPTED
    # Members stay unique even when the student got in by another route
    group.members.add_if_absent(request.student_id)
    return request


def reject_join_request(group: Group, caller_id: UUID, request_id: UUID) -> JoinRequest:
    """Reject a pending request. Membership is unchanged."""
    require_admin(group, caller_id)
    request = _pending_request(group.find_request(request_id), request_id)

    request.status = JoinRequestStatus.REJECTED
    return request


def pending_requests(group: Group, caller_id: UUID) -> list[JoinRequest]:
    """List pending requests. Admin only."""
    require_admin(group, caller_id)
    return group.pending_requests()


# --- Member management ---


def remove_member(group: Group, caller_id: UUID, member_id: UUID) -> None:
    """Remove another student from members. Admin only."""
    require_admin(group, caller_id)
    if not group.is_member(member_id):
        raise GroupMemberNotFoundError(str(member_id))
    group.members.remove(member_id)


def promote_member(group: Group, caller_id: UUID, member_id: UUID) -> None:
    """Append a student to admins. Admin only.

    The target does not have to be in ``members``.
    """
    require_admin(group, caller_id)
    if group.is_admin(member_id):
        raise AlreadyAnAdminError(str(member_id))
    group.admins.append(member_id)


def demote_member(group: Group, caller_id: UUID, member_id: UUID) -> None:
    """Remove a student from admins. Primary admin only."""
    require_primary_admin(group, caller_id)
    if not group.is_admin(member_id):
        raise NotAnAdminError(str(member_id))
    if member_id == caller_id and len(group.admins) == 1:
        raise SoleAdminError()
    group.admins.remove(member_id)


def demote_self(group: Group, caller_id: UUID) -> None:
    """Step down from admin, provided another admin remains."""
    require_admin(group, caller_id)
    if len(group.admins) == 1:
        raise SoleAdminError()
    group.admins.remove(caller_id)


def transfer_ownership(group: Group, caller_id: UUID, new_owner_id: UUID) -> None:
    """Hand the owner field to a current member. Owner only."""
    require_owner(group, caller_id)
    if not group.is_member(new_owner_id):
        raise NotAGroupMemberError(
            str(new_owner_id), message="New owner must be a group member"
        )
    group.owner = new_owner_id
