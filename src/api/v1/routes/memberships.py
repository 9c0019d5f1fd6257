"""Group membership API routes: joining, join requests and roles."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_membership_service
from api.v1.schemas.group import GroupResponse
from api.v1.schemas.membership import (
    GroupMemberListResponse,
    GroupMemberResponse,
    JoinGroupResponse,
    JoinRequestListResponse,
    JoinRequestResponse,
    MembershipActionResponse,
    TransferOwnershipRequest,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.membership_rules import JoinOutcome
from domain.services.membership_service import MembershipService

router = APIRouter(prefix="/groups/{group_id}", tags=["memberships"])

_JOIN_MESSAGES = {
    JoinOutcome.JOINED: "You have joined the group successfully",
    JoinOutcome.REQUESTED: "Join request sent successfully",
}


@router.post(
    "/join",
    response_model=JoinGroupResponse,
    summary="Join a group",
    responses={
        200: {"description": "Joined (public) or request sent (private)"},
        404: {"description": "Group not found"},
        409: {"description": "Already a member or request already pending"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def join_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> JoinGroupResponse:
    """Join a public group directly or request to join a private one."""
    group, outcome, join_request = await service.join(group_id, user.id)
    return JoinGroupResponse(
        outcome=outcome,
        message=_JOIN_MESSAGES[outcome],
        request=(
            JoinRequestResponse.model_validate(join_request) if join_request else None
        ),
        data=GroupResponse.from_entity(group),
    )


@router.post(
    "/leave",
    response_model=MembershipActionResponse,
    summary="Leave a group",
    responses={
        200: {"description": "Left the group"},
        400: {"description": "Not a member"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def leave_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipActionResponse:
    """Leave a group. Admin status is not affected."""
    group = await service.leave(group_id, user.id)
    return MembershipActionResponse(
        message="You have left the group successfully",
        data=GroupResponse.from_entity(group),
    )


# --- Members ---


@router.get(
    "/members",
    response_model=GroupMemberListResponse,
    summary="List group members",
    responses={
        200: {"description": "Members with their profiles"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> GroupMemberListResponse:
    """List the members of a group."""
    group, students = await service.get_members(group_id)
    data = [
        GroupMemberResponse(
            id=s.id,
            first_name=s.first_name,
            last_name=s.last_name,
            email=s.email,
            is_admin=group.is_admin(s.id),
            is_owner=group.owner == s.id,
        )
        for s in students
    ]
    return GroupMemberListResponse(data=data, meta={"total": len(data)})


@router.delete(
    "/members/{member_id}",
    response_model=MembershipActionResponse,
    summary="Remove a member",
    responses={
        200: {"description": "Member removed"},
        403: {"description": "Not an admin"},
        404: {"description": "Group or member not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def remove_member(
    request: Request,
    group_id: UUID,
    member_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipActionResponse:
    """Remove a member from the group. Admin only."""
    group = await service.remove_member(group_id, user.id, member_id)
    return MembershipActionResponse(
        message="Member removed successfully",
        data=GroupResponse.from_entity(group),
    )


# --- Join requests ---


@router.get(
    "/requests",
    response_model=JoinRequestListResponse,
    summary="List pending join requests",
    responses={
        200: {"description": "Pending requests"},
        403: {"description": "Not an admin"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_pending_requests(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> JoinRequestListResponse:
    """List pending join requests. Admin only."""
    requests = await service.get_pending_requests(group_id, user.id)
    data = [JoinRequestResponse.model_validate(r) for r in requests]
    return JoinRequestListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/requests/{request_id}/approve",
    response_model=JoinRequestResponse,
    summary="Approve a join request",
    responses={
        200: {"description": "Request accepted, student added"},
        403: {"description": "Not an admin"},
        404: {"description": "Group or request not found"},
        409: {"description": "Request already processed"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def approve_request(
    request: Request,
    group_id: UUID,
    request_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> JoinRequestResponse:
    """Approve a pending join request. Admin only."""
    join_request = await service.approve_request(group_id, user.id, request_id)
    return JoinRequestResponse.model_validate(join_request)


@router.post(
    "/requests/{request_id}/reject",
    response_model=JoinRequestResponse,
    summary="Reject a join request",
    responses={
        200: {"description": "Request rejected"},
        403: {"description": "Not an admin"},
        404: {"description": "Group or request not found"},
        409: {"description": "Request already processed"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def reject_request(
    request: Request,
    group_id: UUID,
    request_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> JoinRequestResponse:
    """Reject a pending join request. Admin only."""
    join_request = await service.reject_request(group_id, user.id, request_id)
    return JoinRequestResponse.model_validate(join_request)


@router.delete(
    "/requests/{request_id}",
    response_model=MembershipActionResponse,
    summary="Cancel a join request",
    responses={
        200: {"description": "Request withdrawn"},
        400: {"description": "Group is not private"},
        404: {"description": "Group or request not found"},
        409: {"description": "Request already processed"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def cancel_request(
    request: Request,
    group_id: UUID,
    request_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipActionResponse:
    """Withdraw your own pending join request."""
    group = await service.cancel_request(group_id, user.id, request_id)
    return MembershipActionResponse(
        message="Join request cancelled successfully",
        data=GroupResponse.from_entity(group),
    )


# --- Roles ---


@router.post(
    "/members/{member_id}/promote",
    response_model=MembershipActionResponse,
    summary="Promote to admin",
    responses={
        200: {"description": "Promoted"},
        403: {"description": "Not an admin"},
        404: {"description": "Group not found"},
        409: {"description": "Already an admin"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def promote_member(
    request: Request,
    group_id: UUID,
    member_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipActionResponse:
    """Promote a student to admin. Admin only."""
    group = await service.promote(group_id, user.id, member_id)
    return MembershipActionResponse(
        message="Member promoted to admin successfully",
        data=GroupResponse.from_entity(group),
    )


@router.post(
    "/members/{member_id}/demote",
    response_model=MembershipActionResponse,
    summary="Demote an admin",
    responses={
        200: {"description": "Demoted"},
        400: {"description": "Target is not an admin"},
        403: {"description": "Not the primary admin"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def demote_member(
    request: Request,
    group_id: UUID,
    member_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipActionResponse:
    """Demote an admin to a regular member. Primary admin only."""
    group = await service.demote(group_id, user.id, member_id)
    return MembershipActionResponse(
        message="Admin demoted to regular member successfully",
        data=GroupResponse.from_entity(group),
    )


@router.post(
    "/admins/me/demote",
    response_model=MembershipActionResponse,
    summary="Step down as admin",
    responses={
        200: {"description": "Stepped down"},
        400: {"description": "Only admin"},
        403: {"description": "Not an admin"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def demote_self(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipActionResponse:
    """Give up your own admin role while another admin remains."""
    group = await service.demote_self(group_id, user.id)
    return MembershipActionResponse(
        message="You have successfully demoted yourself to a regular member",
        data=GroupResponse.from_entity(group),
    )


@router.put(
    "/owner",
    response_model=MembershipActionResponse,
    summary="Transfer ownership",
    responses={
        200: {"description": "Ownership transferred"},
        400: {"description": "New owner is not a member"},
        403: {"description": "Not the owner"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def transfer_ownership(
    request: Request,
    group_id: UUID,
    body: TransferOwnershipRequest,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipActionResponse:
    """Transfer group ownership to another member. Owner only."""
    group = await service.transfer_ownership(group_id, user.id, body.new_owner_id)
    return MembershipActionResponse(
        message="Group ownership transferred successfully",
        data=GroupResponse.from_entity(group),
    )
