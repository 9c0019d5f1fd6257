"""Group API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_group_service
from api.v1.schemas.group import (
    AnnouncementCreate,
    AnnouncementListResponse,
    AnnouncementResponse,
    GroupCreate,
    GroupDetailResponse,
    GroupListResponse,
    GroupResponse,
    GroupUpdate,
    InviteCodeResponse,
    ResourceCreate,
    ResourceListResponse,
    ResourceResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.group_service import GroupService

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get(
    "",
    response_model=GroupListResponse,
    summary="List groups",
    responses={200: {"description": "All groups"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_groups(
    request: Request,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> GroupListResponse:
    """Get all groups."""
    groups = await service.get_all()
    data = [GroupResponse.from_entity(g) for g in groups]
    return GroupListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=GroupDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
    responses={
        201: {"description": "Group created"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_group(
    request: Request,
    body: GroupCreate,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    """Create a group. The creator becomes its first admin and owner."""
    group = await service.create(
        user_id=user.id,
        name=body.name,
        description=body.description,
        group_type=body.group_type,
        privacy=body.privacy,
        settings=body.settings.to_entity() if body.settings else None,
    )
    return GroupDetailResponse(data=GroupResponse.from_entity(group))


@router.get(
    "/{group_id}",
    response_model=GroupDetailResponse,
    summary="Get group details",
    responses={
        200: {"description": "Group details"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    """Get a single group."""
    group = await service.get_by_id(group_id)
    return GroupDetailResponse(data=GroupResponse.from_entity(group))


@router.patch(
    "/{group_id}",
    response_model=GroupDetailResponse,
    summary="Update a group",
    responses={
        200: {"description": "Group updated"},
        403: {"description": "Not an admin"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_group(
    request: Request,
    group_id: UUID,
    body: GroupUpdate,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    """Update a group. Admin only."""
    group = await service.update(
        group_id=group_id,
        user_id=user.id,
        name=body.name,
        description=body.description,
        group_type=body.group_type,
        privacy=body.privacy,
        settings=body.settings.to_entity() if body.settings else None,
    )
    return GroupDetailResponse(data=GroupResponse.from_entity(group))


@router.delete(
    "/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a group",
    responses={
        204: {"description": "Group deleted"},
        403: {"description": "Not an admin"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> None:
    """Delete a group permanently. Admin only."""
    await service.delete(group_id, user.id)
    return None


@router.post(
    "/{group_id}/invite-code",
    response_model=InviteCodeResponse,
    summary="Regenerate invite code",
    responses={
        200: {"description": "New invite code"},
        403: {"description": "Not an admin"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def regenerate_invite_code(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> InviteCodeResponse:
    """Replace the group's invite code. Admin only."""
    code = await service.regenerate_invite_code(group_id, user.id)
    return InviteCodeResponse(invite_code=code)


# --- Announcements ---


@router.get(
    "/{group_id}/announcements",
    response_model=AnnouncementListResponse,
    summary="List announcements",
    responses={
        200: {"description": "Announcements, newest first"},
        400: {"description": "Not a member"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_announcements(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> AnnouncementListResponse:
    """List a group's announcements. Members only."""
    announcements = await service.get_announcements(group_id, user.id)
    data = [AnnouncementResponse.model_validate(a) for a in announcements]
    return AnnouncementListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/{group_id}/announcements",
    response_model=AnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post an announcement",
    responses={
        201: {"description": "Announcement posted"},
        403: {"description": "Not an admin"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def post_announcement(
    request: Request,
    group_id: UUID,
    body: AnnouncementCreate,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> AnnouncementResponse:
    """Post an announcement. Admin only."""
    announcement = await service.post_announcement(group_id, user.id, body.content)
    return AnnouncementResponse.model_validate(announcement)


# --- Resources ---


@router.get(
    "/{group_id}/resources",
    response_model=ResourceListResponse,
    summary="List shared resources",
    responses={
        200: {"description": "Shared resources"},
        400: {"description": "Not a member"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_resources(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> ResourceListResponse:
    """List a group's shared resources. Members only."""
    resources = await service.get_resources(group_id, user.id)
    data = [ResourceResponse.model_validate(r) for r in resources]
    return ResourceListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/{group_id}/resources",
    response_model=ResourceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Share a resource",
    responses={
        201: {"description": "Resource shared"},
        400: {"description": "Not a member"},
        403: {"description": "File sharing disabled"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def share_resource(
    request: Request,
    group_id: UUID,
    body: ResourceCreate,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> ResourceResponse:
    """Share a file link with the group. Members only."""
    resource = await service.share_resource(group_id, user.id, body.file_url)
    return ResourceResponse.model_validate(resource)
