"""Pydantic schemas for group membership API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.group import GroupResponse
from domain.entities.group import JoinRequestStatus
from domain.services.membership_rules import JoinOutcome


class JoinRequestResponse(BaseModel):
    """Schema for JoinRequest response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    status: JoinRequestStatus
    requested_at: datetime


class JoinGroupResponse(BaseModel):
    """Result of joining a group.

    ``request`` is set when a join request was queued for a private group.
    """

    outcome: JoinOutcome
    message: str
    request: JoinRequestResponse | None = None
    data: GroupResponse


class JoinRequestListResponse(BaseModel):
    """Schema for list of pending join requests."""

    data: list[JoinRequestResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class GroupMemberResponse(BaseModel):
    """A member's public profile within a group."""

    id: UUID
    first_name: str
    last_name: str
    email: str
    is_admin: bool = False
    is_owner: bool = False


class GroupMemberListResponse(BaseModel):
    """Schema for list of Group Members response."""

    data: list[GroupMemberResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class TransferOwnershipRequest(BaseModel):
    """Schema for transferring group ownership."""

    new_owner_id: UUID


class MembershipActionResponse(BaseModel):
    """Message plus the group state after a membership change."""

    message: str
    data: GroupResponse
