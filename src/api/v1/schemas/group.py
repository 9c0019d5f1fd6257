"""Pydantic schemas for Group API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.group import Group, GroupPrivacy, GroupSettings, GroupType


class GroupSettingsSchema(BaseModel):
    """Per-group feature switches."""

    allow_file_sharing: bool = True
    allow_chat: bool = True

    def to_entity(self) -> GroupSettings:
        return GroupSettings(
            allow_file_sharing=self.allow_file_sharing,
            allow_chat=self.allow_chat,
        )


class GroupCreate(BaseModel):
    """Schema for creating a group."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    group_type: GroupType
    privacy: GroupPrivacy = GroupPrivacy.PUBLIC
    settings: GroupSettingsSchema | None = None


class GroupUpdate(BaseModel):
    """Schema for updating a group. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=1000)
    group_type: GroupType | None = None
    privacy: GroupPrivacy | None = None
    settings: GroupSettingsSchema | None = None


class GroupResponse(BaseModel):
    """Schema for Group response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    group_type: GroupType
    privacy: GroupPrivacy
    owner: UUID
    admins: list[UUID]
    members: list[UUID]
    member_count: int
    invite_code: str
    settings: GroupSettingsSchema
    created_at: datetime

    @classmethod
    def from_entity(cls, group: Group) -> "GroupResponse":
        return cls(
            id=group.id,
            name=group.name,
            description=group.description,
            group_type=group.group_type,
            privacy=group.privacy,
            owner=group.owner,
            admins=group.admins.to_list(),
            members=group.members.to_list(),
            member_count=len(group.members),
            invite_code=group.invite_code,
            settings=GroupSettingsSchema(
                allow_file_sharing=group.settings.allow_file_sharing,
                allow_chat=group.settings.allow_chat,
            ),
            created_at=group.created_at,
        )


class GroupListResponse(BaseModel):
    """Schema for list of Groups response."""

    data: list[GroupResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class GroupDetailResponse(BaseModel):
    """Schema for single Group response."""

    data: GroupResponse


class InviteCodeResponse(BaseModel):
    """Schema for a regenerated invite code."""

    invite_code: str


class AnnouncementCreate(BaseModel):
    """Schema for posting an announcement."""

    content: str = Field(..., min_length=1, max_length=5000)


class AnnouncementResponse(BaseModel):
    """Schema for Announcement response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    content: str
    created_by: UUID
    created_at: datetime


class AnnouncementListResponse(BaseModel):
    """Schema for list of Announcements response."""

    data: list[AnnouncementResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class ResourceCreate(BaseModel):
    """Schema for sharing a resource link."""

    file_url: str = Field(..., min_length=1, max_length=2000, pattern=r"^https?://")


class ResourceResponse(BaseModel):
    """Schema for Resource response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    file_url: str
    uploaded_by: UUID
    uploaded_at: datetime


class ResourceListResponse(BaseModel):
    """Schema for list of Resources response."""

    data: list[ResourceResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
