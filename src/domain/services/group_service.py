"""Group service layer with business logic."""

from collections.abc import Callable
from typing import List, Optional
from uuid import UUID

import structlog

from core.exceptions import FeatureDisabledError, GroupNotFoundError
from domain.entities.group import (
    Announcement,
    Group,
    GroupPrivacy,
    GroupSettings,
    GroupType,
    Resource,
    generate_invite_code,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.membership_rules import require_admin, require_participant

logger = structlog.get_logger()


class GroupService:
    """Service layer for group administration and shared content."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_all(self) -> List[Group]:
        """Get all groups."""
        async with self._uow_factory() as uow:
            return await uow.groups.get_all()

    async def get_by_id(self, group_id: UUID) -> Group:
        """Get a group by ID."""
        async with self._uow_factory() as uow:
            return await self._get_group(uow, group_id)

    async def create(
        self,
        user_id: UUID,
        name: str,
        description: Optional[str] = None,
        group_type: GroupType = GroupType.PUBLIC,
        privacy: GroupPrivacy = GroupPrivacy.PUBLIC,
        settings: Optional[GroupSettings] = None,
    ) -> Group:
        """Create a group. The creator becomes admin, member and owner."""
        async with self._uow_factory() as uow:
            group = Group.create(
                name=name,
                creator_id=user_id,
                description=description,
                group_type=group_type,
                privacy=privacy,
                settings=settings,
            )
            created = await uow.groups.create(group)
            await uow.commit()

        logger.info("group_created", group_id=str(created.id), created_by=str(user_id))
        return created

    async def update(
        self,
        group_id: UUID,
        user_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        group_type: Optional[GroupType] = None,
        privacy: Optional[GroupPrivacy] = None,
        settings: Optional[GroupSettings] = None,
    ) -> Group:
        """Update group details. Admin only. ``None`` leaves a field unchanged."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            require_admin(group, user_id)

            if name is not None:
                group.name = name
            if description is not None:
                group.description = description
            if group_type is not None:
                group.group_type = group_type
            if privacy is not None:
                group.privacy = privacy
            if settings is not None:
                group.settings = settings

            updated = await uow.groups.update(group)
            await uow.commit()
            return updated

    async def delete(self, group_id: UUID, user_id: UUID) -> bool:
        """Hard-delete a group. Admin only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            require_admin(group, user_id)

            deleted = await uow.groups.delete(group_id)
            await uow.commit()

        logger.info("group_deleted", group_id=str(group_id), deleted_by=str(user_id))
        return deleted

    async def regenerate_invite_code(self, group_id: UUID, user_id: UUID) -> str:
        """Replace the group's invite code. Admin only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            require_admin(group, user_id)

            group.invite_code = generate_invite_code()
            updated = await uow.groups.update(group)
            await uow.commit()
            return updated.invite_code

    # --- Shared content ---

    async def get_announcements(self, group_id: UUID, user_id: UUID) -> List[Announcement]:
        """List announcements, newest first. Members and admins only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            require_participant(group, user_id)
            return sorted(group.announcements, key=lambda a: a.created_at, reverse=True)

    async def post_announcement(
        self, group_id: UUID, user_id: UUID, content: str
    ) -> Announcement:
        """Post an announcement. Admin only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            require_admin(group, user_id)

            announcement = Announcement(content=content, created_by=user_id)
            group.announcements.append(announcement)
            await uow.groups.update(group)
            await uow.commit()
            return announcement

    async def get_resources(self, group_id: UUID, user_id: UUID) -> List[Resource]:
        """List shared resources. Members and admins only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            require_participant(group, user_id)
            return list(group.resources)

    async def share_resource(self, group_id: UUID, user_id: UUID, file_url: str) -> Resource:
        """Share a file link with the group.

        Requires membership and the group's ``allow_file_sharing`` setting.
        """
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            require_participant(group, user_id)
            if not group.settings.allow_file_sharing:
                raise FeatureDisabledError("file_sharing")

            resource = Resource(file_url=file_url, uploaded_by=user_id)
            group.resources.append(resource)
            await uow.groups.update(group)
            await uow.commit()
            return resource

    # --- Internal helpers ---

    @staticmethod
    async def _get_group(uow: IUnitOfWork, group_id: UUID) -> Group:
        group = await uow.groups.get(group_id)
        if not group:
            raise GroupNotFoundError(str(group_id))
        return group
