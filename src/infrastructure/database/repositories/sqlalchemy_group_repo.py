"""SQLAlchemy implementation of Group repository."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from core.exceptions import GroupConflictError, GroupNotFoundError
from domain.entities.group import (
    Announcement,
    Group,
    GroupPrivacy,
    GroupSettings,
    GroupType,
    JoinRequest,
    JoinRequestStatus,
    MemberIds,
    Resource,
)
from infrastructure.database.models import GroupModel


class SQLAlchemyGroupRepository:
    """SQLAlchemy implementation of IGroupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        stmt = select(GroupModel).where(GroupModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[Group]:
        """Get all groups, oldest first."""
        stmt = select(GroupModel).order_by(GroupModel.created_at)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        model = GroupModel(id=group.id, created_at=group.created_at)
        self._apply(group, model)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, group: Group) -> Group:
        """Write back the whole group document.

        Raises:
            GroupConflictError: If the stored version differs from
                ``group.version``, i.e. another request saved the group
                after this one loaded it.
        """
        stmt = (
            select(GroupModel)
            .where(GroupModel.id == group.id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise GroupNotFoundError(str(group.id))
        if model.version != group.version:
            raise GroupConflictError(str(group.id))

        self._apply(group, model)

        try:
            await self._session.flush()
        except StaleDataError as e:
            raise GroupConflictError(str(group.id)) from e
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a group."""
        stmt = select(GroupModel).where(GroupModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    # --- Mapping ---

    def _apply(self, entity: Group, model: GroupModel) -> None:
        """Copy every mutable field of the entity onto the model."""
        model.name = entity.name
        model.description = entity.description
        model.group_type = entity.group_type.value
        model.privacy = entity.privacy.value
        model.owner_id = entity.owner
        model.admins = [str(id_) for id_ in entity.admins]
        model.members = [str(id_) for id_ in entity.members]
        model.requests = [
            {
                "id": str(r.id),
                "student_id": str(r.student_id),
                "status": r.status.value,
                "requested_at": r.requested_at.isoformat(),
            }
            for r in entity.requests
        ]
        model.resources = [
            {
                "id": str(r.id),
                "file_url": r.file_url,
                "uploaded_by": str(r.uploaded_by),
                "uploaded_at": r.uploaded_at.isoformat(),
            }
            for r in entity.resources
        ]
        model.announcements = [
            {
                "id": str(a.id),
                "content": a.content,
                "created_by": str(a.created_by),
                "created_at": a.created_at.isoformat(),
            }
            for a in entity.announcements
        ]
        model.invite_code = entity.invite_code
        model.settings = {
            "allow_file_sharing": entity.settings.allow_file_sharing,
            "allow_chat": entity.settings.allow_chat,
        }

    def _to_entity(self, model: GroupModel) -> Group:
        """Convert ORM model to domain entity."""
        settings: dict[str, Any] = model.settings or {}
        return Group(
            id=model.id,
            name=model.name,
            description=model.description,
            group_type=GroupType(model.group_type),
            privacy=GroupPrivacy(model.privacy),
            owner=model.owner_id,
            admins=MemberIds(UUID(id_) for id_ in model.admins),
            members=MemberIds(UUID(id_) for id_ in model.members),
            requests=[
                JoinRequest(
                    id=UUID(r["id"]),
                    student_id=UUID(r["student_id"]),
                    status=JoinRequestStatus(r["status"]),
                    requested_at=datetime.fromisoformat(r["requested_at"]),
                )
                for r in model.requests
            ],
            resources=[
                Resource(
                    id=UUID(r["id"]),
                    file_url=r["file_url"],
                    uploaded_by=UUID(r["uploaded_by"]),
                    uploaded_at=datetime.fromisoformat(r["uploaded_at"]),
                )
                for r in model.resources
            ],
            announcements=[
                Announcement(
                    id=UUID(a["id"]),
                    content=a["content"],
                    created_by=UUID(a["created_by"]),
                    created_at=datetime.fromisoformat(a["created_at"]),
                )
                for a in model.announcements
            ],
            invite_code=model.invite_code,
            settings=GroupSettings(
                allow_file_sharing=settings.get("allow_file_sharing", True),
                allow_chat=settings.get("allow_chat", True),
            ),
            created_at=model.created_at,
            version=model.version,
        )
