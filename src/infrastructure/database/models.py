"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class StudentModel(Base):
    """Registered student."""

    __tablename__ = "students"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    profile_picture: Mapped[str] = mapped_column(String(500), nullable=False)
    bio: Mapped[str | None] = mapped_column(Text)
    interests: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    social_links: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, nullable=False, default=list
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


class GroupModel(Base):
    """Group document.

    Admins, members, join requests, resources and announcements are embedded
    JSON arrays; the row is rewritten as a whole on every save. ``version`` is
    the optimistic-concurrency token checked by the ORM on UPDATE.
    """

    __tablename__ = "groups"
    __table_args__ = (
        CheckConstraint("group_type IN ('public', 'private')", name="ck_groups_group_type"),
        CheckConstraint("privacy IN ('public', 'private')", name="ck_groups_privacy"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    group_type: Mapped[str] = mapped_column(String(20), nullable=False, default="public")
    privacy: Mapped[str] = mapped_column(String(20), nullable=False, default="public")
    owner_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False, index=True)
    admins: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    members: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    requests: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)
    resources: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)
    announcements: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, nullable=False, default=list
    )
    invite_code: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    settings: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __mapper_args__ = {
        "version_id_col": version,
        "version_id_generator": lambda v: (v or 0) + 1,
    }
