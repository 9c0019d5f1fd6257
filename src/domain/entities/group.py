"""Group domain entities."""

import secrets
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class GroupType(StrEnum):
    """How a group admits new members."""

    PUBLIC = "public"
    PRIVATE = "private"


class GroupPrivacy(StrEnum):
    """Visibility flag, stored and validated but not used for access decisions."""

    PUBLIC = "public"
    PRIVATE = "private"


class JoinRequestStatus(StrEnum):
    """Lifecycle of a join request. Only pending requests may change."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def generate_invite_code() -> str:
    """Generate an 8-character hex invite code."""
    return secrets.token_hex(4)


class MemberIds:
    """Ordered sequence of student IDs that never holds the same ID twice.

    Order is significant: for admins, the first entry is the primary admin.
    """

    def __init__(self, ids: Iterable[UUID] = ()) -> None:
        self._ids: list[UUID] = []
        for id_ in ids:
            self.append(id_)

    def append(self, id_: UUID) -> None:
        """Append an ID. Raises ValueError if it is already present."""
        if id_ in self._ids:
            raise ValueError(f"{id_} is already in the sequence")
        self._ids.append(id_)

    def add_if_absent(self, id_: UUID) -> bool:
        """Append an ID unless present. Returns True if it was added."""
        if id_ in self._ids:
            return False
        self._ids.append(id_)
        return True

    def remove(self, id_: UUID) -> None:
        """Remove an ID. Raises ValueError if it is absent."""
        self._ids.remove(id_)

    @property
    def first(self) -> UUID | None:
        return self._ids[0] if self._ids else None

    def __contains__(self, id_: object) -> bool:
        return id_ in self._ids

    def __iter__(self) -> Iterator[UUID]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MemberIds):
            return self._ids == other._ids
        if isinstance(other, list):
            return self._ids == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"MemberIds({self._ids!r})"

    def to_list(self) -> list[UUID]:
        return list(self._ids)


@dataclass
class GroupSettings:
    """Per-group feature switches."""

    allow_file_sharing: bool = True
    allow_chat: bool = True


@dataclass
class JoinRequest:
    """A student's request to join a private group."""

    student_id: UUID
    id: UUID = field(default_factory=uuid4)
    status: JoinRequestStatus = JoinRequestStatus.PENDING
    requested_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_pending(self) -> bool:
        return self.status == JoinRequestStatus.PENDING


@dataclass
class Resource:
    """A file link shared within a group."""

    file_url: str
    uploaded_by: UUID
    id: UUID = field(default_factory=uuid4)
    uploaded_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Announcement:
    """An admin announcement posted to a group."""

    content: str
    created_by: UUID
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Group:
    """Domain entity for a student interest group.

    The group is stored and written back as one document: admins, members,
    join requests, resources and announcements are embedded.
    """

    name: str
    owner: UUID
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    group_type: GroupType = GroupType.PUBLIC
    privacy: GroupPrivacy = GroupPrivacy.PUBLIC
    admins: MemberIds = field(default_factory=MemberIds)
    members: MemberIds = field(default_factory=MemberIds)
    requests: list[JoinRequest] = field(default_factory=list)
    resources: list[Resource] = field(default_factory=list)
    announcements: list[Announcement] = field(default_factory=list)
    invite_code: str = field(default_factory=generate_invite_code)
    settings: GroupSettings = field(default_factory=GroupSettings)
    created_at: datetime = field(default_factory=datetime.utcnow)
    version: int = 0

    def __post_init__(self) -> None:
        """Accept plain lists for the ID sequences."""
        if not isinstance(self.admins, MemberIds):
            self.admins = MemberIds(self.admins)
        if not isinstance(self.members, MemberIds):
            self.members = MemberIds(self.members)

    @classmethod
    def create(
        cls,
        name: str,
        creator_id: UUID,
        description: str | None = None,
        group_type: GroupType = GroupType.PUBLIC,
        privacy: GroupPrivacy = GroupPrivacy.PUBLIC,
        settings: GroupSettings | None = None,
    ) -> "Group":
        """Build a new group with the creator as sole admin, member and owner."""
        return cls(
            name=name,
            owner=creator_id,
            description=description,
            group_type=group_type,
            privacy=privacy,
            admins=MemberIds([creator_id]),
            members=MemberIds([creator_id]),
            settings=settings or GroupSettings(),
        )

    @property
    def primary_admin(self) -> UUID | None:
        """First admin in the sequence."""
        return self.admins.first

    def is_admin(self, student_id: UUID) -> bool:
        return student_id in self.admins

    def is_member(self, student_id: UUID) -> bool:
        return student_id in self.members

    def find_request(self, request_id: UUID) -> JoinRequest | None:
        return next((r for r in self.requests if r.id == request_id), None)

    def pending_requests(self) -> list[JoinRequest]:
        return [r for r in self.requests if r.is_pending]
