"""Student domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

DEFAULT_PROFILE_PICTURE = (
    "https://static.vecteezy.com/system/resources/thumbnails/009/292/244/small/"
    "default-avatar-icon-of-social-media-user-vector.jpg"
)


@dataclass
class SocialLink:
    """A link to one of a student's external profiles."""

    platform: str
    url: str


@dataclass
class Student:
    """Domain entity for a registered student."""

    first_name: str
    last_name: str
    email: str
    password_hash: str
    department: str
    id: UUID = field(default_factory=uuid4)
    profile_picture: str = DEFAULT_PROFILE_PICTURE
    bio: str | None = None
    interests: list[str] = field(default_factory=list)
    social_links: list[SocialLink] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
