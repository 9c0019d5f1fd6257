"""Pydantic schemas for authentication and student profiles."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.student import SocialLink, Student


def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v or "." not in v.split("@")[-1]:
        raise ValueError("Invalid email address")
    return v


class SignupRequest(BaseModel):
    """Schema for registering a student."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    department: str = Field(..., min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Basic email validation."""
        return _normalize_email(v)


class LoginRequest(BaseModel):
    """Schema for logging in."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _normalize_email(v)


class SocialLinkSchema(BaseModel):
    """A link to an external profile."""

    platform: str = Field(..., min_length=1, max_length=50)
    url: str = Field(..., min_length=1, max_length=500)


class StudentUpdate(BaseModel):
    """Schema for updating a profile. Email and password are not editable."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    profile_picture: str | None = Field(None, max_length=500)
    department: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=1000)
    interests: list[str] | None = None
    social_links: list[SocialLinkSchema] | None = None

    def social_link_entities(self) -> list[SocialLink] | None:
        if self.social_links is None:
            return None
        return [SocialLink(platform=link.platform, url=link.url) for link in self.social_links]


class StudentResponse(BaseModel):
    """Schema for Student response. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    department: str
    profile_picture: str
    bio: str | None
    interests: list[str]
    social_links: list[SocialLinkSchema]
    created_at: datetime

    @classmethod
    def from_entity(cls, student: Student) -> "StudentResponse":
        return cls(
            id=student.id,
            first_name=student.first_name,
            last_name=student.last_name,
            email=student.email,
            department=student.department,
            profile_picture=student.profile_picture,
            bio=student.bio,
            interests=student.interests,
            social_links=[
                SocialLinkSchema(platform=link.platform, url=link.url)
                for link in student.social_links
            ],
            created_at=student.created_at,
        )


class StudentDetailResponse(BaseModel):
    """Schema for single Student response."""

    data: StudentResponse


class AuthResponse(BaseModel):
    """Token issued on signup or login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    data: StudentResponse
