"""Student profile API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_student_service
from api.v1.schemas.student import StudentDetailResponse, StudentResponse, StudentUpdate
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.student_service import StudentService

router = APIRouter(prefix="/students", tags=["students"])


@router.patch(
    "/me",
    response_model=StudentDetailResponse,
    summary="Update your profile",
    responses={
        200: {"description": "Profile updated"},
        404: {"description": "Student not found"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    body: StudentUpdate,
    user: CurrentUser,
    service: StudentService = Depends(get_student_service),
) -> StudentDetailResponse:
    """Update the authenticated student's profile."""
    student = await service.update_profile(
        student_id=user.id,
        first_name=body.first_name,
        last_name=body.last_name,
        profile_picture=body.profile_picture,
        department=body.department,
        bio=body.bio,
        interests=body.interests,
        social_links=body.social_link_entities(),
    )
    return StudentDetailResponse(data=StudentResponse.from_entity(student))


@router.get(
    "/{student_id}",
    response_model=StudentDetailResponse,
    summary="Get a student profile",
    responses={
        200: {"description": "Student profile"},
        404: {"description": "Student not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_student(
    request: Request,
    student_id: UUID,
    user: CurrentUser,
    service: StudentService = Depends(get_student_service),
) -> StudentDetailResponse:
    """Get a student's public profile."""
    student = await service.get_by_id(student_id)
    return StudentDetailResponse(data=StudentResponse.from_entity(student))
