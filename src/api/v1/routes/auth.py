"""Authentication API routes: signup, login, logout and the current student."""

from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_student_service
from api.v1.schemas.common import MessageResponse
from api.v1.schemas.student import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    StudentDetailResponse,
    StudentResponse,
)
from core.config import settings
from core.rate_limit import AUTH_LIMIT, READ_LIMIT, limiter
from domain.entities.student import Student
from domain.services.student_service import StudentService

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.jwt_expire_minutes * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def _auth_response(student: Student, token: str) -> AuthResponse:
    return AuthResponse(
        access_token=token,
        expires_in=settings.jwt_expire_minutes * 60,
        data=StudentResponse.from_entity(student),
    )


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a student",
    responses={
        201: {"description": "Student registered and logged in"},
        409: {"description": "Email already registered"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def signup(
    request: Request,
    response: Response,
    body: SignupRequest,
    service: StudentService = Depends(get_student_service),
) -> AuthResponse:
    """Create a student account and start a session."""
    student, token = await service.register(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        password=body.password,
        department=body.department,
    )
    _set_auth_cookie(response, token)
    return _auth_response(student, token)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
    responses={
        200: {"description": "Logged in"},
        401: {"description": "Invalid credentials"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    service: StudentService = Depends(get_student_service),
) -> AuthResponse:
    """
    Log in with email and password.

    The token is returned in the body and also set as an httpOnly cookie.
    """
    student, token = await service.login(body.email, body.password)
    _set_auth_cookie(response, token)
    return _auth_response(student, token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
)
async def logout(response: Response) -> MessageResponse:
    """Clear the session cookie."""
    response.delete_cookie(key=settings.auth_cookie_name, httponly=True, samesite="lax")
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=StudentDetailResponse,
    summary="Get the current student",
    responses={
        200: {"description": "Current student profile"},
        401: {"description": "Not authenticated"},
        404: {"description": "Student no longer exists"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def me(
    request: Request,
    user: CurrentUser,
    service: StudentService = Depends(get_student_service),
) -> StudentDetailResponse:
    """Get the profile of the authenticated student."""
    student = await service.get_by_id(user.id)
    return StudentDetailResponse(data=StudentResponse.from_entity(student))
