"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    FEATURE_DISABLED = "FEATURE_DISABLED"

    # Not found errors (404)
    STUDENT_NOT_FOUND = "STUDENT_NOT_FOUND"
    GROUP_NOT_FOUND = "GROUP_NOT_FOUND"
    GROUP_MEMBER_NOT_FOUND = "GROUP_MEMBER_NOT_FOUND"
    JOIN_REQUEST_NOT_FOUND = "JOIN_REQUEST_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_A_GROUP_MEMBER = "NOT_A_GROUP_MEMBER"
    NOT_AN_ADMIN = "NOT_AN_ADMIN"
    SOLE_ADMIN = "SOLE_ADMIN"
    WRONG_GROUP_TYPE = "WRONG_GROUP_TYPE"

    # Conflict errors (409)
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    ALREADY_A_GROUP_MEMBER = "ALREADY_A_GROUP_MEMBER"
    ALREADY_AN_ADMIN = "ALREADY_AN_ADMIN"
    DUPLICATE_JOIN_REQUEST = "DUPLICATE_JOIN_REQUEST"
    REQUEST_ALREADY_PROCESSED = "REQUEST_ALREADY_PROCESSED"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class InvalidCredentialsError(AppException):
    """Email or password did not match."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_CREDENTIALS,
            message="Invalid email or password",
            status_code=401,
        )


class InsufficientPermissionsError(AppException):
    """Caller lacks the group role an operation requires."""

    def __init__(self, required_role: str = "admin") -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=f"Insufficient permissions. Required role: {required_role}",
            status_code=403,
            details={"required_role": required_role},
        )


class FeatureDisabledError(AppException):
    """A group setting turns the requested feature off."""

    def __init__(self, feature: str) -> None:
        super().__init__(
            error_code=ErrorCode.FEATURE_DISABLED,
            message=f"This group has disabled {feature.replace('_', ' ')}",
            status_code=403,
            details={"feature": feature},
        )


class StudentNotFoundError(AppException):
    """Student not found."""

    def __init__(self, student_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.STUDENT_NOT_FOUND,
            message=f"Student not found: {student_id}",
            status_code=404,
            details={"student_id": student_id},
        )


class DuplicateEmailError(AppException):
    """A student with this email is already registered."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_EMAIL,
            message="A student with this email already exists",
            status_code=409,
            details={"email": email},
        )


class GroupNotFoundError(AppException):
    """Group not found."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_NOT_FOUND,
            message=f"Group not found: {group_id}",
            status_code=404,
            details={"group_id": group_id},
        )


class GroupMemberNotFoundError(AppException):
    """Target student is not in the group's member list."""

    def __init__(self, member_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_MEMBER_NOT_FOUND,
            message="Member not found in this group",
            status_code=404,
            details={"member_id": member_id},
        )


class JoinRequestNotFoundError(AppException):
    """Join request not found (or not owned by the caller)."""

    def __init__(self, request_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.JOIN_REQUEST_NOT_FOUND,
            message="Join request not found",
            status_code=404,
            details={"request_id": request_id},
        )


class AlreadyAGroupMemberError(AppException):
    """Student is already a member of the group."""

    def __init__(self, student_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_GROUP_MEMBER,
            message="You are already a member of this group",
            status_code=409,
            details={"student_id": student_id},
        )


class DuplicateJoinRequestError(AppException):
    """A pending join request from this student already exists."""

    def __init__(self, student_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_JOIN_REQUEST,
            message="Join request already sent",
            status_code=409,
            details={"student_id": student_id},
        )


class RequestAlreadyProcessedError(AppException):
    """Join request is no longer pending."""

    def __init__(self, request_id: str, status: str) -> None:
        super().__init__(
            error_code=ErrorCode.REQUEST_ALREADY_PROCESSED,
            message="This request has already been processed",
            status_code=409,
            details={"request_id": request_id, "status": status},
        )


class AlreadyAnAdminError(AppException):
    """Target student is already a group admin."""

    def __init__(self, student_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_AN_ADMIN,
            message="This member is already an admin",
            status_code=409,
            details={"student_id": student_id},
        )


class NotAnAdminError(AppException):
    """Target student is not a group admin."""

    def __init__(self, student_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_AN_ADMIN,
            message="This member is not an admin",
            status_code=400,
            details={"student_id": student_id},
        )


class NotAGroupMemberError(AppException):
    """Student is not in the group's member list."""

    def __init__(
        self,
        student_id: str,
        message: str = "You are not a member of this group",
    ) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_GROUP_MEMBER,
            message=message,
            status_code=400,
            details={"student_id": student_id},
        )


class SoleAdminError(AppException):
    """Cannot step down as the only admin of a group."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.SOLE_ADMIN,
            message=(
                "You cannot demote yourself because you are the only admin. "
                "Please transfer ownership or promote another member first."
            ),
            status_code=400,
        )


class WrongGroupTypeError(AppException):
    """Operation is not available for this group type."""

    def __init__(self, required_type: str) -> None:
        super().__init__(
            error_code=ErrorCode.WRONG_GROUP_TYPE,
            message=f"This action is only for {required_type} groups",
            status_code=400,
            details={"required_type": required_type},
        )


class GroupConflictError(AppException):
    """Group was modified by another request since it was loaded."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CONCURRENT_MODIFICATION,
            message="The group was modified by another request, please retry",
            status_code=409,
            details={"group_id": group_id},
        )


class StorageError(AppException):
    """Persistence failed. Internal detail is never exposed."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message="A storage error occurred",
            status_code=500,
        )
