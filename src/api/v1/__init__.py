"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.auth import router as auth_router
from api.v1.routes.groups import router as groups_router
from api.v1.routes.memberships import router as memberships_router
from api.v1.routes.students import router as students_router
from api.v1.schemas.common import COMMON_ERROR_RESPONSES

router = APIRouter(responses=COMMON_ERROR_RESPONSES)
router.include_router(auth_router)
router.include_router(students_router)
router.include_router(groups_router)
router.include_router(memberships_router)
