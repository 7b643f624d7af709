"""Top-level API router for the testing maturity assessment service.

API prefix: /api/v1
"""

from fastapi import APIRouter

from testing_maturity.api.routes.admin import router as admin_router
from testing_maturity.api.routes.assessment import router as assessment_router

router = APIRouter()
router.include_router(assessment_router)
router.include_router(admin_router)
