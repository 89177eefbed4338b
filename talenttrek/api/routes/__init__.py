"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from talenttrek.api.routes.auth_routes import router as auth_router
from talenttrek.api.routes.student_routes import router as student_router
from talenttrek.api.routes.recruiter_routes import router as recruiter_router
from talenttrek.api.routes.company_routes import router as company_router
from talenttrek.api.routes.file_routes import router as file_router

# Main router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(student_router)
api_router.include_router(recruiter_router)
api_router.include_router(company_router)
api_router.include_router(file_router)
