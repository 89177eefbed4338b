"""
TalentTrek - Main Application

FastAPI backend with:
- SQL database for users, companies, jobs and applications
- MongoDB GridFS for resumes and profile photos
- DeepSeek AI for interview questions
- JWT session cookie with role-based route guards

Run: uvicorn talenttrek.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from talenttrek.api.routes import api_router
from talenttrek.core.config import get_settings
from talenttrek.core.errors import (
    GuardRedirect, TalentTrekError, guard_redirect_handler, talenttrek_error_handler
)
from talenttrek.db.postgres import init_schema
from talenttrek.schemas.schemas import HomePage
from talenttrek.ui.landing import home_page

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    init_schema()
    yield


# Create FastAPI app
app = FastAPI(
    title="TalentTrek",
    description="""
    A job board connecting students with recruiters.

    ## Features
    - **Authentication**: sign-up with role (student or recruiter), session cookie
    - **Students**: Browse and search jobs, apply, track applications
    - **Recruiters**: Companies, job postings and applicant management
    - **Interview prep**: AI-generated questions with model answers
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
    lifespan=lifespan
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(TalentTrekError, talenttrek_error_handler)
app.add_exception_handler(GuardRedirect, guard_redirect_handler)


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Unknown paths get the catch-all page; every other HTTP error is unchanged."""
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(status_code=404, content={"detail": "404 - Page Not Found"})
    return await http_exception_handler(request, exc)


app.include_router(api_router)


@app.get("/", response_model=HomePage, tags=["Landing"])
async def landing():
    """Public landing page."""
    return home_page()


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from talenttrek.db.postgres import test_postgres_connection
    from talenttrek.db.mongodb import test_mongo_connection

    return {
        "status": "healthy",
        "database": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
