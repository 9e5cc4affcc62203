"""
FastAPI application entry point
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from backend.app.api.v1.applications import routes as applications
from backend.app.api.v1.auth import auth
from backend.app.api.v1.employer import applications as employer_applications
from backend.app.api.v1.employer import jobs as employer_jobs
from backend.app.api.v1.employer import overview as employer_overview
from backend.app.api.v1.employer import profile as employer_profile
from backend.app.api.v1.jobs import routes as jobs
from backend.app.api.v1.user import profile_router
from backend.app.core.config import settings
from backend.app.core.logging_config import setup_logging
from backend.app.db.base import Base
from backend.app.db.session import engine

# Import models so they register with Base.metadata
import backend.app.models  # noqa: F401

logger = setup_logging()

# Create database tables
try:
    Base.metadata.create_all(bind=engine)
except SQLAlchemyError:
    logger.exception("Database error while creating tables")

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Job board API: seeker profiles, job postings, applications",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["authentication"])
app.include_router(profile_router, prefix="/api/profile", tags=["profile"])
app.include_router(jobs.router, prefix="/api")
app.include_router(applications.router, prefix="/api")
app.include_router(employer_jobs.router, prefix="/api")
app.include_router(employer_applications.router, prefix="/api")
app.include_router(employer_overview.router, prefix="/api")
app.include_router(employer_profile.router, prefix="/api")


@app.get("/")
def read_root():
    """Root endpoint"""
    return {"message": f"{settings.app_name} API", "version": settings.app_version}


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
