"""
Application configuration settings.
Loads from .env file first (overrides shell env for local dev), then pydantic reads from environment.
Production: set env vars in the platform (Docker, K8s, etc.); .env is optional.

All backend-related configs and constants are centralized here.
"""
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env path: backend/.env (absolute path, works regardless of cwd)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = (_BASE_DIR / ".env").resolve()

# Load .env into environment BEFORE pydantic reads. override=True ensures .env
# values override any shell env.
# When .env doesn't exist (prod), this is a no-op; platform env vars are used.
if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE, override=True)


class Settings(BaseSettings):
    """Application settings. Source: env vars (after dotenv load)."""

    # App
    app_name: str = "JobBoard"
    app_version: str = "1.0.0"
    port: int = 8001

    # Database
    database_url: str = "sqlite:///./jobboard.db"

    # Auth
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Upload & storage
    # inline: data URLs kept in the user_files record
    # local:  files written under upload_dir, record keeps the path
    # s3:     files uploaded to the bucket, record keeps the object URL
    storage_backend: str = "inline"
    upload_dir: str = "uploads/files"
    max_upload_bytes: int = 5 * 1024 * 1024
    max_encoded_chars: int = 900_000

    # AWS S3
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "ap-southeast-1"
    aws_bucket_name: str = "jobboard-files"
    s3_key_prefix: str = "user-files"

    # Views
    notice_ttl_seconds: float = 3.0
    overview_recent_jobs_limit: int = 5
    stream_keepalive_seconds: float = 15.0

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


# --- Constants (non-env, business config) ---

# Roles
ROLE_JOBSEEKER: str = "jobseeker"
ROLE_EMPLOYER: str = "employer"
ROLES: frozenset[str] = frozenset({ROLE_JOBSEEKER, ROLE_EMPLOYER})

# Application status lifecycle
STATUS_PENDING: str = "pending"
STATUS_SCHEDULED: str = "scheduled"
STATUS_ACCEPTED: str = "accepted"
STATUS_REJECTED: str = "rejected"
APPLICATION_STATUSES: tuple[str, ...] = (
    STATUS_PENDING,
    STATUS_SCHEDULED,
    STATUS_ACCEPTED,
    STATUS_REJECTED,
)
# A newer application is blocked while the latest one is in any of these
ACTIVE_APPLICATION_STATUSES: frozenset[str] = frozenset({
    STATUS_PENDING, STATUS_SCHEDULED, STATUS_ACCEPTED,
})

# Job postings
JOB_STATUS_OPEN: str = "open"
JOB_STATUS_CLOSED: str = "closed"
JOB_TYPES: frozenset[str] = frozenset({"full-time", "part-time"})

# Uploads: allowed MIME types per file kind
PHOTO_MIME_TYPES: frozenset[str] = frozenset({"image/jpeg", "image/png", "image/jpg"})
RESUME_MIME_TYPES: frozenset[str] = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
})

# Change feed collections
COLLECTION_APPLICATIONS: str = "applications"
COLLECTION_JOBS: str = "jobs"
COLLECTION_USER_FILES: str = "userFiles"
COLLECTION_PROFILES: str = "users"
COLLECTION_EMPLOYERS: str = "employers"
