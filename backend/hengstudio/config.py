"""
Studio CMS Configuration

Environment-based configuration, built once at startup.
The admin token is never hardcoded; leaving it empty disables all admin endpoints.
"""
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Admin secret (X-Admin-Token). Empty means admin is not configured.
    admin_token: str = ""

    # Projects document and its rolling backups
    data_dir: Path = Path("data")
    backup_retention: int = 20

    # Uploaded media
    upload_dir: Path = Path("uploads")
    max_upload_bytes: int = 15 * 1024 * 1024

    # Static site root holding images/gallery and gallery.json
    public_dir: Path = Path("public")
    gallery_save_requires_admin: bool = True

    # HTTP
    host: str = "0.0.0.0"
    port: int = 8787
    cors_origins: List[str] = ["*"]

    # Debug mode (verbose low-level logging)
    debug: bool = False

    # Follow-through mode (structured step-by-step execution tracing)
    follow_through: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @field_validator("admin_token", mode="before")
    @classmethod
    def strip_token(cls, v: str) -> str:
        """Whitespace around the secret is never significant."""
        return (v or "").strip()

    @property
    def projects_file(self) -> Path:
        return self.data_dir / "projects.json"

    @property
    def backup_dir(self) -> Path:
        return self.data_dir / "backups"

    @property
    def gallery_dir(self) -> Path:
        return self.public_dir / "images" / "gallery"

    @property
    def gallery_manifest(self) -> Path:
        return self.public_dir / "gallery.json"

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_token)


# Global settings instance
settings = Settings()
