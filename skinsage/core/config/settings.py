# File: skinsage/core/config/settings.py

import os
from pathlib import Path


class Settings:
    # --- Paths ---
    # skinsage/core/config/settings.py -> skinsage/core/config -> skinsage/core -> skinsage -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    ARTIFACTS_DIR: Path = Path(os.getenv("ARTIFACTS_DIR", str(DATA_DIR / "artifacts")))

    # --- Database ---
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "skinsage_db")

    @property
    def DATABASE_URL(self) -> str:
        # Only fallback to SQLite if explicitly requested.
        if os.getenv("USE_SQLITE", "false").lower() == "true":
            return f"sqlite:///{os.getenv('SQLITE_PATH', './test_skinsage.db')}"

        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # --- Object Storage ---
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "s3").lower()
    S3_BUCKET: str = os.getenv("S3_BUCKET", "skinsage")
    S3_REGION: str = os.getenv("S3_REGION", "us-east-1")
    S3_ENDPOINT: str = os.getenv("S3_ENDPOINT", "")
    S3_ACCESS_KEY_ID: str = os.getenv("S3_ACCESS_KEY_ID", "")
    S3_SECRET_ACCESS_KEY: str = os.getenv("S3_SECRET_ACCESS_KEY", "")
    S3_PUBLIC_BASE_URL: str = os.getenv("S3_PUBLIC_BASE_URL", "")

    # Write targets are always valid for 15 minutes.
    UPLOAD_URL_TTL_SECONDS: int = 900

    # --- Quality Analysis ---
    BLUR_THRESHOLD: float = float(os.getenv("BLUR_THRESHOLD", "120"))
    LIGHT_THRESHOLD: float = float(os.getenv("LIGHT_THRESHOLD", "55"))

    # --- Ingestion ---
    # One worker per angle at most; there are only five angles.
    INGEST_MAX_WORKERS: int = int(os.getenv("INGEST_MAX_WORKERS", "5"))

    def ensure_dirs(self):
        """Creates necessary data directories if they don't exist."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.ARTIFACTS_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
