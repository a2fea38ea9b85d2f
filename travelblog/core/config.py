from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Australia Travel Blog API"
    DATABASE_URL: str = "sqlite:///./travelblog.db"
    SECRET_KEY: str = "supersecretkey_change_me_in_production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7 # 1 week
    LOG_LEVEL: str = "INFO"

    # Site / SEO
    SITE_NAME: str = "Australia Travel Blog"
    SITE_DESCRIPTION: str = "Travel guides, destinations and a directory of places to stay, eat and explore across Australia."
    BASE_URL: str = "http://localhost:8000"
    COPYRIGHT: str = "Australia Travel Blog"

    # Comma separated list of allowed origins
    CORS_ORIGINS: str = "*"

    # Media storage: "local" writes to UPLOAD_DIR, "s3" pushes to the bucket below
    MEDIA_BACKEND: str = "local"
    UPLOAD_DIR: str = "./uploads"
    MEDIA_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024 # 10MB

    # AWS S3
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "ap-southeast-2"
    S3_BUCKET: str = "australia-travel-blog-media"

    # First super admin, created by seed_data.py
    ADMIN_EMAIL: str = "admin@example.com"
    ADMIN_PASSWORD: str = "change-me-please"
    ADMIN_NAME: str = "Admin User"

    @property
    def S3_BASE_URL(self) -> str:
        return f"https://{self.S3_BUCKET}.s3.{self.AWS_REGION}.amazonaws.com"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
