from typing import List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application Information
    app_name: str = Field(default="Personal Blog API")
    app_description: str = Field(default="Personal blog backend service")
    app_version: str = Field(default="1.0.0")
    frontend_url: str = Field(default="http://localhost:3000")
    site_name: str = Field(default="Personal Blog")
    debug: bool = Field(default=True)
    production: bool = Field(default=False)

    # Database Configuration
    database_url: Optional[str] = Field(default=None)
    db_connection: str = Field(default="postgresql")
    db_host: str = Field(default="127.0.0.1")
    db_port: int = Field(default=5432)
    db_database: str = Field(default="personal-blog")
    db_username: str = Field(default="blog")
    db_password: str = Field(default="blog")

    # Security Settings
    cors_allowed_origins: List[str] = Field(default=["http://localhost:3000"])
    password_hash_rounds: int = Field(default=12)
    max_login_attempts: int = Field(default=5)
    lockout_minutes: int = Field(default=120)
    email_verify_expire_hours: int = Field(default=24)
    password_reset_expire_hours: int = Field(default=1)

    # JWT Configuration
    jwt_secret: str = Field(default="your-secret-key-change-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_user_expiration: int = Field(default=7)
    jwt_remember_expiration: int = Field(default=30)
    jwt_issuer: str = Field(default="Personal Blog")

    # Email (SMTP)
    mail_enabled: bool = Field(default=False)
    mail_host: str = Field(default="smtp.gmail.com")
    mail_port: int = Field(default=587)
    mail_username: str = Field(default="")
    mail_password: str = Field(default="")
    mail_start_tls: bool = Field(default=True)
    mail_timeout: float = Field(default=10.0)
    mail_from_address: str = Field(default="no-reply@example.com")
    mail_from_name: str = Field(default="Personal Blog")

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_storage_uri: str = Field(default="memory://")
    rate_limit_default: str = Field(default="100/15minutes")
    rate_limit_login: str = Field(default="5/15minutes")
    rate_limit_email: str = Field(default="3/hour")

    # File Uploads
    upload_dir: str = Field(default="uploads")

    # Logging
    log_level: str = Field(default="info")
    log_file: str = Field(default="logs/app.log")

    # Pagination
    default_page_size: int = Field(default=10)
    max_page_size: int = Field(default=100)

    # Admin Defaults
    admin_default_username: str = Field(default="admin")
    admin_default_email: str = Field(default="admin@example.com")
    admin_default_password: str = Field(default="admin123456")
    admin_default_bio: str = Field(default="Site administrator")

    @field_validator("cors_allowed_origins", mode="before")
    def validate_cors(cls, v):
        if isinstance(v, str):
            items = [x.strip() for x in v.split(",") if x.strip()]
            return items if items else ["http://localhost:3000"]
        return v

    @property
    def sqlalchemy_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return "postgresql+psycopg2://{user}:{password}@{host}:{port}/{database}".format(
            user=self.db_username,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings():
    try:
        return Settings()
    except ValidationError as e:
        print("❌ Settings validation error:", e)
        raise


settings = load_settings()
