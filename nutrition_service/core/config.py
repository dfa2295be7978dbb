"""
Core configuration and settings for the Nutrition Service
"""

from typing import Optional, Tuple
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Service information
    service_name: str = Field(default="nutrition-service")
    service_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Server configuration
    port: int = Field(default=8000)
    host: str = Field(default="0.0.0.0")  # nosec B104

    # Database configuration
    mongodb_url_override: Optional[str] = Field(default=None, alias="MONGODB_URL")
    mongodb_host: str = Field(default="localhost")
    mongodb_port: int = Field(default=27017)
    mongodb_username: Optional[str] = Field(default=None)
    mongodb_password: Optional[str] = Field(default=None)
    mongodb_database: str = Field(default="nutritiondb")
    mongodb_collection: str = Field(default="products")

    @property
    def mongodb_url(self) -> str:
        """Construct MongoDB connection URL"""
        if self.mongodb_url_override:
            return self.mongodb_url_override
        if self.mongodb_username and self.mongodb_password:
            return (
                f"mongodb://{self.mongodb_username}:{self.mongodb_password}"
                f"@{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}?authSource=admin"
            )
        return f"mongodb://{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_to_file: bool = Field(default=False)
    log_to_console: bool = Field(default=True)
    log_file_path: str = Field(default="logs/nutrition-service.log")

    # Tracing
    correlation_id_header: str = Field(default="X-Correlation-ID")

    # JWT Authentication configuration
    jwt_secret: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    auth_header: str = Field(default="authorization")

    # Nutrient lookup API
    nutrient_api_url: Optional[str] = Field(default=None)

    # Object storage (S3 compatible)
    s3_bucket: Optional[str] = Field(default=None)
    s3_region: str = Field(default="us-east-1")
    s3_endpoint_url: Optional[str] = Field(default=None)
    s3_public_base_url: Optional[str] = Field(default=None)
    s3_object_acl: Optional[str] = Field(default="public-read")
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # Local staging of uploaded images
    upload_dir: str = Field(default="uploads")
    max_upload_bytes: int = Field(default=5 * 1024 * 1024)
    allowed_image_types: Tuple[str, ...] = Field(
        default=("image/jpeg", "image/png", "image/webp", "image/gif")
    )

    # Timeout and retry applied to every external call (seconds)
    external_call_timeout: float = Field(default=10.0)
    external_call_retries: int = Field(default=1, ge=0)
    external_call_retry_wait: float = Field(default=0.5, ge=0)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


# Global config instance
config = Config()
