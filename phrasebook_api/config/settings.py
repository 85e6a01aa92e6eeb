"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode
from typing import Annotated, Optional, Dict, Any, List
from enum import Enum


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StorageBackend(str, Enum):
    """Phrase list storage backends"""
    REDIS = "redis"
    MEMORY = "memory"


def _split_csv(v):
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class OpenAISettings(BaseSettings):
    """Language model (OpenAI) configuration"""

    api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    model: str = Field(default="gpt-4o-mini")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)
    max_retries: int = Field(default=2, ge=0, le=10)

    model_config = {
        "env_prefix": "OPENAI_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class RedisSettings(BaseSettings):
    """Redis key-value store configuration"""

    url: Optional[str] = Field(default=None, description="Full connection URL, overrides host/port")
    host: str = Field(default="localhost")
    port: int = Field(default=6379, ge=1, le=65535)
    password: Optional[str] = Field(default=None)
    db: int = Field(default=0, ge=0, le=15)
    ssl: bool = Field(default=False)
    socket_timeout: float = Field(default=5.0, ge=0.5, le=60.0)

    @property
    def connection_url(self) -> str:
        """Generate Redis URL from configuration"""
        if self.url:
            return self.url
        scheme = "rediss" if self.ssl else "redis"
        auth = f":{self.password}@" if self.password else ""
        return f"{scheme}://{auth}{self.host}:{self.port}/{self.db}"

    model_config = {
        "env_prefix": "REDIS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class SyncSettings(BaseSettings):
    """Anonymous phrase sync configuration"""

    min_key_length: int = Field(default=10, ge=1, le=256)
    key_prefix: str = Field(default="phrases:")
    max_phrases_per_push: int = Field(default=5000, ge=1, le=100000)

    model_config = {
        "env_prefix": "SYNC_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class SecuritySettings(BaseSettings):
    """CORS configuration"""

    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: [
            "https://frontendarabicapp.vercel.app",
            "http://localhost:5173",
            "http://localhost:3000",
        ]
    )
    cors_allow_credentials: bool = Field(default=False)
    cors_allow_methods: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["GET", "POST", "OPTIONS"]
    )
    cors_allow_headers: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["Content-Type", "Authorization"]
    )

    @field_validator('cors_origins', 'cors_allow_methods', 'cors_allow_headers', mode='before')
    @classmethod
    def parse_csv_lists(cls, v):
        """Parse comma-separated lists from environment variables"""
        return _split_csv(v) or []

    model_config = {
        "env_prefix": "SECURITY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class ImageSettings(BaseSettings):
    """Image upload configuration"""

    max_upload_mb: int = Field(default=10, ge=1, le=50)
    default_mime_type: str = Field(default="image/jpeg")

    model_config = {
        "env_prefix": "IMAGE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="Arabic Phrasebook Backend")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_json: bool = Field(default=True)
    log_file: Optional[str] = Field(default=None)

    # Storage Configuration
    storage_backend: StorageBackend = Field(default=StorageBackend.REDIS)

    # Nested Settings
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    images: ImageSettings = Field(default_factory=ImageSettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator('storage_backend', mode='before')
    @classmethod
    def validate_storage_backend(cls, v):
        if isinstance(v, str):
            return StorageBackend(v.lower())
        return v

    @classmethod
    def from_env_file(cls, env_file: str, **values: Any) -> "Settings":
        """Build settings from one dotenv file, nested groups included.

        Nested groups are created by their own default factories, so each one
        is handed the file explicitly.
        """
        nested = {
            name: settings_class(_env_file=env_file)
            for name, settings_class in _NESTED_SETTINGS.items()
            if name not in values
        }
        return cls(_env_file=env_file, **nested, **values)

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


_NESTED_SETTINGS = {
    "openai": OpenAISettings,
    "redis": RedisSettings,
    "sync": SyncSettings,
    "security": SecuritySettings,
    "images": ImageSettings,
}


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
