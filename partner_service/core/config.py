from pathlib import Path
from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_PATH = Path(__file__).resolve().parents[2] / ".env"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_PATH, env_file_encoding="utf-8", extra="ignore")

    # App
    env: str = "dev"
    service_name: str = "partner-service"

    # Reference services
    utility_service_url: str = "http://localhost:8021/api/v1"
    subscription_service_url: str = "http://localhost:8022/api/v1"
    oauth_service_url: str = "http://localhost:8023/api/v1"
    store_service_url: str = "http://localhost:8024/api/v1"
    member_service_url: str = "http://localhost:8025/api/v1"
    http_timeout_seconds: float = 20.0

    # Cache
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl_seconds: int = 60

    # Encryption (Fernet key, urlsafe base64 of 32 bytes)
    credentials_encryption_key: SecretStr = SecretStr("IN_ENV")


settings = Settings()
