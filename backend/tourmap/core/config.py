from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    project_name: str = "Tour Map"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO")

    database_url: str = Field(default="postgresql+asyncpg://postgres:postgres@db:5432/tourmap")
    database_echo: bool = Field(default=False)
    database_pool_size: int = Field(default=5)
    auto_create_schema: bool = Field(default=True)

    redis_url: str = Field(default="redis://redis:6379/0")

    jwt_secret_key: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60)
    refresh_token_expire_minutes: int = Field(default=60 * 24 * 30)
    mobile_token_expire_days: int = Field(default=30)

    # OAuth 공급자 (client id/secret 이 모두 있어야 활성화)
    google_client_id: str = Field(default="")
    google_client_secret: str = Field(default="")
    github_client_id: str = Field(default="")
    github_client_secret: str = Field(default="")
    oauth_redirect_base_url: str = Field(default="http://localhost:8000")
    oauth_state_ttl_seconds: int = Field(default=600)

    cors_origins: str = Field(default="http://localhost:5173,http://localhost:3000,http://localhost")

    admin_emails: str = Field(default="")  # 관리자 이메일 목록 (콤마 구분)

    default_page_size: int = Field(default=10)
    max_page_size: int = Field(default=100)
    default_search_radius_km: float = Field(default=5.0)

    map_tile_url: str = Field(default="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png")
    map_attribution: str = Field(default="&copy; OpenStreetMap contributors")
    map_default_latitude: float = Field(default=39.9042)
    map_default_longitude: float = Field(default=116.4074)
    map_default_zoom: int = Field(default=11)

    @property
    def cors_origins_list(self) -> list[str]:
        return _split_csv(self.cors_origins)

    @property
    def admin_emails_list(self) -> list[str]:
        return [email.lower() for email in _split_csv(self.admin_emails)]

    @property
    def frontend_static_dir(self) -> Path:
        return Path(__file__).resolve().parents[3] / "frontend"


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
