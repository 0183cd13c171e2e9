from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.errors import ConfigurationError


class Settings(BaseSettings):
    # 기본 설정들
    environment: str = Field(default="local")
    log_level: str = Field(default="INFO")

    # 외부 API 키 (환경변수: GOODREADS_API_KEY, 필수)
    goodreads_api_key: str = Field(
        ...,
        min_length=1,
        validation_alias="GOODREADS_API_KEY",
    )
    goodreads_base_url: str = Field(
        default="https://www.goodreads.com",
        validation_alias="GOODREADS_BASE_URL",
    )
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)

    # 응답 형태
    include_pagination: bool = Field(default=True)
    envelope_mode: Literal["permissive", "strict"] = Field(default="permissive")

    # CORS
    cors_origins: str = Field(default="*")  # comma separated list for production

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()
    except PydanticValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise ConfigurationError(f"Invalid configuration: {fields}") from exc
