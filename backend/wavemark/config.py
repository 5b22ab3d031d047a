import os
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    openai_api_key: Optional[str] = Field(None, alias="OPENAI_API_KEY")
    marking_model: str = Field("gpt-4.1", alias="WAVEMARK_MARKING_MODEL")
    marking_max_output_tokens: int = Field(1024, alias="WAVEMARK_MARKING_MAX_TOKENS", ge=64)
    database_url: Optional[str] = Field(None, alias="WAVEMARK_DATABASE_URL")
    database_pool_size: int = Field(10, alias="WAVEMARK_DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(10, alias="WAVEMARK_DATABASE_MAX_OVERFLOW")
    database_echo: bool = Field(False, alias="WAVEMARK_DATABASE_ECHO")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], alias="WAVEMARK_CORS_ORIGINS")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @property
    def vision_configured(self) -> bool:
        return bool(self.openai_api_key)


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()  # type: ignore[call-arg]
        if settings.openai_api_key and not os.getenv("OPENAI_API_KEY"):
            os.environ["OPENAI_API_KEY"] = settings.openai_api_key
        return settings
    except ValidationError as exc:
        raise RuntimeError(f"Invalid backend configuration: {exc}") from exc
