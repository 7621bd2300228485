from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str = Field(default="https://api.openai.com/v1", alias="OPENAI_BASE_URL")
    openai_timeout_seconds: int = Field(default=90, alias="OPENAI_TIMEOUT_SECONDS")

    default_model: str = Field(default="gpt-4o-mini", alias="JSON_SALVAGE_MODEL")
    max_attempts: int = Field(default=3, alias="JSON_SALVAGE_MAX_ATTEMPTS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


class ClientConfig(BaseModel):
    api_key: str
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    # Re-prompts when the reply contains no usable JSON.
    max_attempts: int = Field(default=3, ge=1)
    timeout_seconds: int = Field(default=90, gt=0)
    temperature: float | None = None


def load_client_config(env: EnvSettings, *, model: str | None = None) -> ClientConfig:
    if not env.openai_api_key:
        raise ValueError("OPENAI_API_KEY is required to call the model")
    return ClientConfig(
        api_key=env.openai_api_key,
        base_url=env.openai_base_url,
        model=model or env.default_model,
        max_attempts=env.max_attempts,
        timeout_seconds=env.openai_timeout_seconds,
    )
