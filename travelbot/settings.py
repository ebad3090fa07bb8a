# travelbot/settings.py
from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COLLECTIONS = "Items,Drivers,Category,SubCategory"

# provider -> env var that must be set at boot
PROVIDER_KEYS = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
}


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="Travel Lebanon Chatbot API")
    # APP_ENV and NODE_ENV are accepted as the environment name too
    ENV: str = Field(default="development", validation_alias=AliasChoices("ENV", "APP_ENV", "NODE_ENV"))
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=4000)
    CORS_ORIGINS: str = Field(default="*")

    # directus
    DIRECTUS_URL: str | None = None
    DIRECTUS_TOKEN: str | None = None
    DIRECTUS_COLLECTIONS: str = Field(default=DEFAULT_COLLECTIONS)
    DIRECTUS_PAGE_LIMIT: int = Field(default=100)
    DIRECTUS_TIMEOUT: float = Field(default=30.0)

    # retrieval / prompt
    INCLUDE_UNFILTERED_CONTEXT: bool = Field(default=True)
    MAX_PROMPT_TOKENS: int = Field(default=30000)

    # llm
    LLM_PROVIDER: str = Field(default="gemini")
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = Field(default="gemini-pro")
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    OLLAMA_HOST: str = Field(default="http://localhost:11434")
    OLLAMA_MODEL: str = Field(default="mistral:7b-instruct")
    # falls back to travelbot/generate/config.yaml
    GENERATE_CONFIG_PATH: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("DIRECTUS_URL")
    @classmethod
    def _strip_trailing_slash(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v else v

    @field_validator("LLM_PROVIDER")
    @classmethod
    def _known_provider(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("gemini", "openai", "ollama", "echo"):
            raise ValueError(f"Unsupported LLM_PROVIDER: {v}")
        return v

    @property
    def collections(self) -> List[str]:
        """Configured collection names, trimmed, blanks dropped."""
        items = [c.strip() for c in self.DIRECTUS_COLLECTIONS.split(",")]
        return [c for c in items if c]

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "production"

    def missing_required(self) -> List[str]:
        """Names of boot-time variables that are unset."""
        missing = []
        key_name = PROVIDER_KEYS.get(self.LLM_PROVIDER)
        if key_name and not getattr(self, key_name):
            missing.append(key_name)
        if not self.DIRECTUS_URL:
            missing.append("DIRECTUS_URL")
        if not self.DIRECTUS_TOKEN:
            missing.append("DIRECTUS_TOKEN")
        return missing


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
