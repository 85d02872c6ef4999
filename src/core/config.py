"""
Application settings.

Everything can be set through environment variables (prefix CHESS_, the LLM provider keys use the provider's usual
variable name, e.g. OPENAI_API_KEY). Invalid values raise a pydantic ValidationError when the settings get loaded.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from src.core.shared_types import Difficulty, EngineKind

ENV_PREFIX = "CHESS_"
TRUTHY = {"1", "true", "yes", "on"}

LLM_PROVIDERS = ("openai", "anthropic", "gemini", "xai", "deepseek")
DEFAULT_LLM_MODELS: dict[str, str] = {
    "openai": "gpt-3.5-turbo",
    "anthropic": "claude-3-haiku-20240307",
    "gemini": "gemini-1.5-flash",
    "xai": "grok-beta",
    "deepseek": "deepseek-chat",
}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


class ServerSettings(BaseModel):
    host: str = "localhost"
    port: int = Field(default=8080, ge=0, le=65535)
    cors_origins: list[str] = ["*"]


class AISettings(BaseModel):
    default_difficulty: Difficulty = Difficulty.MEDIUM
    default_engine: EngineKind = EngineKind.RANDOM
    max_think_seconds: float = Field(default=5.0, gt=0)
    # artificial thinking time of the engines
    random_max_think_ms: int = Field(default=1000, ge=0)
    heuristic_think_ms_per_ply: int = Field(default=500, ge=0)


class LLMProviderSettings(BaseModel):
    api_key: str = ""
    model: str = ""


class LLMSettings(BaseModel):
    enabled: bool = False
    default_provider: str = "openai"
    providers: dict[str, LLMProviderSettings] = {}

    @field_validator("default_provider")
    @classmethod
    def validate_provider(cls, value: str) -> str:
        value = value.lower()
        if value not in LLM_PROVIDERS:
            raise ValueError(
                f"Unknown LLM provider {value!r}. Pick one from {', '.join(LLM_PROVIDERS)}"
            )
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "text"

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"Invalid log level {value!r}")
        return value

    @field_validator("format")
    @classmethod
    def validate_format(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_FORMATS:
            raise ValueError(f"Invalid log format {value!r}: use 'text' or 'json'")
        return value


class DatabaseSettings(BaseModel):
    url: str = "sqlite:///chess.db"
    echo: bool = False


class Settings(BaseModel):
    server: ServerSettings = Field(default_factory=ServerSettings)
    ai: AISettings = Field(default_factory=AISettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        def get(name: str, default: str) -> str:
            return env.get(f"{ENV_PREFIX}{name}", default)

        providers = {
            provider: LLMProviderSettings(
                api_key=env.get(f"{provider.upper()}_API_KEY", ""),
                model=get(f"LLM_{provider.upper()}_MODEL", DEFAULT_LLM_MODELS[provider]),
            )
            for provider in LLM_PROVIDERS
        }
        return cls(
            server=ServerSettings(
                host=get("HOST", "localhost"),
                port=get("PORT", "8080"),
                cors_origins=[
                    origin.strip()
                    for origin in get("CORS_ORIGINS", "*").split(",")
                    if origin.strip()
                ],
            ),
            ai=AISettings(
                default_difficulty=get("AI_DIFFICULTY", Difficulty.MEDIUM).lower(),
                default_engine=get("AI_ENGINE", EngineKind.RANDOM).lower(),
                max_think_seconds=get("AI_MAX_THINK_SECONDS", "5"),
                random_max_think_ms=get("AI_RANDOM_MAX_THINK_MS", "1000"),
                heuristic_think_ms_per_ply=get("AI_HEURISTIC_THINK_MS_PER_PLY", "500"),
            ),
            llm=LLMSettings(
                enabled=get("LLM_ENABLED", "false").lower() in TRUTHY,
                default_provider=get("LLM_PROVIDER", "openai"),
                providers=providers,
            ),
            logging=LoggingSettings(
                level=get("LOG_LEVEL", "INFO"),
                format=get("LOG_FORMAT", "text"),
            ),
            database=DatabaseSettings(
                url=get("DATABASE_URL", "sqlite:///chess.db"),
                echo=get("DATABASE_ECHO", "false").lower() in TRUTHY,
            ),
        )

    @property
    def server_address(self) -> str:
        return f"{self.server.host}:{self.server.port}"

    def available_llm_providers(self) -> list[str]:
        """Providers that have an API key configured"""
        return [
            name for name, provider in self.llm.providers.items() if provider.api_key
        ]
