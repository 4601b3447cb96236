from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from src.constants import (
    CLAUDE_VISION_MODEL,
    DEFAULT_HOST,
    DEFAULT_PORT,
    OPENAI_VISION_MODEL,
    VISION_PROVIDER_ANTHROPIC,
    VISION_PROVIDER_OPENAI,
    WHISPER_MODEL,
)


@dataclass(frozen=True)
class Config:
    openai_api_key: Optional[str]
    anthropic_api_key: Optional[str]
    vision_provider: str
    openai_vision_model: str
    claude_vision_model: str
    whisper_model: str
    host: str
    port: int
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        anthropic_api_key = os.getenv("ANTHROPIC_API_KEY") or None
        vision_provider = os.getenv("VISION_PROVIDER", VISION_PROVIDER_OPENAI)
        openai_vision_model = os.getenv("OPENAI_VISION_MODEL", OPENAI_VISION_MODEL)
        claude_vision_model = os.getenv("CLAUDE_VISION_MODEL", CLAUDE_VISION_MODEL)
        whisper_model = os.getenv("WHISPER_MODEL", WHISPER_MODEL)
        host = os.getenv("HOST", DEFAULT_HOST)
        port = os.getenv("PORT") or str(DEFAULT_PORT)
        log_level = os.getenv("LOG_LEVEL", "INFO")

        return cls._validate(
            openai_api_key=openai_api_key,
            anthropic_api_key=anthropic_api_key,
            vision_provider=vision_provider.strip().lower(),
            openai_vision_model=openai_vision_model,
            claude_vision_model=claude_vision_model,
            whisper_model=whisper_model,
            host=host,
            port=int(port),
            log_level=log_level,
        )

    @staticmethod
    def _validate(
        openai_api_key: Optional[str],
        anthropic_api_key: Optional[str],
        vision_provider: str,
        openai_vision_model: str,
        claude_vision_model: str,
        whisper_model: str,
        host: str,
        port: int,
        log_level: str,
    ) -> "Config":
        # API keys are optional; a missing key fails on the first remote call.
        match vision_provider:
            case "openai" | "anthropic":
                pass
            case other:
                raise ValueError(
                    f"VISION_PROVIDER must be '{VISION_PROVIDER_OPENAI}' or "
                    f"'{VISION_PROVIDER_ANTHROPIC}', got '{other}'"
                )

        return Config(
            openai_api_key=openai_api_key,
            anthropic_api_key=anthropic_api_key,
            vision_provider=vision_provider,
            openai_vision_model=openai_vision_model,
            claude_vision_model=claude_vision_model,
            whisper_model=whisper_model,
            host=host,
            port=port,
            log_level=log_level,
        )
