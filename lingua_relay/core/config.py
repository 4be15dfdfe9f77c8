"""
Lingua Relay Core Configuration

This module manages all application configuration using Pydantic Settings.
Environment variables are loaded from .env file.
"""

import json
from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: str = "INFO"

    api_prefix: str = "/api"
    public_base_url: Optional[str] = None

    # Relay defaults. Every defaultable field of a join or message lives here.
    default_join_language: str = "hi-IN"
    reply_language: str = "en-IN"
    fallback_target_language: str = "hi-IN"
    default_room_label: str = "Unknown Hotel"
    room_cleanup_delay_seconds: float = 300.0
    collaborator_timeout_seconds: float = 30.0
    max_audio_bytes: int = 2_000_000
    default_audio_mime_type: str = "audio/webm"

    # Speech / translation providers
    speech_provider: Literal["SARVAM", "MOCK"] = "MOCK"
    translation_provider: Literal["SARVAM", "OPENAI", "MOCK"] = "MOCK"
    translation_fallback_enabled: bool = False
    mock_latency_seconds: float = 0.3

    sarvam_api_key: Optional[str] = None
    sarvam_base_url: str = "https://api.sarvam.ai"
    sarvam_stt_model: str = "saarika:v2.5"
    sarvam_tts_model: str = "bulbul:v2"
    sarvam_translate_model: str = "mayura:v1"
    sarvam_speaker_gender: str = "Male"
    sarvam_tone: str = "formal"

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"

    # Room lifecycle feed
    room_events_enabled: bool = False
    redis_url: str = "redis://localhost:6379/0"
    redis_db: int = 0
    room_events_channel: str = "relay:rooms"

    # CORS
    cors_origins: list[str] = ["*"]
    cors_credentials: bool = True
    cors_methods: list[str] = ["*"]
    cors_headers: list[str] = ["*"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Any) -> list[str]:
        """Parse CORS origins from string, list, or JSON string"""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [v]
        if isinstance(v, list):
            return v
        return ["*"]

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def use_mock_speech(self) -> bool:
        """Speech falls back to the mock client when no Sarvam key is set"""
        return self.speech_provider == "MOCK" or not self.sarvam_api_key

    @property
    def use_mock_translation(self) -> bool:
        if self.translation_provider == "MOCK":
            return True
        if self.translation_provider == "OPENAI":
            return not self.openai_api_key
        return not self.sarvam_api_key


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache for singleton pattern.
    """
    return Settings()


settings = get_settings()
