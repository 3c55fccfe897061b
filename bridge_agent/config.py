# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Application configuration using pydantic-settings.

Token budget tables live in ``bridge_agent.services.response`` as
module-level constants; only host-tunable behaviour is exposed here.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Attributes:
        APP_NAME (str): Display name of the assistant.
        LOG_LEVEL (str): Root log level applied by ``setup_logging()``.
        RESPONSE_COMPRESSION_ENABLED (bool): Whether full-text responses are
            post-processed by the compressor.
        RESPONSE_COMPRESSION_MODE (str): ``"auto"`` to pick a mode from the
            response length, or a fixed compression mode.
        STREAM_COMPRESSION_MODE (str): Compression mode for streamed output.
        STREAM_SENTENCE_THRESHOLD (int): Sentences buffered before a streamed
            batch is compressed.
        SUMMARY_MAX_LENGTH (int): Default character limit for summaries.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "TheBridge Assistant"
    LOG_LEVEL: str = "INFO"

    # Post-processing
    RESPONSE_COMPRESSION_ENABLED: bool = True
    RESPONSE_COMPRESSION_MODE: Literal["auto", "none", "light", "moderate", "aggressive"] = "auto"

    # Streaming
    STREAM_COMPRESSION_MODE: Literal["none", "light", "moderate", "aggressive"] = "light"
    STREAM_SENTENCE_THRESHOLD: int = 3

    SUMMARY_MAX_LENGTH: int = 500


settings = Settings()
