"""Minimal settings + logging for the VTT to Markdown converter."""

from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Load .env file from the working directory, then from the package directory
PACKAGE_DIR = Path(__file__).resolve().parent
load_dotenv()
load_dotenv(dotenv_path=PACKAGE_DIR / ".env")

DEFAULT_KEYWORD_VOCABULARY = [
    "meeting",
    "transcript",
    "discussion",
    "interview",
    "standup",
    "review",
    "planning",
    "retrospective",
    "demo",
    "workshop",
    "training",
    "sync",
    "azure",
    "arc",
    "kubernetes",
    "architecture",
    "onboarding",
]


class Settings(BaseSettings):
    """Essential settings for conversion and logging."""

    model_config = SettingsConfigDict(env_prefix="VTT2MD_", extra="ignore")

    # Environment + logging
    log_level: str = "INFO"
    log_json: bool = False

    # Conversion defaults
    default_meeting_type: str = "meeting"
    file_filter: str = "*.vtt"
    encoding: str = "utf-8-sig"
    # Comma-separated in the environment: VTT2MD_KEYWORD_VOCABULARY="demo,azure"
    keyword_vocabulary: Annotated[list[str], NoDecode] = DEFAULT_KEYWORD_VOCABULARY

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        return str(v).strip().upper()

    @field_validator("keyword_vocabulary", mode="before")
    @classmethod
    def parse_keyword_vocabulary(cls, v) -> list[str]:
        """Parse the vocabulary from a comma-separated string or list."""
        if isinstance(v, str):
            return [term.strip().lower() for term in v.split(",") if term.strip()]
        return [str(term).strip().lower() for term in v]


settings = Settings()


def configure_structlog(log_level: str | None = None, log_json: bool | None = None) -> None:
    """Simple logging setup."""
    import logging
    import sys

    import structlog

    level_name = (log_level or settings.log_level).upper()
    use_json = settings.log_json if log_json is None else log_json

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        stream=sys.stderr,
        format="%(message)s",
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.stdlib.add_log_level,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
