from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import os


BASE_DIR = Path(__file__).resolve().parent
DEFAULT_MEMORY_PATH = BASE_DIR / "storage" / "translation_memory.json"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff_factor: float = 2.0
    backoff_jitter: float = 0.25
    initial_delay: float = 1.0


@dataclass(slots=True)
class TranslatorSettings:
    concurrency_limit: int = 4
    request_timeout: float = 30.0
    session_timeout: float = 60.0
    proxy_url: str | None = field(default_factory=lambda: os.getenv("LOCALIZER_PROXY"))


@dataclass(slots=True)
class EngineSecrets:
    openai_api_key: str | None = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    openai_model: str = field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4o-mini"))
    openai_base_url: str = field(default_factory=lambda: os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"))
    deepl_api_key: str | None = field(default_factory=lambda: os.getenv("DEEPL_API_KEY"))


@dataclass(slots=True)
class AppSettings:
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    translator: TranslatorSettings = field(default_factory=TranslatorSettings)
    secrets: EngineSecrets = field(default_factory=EngineSecrets)
    translation_memory_path: Path = field(default_factory=lambda: Path(os.getenv("LOCALIZER_MEMORY", DEFAULT_MEMORY_PATH)))
    default_engine: str = field(default_factory=lambda: os.getenv("LOCALIZER_ENGINE", "Google"))
    default_source_lang: str = field(default_factory=lambda: os.getenv("LOCALIZER_SOURCE", "auto"))
    skip_non_translatable: bool = field(default_factory=lambda: _env_flag("LOCALIZER_SKIP_NON_TRANSLATABLE", True))
    overwrite_existing: bool = field(default_factory=lambda: _env_flag("LOCALIZER_OVERWRITE", False))


SETTINGS = AppSettings()
