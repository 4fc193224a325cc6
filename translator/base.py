from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List
import json

from loguru import logger

from errors import MissingCredentialError, UnsupportedLanguageError

from .languages import Lang, get_languages
from .transport import HttpRequest


@dataclass(slots=True)
class TranslationRequest:
    text: str
    source_lang: Lang
    target_lang: Lang
    key: str | None = None


@dataclass(frozen=True, slots=True)
class BackendDescriptor:
    key: str
    display_name: str
    requires_app_id: bool
    requires_app_key: bool
    app_key_label: str
    supported_languages: tuple[Lang, ...]


class BaseTranslator(ABC):
    key: str = "base"
    display_name: str = "Base"
    needs_app_id: bool = False
    needs_app_key: bool = False
    app_id_label: str = "App ID"
    app_key_label: str = "App Key"
    request_method: str = "POST"
    concurrency_limit: int = 1

    def __init__(
        self,
        *,
        app_id: str | None = None,
        app_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.app_id = app_id
        self.app_key = app_key
        self.timeout = timeout

    def supported_languages(self) -> List[Lang]:
        return get_languages()

    @property
    def descriptor(self) -> BackendDescriptor:
        return BackendDescriptor(
            key=self.key,
            display_name=self.display_name,
            requires_app_id=self.needs_app_id,
            requires_app_key=self.needs_app_key,
            app_key_label=self.app_key_label,
            supported_languages=tuple(self.supported_languages()),
        )

    def check_credentials(self) -> None:
        if self.needs_app_id and not self.app_id:
            raise MissingCredentialError(self.display_name, self.app_id_label)
        if self.needs_app_key and not self.app_key:
            raise MissingCredentialError(self.display_name, self.app_key_label)

    def ensure_supported(self, lang: Lang) -> None:
        if lang not in self.supported_languages():
            raise UnsupportedLanguageError(lang.code, self.key)

    @abstractmethod
    def request_url(self, from_lang: Lang, to_lang: Lang, text: str) -> str:
        """Endpoint for translating ``text``."""

    @abstractmethod
    def request_body(self, from_lang: Lang, to_lang: Lang, text: str) -> bytes:
        """Serialized payload for translating ``text``."""

    def configure_request(self, request: HttpRequest) -> None:
        """Attach backend specific headers (auth, content type)."""

    def build_request(self, request: TranslationRequest) -> HttpRequest:
        http_request = HttpRequest(
            method=self.request_method,
            url=self.request_url(request.source_lang, request.target_lang, request.text),
            body=self.request_body(request.source_lang, request.target_lang, request.text),
        )
        self.configure_request(http_request)
        return http_request

    @abstractmethod
    def extract_translation(self, payload: Any) -> str | None:
        """Pull the translated text out of a decoded response."""

    def try_parse_result(self, from_lang: Lang, to_lang: Lang, text: str, result_text: str) -> str | None:
        try:
            payload = json.loads(result_text)
            if isinstance(payload, dict) and isinstance(payload.get("translation"), str):
                return payload["translation"]
            translated = self.extract_translation(payload)
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
            logger.error(f"{self.key}: error parsing translation result: {exc}")
            return None
        if not translated or not isinstance(translated, str):
            logger.error(f"{self.key}: no translation found in response: {result_text[:200]}")
            return None
        return translated

    def parse_result(self, from_lang: Lang, to_lang: Lang, text: str, result_text: str) -> str:
        """Normalize a raw response; malformed responses yield ``text`` unchanged."""
        translated = self.try_parse_result(from_lang, to_lang, text, result_text)
        return text if translated is None else translated
