"""
DeepL API Translator

Official DeepL API translator supporting both Free and Pro plans.
"""
from __future__ import annotations

import json
from typing import Any, List

from .base import BaseTranslator
from .languages import Lang, get_language
from .transport import HttpRequest


class DeepLTranslator(BaseTranslator):
    """DeepL API Translator with Free and Pro plan support.

    Free plan keys end with ``:fx`` and are sent to the free endpoint.
    """

    key = "DeepL"
    display_name = "DeepL API"
    needs_app_key = True
    app_key_label = "Auth Key"
    concurrency_limit = 4

    PRO_API_URL = "https://api.deepl.com/v2/translate"
    FREE_API_URL = "https://api-free.deepl.com/v2/translate"

    # Registry code -> DeepL code
    LANG_MAP = {
        "ar": "AR",
        "bg": "BG",
        "cs": "CS",
        "da": "DA",
        "de": "DE",
        "el": "EL",
        "en": "EN-US",
        "es": "ES",
        "et": "ET",
        "fi": "FI",
        "fr": "FR",
        "hu": "HU",
        "in": "ID",
        "it": "IT",
        "ja": "JA",
        "ko": "KO",
        "lt": "LT",
        "lv": "LV",
        "nb": "NB",
        "nl": "NL",
        "pl": "PL",
        "pt": "PT-PT",
        "pt-BR": "PT-BR",
        "ro": "RO",
        "ru": "RU",
        "sk": "SK",
        "sl": "SL",
        "sv": "SV",
        "tr": "TR",
        "uk": "UK",
        "zh-CN": "ZH-HANS",
        "zh-TW": "ZH-HANT",
    }

    def __init__(
        self,
        *,
        app_id: str | None = None,
        app_key: str | None = None,
        plan: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(app_id=app_id, app_key=app_key, timeout=timeout)
        if plan:
            self.plan = plan.lower()
        elif app_key and app_key.endswith(":fx"):
            self.plan = "free"
        else:
            self.plan = "pro"

    def supported_languages(self) -> List[Lang]:
        return [get_language(code) for code in self.LANG_MAP]

    def _map_lang(self, lang: Lang) -> str | None:
        """Map a registry language to DeepL format; ``None`` means auto-detect."""
        if lang.code == "auto":
            return None
        return self.LANG_MAP.get(lang.code, lang.code.upper())

    def request_url(self, from_lang: Lang, to_lang: Lang, text: str) -> str:
        return self.FREE_API_URL if self.plan == "free" else self.PRO_API_URL

    def request_body(self, from_lang: Lang, to_lang: Lang, text: str) -> bytes:
        payload = {
            "text": [text],
            "target_lang": self._map_lang(to_lang),
        }
        # Source languages take the bare code (EN, PT, ZH)
        source_lang = self._map_lang(from_lang)
        if source_lang:
            payload["source_lang"] = source_lang.split("-")[0]
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")

    def configure_request(self, request: HttpRequest) -> None:
        request.set_header("Authorization", f"DeepL-Auth-Key {self.app_key}")
        request.set_header("Content-Type", "application/json")

    def extract_translation(self, payload: Any) -> str | None:
        translations = payload.get("translations") if isinstance(payload, dict) else None
        if not translations or not isinstance(translations[0], dict):
            return None
        return translations[0].get("text")
