"""
OpenAI ChatGPT Translator

Chat-completion backend: the style rules go in a system message and the
text in a user message. Bearer token authentication.
"""
from __future__ import annotations

import json
from typing import Any

from config import SETTINGS

from .base import BaseTranslator
from .languages import Lang
from .transport import HttpRequest


SYSTEM_PROMPT = (
    "Translate the user provided text into high quality, well written {lang}. "
    "Apply these 4 translation rules; "
    "1.Keep the exact original formatting and style, "
    "2.Keep translations concise and just repeat the original text for unchanged translations (e.g. 'OK'), "
    "3.Audience: native {lang} speakers, "
    "4.Text can be used in Android app UI (limited space, concise translations!)."
)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_text(text: str) -> str:
    return "".join(_ESCAPES.get(char, char) for char in text)


class ChatGPTTranslator(BaseTranslator):
    key = "ChatGPT"
    display_name = "OpenAI ChatGPT"
    needs_app_key = True
    app_key_label = "API Key"
    concurrency_limit = 4

    def __init__(
        self,
        *,
        app_id: str | None = None,
        app_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(app_id=app_id, app_key=app_key, timeout=timeout)
        self.model = model or SETTINGS.secrets.openai_model
        self.base_url = (base_url or SETTINGS.secrets.openai_base_url).rstrip("/")

    def request_url(self, from_lang: Lang, to_lang: Lang, text: str) -> str:
        return f"{self.base_url}/chat/completions"

    def build_messages(self, to_lang: Lang, text: str) -> list[dict[str, str]]:
        lang = to_lang.english_name
        return [
            {"role": "system", "content": SYSTEM_PROMPT.format(lang=lang)},
            {"role": "user", "content": f"Text to translate: {escape_text(text)}"},
        ]

    def request_body(self, from_lang: Lang, to_lang: Lang, text: str) -> bytes:
        payload = {"model": self.model, "messages": self.build_messages(to_lang, text)}
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")

    def configure_request(self, request: HttpRequest) -> None:
        request.set_header("Authorization", f"Bearer {self.app_key}")
        request.set_header("Content-Type", "application/json")

    def extract_translation(self, payload: Any) -> str | None:
        choices = payload.get("choices") if isinstance(payload, dict) else None
        if not choices:
            return None
        content = choices[0]["message"]["content"]
        return content.strip() if isinstance(content, str) else None
