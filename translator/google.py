"""
Google Translator

Uses the free ``translate_a/single`` endpoint (client=gtx), no API key
required. Language pair in the query string, text in a form encoded body.
"""
from __future__ import annotations

import urllib.parse
from typing import Any

from .base import BaseTranslator
from .languages import Lang
from .transport import HttpRequest


class GoogleTranslator(BaseTranslator):
    """Google Translate over the public web endpoint.

    The response is a nested list; its first element holds one
    ``[translated, original, ...]`` row per sentence.
    """

    key = "Google"
    display_name = "Google Translate"
    concurrency_limit = 8

    API_URL = "https://translate.googleapis.com/translate_a/single"
    USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    def request_url(self, from_lang: Lang, to_lang: Lang, text: str) -> str:
        params = {
            "client": "gtx",
            "sl": from_lang.code,
            "tl": to_lang.code,
            "dt": "t",
        }
        return f"{self.API_URL}?{urllib.parse.urlencode(params)}"

    def request_body(self, from_lang: Lang, to_lang: Lang, text: str) -> bytes:
        return urllib.parse.urlencode({"q": text}).encode("utf-8")

    def configure_request(self, request: HttpRequest) -> None:
        request.set_header("Content-Type", "application/x-www-form-urlencoded;charset=utf-8")
        request.set_header("User-Agent", self.USER_AGENT)

    def extract_translation(self, payload: Any) -> str | None:
        if not isinstance(payload, list) or not payload or not payload[0]:
            return None
        return "".join(part[0] for part in payload[0] if part and part[0])
