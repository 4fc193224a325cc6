from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Callable, List

import pytest

from config import RetryPolicy
from translator.base import BaseTranslator
from translator.languages import Lang
from translator.transport import HttpRequest, HttpResponse


SAMPLE_STRINGS = """<?xml version="1.0" encoding="utf-8"?>
<resources xmlns:xliff="urn:oasis:names:tc:xliff:document:1.2">
    <!-- Application strings -->
    <string name="app_name">My App</string>
    <string name="debug_label" translatable="false">Debug</string>
    <string name="greeting">Hello <xliff:g id="name">%1$s</xliff:g>!</string>
    <string-array name="planets">
        <item>Mercury</item>
        <item>@string/app_name</item>
    </string-array>
    <color name="accent">#FF0000</color>
</resources>
"""

SCENARIO_STRINGS = """<?xml version="1.0" encoding="utf-8"?>
<resources>
    <string name="app_name">My App</string>
    <string name="debug_label" translatable="false">Debug</string>
</resources>
"""


class EchoTranslator(BaseTranslator):
    """Backend whose test server answers with ``prefix + text``."""

    key = "Echo"
    display_name = "Echo"
    concurrency_limit = 4

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.parsed: List[str] = []

    def request_url(self, from_lang: Lang, to_lang: Lang, text: str) -> str:
        return f"https://echo.test/{from_lang.code}/{to_lang.code}"

    def request_body(self, from_lang: Lang, to_lang: Lang, text: str) -> bytes:
        return json.dumps({"text": text, "target": to_lang.code}).encode("utf-8")

    def extract_translation(self, payload: Any) -> str | None:
        return payload.get("echo")

    def try_parse_result(self, from_lang: Lang, to_lang: Lang, text: str, result_text: str) -> str | None:
        self.parsed.append(text)
        return super().try_parse_result(from_lang, to_lang, text, result_text)


class KeyedEchoTranslator(EchoTranslator):
    key = "KeyedEcho"
    display_name = "Keyed Echo"
    needs_app_key = True
    app_key_label = "Secret"


Handler = Callable[[HttpRequest], HttpResponse]


def echo_handler(prefix: str = "") -> Handler:
    def handle(request: HttpRequest) -> HttpResponse:
        payload = json.loads(request.body)
        return HttpResponse(status=200, body=json.dumps({"translation": prefix + payload["text"]}))

    return handle


def target_prefix_handler(request: HttpRequest) -> HttpResponse:
    payload = json.loads(request.body)
    return HttpResponse(status=200, body=json.dumps({"translation": f"{payload['target']}:{payload['text']}"}))


class StubTransport:
    """Records requests and answers them with ``handler``."""

    def __init__(self, handler: Handler, *, delay: float = 0.0) -> None:
        self.handler = handler
        self.delay = delay
        self.requests: List[HttpRequest] = []

    async def send(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.handler(request)

    @property
    def texts(self) -> List[str]:
        return [json.loads(request.body)["text"] for request in self.requests]

    async def __aenter__(self) -> "StubTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None


@pytest.fixture
def fast_retry() -> RetryPolicy:
    return RetryPolicy(max_attempts=2, backoff_factor=1.0, backoff_jitter=0.0, initial_delay=0.0)


@pytest.fixture
def res_dir(tmp_path: Path) -> Path:
    path = tmp_path / "res"
    (path / "values").mkdir(parents=True)
    return path


@pytest.fixture
def source_file(res_dir: Path) -> Path:
    path = res_dir / "values" / "strings.xml"
    path.write_text(SAMPLE_STRINGS, encoding="utf-8")
    return path


@pytest.fixture
def scenario_file(res_dir: Path) -> Path:
    path = res_dir / "values" / "strings.xml"
    path.write_text(SCENARIO_STRINGS, encoding="utf-8")
    return path
