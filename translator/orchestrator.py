from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Mapping, Sequence

from loguru import logger

from config import SETTINGS, RetryPolicy
from errors import RunCancelledError, TranslationFailure
from resources.values import ResourceEntry, apply_segments, entry_segments, is_translatable_text
from utils.cache import TranslationMemory, make_cache_key

from .base import BaseTranslator, TranslationRequest
from .languages import Lang
from .transport import HttpResponse, Transport


ProgressCallback = Callable[[int, int], None]
LogCallback = Callable[[str], None]

RETRYABLE_STATUS = {408, 425, 429, 500, 502, 503, 504}


class EntryStatus(str, Enum):
    TRANSLATED = "translated"
    FAILED = "failed"
    UNTOUCHED = "untouched"


@dataclass(slots=True)
class EntryOutcome:
    entry: ResourceEntry
    status: EntryStatus
    reason: str | None = None


class TranslationOrchestrator:
    """Sends every entry of a run through one backend.

    Entries are independent: a failed entry keeps its original content and
    the others carry on. Results come back in input order whatever order the
    requests complete in.
    """

    def __init__(
        self,
        translator: BaseTranslator,
        transport: Transport,
        memory: TranslationMemory | None = None,
        retry_policy: RetryPolicy | None = None,
        *,
        concurrency_limit: int | None = None,
        request_timeout: float | None = None,
    ) -> None:
        self.translator = translator
        self.transport = transport
        self.memory = memory
        self.retry_policy = retry_policy or SETTINGS.retry
        self.concurrency_limit = concurrency_limit or min(
            translator.concurrency_limit, SETTINGS.translator.concurrency_limit
        )
        self.request_timeout = request_timeout or translator.timeout

    async def translate(
        self,
        *,
        entries: Sequence[ResourceEntry],
        namespaces: Mapping[str | None, str],
        source_lang: Lang,
        target_lang: Lang,
        cancel_event: asyncio.Event | None = None,
        progress_cb: ProgressCallback | None = None,
        log_cb: LogCallback | None = None,
    ) -> List[EntryOutcome]:
        total = len(entries)
        outcomes: List[EntryOutcome | None] = [None] * total
        semaphore = asyncio.Semaphore(max(self.concurrency_limit, 1))
        completed = 0

        async def worker(index: int, entry: ResourceEntry) -> None:
            nonlocal completed
            async with semaphore:
                outcomes[index] = await self._translate_entry(
                    entry,
                    namespaces=namespaces,
                    source_lang=source_lang,
                    target_lang=target_lang,
                    cancel_event=cancel_event,
                    log_cb=log_cb,
                )
            completed += 1
            if progress_cb:
                progress_cb(completed, total)

        tasks = [asyncio.create_task(worker(idx, entry)) for idx, entry in enumerate(entries)]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [outcome for outcome in outcomes if outcome is not None]

    async def _translate_entry(
        self,
        entry: ResourceEntry,
        *,
        namespaces: Mapping[str | None, str],
        source_lang: Lang,
        target_lang: Lang,
        cancel_event: asyncio.Event | None,
        log_cb: LogCallback | None,
    ) -> EntryOutcome:
        if not entry.translatable:
            return EntryOutcome(entry=entry, status=EntryStatus.UNTOUCHED)
        segments = entry_segments(entry, namespaces)
        if not any(is_translatable_text(segment) for segment in segments):
            return EntryOutcome(entry=entry, status=EntryStatus.UNTOUCHED)

        try:
            translated: List[str] = []
            for segment in segments:
                if not is_translatable_text(segment):
                    translated.append(segment)
                    continue
                request = TranslationRequest(
                    text=segment,
                    source_lang=source_lang,
                    target_lang=target_lang,
                    key=entry.key,
                )
                translated.append(await self._translate_text(request, cancel_event=cancel_event, log_cb=log_cb))
            result = apply_segments(entry, namespaces, translated)
        except TranslationFailure as exc:
            message = f"[{target_lang.code}] '{entry.key}' kept untranslated: {exc.reason}"
            logger.warning(message)
            if log_cb:
                log_cb(message)
            return EntryOutcome(entry=entry, status=EntryStatus.FAILED, reason=exc.reason)
        return EntryOutcome(entry=result, status=EntryStatus.TRANSLATED)

    async def _translate_text(
        self,
        request: TranslationRequest,
        *,
        cancel_event: asyncio.Event | None,
        log_cb: LogCallback | None,
    ) -> str:
        cache_key = make_cache_key(
            self.translator.key, request.text, request.source_lang.code, request.target_lang.code
        )
        if self.memory:
            cached = self.memory.get(cache_key)
            if cached:
                return cached

        response = await self._retry(lambda: self._send(request, cancel_event), log_cb=log_cb)
        # A body received after cancellation is discarded unparsed.
        self._check_cancelled(cancel_event)
        translated = self.translator.try_parse_result(
            request.source_lang, request.target_lang, request.text, response.body
        )
        if translated is None:
            raise TranslationFailure("Unparsable response from backend")
        if self.memory:
            self.memory.set(cache_key, translated)
        return translated

    async def _send(self, request: TranslationRequest, cancel_event: asyncio.Event | None) -> HttpResponse:
        self._check_cancelled(cancel_event)
        http_request = self.translator.build_request(request)
        try:
            response = await asyncio.wait_for(self.transport.send(http_request), timeout=self.request_timeout)
        except asyncio.TimeoutError as exc:
            raise TranslationFailure(f"Request timed out after {self.request_timeout}s", retryable=True) from exc
        except OSError as exc:
            raise TranslationFailure(f"Connection error: {exc}", retryable=True) from exc
        if not response.ok:
            raise TranslationFailure(
                f"HTTP {response.status}: {response.body[:200]}",
                retryable=response.status in RETRYABLE_STATUS,
                status=response.status,
            )
        return response

    @staticmethod
    def _check_cancelled(cancel_event: asyncio.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise RunCancelledError("Run cancelled")

    async def _retry(
        self,
        action: Callable[[], Awaitable[HttpResponse]],
        log_cb: LogCallback | None,
    ) -> HttpResponse:
        attempt = 0
        delay = self.retry_policy.initial_delay
        while True:
            attempt += 1
            try:
                return await action()
            except TranslationFailure as exc:
                logger.debug(f"Translation attempt {attempt} failed: {exc}")
                if log_cb:
                    log_cb(f"Translation attempt {attempt} failed: {exc}")
                if not exc.retryable or attempt >= self.retry_policy.max_attempts:
                    raise
                jitter = random.uniform(0, self.retry_policy.backoff_jitter)
                await asyncio.sleep(delay + jitter)
                delay *= self.retry_policy.backoff_factor
