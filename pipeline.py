"""
Localization runs.

A run translates one source values file into one target language and
merges the result into ``values-<lang>/<file>``:

    idle -> extracting -> translating -> merging -> done

Entry failures stay inside ``translating``; configuration, parse, write
errors and cancellation end the run in ``aborted``.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Sequence

from loguru import logger

from config import SETTINGS, RetryPolicy
from errors import EmptyDocumentError
from resources.merge import merge_entries, select_pending
from resources.values import ResourceEntry, ValuesDocument, extract, load_existing, values_file_path
from resources.writer import write_values_file
from translator.base import BaseTranslator
from translator.languages import Lang
from translator.orchestrator import EntryStatus, LogCallback, ProgressCallback, TranslationOrchestrator
from translator.transport import Transport
from utils.cache import TranslationMemory


LanguageProgressCallback = Callable[[Lang, int, int], None]


class RunState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    TRANSLATING = "translating"
    MERGING = "merging"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(slots=True)
class RunOptions:
    skip_non_translatable: bool = field(default_factory=lambda: SETTINGS.skip_non_translatable)
    overwrite_existing: bool = field(default_factory=lambda: SETTINGS.overwrite_existing)
    file_name: str | None = None


@dataclass(slots=True)
class MergeReport:
    target_lang: str
    destination: Path
    state: RunState = RunState.IDLE
    translated: int = 0
    failed: int = 0
    untouched: int = 0
    preserved: int = 0
    written: int = 0
    failed_keys: List[str] = field(default_factory=list)


class LocalizationRun:
    def __init__(
        self,
        translator: BaseTranslator,
        transport: Transport,
        *,
        options: RunOptions | None = None,
        memory: TranslationMemory | None = None,
        retry_policy: RetryPolicy | None = None,
        concurrency_limit: int | None = None,
        request_timeout: float | None = None,
    ) -> None:
        self.translator = translator
        self.options = options or RunOptions()
        self.orchestrator = TranslationOrchestrator(
            translator,
            transport,
            memory,
            retry_policy,
            concurrency_limit=concurrency_limit,
            request_timeout=request_timeout,
        )
        self.state = RunState.IDLE

    def _transition(self, state: RunState) -> None:
        logger.debug(f"Run state {self.state.value} -> {state.value}")
        self.state = state

    def _check_configuration(self, target_lang: Lang) -> None:
        self.translator.check_credentials()
        self.translator.ensure_supported(target_lang)

    async def run(
        self,
        source_path: str | Path,
        source_lang: Lang,
        target_lang: Lang,
        *,
        res_dir: str | Path | None = None,
        cancel_event: asyncio.Event | None = None,
        progress_cb: ProgressCallback | None = None,
        log_cb: LogCallback | None = None,
    ) -> MergeReport:
        """Extract ``source_path`` and translate it into ``target_lang``.

        ``res_dir`` defaults to the directory holding the source ``values``
        folder; the output keeps the source file name unless
        ``RunOptions.file_name`` says otherwise.
        """
        path = Path(source_path)
        destination = values_file_path(
            Path(res_dir) if res_dir else path.parent.parent,
            target_lang,
            self.options.file_name or path.name,
        )
        try:
            self._check_configuration(target_lang)
            self._transition(RunState.EXTRACTING)
            entries, namespaces = read_source(path, skip_non_translatable=self.options.skip_non_translatable)
        except BaseException:
            self._transition(RunState.ABORTED)
            raise
        return await self.translate_and_merge(
            entries,
            source_lang,
            target_lang,
            destination,
            namespaces=namespaces,
            cancel_event=cancel_event,
            progress_cb=progress_cb,
            log_cb=log_cb,
        )

    async def translate_and_merge(
        self,
        entries: Sequence[ResourceEntry],
        source_lang: Lang,
        target_lang: Lang,
        destination: str | Path,
        *,
        namespaces: Mapping[str | None, str] | None = None,
        cancel_event: asyncio.Event | None = None,
        progress_cb: ProgressCallback | None = None,
        log_cb: LogCallback | None = None,
    ) -> MergeReport:
        destination = Path(destination)
        overwrite = self.options.overwrite_existing
        report = MergeReport(target_lang=target_lang.code, destination=destination)
        try:
            self._check_configuration(target_lang)

            existing: List[ResourceEntry] = []
            merged_namespaces: Dict[str | None, str] = {}
            existing_document = None if overwrite else load_existing(destination)
            if existing_document is not None:
                existing = extract(existing_document, skip_non_translatable=False)
                merged_namespaces.update(existing_document.namespaces)
            merged_namespaces.update(namespaces or {})

            pending = select_pending(entries, existing, overwrite_existing=overwrite)
            report.preserved = len(entries) - len(pending)

            self._transition(RunState.TRANSLATING)
            logger.info(f"[{target_lang.code}] translating {len(pending)} entries with {self.translator.key}")
            outcomes = await self.orchestrator.translate(
                entries=pending,
                namespaces=merged_namespaces,
                source_lang=source_lang,
                target_lang=target_lang,
                cancel_event=cancel_event,
                progress_cb=progress_cb,
                log_cb=log_cb,
            )

            self._transition(RunState.MERGING)
            merged = merge_entries(
                [outcome.entry for outcome in outcomes],
                existing,
                overwrite_existing=overwrite,
            )
            if merged.added or existing_document is None:
                write_values_file(destination, merged.entries, merged_namespaces)
            else:
                logger.info(f"[{target_lang.code}] {destination} is up to date")
        except BaseException:
            self._transition(RunState.ABORTED)
            report.state = self.state
            raise

        for outcome in outcomes:
            if outcome.status is EntryStatus.TRANSLATED:
                report.translated += 1
            elif outcome.status is EntryStatus.FAILED:
                report.failed += 1
                report.failed_keys.append(outcome.entry.key)
            else:
                report.untouched += 1
        report.written = len(merged.entries)
        self._transition(RunState.DONE)
        report.state = self.state
        logger.info(
            f"[{target_lang.code}] wrote {report.written} entries to {destination} "
            f"({report.translated} translated, {report.failed} failed)"
        )
        return report


def read_source(
    source_path: Path,
    *,
    skip_non_translatable: bool,
) -> tuple[List[ResourceEntry], Dict[str | None, str]]:
    try:
        document = ValuesDocument.from_file(source_path)
    except EmptyDocumentError:
        logger.warning(f"{source_path} has no root element, nothing to translate")
        return [], {}
    return extract(document, skip_non_translatable=skip_non_translatable), document.namespaces


async def localize(
    source_path: str | Path,
    source_lang: Lang,
    target_langs: Iterable[Lang],
    translator: BaseTranslator,
    *,
    transport: Transport,
    options: RunOptions | None = None,
    memory: TranslationMemory | None = None,
    res_dir: str | Path | None = None,
    retry_policy: RetryPolicy | None = None,
    concurrency_limit: int | None = None,
    request_timeout: float | None = None,
    cancel_event: asyncio.Event | None = None,
    progress_cb: LanguageProgressCallback | None = None,
    log_cb: LogCallback | None = None,
) -> Dict[str, MergeReport | BaseException]:
    """Translate one source file into several languages concurrently.

    Each language is an independent run writing its own destination; the
    result maps language codes to a report or to the error that ended that
    language's run.
    """
    path = Path(source_path)
    options = options or RunOptions()
    root = Path(res_dir) if res_dir else path.parent.parent
    file_name = options.file_name or path.name

    languages: List[Lang] = []
    for lang in target_langs:
        if lang not in languages:
            languages.append(lang)
    destinations: Dict[str, Path] = {}
    for lang in languages:
        destination = values_file_path(root, lang, file_name)
        if destination in destinations.values():
            raise ValueError(f"Two target languages resolve to {destination}")
        destinations[lang.code] = destination

    entries, namespaces = read_source(path, skip_non_translatable=options.skip_non_translatable)

    async def run_language(lang: Lang) -> MergeReport:
        run = LocalizationRun(
            translator,
            transport,
            options=options,
            memory=memory,
            retry_policy=retry_policy,
            concurrency_limit=concurrency_limit,
            request_timeout=request_timeout,
        )
        language_progress = None
        if progress_cb:
            def language_progress(done: int, total: int) -> None:
                progress_cb(lang, done, total)
        return await run.translate_and_merge(
            entries,
            source_lang,
            lang,
            destinations[lang.code],
            namespaces=namespaces,
            cancel_event=cancel_event,
            progress_cb=language_progress,
            log_cb=log_cb,
        )

    try:
        results = await asyncio.gather(*(run_language(lang) for lang in languages), return_exceptions=True)
    finally:
        if memory:
            memory.flush()

    reports: Dict[str, MergeReport | BaseException] = {}
    for lang, result in zip(languages, results):
        if isinstance(result, BaseException):
            logger.error(f"[{lang.code}] run aborted: {result}")
        reports[lang.code] = result
    return reports
