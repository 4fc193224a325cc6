from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import Progress
from rich.table import Table

from config import SETTINGS
from errors import LocalizerError
from pipeline import MergeReport, RunOptions, localize, read_source
from resources.values import entry_segments, is_values_file
from translator.factory import build_translator, get_descriptors, get_translator_class
from translator.languages import AUTO, Lang, get_language, find_languages, sort_by_english_name
from translator.transport import AiohttpTransport
from utils.cache import TranslationMemory
from utils.lang import detect_source_language
from utils.logging_config import configure_logging

app = typer.Typer(add_completion=False, help="Translate Android values resources into other languages")
console = Console()


def _run_async(coro):
    return asyncio.run(coro)


def _resolve_source(source: str, detect: bool, source_path: Path) -> Lang:
    if source.lower() != "auto":
        return get_language(source)
    if not detect:
        return AUTO
    entries, namespaces = read_source(source_path, skip_non_translatable=True)
    texts = [segment for entry in entries for segment in entry_segments(entry, namespaces)]
    detected = detect_source_language(texts, AUTO)
    if detected is AUTO:
        console.log("Could not detect the source language, letting the engine decide")
    else:
        console.log(f"Detected source language: {detected.english_name} ({detected.code})")
    return detected


def _print_reports(reports: dict[str, MergeReport | BaseException]) -> bool:
    table = Table(title="Localization")
    table.add_column("Language")
    table.add_column("Result")
    table.add_column("Translated", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Kept", justify="right")
    table.add_column("Output")
    success = True
    for code, report in reports.items():
        if isinstance(report, BaseException):
            success = False
            table.add_row(code, f"[red]{report}[/red]", "-", "-", "-", "-")
            continue
        table.add_row(
            code,
            f"[green]{report.state.value}[/green]",
            str(report.translated),
            str(report.failed),
            str(report.preserved),
            str(report.destination),
        )
    console.print(table)
    return success


@app.command(help="Translate a values file (e.g. res/values/strings.xml) into the target languages")
def translate(
    source_file: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    targets: List[str] = typer.Option(..., "--target", "-t", help="Target language code, repeatable"),
    engine: str = typer.Option(SETTINGS.default_engine, "--engine", "-e"),
    source: str = typer.Option(SETTINGS.default_source_lang, "--source", "-s", help="Source language code or 'auto'"),
    detect: bool = typer.Option(False, help="Detect the source language when --source is 'auto'"),
    app_id: Optional[str] = typer.Option(None, help="App ID for engines that need one"),
    app_key: Optional[str] = typer.Option(None, help="API key, overrides the environment"),
    model: Optional[str] = typer.Option(None, help="Model name for ChatGPT"),
    res_dir: Optional[Path] = typer.Option(None, help="Resource directory, defaults to the source file's grandparent"),
    skip_non_translatable: bool = typer.Option(
        SETTINGS.skip_non_translatable,
        "--skip-non-translatable/--keep-non-translatable",
        help="Leave translatable=\"false\" entries out of the output",
    ),
    overwrite: bool = typer.Option(SETTINGS.overwrite_existing, help="Replace existing translated files wholesale"),
    concurrency: Optional[int] = typer.Option(None, min=1, help="Parallel requests per language"),
    memory: bool = typer.Option(True, help="Reuse translations stored in the translation memory"),
    log_file: Optional[Path] = typer.Option(None, help="Write a debug log to this file"),
) -> None:
    configure_logging(log_file)
    if not is_values_file(source_file):
        console.print(f"[yellow]{source_file} is not inside a values directory[/yellow]")

    try:
        translator = build_translator(engine, app_id=app_id, app_key=app_key, model=model)
        target_langs = find_languages(targets)
        source_lang = _resolve_source(source, detect, source_file)
    except LocalizerError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    translation_memory = TranslationMemory(SETTINGS.translation_memory_path) if memory else None
    options = RunOptions(skip_non_translatable=skip_non_translatable, overwrite_existing=overwrite)

    def log_callback(message: str) -> None:
        console.log(message)

    async def runner():
        async with AiohttpTransport(
            timeout=SETTINGS.translator.session_timeout,
            proxy=SETTINGS.translator.proxy_url,
        ) as transport:
            with Progress(console=console) as progress:
                task_ids = {
                    lang.code: progress.add_task(f"{lang.english_name}", total=None) for lang in target_langs
                }

                def progress_callback(lang: Lang, done: int, total: int) -> None:
                    progress.update(task_ids[lang.code], completed=done, total=total)

                return await localize(
                    source_file,
                    source_lang,
                    target_langs,
                    translator,
                    transport=transport,
                    options=options,
                    memory=translation_memory,
                    res_dir=res_dir,
                    concurrency_limit=concurrency,
                    progress_cb=progress_callback,
                    log_cb=log_callback,
                )

    try:
        reports = _run_async(runner())
    except (LocalizerError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    if not _print_reports(reports):
        raise typer.Exit(code=1)


@app.command(help="List the available translation engines")
def engines() -> None:
    table = Table(title="Engines")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Credentials")
    table.add_column("Languages", justify="right")
    for descriptor in get_descriptors():
        needs = []
        if descriptor.requires_app_id:
            needs.append("App ID")
        if descriptor.requires_app_key:
            needs.append(descriptor.app_key_label)
        table.add_row(
            descriptor.key,
            descriptor.display_name,
            ", ".join(needs) or "-",
            str(len(descriptor.supported_languages)),
        )
    console.print(table)


@app.command(help="List the languages an engine can translate into")
def languages(engine: str = typer.Option(SETTINGS.default_engine, "--engine", "-e")) -> None:
    try:
        translator_cls = get_translator_class(engine)
    except LocalizerError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    for lang in sort_by_english_name(translator_cls().supported_languages()):
        console.print(f"{lang.english_name} ({lang.code}) - {lang.local_name}")


if __name__ == "__main__":
    app()
