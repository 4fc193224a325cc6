from __future__ import annotations

from typing import Sequence

from langdetect import DetectorFactory, LangDetectException, detect
from loguru import logger

from errors import UnsupportedLanguageError
from translator.languages import Lang, get_language

DetectorFactory.seed = 0

# langdetect code -> registry code, where they differ
_DETECTED_ALIASES = {
    "zh-cn": "zh-CN",
    "zh-tw": "zh-TW",
    "he": "iw",
    "id": "in",
    "tl": "fil",
    "no": "nb",
}


def detect_source_language(texts: Sequence[str], fallback: Lang, *, max_chars: int = 2500) -> Lang:
    """Guess the language of ``texts``; ``fallback`` when unsure or unknown."""
    sample = _build_sample(texts, max_chars=max_chars)
    if not sample.strip():
        return fallback
    try:
        detected = detect(sample)
    except LangDetectException:
        return fallback
    try:
        return get_language(_DETECTED_ALIASES.get(detected, detected))
    except UnsupportedLanguageError:
        logger.debug(f"Detected language '{detected}' is not in the registry")
        return fallback


def _build_sample(texts: Sequence[str], *, max_chars: int) -> str:
    buffer: list[str] = []
    total = 0
    for text in texts:
        if not text:
            continue
        remaining = max_chars - total
        if remaining <= 0:
            break
        snippet = text.strip()
        if not snippet:
            continue
        if len(snippet) > remaining:
            snippet = snippet[:remaining]
        buffer.append(snippet)
        total += len(snippet)
    return "\n".join(buffer)
