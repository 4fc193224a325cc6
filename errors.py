"""
Localizer Exceptions

Run-level errors (configuration, parsing, writing) propagate to the caller.
TranslationFailure is entry-level and is absorbed by the orchestrator.
"""
from __future__ import annotations

from pathlib import Path


class LocalizerError(Exception):
    """Base class for every error raised by the localizer."""


class ParseError(LocalizerError):
    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class EmptyDocumentError(LocalizerError):
    """The document has no root element. Callers treat it as zero entries."""

    def __init__(self, message: str = "Document has no root element", *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class BackendNotFoundError(LocalizerError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown translation backend: {key}")
        self.key = key


class UnsupportedLanguageError(LocalizerError):
    def __init__(self, code: str, backend: str | None = None) -> None:
        if backend:
            message = f"Language '{code}' is not supported by {backend}"
        else:
            message = f"Unknown language code: {code}"
        super().__init__(message)
        self.code = code
        self.backend = backend


class MissingCredentialError(LocalizerError):
    def __init__(self, backend: str, field: str) -> None:
        super().__init__(f"{backend} requires {field}. Please configure it.")
        self.backend = backend
        self.field = field


class TranslationFailure(LocalizerError):
    """One entry could not be translated; its original text is kept."""

    def __init__(self, reason: str, *, retryable: bool = False, status: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.retryable = retryable
        self.status = status


class WriteError(LocalizerError):
    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class RunCancelledError(LocalizerError):
    """The run observed its cancel event and stopped before writing."""
