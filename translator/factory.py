"""
Translator Factory

Append-only registry of translation backends keyed by their stable key
(the value persisted as "selected engine"), plus a builder that fills in
credentials from the settings.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Type

from config import SETTINGS
from errors import BackendNotFoundError

from .base import BackendDescriptor, BaseTranslator
from .deepl_api import DeepLTranslator
from .google import GoogleTranslator
from .openai_chat import ChatGPTTranslator


_REGISTRY: Dict[str, Type[BaseTranslator]] = {}


def register_translator(translator_cls: Type[BaseTranslator]) -> Type[BaseTranslator]:
    """Register a backend class. Keys cannot be replaced or removed."""
    key = translator_cls.key
    if key in _REGISTRY:
        raise ValueError(f"Translator key already registered: {key}")
    _REGISTRY[key] = translator_cls
    return translator_cls


def register_builtin_translators() -> None:
    for translator_cls in (GoogleTranslator, ChatGPTTranslator, DeepLTranslator):
        if translator_cls.key not in _REGISTRY:
            register_translator(translator_cls)


def get_translator_class(key: str) -> Type[BaseTranslator]:
    try:
        return _REGISTRY[key]
    except KeyError:
        raise BackendNotFoundError(key) from None


def get_available_engines() -> dict[str, str]:
    """Get available translation engines with display names."""
    return {key: cls.display_name for key, cls in _REGISTRY.items()}


def get_descriptors() -> List[BackendDescriptor]:
    return [cls().descriptor for cls in _REGISTRY.values()]


def build_translator(
    key: str,
    *,
    app_id: Optional[str] = None,
    app_key: Optional[str] = None,
    model: Optional[str] = None,
    timeout: Optional[float] = None,
) -> BaseTranslator:
    """Build a translator instance.

    Args:
        key: Registry key of the engine (Google, ChatGPT, DeepL)
        app_id: App ID for engines that need one
        app_key: API key (falls back to settings)
        model: Model name for model-parameterized engines
        timeout: Request timeout

    Raises:
        BackendNotFoundError: If no engine is registered under ``key``
    """
    translator_cls = get_translator_class(key)
    resolved_timeout = timeout or SETTINGS.translator.request_timeout

    if translator_cls is ChatGPTTranslator:
        return ChatGPTTranslator(
            app_key=app_key or SETTINGS.secrets.openai_api_key,
            model=model,
            timeout=resolved_timeout,
        )

    if translator_cls is DeepLTranslator:
        return DeepLTranslator(
            app_key=app_key or SETTINGS.secrets.deepl_api_key,
            timeout=resolved_timeout,
        )

    return translator_cls(app_id=app_id, app_key=app_key, timeout=resolved_timeout)


register_builtin_translators()
