"""
Translation Engines

Supported engines:
- Google Translate (free web endpoint)
- OpenAI ChatGPT (chat completions, API key)
- DeepL API (free and pro plans, auth key)
"""
from .base import BackendDescriptor, BaseTranslator, TranslationRequest
from .languages import AUTO, LANGUAGES, Lang, get_language, get_languages
from .transport import AiohttpTransport, HttpRequest, HttpResponse
from .google import GoogleTranslator
from .openai_chat import ChatGPTTranslator
from .deepl_api import DeepLTranslator
from .factory import (
    build_translator,
    get_available_engines,
    get_descriptors,
    get_translator_class,
    register_translator,
)
from .orchestrator import EntryOutcome, EntryStatus, TranslationOrchestrator

__all__ = [
    "BackendDescriptor",
    "BaseTranslator",
    "TranslationRequest",
    "AUTO",
    "LANGUAGES",
    "Lang",
    "get_language",
    "get_languages",
    "AiohttpTransport",
    "HttpRequest",
    "HttpResponse",
    "GoogleTranslator",
    "ChatGPTTranslator",
    "DeepLTranslator",
    "build_translator",
    "get_available_engines",
    "get_descriptors",
    "get_translator_class",
    "register_translator",
    "EntryOutcome",
    "EntryStatus",
    "TranslationOrchestrator",
]
