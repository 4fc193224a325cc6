import pytest

from config import SETTINGS
from errors import BackendNotFoundError, MissingCredentialError
from translator import ChatGPTTranslator, DeepLTranslator, GoogleTranslator
from translator.factory import (
    build_translator,
    get_available_engines,
    get_descriptors,
    get_translator_class,
    register_translator,
)


def test_builtin_engines_are_registered_in_order():
    assert get_available_engines() == {
        "Google": "Google Translate",
        "ChatGPT": "OpenAI ChatGPT",
        "DeepL": "DeepL API",
    }
    assert [descriptor.key for descriptor in get_descriptors()] == ["Google", "ChatGPT", "DeepL"]


def test_lookup_by_key():
    assert get_translator_class("DeepL") is DeepLTranslator


def test_unknown_key_raises():
    with pytest.raises(BackendNotFoundError) as excinfo:
        get_translator_class("Bing")

    assert excinfo.value.key == "Bing"


def test_keys_cannot_be_replaced():
    class ImpostorTranslator(GoogleTranslator):
        pass

    with pytest.raises(ValueError):
        register_translator(ImpostorTranslator)

    assert get_translator_class("Google") is GoogleTranslator


def test_build_translator_prefers_explicit_key(monkeypatch):
    monkeypatch.setattr(SETTINGS.secrets, "openai_api_key", "from-env")

    translator = build_translator("ChatGPT", app_key="explicit", model="gpt-test")

    assert isinstance(translator, ChatGPTTranslator)
    assert translator.app_key == "explicit"
    assert translator.model == "gpt-test"


def test_build_translator_falls_back_to_settings(monkeypatch):
    monkeypatch.setattr(SETTINGS.secrets, "deepl_api_key", "env-key:fx")

    translator = build_translator("DeepL")

    assert translator.app_key == "env-key:fx"
    assert translator.plan == "free"
    assert translator.timeout == SETTINGS.translator.request_timeout


def test_missing_secret_surfaces_as_credential_error(monkeypatch):
    monkeypatch.setattr(SETTINGS.secrets, "openai_api_key", None)

    translator = build_translator("ChatGPT")

    with pytest.raises(MissingCredentialError):
        translator.check_credentials()
