from __future__ import annotations

import json
import urllib.parse

import pytest

from errors import MissingCredentialError, UnsupportedLanguageError
from translator import ChatGPTTranslator, DeepLTranslator, GoogleTranslator
from translator.base import TranslationRequest
from translator.languages import AUTO, get_language
from translator.openai_chat import escape_text

EN = get_language("en")
ES = get_language("es")


def test_chatgpt_request_carries_rules_and_bearer_token():
    translator = ChatGPTTranslator(app_key="sk-test", model="gpt-test", base_url="https://llm.test/v1/")

    request = translator.build_request(TranslationRequest(text="Hello", source_lang=EN, target_lang=ES))
    body = json.loads(request.body)

    assert request.method == "POST"
    assert request.url == "https://llm.test/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert request.headers["Content-Type"] == "application/json"
    assert body["model"] == "gpt-test"
    assert [message["role"] for message in body["messages"]] == ["system", "user"]
    assert "Spanish" in body["messages"][0]["content"]
    assert "Android app UI" in body["messages"][0]["content"]
    assert body["messages"][1]["content"] == "Text to translate: Hello"


def test_chatgpt_escapes_control_characters():
    assert escape_text('Say "hi"\nthen\tgo \\ home') == 'Say \\"hi\\"\\nthen\\tgo \\\\ home'


def test_chatgpt_parses_choice_content():
    translator = ChatGPTTranslator(app_key="sk-test")
    response = json.dumps({"choices": [{"message": {"role": "assistant", "content": " Hola \n"}}]})

    assert translator.parse_result(EN, ES, "Hello", response) == "Hola"


@pytest.mark.parametrize(
    "response",
    ["not json at all", json.dumps({"choices": []}), json.dumps({"error": {"message": "quota"}}), "[]"],
)
def test_chatgpt_malformed_response_returns_original(response):
    translator = ChatGPTTranslator(app_key="sk-test")

    assert translator.parse_result(EN, ES, "Hello", response) == "Hello"


@pytest.mark.parametrize(
    "translator, response",
    [
        (ChatGPTTranslator(app_key="k"), json.dumps({"choices": [{"message": {"content": 5}}]})),
        (ChatGPTTranslator(app_key="k"), json.dumps({"choices": ["Hola"]})),
        (DeepLTranslator(app_key="k"), json.dumps({"translations": ["Hola"]})),
        (DeepLTranslator(app_key="k"), json.dumps({"translations": [{"text": 7}]})),
        (GoogleTranslator(), json.dumps([[5, 6]])),
        (GoogleTranslator(), json.dumps({"sentences": "Hola"})),
    ],
    ids=["chatgpt-number", "chatgpt-string-choice", "deepl-string", "deepl-number", "google-numbers", "google-dict"],
)
def test_unexpected_response_shape_returns_original(translator, response):
    assert translator.parse_result(EN, ES, "Hello", response) == "Hello"
    assert translator.try_parse_result(EN, ES, "Hello", response) is None


@pytest.mark.parametrize(
    "translator",
    [ChatGPTTranslator(app_key="k"), GoogleTranslator(), DeepLTranslator(app_key="k")],
    ids=["chatgpt", "google", "deepl"],
)
def test_top_level_translation_field_is_understood_by_every_backend(translator):
    assert translator.parse_result(EN, ES, "Hello", json.dumps({"translation": "Hola"})) == "Hola"


def test_chatgpt_requires_api_key():
    with pytest.raises(MissingCredentialError) as excinfo:
        ChatGPTTranslator(app_key=None).check_credentials()

    assert excinfo.value.field == "API Key"


def test_google_request_puts_language_pair_in_query():
    translator = GoogleTranslator()

    request = translator.build_request(TranslationRequest(text="Hello & bye", source_lang=AUTO, target_lang=ES))
    query = urllib.parse.parse_qs(urllib.parse.urlparse(request.url).query)

    assert query == {"client": ["gtx"], "sl": ["auto"], "tl": ["es"], "dt": ["t"]}
    assert urllib.parse.parse_qs(request.body.decode("utf-8")) == {"q": ["Hello & bye"]}
    assert request.headers["Content-Type"].startswith("application/x-www-form-urlencoded")


def test_google_joins_sentence_rows():
    translator = GoogleTranslator()
    response = json.dumps([[["Hola. ", "Hello. ", None], ["Adiós.", "Bye.", None]], None, "en"])

    assert translator.parse_result(EN, ES, "Hello. Bye.", response) == "Hola. Adiós."


def test_google_needs_no_credentials():
    GoogleTranslator().check_credentials()


def test_deepl_free_key_uses_free_endpoint():
    translator = DeepLTranslator(app_key="abc:fx")

    request = translator.build_request(TranslationRequest(text="Hello", source_lang=EN, target_lang=ES))

    assert request.url == DeepLTranslator.FREE_API_URL
    assert request.headers["Authorization"] == "DeepL-Auth-Key abc:fx"
    assert json.loads(request.body) == {"text": ["Hello"], "target_lang": "ES", "source_lang": "EN"}


def test_deepl_pro_key_and_auto_source():
    translator = DeepLTranslator(app_key="abc")

    request = translator.build_request(
        TranslationRequest(text="Hello", source_lang=AUTO, target_lang=get_language("pt-BR"))
    )

    assert request.url == DeepLTranslator.PRO_API_URL
    assert json.loads(request.body) == {"text": ["Hello"], "target_lang": "PT-BR"}


def test_deepl_parses_first_translation():
    translator = DeepLTranslator(app_key="abc")
    response = json.dumps({"translations": [{"detected_source_language": "EN", "text": "Hola"}]})

    assert translator.parse_result(EN, ES, "Hello", response) == "Hola"


def test_deepl_rejects_languages_it_cannot_translate():
    translator = DeepLTranslator(app_key="abc")

    translator.ensure_supported(get_language("de"))
    with pytest.raises(UnsupportedLanguageError):
        translator.ensure_supported(get_language("hi"))


def test_descriptor_describes_credentials():
    descriptor = DeepLTranslator().descriptor

    assert descriptor.key == "DeepL"
    assert descriptor.requires_app_key is True
    assert descriptor.requires_app_id is False
    assert descriptor.app_key_label == "Auth Key"
    assert get_language("ja") in descriptor.supported_languages
