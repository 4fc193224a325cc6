import json
import urllib.parse

from typer.testing import CliRunner

import cli
from translator.transport import HttpRequest, HttpResponse

from .conftest import SCENARIO_STRINGS, StubTransport

runner = CliRunner()


def _google_handler(request: HttpRequest) -> HttpResponse:
    text = urllib.parse.parse_qs(request.body.decode("utf-8"))["q"][0]
    return HttpResponse(status=200, body=json.dumps([[["x:" + text, text, None]], None, "en"]))


def test_engines_lists_registered_backends():
    result = runner.invoke(cli.app, ["engines"])

    assert result.exit_code == 0
    for key in ("Google", "ChatGPT", "DeepL"):
        assert key in result.output


def test_languages_for_engine():
    result = runner.invoke(cli.app, ["languages", "--engine", "DeepL"])

    assert result.exit_code == 0
    assert "German (de)" in result.output
    assert "Hindi" not in result.output


def test_languages_for_unknown_engine_fails():
    result = runner.invoke(cli.app, ["languages", "--engine", "Nope"])

    assert result.exit_code == 1


def test_translate_writes_target_files(tmp_path, monkeypatch):
    source = tmp_path / "res" / "values" / "strings.xml"
    source.parent.mkdir(parents=True)
    source.write_text(SCENARIO_STRINGS, encoding="utf-8")
    transport = StubTransport(_google_handler)
    monkeypatch.setattr(cli, "AiohttpTransport", lambda **kwargs: transport)

    result = runner.invoke(
        cli.app,
        ["translate", str(source), "-t", "es", "-t", "fr", "--engine", "Google", "--source", "en", "--no-memory"],
    )

    assert result.exit_code == 0, result.output
    for folder in ("values-es", "values-fr"):
        content = (tmp_path / "res" / folder / "strings.xml").read_text(encoding="utf-8")
        assert '<string name="app_name">x:My App</string>' in content
        assert "debug_label" not in content


def test_translate_rejects_unknown_language(tmp_path):
    source = tmp_path / "res" / "values" / "strings.xml"
    source.parent.mkdir(parents=True)
    source.write_text(SCENARIO_STRINGS, encoding="utf-8")

    result = runner.invoke(cli.app, ["translate", str(source), "-t", "xx", "--engine", "Google", "--no-memory"])

    assert result.exit_code == 1
