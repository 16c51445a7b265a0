"""
Command Line Tests
------------------
Tests for the deepl command line front end with a mocked API.
"""

import io

import httpx
import pytest

import main
from conftest import RecordingTransport
from deepl_api import DeepL, Formality, SplitSentences


def route(request: httpx.Request) -> httpx.Response:
    """A tiny fake of the three endpoints."""
    if request.url.path == "/v2/usage":
        return httpx.Response(200, json={"character_limit": 500000, "character_count": 42})
    if request.url.path == "/v2/languages":
        if request.url.params["type"] == "source":
            return httpx.Response(200, json=[{"language": "DE", "name": "German"}])
        return httpx.Response(200, json=[{"language": "EN-US", "name": "English (American)"}])
    if request.url.path == "/v2/translate":
        return httpx.Response(200, json={"translations": [
            {"detected_source_language": "DE", "text": "Hello world"}
        ]})
    return httpx.Response(404, text="not found")


@pytest.fixture
def transport(monkeypatch, tmp_path):
    """Route the CLI's client through a RecordingTransport."""
    recording = RecordingTransport(route)
    monkeypatch.setenv("DEEPL_API_KEY", "cli-key")
    monkeypatch.setattr(
        main, "create_client",
        lambda config: DeepL.from_config(config, transport=recording),
    )
    monkeypatch.chdir(tmp_path)
    return recording


class TestCommands:
    """Tests for each sub-command."""

    def test_usage_information(self, transport, capsys):
        assert main.main(["usage-information"]) == 0

        out = capsys.readouterr().out
        assert "500000" in out
        assert "42" in out
        assert transport.requests[0].url.host == "api.deepl.com"

    def test_free_tier_flag(self, transport):
        assert main.main(["--free-tier", "usage-information"]) == 0

        assert transport.requests[0].url.host == "api-free.deepl.com"

    def test_languages(self, transport, capsys):
        assert main.main(["languages"]) == 0

        out = capsys.readouterr().out
        assert "German" in out
        assert "English (American)" in out
        assert [r.url.params["type"] for r in transport.requests] == ["source", "target"]

    def test_translate_stdin_to_stdout(self, transport, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("Hallo Welt"))

        assert main.main(["translate", "-t", "EN-US"]) == 0

        assert capsys.readouterr().out == "Hello world\n"
        params = transport.requests[0].url.params
        assert params.get_list("text") == ["Hallo Welt"]
        assert "source_lang" not in params
        assert "formality" not in params

    def test_translate_files_and_options(self, transport, tmp_path):
        (tmp_path / "in.txt").write_text("Hallo Welt", encoding="utf-8")

        exit_code = main.main([
            "translate",
            "--source-language", "DE",
            "--target-language", "EN-US",
            "--input-file", "in.txt",
            "--output-file", "out.txt",
            "--formality", "less",
            "--preserve-formatting",
            "--split-sentences", "punctuation",
        ])

        assert exit_code == 0
        assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "Hello world"
        params = transport.requests[0].url.params
        assert params["source_lang"] == "DE"
        assert params["formality"] == "less"
        assert params["preserve_formatting"] == "1"
        assert params["split_sentences"] == "nonewlines"

    def test_empty_input(self, transport, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("  \n"))

        assert main.main(["translate", "-t", "EN-US"]) == 1
        assert transport.requests == []

    def test_target_language_required(self, transport):
        with pytest.raises(SystemExit) as exc_info:
            main.main(["translate"])

        assert exc_info.value.code == 2


class TestFailures:
    """Errors become exit status 1 with a message on stderr."""

    def test_missing_api_key(self, monkeypatch, tmp_path, capsys):
        monkeypatch.chdir(tmp_path)

        assert main.main(["usage-information"]) == 1
        assert "DEEPL_API_KEY" in capsys.readouterr().err

    def test_api_error(self, monkeypatch, tmp_path, capsys):
        recording = RecordingTransport(lambda request: httpx.Response(403, json={}))
        monkeypatch.setenv("DEEPL_API_KEY", "bad-key")
        monkeypatch.setattr(
            main, "create_client",
            lambda config: DeepL.from_config(config, transport=recording),
        )
        monkeypatch.chdir(tmp_path)

        assert main.main(["usage-information"]) == 1
        assert "Authorization failed" in capsys.readouterr().err

    def test_unwritable_log_file(self, transport, tmp_path, capsys):
        (tmp_path / "not-a-dir").write_text("", encoding="utf-8")

        exit_code = main.main(["--log-file", "not-a-dir/deepl.log", "usage-information"])

        assert exit_code == 1
        assert "Error" in capsys.readouterr().err
        assert transport.requests == []

    def test_missing_input_file(self, transport, capsys):
        assert main.main(["translate", "-t", "DE", "-i", "nope.txt"]) == 1
        assert transport.requests == []


class TestBuildOptions:
    """Only flags that were given become options."""

    def parse(self, *argv):
        return main.build_parser().parse_args(["translate", "-t", "DE", *argv])

    def test_no_flags(self):
        assert main.build_options(self.parse()) is None

    def test_formality_only(self):
        options = main.build_options(self.parse("--formality", "more"))

        assert options.formality == Formality.MORE
        assert options.split_sentences is None
        assert options.preserve_formatting is None

    def test_split_sentences_choice(self):
        options = main.build_options(self.parse("--split-sentences", "none"))

        assert options.split_sentences == SplitSentences.NONE
