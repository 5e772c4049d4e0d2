"""Unit tests for the command-line interface."""

import json
from pathlib import Path

import pytest

from gmail_summarizer import cli
from gmail_summarizer.config import Settings
from gmail_summarizer.exceptions import GmailAPIError
from gmail_summarizer.models import EmailSummary


class FakeWorkflow:
    result: list[EmailSummary] = []
    error: Exception | None = None

    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs

    async def run(self) -> list[EmailSummary]:
        if FakeWorkflow.error is not None:
            raise FakeWorkflow.error
        return FakeWorkflow.result


@pytest.fixture
def token_file(tmp_path: Path) -> Path:
    path = tmp_path / "token.json"
    path.write_text(
        json.dumps(
            {
                "token": "ya29.access",
                "refresh_token": "1//refresh",
                "scopes": ["https://www.googleapis.com/auth/gmail.readonly"],
                "expiry": "2026-01-01T00:00:00+00:00",
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def patched(monkeypatch: pytest.MonkeyPatch, mock_settings):
    monkeypatch.setattr(cli, "get_settings", lambda: mock_settings)
    monkeypatch.setattr("gmail_summarizer.agent.summarizer.SummarizerWorkflow", FakeWorkflow)
    FakeWorkflow.result = []
    FakeWorkflow.error = None
    return FakeWorkflow


def test_missing_token_file(patched, tmp_path: Path, capsys) -> None:
    code = cli.main(["summarize", "--token-file", str(tmp_path / "absent.json")])

    assert code == 1
    assert "Token file not found" in capsys.readouterr().err


def test_summarize_prints_summaries(patched, token_file: Path, capsys) -> None:
    patched.result = [
        EmailSummary(sender="Jane Doe", subject="Quarterly report", summary="Review by Friday.", date="Jan 5, 3:07 PM")
    ]

    code = cli.main(["summarize", "--token-file", str(token_file)])

    out = capsys.readouterr().out
    assert code == 0
    assert "Jan 5, 3:07 PM\tJane Doe\tQuarterly report" in out
    assert "Review by Friday." in out


def test_summarize_json_output(patched, token_file: Path, capsys) -> None:
    patched.result = [EmailSummary(sender="Jane Doe", subject="Hi", summary="Says hi.", date="Jan 5, 3:07 PM")]

    code = cli.main(["summarize", "--token-file", str(token_file), "--json"])

    assert code == 0
    assert json.loads(capsys.readouterr().out) == [
        {"from": "Jane Doe", "subject": "Hi", "summary": "Says hi.", "date": "Jan 5, 3:07 PM"}
    ]


def test_summarize_empty_mailbox(patched, token_file: Path, capsys) -> None:
    assert cli.main(["summarize", "--token-file", str(token_file)]) == 0
    assert "No emails found." in capsys.readouterr().out


def test_summarize_failure_returns_nonzero(patched, token_file: Path, capsys) -> None:
    patched.error = GmailAPIError("backend error")

    assert cli.main(["summarize", "--token-file", str(token_file)]) == 1
    assert "Failed to summarize emails" in capsys.readouterr().err


def test_json_output_is_not_mixed_with_log_events(patched, token_file: Path, capsys) -> None:
    patched.result = [EmailSummary(sender="Jane Doe", subject="Hi", summary="Says hi.", date="Jan 5, 3:07 PM")]

    cli.main(["summarize", "--token-file", str(token_file), "--json"])

    captured = capsys.readouterr()
    assert json.loads(captured.out)[0]["subject"] == "Hi"
    assert "gmail_summarizer_started" in captured.err
    assert "gmail_summarizer_started" not in captured.out


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", '{"expiry": "yesterday"}'])
def test_malformed_token_file_returns_nonzero(patched, tmp_path: Path, capsys, content) -> None:
    path = tmp_path / "token.json"
    path.write_text(content, encoding="utf-8")

    assert cli.main(["summarize", "--token-file", str(path)]) == 1
    assert "Failed to summarize emails" in capsys.readouterr().err


def test_missing_llm_key_returns_nonzero(
    patched, token_file: Path, capsys, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("GMAIL_SUMMARIZER_OPENAI_API_KEY", raising=False)
    settings = Settings(_env_file=None)
    monkeypatch.setattr(cli, "get_settings", lambda: settings)

    assert cli.main(["summarize", "--token-file", str(token_file)]) == 1
    assert "Failed to summarize emails" in capsys.readouterr().err
