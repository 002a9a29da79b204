"""Unit tests for the ai-chat-agent command line entry point."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from ai_chat_agent.config import Settings
from ai_chat_agent.conversation import CurrentDateTimeFunction, OpenAiProvider
from ai_chat_agent.main import build_orchestrator, cli_main

_REPLY = {"choices": [{"message": {"role": "assistant", "content": "Bonjour"}}]}


def test_build_orchestrator_wires_provider_and_functions(http) -> None:
    settings = Settings(_env_file=None).model_copy(update={"openai_api_key": "sk-test"})

    chat = build_orchestrator(settings, client=http.client)

    assert isinstance(chat.provider, OpenAiProvider)
    assert isinstance(chat.config.functions[0], CurrentDateTimeFunction)


def test_build_orchestrator_without_datetime() -> None:
    chat = build_orchestrator(Settings(_env_file=None), include_datetime=False)
    assert chat.config.functions == ()


def test_cli_prints_reply(monkeypatch, http, capsys) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    http.queue(200, _REPLY)

    with patch("ai_chat_agent.main.get_settings", return_value=Settings(_env_file=None)):
        with patch(
            "ai_chat_agent.main.create_provider",
            side_effect=lambda config, client=None: OpenAiProvider(config, client=http.client),
        ):
            cli_main(["Hello", "--system", "Be French.", "--no-datetime"])

    assert capsys.readouterr().out.strip() == "Bonjour"
    body = http.body()
    assert body["messages"][0] == {"role": "system", "content": "Be French."}
    assert "functions" not in body


def test_cli_reports_configuration_errors(capsys) -> None:
    with patch("ai_chat_agent.main.get_settings", return_value=Settings(_env_file=None)):
        with pytest.raises(SystemExit) as excinfo:
            cli_main(["Hello", "--provider", "bogus"])

    assert excinfo.value.code == 1
    assert "Unsupported AI provider: bogus" in capsys.readouterr().err
