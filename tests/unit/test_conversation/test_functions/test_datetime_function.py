"""Unit tests for ai_chat_agent.conversation.functions.datetime_function."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from ai_chat_agent.conversation.functions.datetime_function import (
    CurrentDateTimeFunction,
)
from ai_chat_agent.conversation.functions.registry import (
    ChatFunction,
    dispatch_function_call,
)
from ai_chat_agent.conversation.messages import FunctionCall

_FIXED_UTC = datetime(2026, 2, 20, 14, 30, 0, tzinfo=timezone.utc)


class TestCurrentDateTimeSchema:
    def test_is_chat_function(self) -> None:
        assert isinstance(CurrentDateTimeFunction(), ChatFunction)

    def test_schema_shape(self) -> None:
        schema = CurrentDateTimeFunction().to_schema()
        assert schema["name"] == "get_current_datetime"
        assert "UTC" in schema["description"]
        assert "timezone" in schema["parameters"]["properties"]
        # timezone is optional
        assert "timezone" not in schema["parameters"]["required"]


class TestExecute:
    def test_utc_by_default(self) -> None:
        with patch(
            "ai_chat_agent.conversation.functions.datetime_function.datetime"
        ) as mock_dt:
            mock_dt.now.return_value = _FIXED_UTC
            result = CurrentDateTimeFunction().execute({})

        assert result["date"] == "2026-02-20"
        assert result["time"] == "14:30:00"
        assert result["day_of_week"] == "Friday"
        assert result["datetime_iso"] == "2026-02-20T14:30:00+00:00"
        assert result["unix_timestamp"] == int(_FIXED_UTC.timestamp())
        assert "error" not in result

    def test_named_timezone(self) -> None:
        try:
            ZoneInfo("Europe/Paris")
        except ZoneInfoNotFoundError:
            pytest.skip("tz database not installed")
        result = CurrentDateTimeFunction().execute({"timezone": "Europe/Paris"})
        assert result["timezone"] == "Europe/Paris"
        assert "error" not in result

    def test_unknown_timezone_falls_back_to_utc(self) -> None:
        result = CurrentDateTimeFunction().execute({"timezone": "Mars/Olympus_Mons"})
        assert result["timezone"] == "UTC"
        assert "Mars/Olympus_Mons" in result["error"]

    def test_dispatch_returns_json(self) -> None:
        result = dispatch_function_call(
            FunctionCall("get_current_datetime", "{}"), [CurrentDateTimeFunction()]
        )
        assert json.loads(result)["timezone"] == "UTC"
