"""
Date/time function for the chat agent.

Returns the current date and time, optionally in a named timezone.  It needs
no external API and doubles as a reference ``ChatFunction`` implementation.

If an unrecognised timezone key is supplied the result falls back to UTC and
includes an ``"error"`` field describing the problem.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ai_chat_agent.conversation.functions.registry import ChatFunction

logger = logging.getLogger(__name__)


class CurrentDateTimeFunction(ChatFunction):
    """Returns the current date and time, with optional timezone support."""

    name = "get_current_datetime"
    description = (
        "Look up what time it is right now. Use this whenever the answer "
        "depends on today's date, the current time or the weekday. "
        "Pass a timezone to get local time somewhere; otherwise UTC is used."
    )
    parameters = {
        "type": "object",
        "properties": {
            "timezone": {
                "type": "string",
                "description": (
                    "Timezone database key for the wanted location, "
                    "for instance 'Australia/Sydney' or 'America/Denver'. "
                    "Leave out to report UTC."
                ),
            }
        },
        "required": [],
    }

    def execute(self, args: dict[str, Any]) -> dict[str, Any]:
        """Return the current date and time.

        Args:
            args: May contain ``timezone``; missing or empty means UTC.

        Returns:
            A dict with ``datetime_iso``, ``date``, ``time``, ``timezone``,
            ``day_of_week`` and ``unix_timestamp`` keys, plus ``error`` when
            the requested timezone was invalid.
        """
        tz, tz_error = self._resolve_timezone(args.get("timezone") or None)
        now = datetime.now(tz=tz)

        result: dict[str, Any] = {
            "datetime_iso": now.isoformat(timespec="seconds"),
            "date": now.strftime("%Y-%m-%d"),
            "time": now.strftime("%H:%M:%S"),
            "timezone": str(tz),
            "day_of_week": now.strftime("%A"),
            "unix_timestamp": int(now.timestamp()),
        }
        if tz_error:
            result["error"] = tz_error
        return result

    def _resolve_timezone(self, timezone_name: str | None) -> tuple[Any, str | None]:
        if not timezone_name:
            return timezone.utc, None
        try:
            return ZoneInfo(timezone_name), None
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone: %r; falling back to UTC", timezone_name)
            return timezone.utc, (
                f"Unknown timezone {timezone_name!r}; showing UTC instead."
            )
