"""
AI Chat Agent - command line entry point.

Sends one message through the configured provider and prints the reply.
Useful for checking credentials and function wiring outside the panel.

Configuration comes from the environment (see ``ai_chat_agent.config``);
command-line flags override the provider, model and system message.
"""

from __future__ import annotations

import argparse
import logging
import sys

import httpx

from ai_chat_agent.config import Settings, get_settings
from ai_chat_agent.conversation import (
    ChatAgentError,
    ChatOrchestrator,
    CurrentDateTimeFunction,
    create_provider,
)

logger = logging.getLogger(__name__)


def build_orchestrator(
    settings: Settings,
    include_datetime: bool = True,
    client: httpx.Client | None = None,
) -> ChatOrchestrator:
    """Wire a ``ChatOrchestrator`` from *settings*.

    Args:
        settings: Loaded application settings.
        include_datetime: Register the built-in ``get_current_datetime``
            function.
        client: Optional ``httpx.Client`` handed to the provider.
    """
    functions = [CurrentDateTimeFunction()] if include_datetime else []
    provider = create_provider(settings.provider_config(), client=client)
    return ChatOrchestrator(
        provider=provider,
        config=settings.orchestration_config(functions=functions),
    )


def cli_main(argv: list[str] | None = None) -> None:
    """Entry point for the ai-chat-agent console script."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Send a message to the AI chat agent and print the reply"
    )
    parser.add_argument("message", help="Message to send")
    parser.add_argument(
        "--provider",
        default=settings.provider,
        help=f"AI provider: openai, azure, azure-openai (default: {settings.provider})",
    )
    parser.add_argument(
        "--model",
        default=settings.model,
        help=f"Model name (default: {settings.model})",
    )
    parser.add_argument(
        "--system",
        default=None,
        help="System message overriding AI_CHAT_AGENT_SYSTEM_MESSAGE",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )
    parser.add_argument(
        "--no-datetime",
        action="store_true",
        help="Do not register the built-in get_current_datetime function",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    overrides = {"provider": args.provider, "model": args.model}
    if args.system is not None:
        overrides["system_message"] = args.system
    settings = settings.model_copy(update=overrides)
    logger.debug("Using provider %s, model %s", settings.provider, settings.model)

    if not settings.enabled:
        print("AI chat agent is disabled (AI_CHAT_AGENT_ENABLED=false).", file=sys.stderr)
        sys.exit(1)

    try:
        orchestrator = build_orchestrator(
            settings, include_datetime=not args.no_datetime
        )
        orchestrator.add_message(args.message).send()
    except ChatAgentError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    reply = orchestrator.latest_message()
    print(reply.content if reply else "")


if __name__ == "__main__":
    cli_main()
