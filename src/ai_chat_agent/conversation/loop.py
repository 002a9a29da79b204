"""
ChatOrchestrator: the function-calling conversation engine.

Builds the chat-completions payload from the conversation, sends it through
an ``AiProvider``, executes any function the model asks for, feeds the
result back, and repeats until the model produces a final text answer.

The loop is synchronous: one provider call is in flight at a time and
function execution happens between calls.  It is bounded by
``OrchestrationConfig.max_iterations`` provider calls per ``send()``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Mapping

from ai_chat_agent.config import OrchestrationConfig
from ai_chat_agent.conversation.functions.registry import (
    dispatch_function_call,
    format_functions,
    resolve_function_call,
)
from ai_chat_agent.conversation.messages import Conversation, FunctionCall, Message
from ai_chat_agent.conversation.providers import (
    AiProvider,
    ChatAgentError,
    ConfigurationError,
    ProviderError,
)

logger = logging.getLogger(__name__)


class MaxIterationsExceeded(ChatAgentError):
    """Raised when the model keeps requesting functions past the iteration cap.

    Attributes:
        max_iterations: The cap that was hit.
    """

    def __init__(self, max_iterations: int) -> None:
        super().__init__(
            f"ChatOrchestrator exceeded max_iterations={max_iterations} "
            "without reaching a final response. Check for function call loops."
        )
        self.max_iterations = max_iterations


class ChatOrchestrator:
    """Runs the request/function-call loop for one chat session.

    Typical usage::

        orchestrator = ChatOrchestrator(
            provider=create_provider(settings.provider_config()),
            config=settings.orchestration_config(functions=[LookupOrderFunction()]),
        )
        reply = orchestrator.add_message("Where is order 42?").send().latest_message()

    Attributes:
        provider: The provider adapter used for every request.
        config: Resolved chat behaviour.
        conversation: The session's message log.
    """

    def __init__(
        self,
        provider: AiProvider,
        config: OrchestrationConfig | None = None,
        conversation: Conversation | None = None,
    ) -> None:
        self.provider = provider
        self.config = config or OrchestrationConfig()
        self.conversation = conversation if conversation is not None else Conversation()

    @property
    def messages(self) -> tuple[Message, ...]:
        return self.conversation.messages

    def add_message(self, content: str, role: str = "user") -> "ChatOrchestrator":
        """Append a message to the conversation."""
        self.conversation.append(Message(role=role or "user", content=content))
        return self

    def load_messages(
        self, messages: Iterable[Message | Mapping[str, Any]]
    ) -> "ChatOrchestrator":
        """Replace the conversation history with *messages*."""
        self.conversation = Conversation(messages)
        return self

    def latest_message(self) -> Message | None:
        return self.conversation.latest()

    def build_payload(self) -> dict[str, Any]:
        """Assemble the chat-completions request body for the current history."""
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": self.conversation.serialize_for_request(
                self.config.system_message
            ),
        }
        if self.config.temperature:
            payload["temperature"] = self.config.temperature
        if self.config.max_tokens:
            payload["max_tokens"] = self.config.max_tokens
        if self.config.functions:
            payload["functions"] = format_functions(self.config.functions)
            payload["function_call"] = resolve_function_call(self.config.function_call)
        return payload

    def send(self) -> "ChatOrchestrator":
        """Send the conversation and run function calls until a final answer.

        The final assistant message is appended to the conversation; read it
        with ``latest_message()``.

        Raises:
            ConfigurationError: If the agent is disabled or the provider is
                misconfigured.
            ProviderError: If the provider call fails.
            MaxIterationsExceeded: If the model is still requesting functions
                after ``max_iterations`` calls.
        """
        if not self.config.enabled:
            raise ConfigurationError("The AI chat agent is disabled.")

        turn_start = time.monotonic()

        for iteration in range(self.config.max_iterations):
            logger.debug(
                "Chat loop iteration %d/%d", iteration + 1, self.config.max_iterations
            )
            message = self._request(self.build_payload())

            raw_call = message.get("function_call")
            if raw_call is not None:
                function_call = FunctionCall.from_dict(raw_call)
                self.conversation.append(Message.function_request(function_call))
                result = dispatch_function_call(function_call, self.config.functions)
                self.conversation.append(
                    Message.function_result(function_call.name, result)
                )
                continue

            self.conversation.append(Message.assistant(message.get("content") or ""))
            logger.info(
                "Chat loop complete after %d iteration(s) in %.3fs",
                iteration + 1,
                time.monotonic() - turn_start,
            )
            return self

        raise MaxIterationsExceeded(self.config.max_iterations)

    def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Call the provider and return the first choice's message."""
        try:
            response = self.provider.make_request(payload)
            return _first_choice_message(response, self.provider.name)
        except (ConfigurationError, ProviderError) as exc:
            logger.error(
                "AI provider error (%s): %s", self.provider.__class__.__name__, exc
            )
            raise


def _first_choice_message(response: Any, provider: str) -> dict[str, Any]:
    try:
        message = response["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ProviderError(
            "Malformed response: missing choices[0].message", provider=provider
        ) from exc
    if not isinstance(message, dict):
        raise ProviderError(
            "Malformed response: choices[0].message is not an object",
            provider=provider,
        )
    function_call = message.get("function_call")
    if function_call is not None and not isinstance(function_call, dict):
        raise ProviderError(
            "Malformed response: function_call is not an object", provider=provider
        )
    return message
