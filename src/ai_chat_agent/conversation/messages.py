"""
Conversation state for the AI chat agent.

A ``Conversation`` is an ordered, append-only log of role-tagged
``Message`` objects.  It knows how each role is serialised into the
chat-completions ``messages`` array:

- ``function`` messages emit ``{role, name, content}``.
- ``assistant`` messages carrying a function call emit
  ``{role, function_call, content: None}``.
- Everything else emits ``{role, content}`` with ``content`` defaulting to
  an empty string.

A conversation belongs to a single chat session; appends are not guarded
against concurrent access.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Literal, Mapping

Role = Literal["system", "user", "assistant", "function"]

DEFAULT_ROLE: Role = "user"


@dataclass(frozen=True)
class FunctionCall:
    """A function invocation requested by the model.

    Attributes:
        name: Name of the requested function.
        arguments: JSON-encoded argument object, exactly as the model sent it.
    """

    name: str
    arguments: str = "{}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FunctionCall":
        arguments = data.get("arguments")
        return cls(
            name=data.get("name") or "",
            arguments=arguments if arguments is not None else "{}",
        )

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "arguments": self.arguments}


@dataclass(frozen=True)
class Message:
    """One turn in a conversation.

    ``content`` is ``None`` on assistant messages that request a function
    call; ``name`` identifies the producing function on ``function``
    messages.
    """

    role: str = DEFAULT_ROLE
    content: str | None = ""
    function_call: FunctionCall | None = None
    name: str | None = None

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role="assistant", content=content)

    @classmethod
    def function_request(cls, function_call: FunctionCall) -> "Message":
        """Assistant turn recording a function call (no text content)."""
        return cls(role="assistant", content=None, function_call=function_call)

    @classmethod
    def function_result(cls, name: str, content: str) -> "Message":
        """Result of executing function *name*, fed back to the model."""
        return cls(role="function", content=content, name=name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        """Build a message from an OpenAI-style dict; role defaults to ``user``."""
        raw_call = data.get("function_call")
        return cls(
            role=data.get("role") or DEFAULT_ROLE,
            content=data.get("content"),
            function_call=FunctionCall.from_dict(raw_call) if raw_call else None,
            name=data.get("name"),
        )

    def to_request_dict(self) -> dict[str, Any]:
        """Serialise for the outbound ``messages`` array."""
        if self.role == "function":
            return {
                "role": self.role,
                "name": self.name or "",
                "content": self.content if self.content is not None else "",
            }
        if self.role == "assistant" and self.function_call is not None:
            return {
                "role": self.role,
                "function_call": self.function_call.to_dict(),
                "content": None,
            }
        return {
            "role": self.role,
            "content": self.content if self.content is not None else "",
        }


class Conversation:
    """Ordered, append-only message log for one chat session."""

    def __init__(self, messages: Iterable[Message | Mapping[str, Any]] = ()) -> None:
        self._messages: list[Message] = []
        for message in messages:
            self.append(message)

    def append(self, message: Message | Mapping[str, Any]) -> None:
        """Add *message* to the end of the log.

        Plain dicts are converted with ``Message.from_dict``.  Messages are
        never reordered or deduplicated.
        """
        if not isinstance(message, Message):
            message = Message.from_dict(message)
        self._messages.append(message)

    def latest(self) -> Message | None:
        """Return the most recently appended message, or ``None`` if empty."""
        if not self._messages:
            return None
        return self._messages[-1]

    def serialize_for_request(self, system_message: str | None = None) -> list[dict[str, Any]]:
        """Produce the outbound ``messages`` array.

        Args:
            system_message: Prepended as a ``system`` turn when non-empty.

        Returns:
            A new list of message dicts in insertion order.
        """
        serialized: list[dict[str, Any]] = []
        if system_message:
            serialized.append({"role": "system", "content": system_message})
        serialized.extend(message.to_request_dict() for message in self._messages)
        return serialized

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))
