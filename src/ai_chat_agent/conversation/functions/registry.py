"""
Function registry and dispatcher for the chat agent.

Functions are developer-registered capabilities the model may ask to run.
Each one exposes a JSON schema (sent to the provider in the ``functions``
payload field) and an ``execute(args)`` entry point.

Typical usage::

    class LookupOrderFunction(ChatFunction):
        name = "lookup_order"
        description = "Look up an order by its number."
        parameters = {
            "type": "object",
            "properties": {"number": {"type": "string"}},
            "required": ["number"],
        }

        def execute(self, args):
            return {"status": orders.status(args["number"])}

    functions = [LookupOrderFunction()]
    payload["functions"] = format_functions(functions)
    payload["function_call"] = resolve_function_call(None)  # "auto"
    result = dispatch_function_call(FunctionCall("lookup_order", '{"number": "42"}'), functions)

Dispatch never raises: unknown functions, an empty registry and executor
failures all become a JSON ``{"error": ...}`` string that is fed back into
the conversation so the model can react to it.
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Sequence

from ai_chat_agent.conversation.messages import FunctionCall
from ai_chat_agent.conversation.providers import ChatAgentError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Dispatch errors (internal, converted to function results)
# ---------------------------------------------------------------------------


class FunctionDispatchError(ChatAgentError):
    """Base for dispatch failures that become conversation content."""

    def to_result(self) -> str:
        return encode_result({"error": str(self)})


class FunctionUnavailableError(FunctionDispatchError):
    """No functions are registered."""

    def __init__(self) -> None:
        super().__init__("Function not available")


class FunctionNotFoundError(FunctionDispatchError):
    """No registered function matches the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__("Function not found")
        self.name = name


class FunctionExecutionError(FunctionDispatchError):
    """A function's executor raised."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


# ---------------------------------------------------------------------------
# Function base class
# ---------------------------------------------------------------------------


class ChatFunction(ABC):
    """Base class for functions the model can call.

    Attributes:
        name: Unique name the model uses to invoke the function.
        description: Shown to the model to explain what the function does.
        parameters: JSON Schema describing the argument object; ``None``
            means the function takes no arguments.
    """

    name: str
    description: str = ""
    parameters: dict[str, Any] | None = None

    def to_schema(self) -> dict[str, Any]:
        """Serialise to the chat-completions ``functions`` entry format."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": (
                copy.deepcopy(self.parameters)
                if self.parameters is not None
                else {"type": "object", "properties": {}}
            ),
        }

    @abstractmethod
    def execute(self, args: dict[str, Any]) -> Any:
        """Run the function with the model-supplied arguments.

        Returns a string, or any JSON-serialisable value.
        """


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------


def encode_result(value: Any) -> str:
    """Return strings unchanged; JSON-encode everything else compactly."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), default=str)


def _schema_of(function: Any) -> dict[str, Any] | None:
    if isinstance(function, dict):
        return function
    to_schema = getattr(function, "to_schema", None)
    if callable(to_schema):
        try:
            schema = to_schema()
        except Exception as exc:
            logger.warning("Dropping function %r: schema failed (%s)", function, exc)
            return None
        if isinstance(schema, dict):
            return schema
    return None


def format_functions(functions: Iterable[Any]) -> list[dict[str, Any]]:
    """Map registered functions to their schemas, dropping non-conforming entries.

    Accepts ``ChatFunction`` instances, any object with a ``to_schema()``
    method returning a dict, and plain schema dicts.
    """
    schemas = []
    for function in functions:
        schema = _schema_of(function)
        if schema:
            schemas.append(schema)
    return schemas


def resolve_function_call(requested: bool | str | None) -> str | dict[str, str]:
    """Translate the caller's intent into the ``function_call`` control value.

    - ``False`` -> ``"none"`` (the model must answer with a message)
    - ``True`` or ``None`` -> ``"auto"`` (the model decides)
    - a function name -> ``{"name": <name>}`` (the model must call it)

    Anything else falls back to ``"auto"``.
    """
    if requested is False:
        return "none"
    if isinstance(requested, str) and requested:
        return {"name": requested}
    return "auto"


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def _parse_arguments(arguments: Any) -> dict[str, Any]:
    if isinstance(arguments, dict):
        return arguments
    if not arguments:
        return {}
    try:
        parsed = json.loads(arguments)
    except (TypeError, ValueError):
        logger.warning("Ignoring unparseable function arguments: %r", arguments)
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _invoke(function_call: FunctionCall, functions: Sequence[Any]) -> str:
    if not functions:
        raise FunctionUnavailableError()

    args = _parse_arguments(function_call.arguments)

    for function in functions:
        execute = getattr(function, "execute", None)
        if not callable(execute):
            continue
        schema = _schema_of(function)
        if not schema or schema.get("name") != function_call.name:
            continue

        logger.debug("Executing function %r with %s", function_call.name, args)
        try:
            result = execute(args)
        except Exception as exc:
            logger.error(
                "Function %r execution failed: %s", function_call.name, exc
            )
            raise FunctionExecutionError(function_call.name, str(exc)) from exc
        return encode_result(result)

    logger.warning("Unknown function requested: %r", function_call.name)
    raise FunctionNotFoundError(function_call.name)


def dispatch_function_call(function_call: FunctionCall, functions: Sequence[Any]) -> str:
    """Execute the first registered function matching ``function_call.name``.

    Args:
        function_call: The model's request (name plus JSON arguments).
        functions: Registered functions, scanned in order.

    Returns:
        The function's result as a string.  Failures are returned as JSON
        ``{"error": ...}`` strings instead of raised.
    """
    try:
        return _invoke(function_call, functions)
    except FunctionDispatchError as exc:
        return exc.to_result()
