"""
Callable functions for the chat agent.

``ChatFunction`` is the base class for developer-registered functions; the
module-level helpers format them for the request payload and dispatch the
model's function calls.  ``CurrentDateTimeFunction`` is a ready-made
example.
"""

from ai_chat_agent.conversation.functions.datetime_function import (
    CurrentDateTimeFunction,
)
from ai_chat_agent.conversation.functions.registry import (
    ChatFunction,
    FunctionDispatchError,
    FunctionExecutionError,
    FunctionNotFoundError,
    FunctionUnavailableError,
    dispatch_function_call,
    encode_result,
    format_functions,
    resolve_function_call,
)

__all__ = [
    "ChatFunction",
    "CurrentDateTimeFunction",
    "FunctionDispatchError",
    "FunctionExecutionError",
    "FunctionNotFoundError",
    "FunctionUnavailableError",
    "dispatch_function_call",
    "encode_result",
    "format_functions",
    "resolve_function_call",
]
