"""
AI Chat Agent Conversation Package.

Implements the function-calling conversation loop: conversation state,
provider adapters for OpenAI and Azure OpenAI, the function registry and
dispatcher, and the ``ChatOrchestrator`` tying them together.
"""

from ai_chat_agent.conversation.functions import (
    ChatFunction,
    CurrentDateTimeFunction,
    dispatch_function_call,
    format_functions,
    resolve_function_call,
)
from ai_chat_agent.conversation.loop import ChatOrchestrator, MaxIterationsExceeded
from ai_chat_agent.conversation.messages import Conversation, FunctionCall, Message
from ai_chat_agent.conversation.providers import (
    PROVIDERS,
    AiProvider,
    AzureOpenAiProvider,
    ChatAgentError,
    ConfigurationError,
    OpenAiProvider,
    ProviderError,
    create_provider,
)

__all__ = [
    "PROVIDERS",
    "AiProvider",
    "AzureOpenAiProvider",
    "ChatAgentError",
    "ChatFunction",
    "ChatOrchestrator",
    "ConfigurationError",
    "Conversation",
    "CurrentDateTimeFunction",
    "FunctionCall",
    "MaxIterationsExceeded",
    "Message",
    "OpenAiProvider",
    "ProviderError",
    "create_provider",
    "dispatch_function_call",
    "format_functions",
    "resolve_function_call",
]
