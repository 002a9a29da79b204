"""
AI Chat Agent - a function-calling chat engine for OpenAI and Azure OpenAI.

This library relays chat messages to a hosted model and lets the model call
developer-registered functions. It includes:

- Conversation state with OpenAI-style message serialisation
- Provider adapters for OpenAI and Azure OpenAI deployments
- A function registry and dispatcher
- The ``ChatOrchestrator`` request/function-call loop

Quick Start:
    >>> from ai_chat_agent import ChatOrchestrator, create_provider, get_settings
    >>> settings = get_settings()
    >>> chat = ChatOrchestrator(
    ...     provider=create_provider(settings.provider_config()),
    ...     config=settings.orchestration_config(),
    ... )
    >>> chat.add_message("Hello").send().latest_message().content
"""

from ai_chat_agent.config import (
    OrchestrationConfig,
    ProviderConfig,
    Settings,
    get_settings,
)
from ai_chat_agent.conversation import (
    ChatAgentError,
    ChatFunction,
    ChatOrchestrator,
    ConfigurationError,
    MaxIterationsExceeded,
    ProviderError,
    create_provider,
)

__version__ = "0.1.0"
__all__ = [
    "ChatAgentError",
    "ChatFunction",
    "ChatOrchestrator",
    "ConfigurationError",
    "MaxIterationsExceeded",
    "OrchestrationConfig",
    "ProviderConfig",
    "ProviderError",
    "Settings",
    "create_provider",
    "get_settings",
]
