"""
Configuration management for the AI chat agent.

Two layers live here:

- ``Settings`` loads raw values from environment variables (and an optional
  ``.env`` file) using pydantic-settings.  Provider credentials keep the
  variable names the chat widget has always used (``OPENAI_API_KEY``,
  ``AZURE_OPENAI_ENDPOINT``, ...); chat behaviour uses the
  ``AI_CHAT_AGENT_`` prefix.
- ``ProviderConfig`` and ``OrchestrationConfig`` are immutable snapshots
  built once per chat session and injected into the provider adapter and
  the ``ChatOrchestrator``.  Nothing downstream reads the environment.

Any value handed to ``OrchestrationConfig.from_values`` may be a literal or
a zero-argument callable producing one; callables are resolved exactly once
when the snapshot is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar, Union

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

T = TypeVar("T")

# A configuration value given either directly or as a callable producing it.
ValueOrProvider = Union[T, Callable[[], T]]

DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_AZURE_API_VERSION = "2024-02-15-preview"
DEFAULT_TIMEOUT = 120.0
DEFAULT_MAX_ITERATIONS = 10


def resolve_value(value: ValueOrProvider[T]) -> T:
    """Return ``value()`` for callables, ``value`` otherwise."""
    if callable(value):
        return value()
    return value


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved connection parameters for the upstream chat-completions API.

    Only the fields of the selected provider matter; the adapter validates
    them before every request.

    Attributes:
        provider: Provider identifier (``"openai"``, ``"azure"`` or
            ``"azure-openai"``), matched case-insensitively.
        openai_api_key: Bearer token for the OpenAI API.
        openai_organization: Optional ``OpenAI-Organization`` header value.
        azure_endpoint: Base URL of the Azure OpenAI resource.
        azure_api_key: Value of the ``api-key`` header.
        azure_region: Optional ``x-ms-region`` header value.
        azure_deployment: Deployment name embedded in the request URL.
        azure_api_version: ``api-version`` query parameter.
        timeout: Per-request timeout in seconds.
    """

    provider: str = DEFAULT_PROVIDER
    openai_api_key: str | None = None
    openai_organization: str | None = None
    azure_endpoint: str | None = None
    azure_api_key: str | None = None
    azure_region: str | None = None
    azure_deployment: str | None = None
    azure_api_version: str = DEFAULT_AZURE_API_VERSION
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class OrchestrationConfig:
    """Chat behaviour consumed by ``ChatOrchestrator``.

    Attributes:
        model: Model identifier sent in the request payload.
        temperature: Sampling temperature; omitted from the payload when falsy.
        max_tokens: Response token cap; omitted from the payload when falsy.
        system_message: Instructions prepended to every request when non-empty.
        functions: Registered functions, in dispatch order.
        function_call: ``False`` forbids calling, ``True``/``None`` lets the
            model decide, a function name forces that function.
        max_iterations: Maximum provider calls per ``send()``.
        enabled: When false, ``send()`` refuses to contact the provider.
    """

    model: str = DEFAULT_MODEL
    temperature: float | None = None
    max_tokens: int | None = None
    system_message: str | None = ""
    functions: tuple[Any, ...] = field(default_factory=tuple)
    function_call: bool | str | None = None
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    enabled: bool = True

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be a positive integer.")
        # Accept any iterable of functions but store an immutable sequence.
        object.__setattr__(self, "functions", tuple(self.functions or ()))

    @classmethod
    def from_values(cls, **values: ValueOrProvider[Any]) -> "OrchestrationConfig":
        """Build a snapshot, resolving every callable value once.

        Example::

            config = OrchestrationConfig.from_values(
                model="gpt-4o",
                system_message=lambda: f"Today is {date.today()}",
                functions=lambda: [LookupOrderFunction()],
            )
        """
        return cls(**{key: resolve_value(value) for key, value in values.items()})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Provider selection and credentials
    provider: str = Field(
        default=DEFAULT_PROVIDER,
        validation_alias=AliasChoices(
            "FILAMENT_AI_CHAT_AGENT_PROVIDER", "AI_CHAT_AGENT_PROVIDER"
        ),
    )
    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    openai_organization: str | None = Field(
        default=None, validation_alias="OPENAI_ORGANIZATION"
    )
    azure_openai_endpoint: str | None = Field(
        default=None, validation_alias="AZURE_OPENAI_ENDPOINT"
    )
    azure_openai_api_key: str | None = Field(
        default=None, validation_alias="AZURE_OPENAI_API_KEY"
    )
    azure_openai_region: str | None = Field(
        default=None, validation_alias="AZURE_OPENAI_REGION"
    )
    azure_openai_deployment_name: str | None = Field(
        default=None, validation_alias="AZURE_OPENAI_DEPLOYMENT_NAME"
    )
    azure_openai_api_version: str = Field(
        default=DEFAULT_AZURE_API_VERSION, validation_alias="AZURE_OPENAI_API_VERSION"
    )

    # Chat behaviour
    model: str = DEFAULT_MODEL
    temperature: float | None = 0.7
    max_tokens: int | None = None
    system_message: str = ""
    enabled: bool = True
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    timeout: float = DEFAULT_TIMEOUT

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="AI_CHAT_AGENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def provider_config(self) -> ProviderConfig:
        """Snapshot the provider credentials."""
        return ProviderConfig(
            provider=self.provider,
            openai_api_key=self.openai_api_key,
            openai_organization=self.openai_organization,
            azure_endpoint=self.azure_openai_endpoint,
            azure_api_key=self.azure_openai_api_key,
            azure_region=self.azure_openai_region,
            azure_deployment=self.azure_openai_deployment_name,
            azure_api_version=self.azure_openai_api_version,
            timeout=self.timeout,
        )

    def orchestration_config(
        self,
        functions: ValueOrProvider[Any] = (),
        function_call: ValueOrProvider[bool | str | None] = None,
    ) -> OrchestrationConfig:
        """Snapshot the chat behaviour together with the registered functions.

        Functions are Python objects and cannot come from the environment,
        so the caller supplies them (as a list or a callable returning one).
        """
        return OrchestrationConfig.from_values(
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            system_message=self.system_message,
            functions=functions,
            function_call=function_call,
            max_iterations=self.max_iterations,
            enabled=self.enabled,
        )


def get_settings() -> Settings:
    """Get the application settings instance."""
    return Settings()
