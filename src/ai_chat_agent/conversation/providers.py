"""
AI provider adapters for the chat agent.

Defines the ``AiProvider`` base class so ``ChatOrchestrator`` can talk to any
supported chat-completions backend through one contract:

- ``validate_config()``: fail fast on missing credentials.
- ``get_endpoint()`` / ``get_headers()``: where and how to authenticate.
- ``prepare_payload()``: provider-specific payload rewrites.
- ``make_request()``: the HTTP exchange, via ``httpx``.

Two concrete adapters ship:

- ``OpenAiProvider``: the public OpenAI API, authenticated with a bearer
  API key.
- ``AzureOpenAiProvider``: an Azure OpenAI deployment.  The deployment name
  lives in the URL, so the ``model`` field is stripped from the payload.

``create_provider()`` resolves a configured provider identifier to an
adapter.  Also provides the package's exception hierarchy.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ai_chat_agent.config import ProviderConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Custom exception hierarchy
# ---------------------------------------------------------------------------


class ChatAgentError(Exception):
    """Base exception for all chat agent errors."""


class ConfigurationError(ChatAgentError):
    """Raised when required configuration is missing or invalid.

    Always raised before any network attempt; never retried.
    """


class ProviderError(ChatAgentError):
    """Raised when the upstream API fails or returns an unusable response.

    Attributes:
        status_code: HTTP status code from the API, or ``None`` when the
            request never produced one (timeouts, connection failures).
        provider: Identifier of the provider that failed.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.provider = provider


# ---------------------------------------------------------------------------
# Provider base class
# ---------------------------------------------------------------------------


class AiProvider(ABC):
    """Base class for chat-completions backends.

    Attributes:
        name: Provider identifier, e.g. ``"openai"``.
        label: Human-readable name used in error messages.
        config: The resolved ``ProviderConfig``.
        timeout: Per-request timeout in seconds.
    """

    name: str
    label: str

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialise the adapter.

        Args:
            config: Resolved connection parameters.
            client: Optional shared ``httpx.Client``.  When omitted a client is
                opened for each request and closed afterwards.
        """
        self.config = config
        self.timeout = config.timeout
        self._client = client

    @abstractmethod
    def validate_config(self) -> None:
        """Raise ``ConfigurationError`` naming the first missing credential."""

    @abstractmethod
    def get_endpoint(self) -> str:
        """Return the fully-qualified chat-completions URL."""

    @abstractmethod
    def get_headers(self) -> dict[str, str]:
        """Return the authentication and content-type headers."""

    def prepare_payload(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Return the body actually sent over the wire (a copy of *payload*)."""
        return dict(payload)

    def extract_error_message(self, body: Any) -> str:
        """Pull a readable message out of an error body; never raises."""
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return "Unknown error"

    def make_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST *payload* to the provider and return the decoded JSON body.

        Raises:
            ConfigurationError: If required credentials are missing.  No HTTP
                request is attempted.
            ProviderError: On a non-success status, a transport failure or
                timeout, or a body that is not valid JSON.
        """
        self.validate_config()

        body = self.prepare_payload(payload)
        endpoint = self.get_endpoint()
        logger.debug(
            "%s request: endpoint=%s, messages=%d, functions=%d",
            self.label,
            endpoint,
            len(body.get("messages", [])),
            len(body.get("functions", [])),
        )

        try:
            response = self._post(endpoint, body)
        except httpx.TimeoutException as exc:
            logger.error("%s request timed out after %.0fs", self.label, self.timeout)
            raise ProviderError(
                f"{self.label} API Error: request timed out after {self.timeout:.0f}s",
                provider=self.name,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("%s connection failed: %s", self.label, exc)
            raise ProviderError(
                f"{self.label} API Error: could not connect: {exc}",
                provider=self.name,
            ) from exc

        if response.is_error:
            message = self.extract_error_message(_json_or_none(response))
            logger.error(
                "%s API error %d: %s", self.label, response.status_code, message
            )
            raise ProviderError(
                f"{self.label} API Error: {message}",
                status_code=response.status_code,
                provider=self.name,
            )

        try:
            return response.json()
        except ValueError as exc:
            logger.error("%s returned a non-JSON body", self.label)
            raise ProviderError(
                f"{self.label} API Error: response body is not valid JSON",
                status_code=response.status_code,
                provider=self.name,
            ) from exc

    def _post(self, endpoint: str, body: dict[str, Any]) -> httpx.Response:
        headers = self.get_headers()
        if self._client is not None:
            return self._client.post(
                endpoint, json=body, headers=headers, timeout=self.timeout
            )
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(endpoint, json=body, headers=headers)


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Concrete providers
# ---------------------------------------------------------------------------


class OpenAiProvider(AiProvider):
    """Provider for the public OpenAI chat-completions API."""

    name = "openai"
    label = "OpenAI"

    ENDPOINT = "https://api.openai.com/v1/chat/completions"

    def validate_config(self) -> None:
        if not self.config.openai_api_key:
            raise ConfigurationError(
                "OpenAI API key is not configured. Please set OPENAI_API_KEY "
                "in your environment or .env file."
            )

    def get_endpoint(self) -> str:
        return self.ENDPOINT

    def get_headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.openai_api_key}",
            "Content-Type": "application/json",
        }
        if self.config.openai_organization:
            headers["OpenAI-Organization"] = self.config.openai_organization
        return headers


class AzureOpenAiProvider(AiProvider):
    """Provider for an Azure OpenAI deployment.

    The deployment name and API version are part of the URL::

        {endpoint}/openai/deployments/{deployment}/chat/completions?api-version={version}

    Azure error bodies carry ``error`` either as a plain string or as an
    object with a ``message`` field; both are handled.
    """

    name = "azure"
    label = "Azure OpenAI"

    def validate_config(self) -> None:
        if not self.config.azure_endpoint:
            raise ConfigurationError(
                "Azure OpenAI endpoint is not configured. Please set "
                "AZURE_OPENAI_ENDPOINT in your environment or .env file."
            )
        if not self.config.azure_api_key:
            raise ConfigurationError(
                "Azure OpenAI API key is not configured. Please set "
                "AZURE_OPENAI_API_KEY in your environment or .env file."
            )
        if not self.config.azure_deployment:
            raise ConfigurationError(
                "Azure OpenAI deployment name is not configured. Please set "
                "AZURE_OPENAI_DEPLOYMENT_NAME in your environment or .env file."
            )

    def get_endpoint(self) -> str:
        base_url = (self.config.azure_endpoint or "").rstrip("/")
        return (
            f"{base_url}/openai/deployments/{self.config.azure_deployment}"
            f"/chat/completions?api-version={self.config.azure_api_version}"
        )

    def get_headers(self) -> dict[str, str]:
        headers = {
            "api-key": self.config.azure_api_key or "",
            "Content-Type": "application/json",
        }
        if self.config.azure_region:
            headers["x-ms-region"] = self.config.azure_region
        return headers

    def prepare_payload(self, payload: dict[str, Any]) -> dict[str, Any]:
        # The deployment in the URL selects the model.
        body = dict(payload)
        body.pop("model", None)
        return body

    def extract_error_message(self, body: Any) -> str:
        if isinstance(body, dict) and isinstance(body.get("error"), str):
            return body["error"]
        return super().extract_error_message(body)


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------

# Registry of available providers
PROVIDERS: dict[str, type[AiProvider]] = {
    "openai": OpenAiProvider,
    "azure": AzureOpenAiProvider,
    "azure-openai": AzureOpenAiProvider,
}


def create_provider(
    config: ProviderConfig,
    client: httpx.Client | None = None,
) -> AiProvider:
    """Create the provider adapter selected by ``config.provider``.

    Args:
        config: Resolved connection parameters; ``provider`` is matched
            case-insensitively.
        client: Optional ``httpx.Client`` passed through to the adapter.

    Returns:
        Configured provider instance.

    Raises:
        ConfigurationError: If the provider identifier is not supported.
    """
    provider_cls = PROVIDERS.get((config.provider or "").strip().lower())
    if provider_cls is None:
        available = ", ".join(PROVIDERS)
        raise ConfigurationError(
            f"Unsupported AI provider: {config.provider}. "
            f"Supported providers are: {available}"
        )
    return provider_cls(config, client=client)
