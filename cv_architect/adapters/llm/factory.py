"""Factory pattern for creating LLM client instances."""

from cv_architect.adapters.llm.base import AbstractLLMClient
from cv_architect.adapters.llm.gemini_client import GeminiClient
from cv_architect.adapters.llm.openai_client import OpenAIClient
from cv_architect.core.config import settings
from cv_architect.core.errors import MissingCredentialError, ValidationAppError

MISSING_CREDENTIAL_MESSAGE = "API Key is missing. Please check your environment variables."

SUPPORTED_PROVIDERS = ("gemini", "openai")


def create_llm_client() -> AbstractLLMClient:
    """Instantiate the configured LLM client.

    Called per request, so an absent credential is reported when an analysis
    is attempted rather than when the service starts.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        MissingCredentialError: If LLM_API_KEY is not configured.
        ValidationAppError: If the provider is unknown.
    """
    provider = settings.llm.provider.lower()

    if provider not in SUPPORTED_PROVIDERS:
        raise ValidationAppError(
            code="llm_unknown_provider",
            message=(
                f"Unknown LLM provider: '{provider}'. "
                f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
            ),
        )

    if not settings.llm.api_key:
        raise MissingCredentialError(
            code="missing_credential",
            message=MISSING_CREDENTIAL_MESSAGE,
            details={"provider": provider},
        )

    if provider == "gemini":
        return GeminiClient(
            api_key=settings.llm.api_key,
            model=settings.llm.model,
            timeout_seconds=settings.llm.timeout_seconds,
        )

    return OpenAIClient(
        api_key=settings.llm.api_key,
        model=settings.llm.model,
        base_url=settings.llm.base_url,
        timeout_seconds=settings.llm.timeout_seconds,
    )
