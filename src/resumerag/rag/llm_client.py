"""LiteLLM client wrapper with retry, backoff, and API key validation.

All model and embedding calls route through this module. LiteLLM's built-in
retry is used (num_retries=3, exponential backoff). The provider is chosen by
the model string prefix, e.g. ``openai/gpt-4o-mini`` or ``ollama/llama3.2``.
"""

from __future__ import annotations

import os
from typing import Any

import litellm

# Disable LiteLLM verbose logging unless explicitly enabled
litellm.suppress_debug_info = True
litellm.set_verbose = False  # type: ignore[assignment]


# ------------------------------------------------------------------
# Provider → env var mapping for API key validation
# ------------------------------------------------------------------

_PROVIDER_ENV: dict[str, str | None] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "azure": "AZURE_API_KEY",
    "cohere": "COHERE_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "groq": "GROQ_API_KEY",
    "ollama": None,  # Local, no key required
    "ollama_chat": None,
}


def provider_of(model: str) -> str:
    """Return the provider prefix of *model* (``openai`` when none is given)."""
    return model.split("/")[0].lower() if "/" in model else "openai"


def validate_api_key(model: str) -> None:
    """Check that the required API key env var is set for *model*.

    Raises:
        EnvironmentError: If the required key is missing from environment.
    """
    provider = provider_of(model)
    env_var = _PROVIDER_ENV.get(provider, f"{provider.upper()}_API_KEY")

    if env_var is None:
        return

    if not os.getenv(env_var):
        raise EnvironmentError(
            f"API key not found for provider '{provider}'. "
            f"Set the {env_var} environment variable."
        )


def complete(
    model: str,
    messages: list[dict],
    max_tokens: int = 2048,
    temperature: float = 0.0,
    num_retries: int = 3,
    response_format: dict | None = None,
) -> str:
    """Call litellm.completion() with retry/backoff. Returns content string.

    Args:
        model: LiteLLM model string (provider/model format).
        messages: OpenAI-style message list.
        max_tokens: Maximum output tokens.
        temperature: Sampling temperature (0 = deterministic).
        num_retries: Number of retries on transient errors (exponential backoff).
        response_format: Optional structured-output hint, e.g. ``{"type": "json_object"}``.

    Raises:
        litellm.exceptions.APIError: On persistent API failure after retries.
    """
    kwargs: dict[str, Any] = {}
    if response_format is not None:
        kwargs["response_format"] = response_format
    response = litellm.completion(
        model=model,
        messages=messages,
        max_tokens=max_tokens,
        temperature=temperature,
        num_retries=num_retries,
        **kwargs,
    )
    return response.choices[0].message.content or ""


def complete_with_tools(
    model: str,
    messages: list[dict],
    tools: list[dict],
    temperature: float = 0.0,
    num_retries: int = 3,
) -> Any:
    """One tool-calling turn. Returns the assistant message object.

    The returned message has ``content`` and ``tool_calls`` (possibly None),
    in the OpenAI shape LiteLLM normalises every provider to.
    """
    response = litellm.completion(
        model=model,
        messages=messages,
        tools=tools or None,
        temperature=temperature,
        num_retries=num_retries,
    )
    return response.choices[0].message


def embed_batch(model: str, texts: list[str], num_retries: int = 3) -> list[list[float]]:
    """Call litellm.embedding() for several texts at once.

    Returns:
        One embedding per input text, in input order.
    """
    response = litellm.embedding(
        model=model,
        input=texts,
        num_retries=num_retries,
    )
    # Providers tag each vector with its input position; the list order is not guaranteed.
    data = sorted(response.data, key=lambda item: item["index"])
    return [item["embedding"] for item in data]
