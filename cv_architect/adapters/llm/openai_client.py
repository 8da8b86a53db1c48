"""OpenAI LLM client adapter."""

from typing import Any, Sequence

from openai import AsyncOpenAI

from cv_architect.adapters.llm.base import AbstractLLMClient, InlineData, Part, parse_json_text


def _to_content_part(part: Part) -> dict[str, Any]:
    """Map a prompt part to a chat-completions content part.

    Images travel as data URLs; PDFs as inline ``file`` parts.
    """
    if isinstance(part, str):
        return {"type": "text", "text": part}

    data_url = f"data:{part.mime_type};base64,{part.data_base64}"
    if part.mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": data_url}}
    return {
        "type": "file",
        "file": {"filename": "cv.pdf", "file_data": data_url},
    }


class OpenAIClient(AbstractLLMClient):
    """Client for calling OpenAI chat completions and returning JSON.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-4o", "gpt-4o-mini").
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Optional request timeout in seconds.
        """
        client_kwargs: dict[str, Any] = {"api_key": api_key, "base_url": base_url}
        if timeout_seconds is not None:
            client_kwargs["timeout"] = timeout_seconds
        # Retries are the caller's decision; the SDK default would retry 429/5xx.
        self.client = AsyncOpenAI(max_retries=0, **client_kwargs)
        self.model = model

    async def generate_json(
        self,
        parts: Sequence[Part],
        *,
        schema: dict[str, Any] | None = None,
        system_instruction: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Generate structured JSON using OpenAI chat completions.

        Args:
            parts: Prompt parts (text and inline PDF/image data).
            schema: Optional JSON schema enforced through ``response_format``.
            system_instruction: System message prepended to the conversation.
            **kwargs: Provider options (temperature, max_tokens, top_p, seed).

        Returns:
            dict[str, Any]: Parsed JSON object from the LLM response.

        Raises:
            RuntimeError: If the API call fails.
            MalformedResponseError: If the response is not valid JSON.
        """
        system_text = system_instruction or "Output JSON only. No extra text or markdown formatting."
        messages = [
            {"role": "system", "content": system_text},
            {"role": "user", "content": [_to_content_part(p) for p in parts]},
        ]

        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": kwargs.pop("temperature", 0.2),
        }

        if schema is not None:
            request_params["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": schema.get("title", "response"),
                    "schema": schema,
                },
            }
        else:
            request_params["response_format"] = {"type": "json_object"}

        for param in ("max_tokens", "top_p", "seed"):
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
            content = response.choices[0].message.content
        except Exception as exc:
            raise RuntimeError(f"OpenAI API error: {exc}") from exc

        return parse_json_text(content)
