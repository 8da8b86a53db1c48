"""Google Gemini LLM client adapter."""

from __future__ import annotations

import base64
from typing import Any, Sequence

from google import genai

from cv_architect.adapters.llm.base import AbstractLLMClient, InlineData, Part, parse_json_text

# Subset of OpenAPI keywords accepted by Gemini's response_schema
_PASSTHROUGH_KEYS = ("type", "description", "enum", "required")


def to_gemini_schema(json_schema: dict[str, Any]) -> dict[str, Any]:
    """Convert a pydantic JSON schema into Gemini's response-schema dialect.

    ``$ref``s are inlined, ``anyOf [X, null]`` becomes ``X`` with
    ``nullable``, and keywords Gemini rejects (title, minimum, default...)
    are dropped.

    Args:
        json_schema: Output of ``Model.model_json_schema(by_alias=True)``.

    Returns:
        A self-contained schema dict.
    """
    defs: dict[str, Any] = json_schema.get("$defs", {})

    def convert(node: dict[str, Any]) -> dict[str, Any]:
        if "$ref" in node:
            target = dict(defs[node["$ref"].rsplit("/", 1)[-1]])
            if "description" in node:
                target["description"] = node["description"]
            return convert(target)

        if "allOf" in node and len(node["allOf"]) == 1:
            merged = {**node["allOf"][0], **{k: v for k, v in node.items() if k != "allOf"}}
            return convert(merged)

        if "anyOf" in node:
            variants = [v for v in node["anyOf"] if v.get("type") != "null"]
            converted = convert(variants[0]) if variants else {"type": "string"}
            if len(variants) < len(node["anyOf"]):
                converted["nullable"] = True
            if "description" in node:
                converted["description"] = node["description"]
            return converted

        out: dict[str, Any] = {k: node[k] for k in _PASSTHROUGH_KEYS if k in node}
        if "const" in node:
            out.setdefault("type", "string")
            out["enum"] = [node["const"]]
        if "properties" in node:
            out["properties"] = {
                name: convert(prop) for name, prop in node["properties"].items()
            }
        if "items" in node:
            out["items"] = convert(node["items"])
        return out

    return convert(json_schema)


def _to_content(part: Part) -> Any:
    if isinstance(part, InlineData):
        return genai.types.Part.from_bytes(
            data=base64.b64decode(part.data_base64),
            mime_type=part.mime_type,
        )
    return part


class GeminiClient(AbstractLLMClient):
    """Client for Google's Gemini models returning schema-constrained JSON.

    Uses the ``google-genai`` SDK's async surface; inline PDFs and images are
    passed as native parts, so the model reads the original document.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout_seconds: float | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("API key cannot be empty")
        http_options = (
            genai.types.HttpOptions(timeout=int(timeout_seconds * 1000))
            if timeout_seconds is not None
            else None
        )
        self.client = genai.Client(api_key=api_key, http_options=http_options)
        self.model = model
        self.timeout_seconds = timeout_seconds

    async def generate_json(
        self,
        parts: Sequence[Part],
        *,
        schema: dict[str, Any] | None = None,
        system_instruction: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Generate structured JSON with Gemini.

        Args:
            parts: Prompt parts (text and inline PDF/image data).
            schema: Pydantic JSON schema, converted to ``response_schema``.
            system_instruction: Fixed system instruction for the model.
            **kwargs: ``temperature`` is honoured; other options are ignored.

        Returns:
            dict[str, Any]: Parsed JSON object from the model.

        Raises:
            RuntimeError: If the API call fails.
            MalformedResponseError: If the response is not valid JSON.
        """
        config_kwargs: dict[str, Any] = {"response_mime_type": "application/json"}
        if system_instruction is not None:
            config_kwargs["system_instruction"] = system_instruction
        if schema is not None:
            config_kwargs["response_schema"] = to_gemini_schema(schema)
        if "temperature" in kwargs:
            config_kwargs["temperature"] = kwargs["temperature"]

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[_to_content(p) for p in parts],
                config=genai.types.GenerateContentConfig(**config_kwargs),
            )
            content = response.text
        except Exception as exc:
            raise RuntimeError(f"Gemini API error: {exc}") from exc

        return parse_json_text(content)
