import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence

from cv_architect.core.errors import MalformedResponseError


@dataclass(frozen=True)
class InlineData:
	"""Binary content sent alongside the prompt (PDF or image)."""

	mime_type: str
	data_base64: str


Part = str | InlineData


def parse_json_text(content: str | None) -> dict[str, Any]:
	"""Parse the model's text answer as a JSON object.

	Raises:
		MalformedResponseError: If the text is empty, not JSON, or not an object.
	"""
	if not content or not content.strip():
		raise MalformedResponseError(
			code="llm_empty_response",
			message="No response from AI",
		)
	try:
		parsed = json.loads(content.strip())
	except json.JSONDecodeError as exc:
		raise MalformedResponseError(
			code="llm_invalid_json",
			message=f"LLM returned invalid JSON: {exc}",
		) from exc
	if not isinstance(parsed, dict):
		raise MalformedResponseError(
			code="llm_invalid_json",
			message="LLM returned JSON that is not an object",
		)
	return parsed


class AbstractLLMClient(ABC):
	"""Interface for LLM clients that produce structured JSON outputs."""

	model: str

	@abstractmethod
	async def generate_json(
		self,
		parts: Sequence[Part],
		*,
		schema: dict[str, Any] | None = None,
		system_instruction: str | None = None,
		**kwargs: Any,
	) -> dict[str, Any]:
		"""Generate a structured JSON response from the model.

		Args:
			parts: Ordered prompt parts, text or inline binary data.
			schema: Optional JSON schema constraining the response.
			system_instruction: Optional fixed system instruction.
			**kwargs: Provider-specific options (e.g., temperature).

		Returns:
			dict[str, Any]: Parsed JSON object returned by the model.

		Raises:
			RuntimeError: If the provider call fails; the message carries the
				provider's own error text.
			MalformedResponseError: If the response cannot be parsed.
		"""
		...
