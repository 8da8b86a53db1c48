"""Tests for the CV analysis orchestrator.

Covers the single model call, fail-closed validation of the answer, the
up-front credential check and the classification of provider failures.
"""

from typing import Any
from unittest.mock import patch

import pytest

from conftest import FIXED_TIMESTAMP_MS, make_analysis_payload, make_llm
from cv_architect.core.config import settings
from cv_architect.core.errors import (
    MalformedResponseError,
    MissingCredentialError,
    PayloadRejectedError,
    QuotaExceededError,
    ServiceUnavailableError,
    UnknownLLMError,
    ValidationAppError,
)
from cv_architect.schemas.request import AnalysisRequest, TextPayload
from cv_architect.services.analysis_service import (
    MALFORMED_RESPONSE_MESSAGE,
    PAYLOAD_REJECTED_MESSAGE,
    QUOTA_EXCEEDED_MESSAGE,
    SERVICE_UNAVAILABLE_MESSAGE,
    AnalysisService,
    classify_failure,
)
from cv_architect.services.request_builder import SYSTEM_INSTRUCTION


def _request(text: str = "Jane Doe, Data Analyst", **kwargs: Any) -> AnalysisRequest:
    return AnalysisRequest(cv_payload=TextPayload(extracted_text=text), **kwargs)


def _service(llm) -> AnalysisService:
    return AnalysisService(llm_factory=lambda: llm, clock=lambda: FIXED_TIMESTAMP_MS)


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_success_returns_timestamped_result(self, analysis_payload: dict) -> None:
        llm = make_llm(response=analysis_payload)

        result = await _service(llm).analyze(_request(target_market="Global"))

        assert result.timestamp == FIXED_TIMESTAMP_MS
        assert result.scores.overall_score == 71
        assert result.job_title_detected == "Backend Engineer"
        assert result.keywords.missing == ["Kubernetes", "Terraform"]

    @pytest.mark.asyncio
    async def test_exactly_one_model_call(self, analysis_payload: dict) -> None:
        llm = make_llm(response=analysis_payload)

        await _service(llm).analyze(_request())

        llm.generate_json.assert_awaited_once()
        args, kwargs = llm.generate_json.call_args
        assert kwargs["system_instruction"] == SYSTEM_INSTRUCTION
        assert kwargs["schema"]["type"] == "object"
        assert "temperature" in kwargs

    @pytest.mark.asyncio
    async def test_model_timestamp_is_overwritten(self) -> None:
        llm = make_llm(response=make_analysis_payload(timestamp=1))

        result = await _service(llm).analyze(_request())

        assert result.timestamp == FIXED_TIMESTAMP_MS

    @pytest.mark.asyncio
    async def test_float_scores_are_rounded(self) -> None:
        payload = make_analysis_payload()
        payload["scores"] = {**payload["scores"], "overallScore": 70.6}

        result = await _service(make_llm(response=payload)).analyze(_request())

        assert result.scores.overall_score == 71

    @pytest.mark.asyncio
    async def test_empty_cv_fails_without_model_call(self) -> None:
        llm = make_llm(response={})
        factory_calls = []

        def factory():
            factory_calls.append(1)
            return llm

        service = AnalysisService(llm_factory=factory)

        with pytest.raises(ValidationAppError) as exc_info:
            await service.analyze(_request(text="   "))

        assert exc_info.value.code == "empty_cv"
        assert factory_calls == []
        llm.generate_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_credential_fails_without_model_call(self) -> None:
        with patch.object(settings.llm, "api_key", None):
            service = AnalysisService()

            with pytest.raises(MissingCredentialError) as exc_info:
                await service.analyze(_request())

        assert exc_info.value.code == "missing_credential"
        assert "API Key is missing" in exc_info.value.message


class TestFailClosed:
    """Any answer that does not match the result schema is an error."""

    @pytest.mark.asyncio
    async def test_missing_required_field(self) -> None:
        payload = make_analysis_payload()
        del payload["salaryEstimation"]

        with pytest.raises(MalformedResponseError) as exc_info:
            await _service(make_llm(response=payload)).analyze(_request())

        assert exc_info.value.code == "malformed_response"
        assert exc_info.value.message == MALFORMED_RESPONSE_MESSAGE

    @pytest.mark.asyncio
    async def test_score_out_of_range(self) -> None:
        payload = make_analysis_payload()
        payload["scores"] = {**payload["scores"], "atsScore": 140}

        with pytest.raises(MalformedResponseError):
            await _service(make_llm(response=payload)).analyze(_request())

    @pytest.mark.asyncio
    async def test_unknown_section_status(self) -> None:
        payload = make_analysis_payload()
        payload["sectionAnalysis"][0]["status"] = "excellent"

        with pytest.raises(MalformedResponseError):
            await _service(make_llm(response=payload)).analyze(_request())

    @pytest.mark.asyncio
    async def test_unparseable_answer(self) -> None:
        error = MalformedResponseError(code="llm_invalid_json", message="LLM returned invalid JSON")

        with pytest.raises(MalformedResponseError) as exc_info:
            await _service(make_llm(side_effect=error)).analyze(_request())

        assert exc_info.value.code == "malformed_response"


class TestClassifyFailure:
    @pytest.mark.parametrize(
        ("provider_message", "error_type", "message"),
        [
            ("Gemini API error: 400 Request payload size exceeds the limit", PayloadRejectedError, PAYLOAD_REJECTED_MESSAGE),
            ("Gemini API error: 429 Resource has been exhausted", QuotaExceededError, QUOTA_EXCEEDED_MESSAGE),
            ("OpenAI API error: Error code: 500 - internal", ServiceUnavailableError, SERVICE_UNAVAILABLE_MESSAGE),
            ("Gemini API error: 503 The model is overloaded", ServiceUnavailableError, SERVICE_UNAVAILABLE_MESSAGE),
        ],
    )
    def test_status_markers(self, provider_message: str, error_type: type, message: str) -> None:
        error = classify_failure(RuntimeError(provider_message))

        assert isinstance(error, error_type)
        assert error.message == message

    def test_api_key_marker_is_missing_credential(self) -> None:
        error = classify_failure(RuntimeError("API Key not valid. Please pass a valid API key."))

        assert isinstance(error, MissingCredentialError)

    def test_marker_found_in_cause(self) -> None:
        try:
            try:
                raise ValueError("HTTP 429 Too Many Requests")
            except ValueError as inner:
                raise RuntimeError("Gemini API error") from inner
        except RuntimeError as exc:
            error = classify_failure(exc)

        assert isinstance(error, QuotaExceededError)

    def test_numbers_inside_other_numbers_do_not_match(self) -> None:
        error = classify_failure(RuntimeError("Request 4005001 failed"))

        assert isinstance(error, UnknownLLMError)

    def test_unknown_error_keeps_message(self) -> None:
        error = classify_failure(RuntimeError("connection reset by peer"))

        assert isinstance(error, UnknownLLMError)
        assert error.message == "connection reset by peer"

    def test_unknown_error_without_message(self) -> None:
        error = classify_failure(RuntimeError())

        assert error.message == "An unexpected error occurred."

    @pytest.mark.asyncio
    async def test_service_raises_classified_error(self) -> None:
        llm = make_llm(side_effect=RuntimeError("Gemini API error: 429 quota"))

        with pytest.raises(QuotaExceededError) as exc_info:
            await _service(llm).analyze(_request())

        assert exc_info.value.http_status == 429
        assert isinstance(exc_info.value.__cause__, RuntimeError)
