"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It points the settings at the testing environment and a throwaway history
file before any application module is imported.
"""

import os
import tempfile
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LLM_PROVIDER", "gemini")
os.environ.setdefault("LLM_MODEL", "gemini-2.5-flash")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault(
    "APP_HISTORY_PATH",
    str(Path(tempfile.mkdtemp(prefix="cv_architect_tests_")) / "history.json"),
)

import pytest
from fastapi.testclient import TestClient

from cv_architect.adapters.storage.in_memory import InMemoryKeyValueStore
from cv_architect.core.app_factory import create_app
from cv_architect.schemas.analysis import AnalysisResult
from cv_architect.services.analysis_service import AnalysisService
from cv_architect.services.headshot_service import HeadshotService
from cv_architect.services.history_service import HistoryStore
from cv_architect.state.controller import DashboardController

FIXED_TIMESTAMP_MS = 1_700_000_000_000


def make_analysis_payload(**overrides: Any) -> dict[str, Any]:
    """Return a schema-valid model answer in wire (camelCase) form."""
    payload: dict[str, Any] = {
        "scores": {
            "atsScore": 72,
            "keywordMatch": 64,
            "skillsScore": 70,
            "experienceScore": 68,
            "formatScore": 80,
            "overallScore": 71,
        },
        "summary": "Solid backend profile with limited cloud exposure.",
        "jobTitleDetected": "Backend Engineer",
        "strengths": ["Python", "API design", "Testing discipline"],
        "weaknesses": ["No cloud certifications", "Few quantified results"],
        "keywords": {
            "present": ["Python", "FastAPI", "PostgreSQL"],
            "missing": ["Kubernetes", "Terraform"],
            "score": 64,
        },
        "sectionAnalysis": [
            {
                "sectionName": "Experience",
                "status": "good",
                "feedback": "Clear progression across roles.",
                "suggestion": "Quantify the impact of each project.",
            },
            {
                "sectionName": "Certifications",
                "status": "missing",
                "feedback": "No certifications listed.",
                "suggestion": "Add a cloud certification.",
            },
        ],
        "rewrittenSummary": "Backend engineer with 5 years of Python experience.",
        "marketFit": "Strong fit for product companies in Dhaka.",
        "interviewQuestions": [
            "How do you design idempotent APIs?",
            "Describe a production incident you resolved.",
        ],
        "coverLetter": "Dear Hiring Manager,\nI am excited to apply.\nSincerely,",
        "salaryEstimation": {
            "min": "80,000 BDT",
            "max": "120,000 BDT",
            "currency": "BDT",
            "explanation": "Mid-level backend roles in Dhaka.",
        },
        "linkedinAudit": {
            "headline": "Backend Engineer | Python | FastAPI",
            "aboutSummary": "I build reliable APIs.",
            "missingSections": ["Featured", "Recommendations"],
            "bannerSuggestion": "Clean code editor background.",
        },
        "learningPath": [
            {"skill": "Kubernetes", "recommendation": "CKAD preparation", "type": "Course"},
        ],
        "projectIdeas": [
            {
                "title": "Deploy a FastAPI service on k8s",
                "description": "Shows container orchestration experience.",
                "techStack": ["FastAPI", "Kubernetes", "Helm"],
                "difficulty": "Intermediate",
            },
        ],
    }
    payload.update(overrides)
    return payload


def make_llm(response: Any = None, side_effect: Any = None, model: str = "test-model") -> MagicMock:
    """Return a stand-in LLM client whose ``generate_json`` is an AsyncMock."""
    llm = MagicMock()
    llm.model = model
    llm.generate_json = AsyncMock(return_value=response, side_effect=side_effect)
    return llm


def make_headshot_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "score": 82,
        "professionalism": "Suitable for corporate use.",
        "lighting": "Even, soft light.",
        "background": "Plain and neutral.",
        "attire": "Business casual.",
        "expression": "Approachable smile.",
        "tips": ["Crop closer", "Raise the camera", "Use a lighter background"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def analysis_payload() -> dict[str, Any]:
    return make_analysis_payload()


@pytest.fixture
def analysis_result(analysis_payload: dict[str, Any]) -> AnalysisResult:
    return AnalysisResult.model_validate({**analysis_payload, "timestamp": FIXED_TIMESTAMP_MS})


@pytest.fixture
def llm(analysis_payload: dict[str, Any]) -> MagicMock:
    """LLM stand-in answering with a valid analysis."""
    return make_llm(response=analysis_payload)


@pytest.fixture
def history_store() -> HistoryStore:
    return HistoryStore(InMemoryKeyValueStore(), key="test_history", limit=20)


@pytest.fixture
def controller(llm: MagicMock, history_store: HistoryStore) -> DashboardController:
    """Dashboard controller wired to the LLM stand-in and in-memory history."""
    return DashboardController(
        analysis_service=AnalysisService(llm_factory=lambda: llm, clock=lambda: FIXED_TIMESTAMP_MS),
        headshot_service=HeadshotService(llm_factory=lambda: llm),
        history=history_store,
        default_market="Bangladesh",
    )


@pytest.fixture
def client(controller: DashboardController) -> TestClient:
    """Create FastAPI test client around an isolated controller."""
    return TestClient(create_app(controller=controller))
