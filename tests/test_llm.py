import pytest
import requests

import nlp.llm as llm_module
from nlp.llm import analyze_resume_via_gemini, build_analysis_prompt
from services.errors import AnalysisServiceError


class _FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._payload


@pytest.fixture(autouse=True)
def _gemini_env(monkeypatch):
    monkeypatch.setattr(llm_module, "_ENV_LOADED", True)
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.delenv("GEMINI_API_ENDPOINT", raising=False)
    monkeypatch.delenv("GEMINI_TIMEOUT", raising=False)


def test_prompt_includes_job_sections_only_when_targeted():
    plain = build_analysis_prompt("Resume body")
    targeted = build_analysis_prompt("Resume body", "Backend role")

    assert "Resume body" in plain
    assert "Overall Resume Quality Score: [0-100]" in plain
    assert "Job Match Score" not in plain
    assert "JOB MATCHING ANALYSIS" not in plain

    assert "Backend role" in targeted
    assert "Job Match Score: [0-100]" in targeted
    assert "## JOB MATCHING ANALYSIS:" in targeted


def test_successful_call_returns_first_candidate(monkeypatch):
    captured = {}

    def fake_post(url, headers=None, json=None, params=None, timeout=None):
        captured.update(url=url, json=json, params=params, timeout=timeout)
        payload = {"candidates": [{"content": {"parts": [{"text": "Overall Score: 80"}]}}]}
        return _FakeResponse(payload=payload)

    monkeypatch.setattr(requests, "post", fake_post)

    text = analyze_resume_via_gemini("Resume body")

    assert text == "Overall Score: 80"
    assert captured["url"] == llm_module.DEFAULT_ENDPOINT
    assert captured["params"] == {"key": "test-key"}
    assert captured["timeout"] == 60.0
    assert captured["json"]["generationConfig"]["temperature"] == 0.3
    assert "Resume body" in captured["json"]["contents"][0]["parts"][0]["text"]


def test_missing_api_key_raises(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(AnalysisServiceError):
        analyze_resume_via_gemini("Resume body")


def test_http_error_raises_generic_message(monkeypatch):
    def fake_post(*args, **kwargs):
        return _FakeResponse(status_code=403, payload={"error": {"message": "API key not valid"}}, reason="Forbidden")

    monkeypatch.setattr(requests, "post", fake_post)

    with pytest.raises(AnalysisServiceError) as excinfo:
        analyze_resume_via_gemini("Resume body")
    assert "Failed to analyze resume with AI" in str(excinfo.value)


def test_network_failure_is_chained(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "post", fake_post)

    with pytest.raises(AnalysisServiceError) as excinfo:
        analyze_resume_via_gemini("Resume body")
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_empty_candidates_raise(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **k: _FakeResponse(payload={"candidates": []}))
    with pytest.raises(AnalysisServiceError):
        analyze_resume_via_gemini("Resume body")
