"""Shared pytest fixtures for the GTM gateway test suite."""

from __future__ import annotations

import os
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

# Ensure test environment variables are set BEFORE importing app modules
os.environ.setdefault("APIFY_API_TOKEN", "test-token-not-real")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")


SAMPLE_RECORD = {
    "consultation_id": "c-2024-001",
    "report_url": "https://reports.example.com/c-2024-001.html",
    "primary_epic_focus": "Market Expansion",
    "epic_scores": {"E": 8, "P": 6, "I": 7, "C": 5},
    "consultation_output": "## GTM Plan\n1. Pick two EU beachhead markets.",
    "timestamp": "2025-01-01T10:05:00Z",
}

VALID_PAYLOAD = {
    "client_name": "Jane",
    "company_name": "Acme",
    "gtm_challenge": "expansion",
    "business_stage": "seed",
}


def make_run(status: str = "SUCCEEDED", **overrides: Any):
    """Build a JobRun from a platform-shaped (camelCase) run object."""
    from gtm_gateway.models.job_models import JobRun

    data = {
        "id": "run-abc123",
        "status": status,
        "startedAt": "2025-01-01T10:00:00.000Z",
        "finishedAt": "2025-01-01T10:05:00.000Z",
        "statusMessage": None,
        "defaultDatasetId": "ds-xyz",
        "defaultKeyValueStoreId": "kv-xyz",
    }
    data.update(overrides)
    return JobRun.model_validate(data)


class FakePlatform:
    """In-memory JobPlatform recording every call."""

    def __init__(
        self,
        run: Any = None,
        records: Optional[list[dict[str, Any]]] = None,
        output: Any = None,
        submit_error: Optional[Exception] = None,
        records_error: Optional[Exception] = None,
        output_error: Optional[Exception] = None,
        actor: Optional[dict[str, Any]] = None,
        runs: Optional[list[Any]] = None,
    ) -> None:
        self.run = run if run is not None else make_run()
        self.records = records if records is not None else [SAMPLE_RECORD]
        self.output = output
        self.submit_error = submit_error
        self.records_error = records_error
        self.output_error = output_error
        self.actor = actor or {}
        self.runs = runs or []
        self.submissions: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self.closed = False

    async def submit(self, actor_id, run_input, *, timeout_secs, memory_mbytes):
        self.calls.append("submit")
        self.submissions.append({
            "actor_id": actor_id,
            "run_input": run_input,
            "timeout_secs": timeout_secs,
            "memory_mbytes": memory_mbytes,
        })
        if self.submit_error is not None:
            raise self.submit_error
        return self.run

    async def list_output_records(self, dataset_id):
        self.calls.append("list_output_records")
        if self.records_error is not None:
            raise self.records_error
        return list(self.records)

    async def get_record(self, store_id, key):
        self.calls.append("get_record")
        if self.output_error is not None:
            raise self.output_error
        return self.output

    async def get_actor(self, actor_id):
        self.calls.append("get_actor")
        if self.submit_error is not None:
            raise self.submit_error
        return self.actor

    async def list_runs(self, actor_id, *, limit=10, desc=True):
        self.calls.append("list_runs")
        if self.submit_error is not None:
            raise self.submit_error
        return self.runs[:limit]

    async def aclose(self):
        self.closed = True


@pytest.fixture
def settings():
    """Settings isolated from the process environment and .env."""
    from gtm_gateway.config import Settings

    return Settings(
        _env_file=None,
        apify_api_token="test-token-not-real",
        app_env="test",
    )


@pytest.fixture
def platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def make_client(settings):
    """Factory returning a TestClient wired to the given fake platform."""
    from gtm_gateway.main import create_app

    def _make(platform: FakePlatform, **setting_overrides: Any) -> TestClient:
        app_settings = settings.model_copy(update=setting_overrides) if setting_overrides else settings
        return TestClient(create_app(settings=app_settings, platform=platform))

    return _make


@pytest.fixture
def client(make_client, platform) -> TestClient:
    """FastAPI synchronous test client backed by the default fake platform."""
    return make_client(platform)
