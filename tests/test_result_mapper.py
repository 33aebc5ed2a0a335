"""Result mapper: success envelope, failure envelope and the empty-dataset case."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from gtm_gateway.errors import NoResultError, PlatformError
from gtm_gateway.services.result_mapper import ResultMapper
from tests.conftest import SAMPLE_RECORD, FakePlatform, make_run

GENERATED_AT = datetime(2025, 1, 1, 10, 6, tzinfo=timezone.utc)


def _mapper(platform) -> ResultMapper:
    return ResultMapper(platform, console_url="https://console.apify.com/")


@pytest.mark.asyncio
async def test_success_maps_first_record_and_ignores_the_rest():
    second = {**SAMPLE_RECORD, "consultation_id": "c-2024-002"}
    platform = FakePlatform(records=[SAMPLE_RECORD, second], output={"html": "<h1>Report</h1>"})

    response = await _mapper(platform).map(make_run(), generated_at=GENERATED_AT)
    body = response.to_json_dict()

    assert body["success"] is True
    assert body["data"] == SAMPLE_RECORD
    assert body["runId"] == "run-abc123"
    assert body["status"] == "SUCCEEDED"
    assert body["duration"] == 300_000
    assert body["additionalData"] == {"html": "<h1>Report</h1>"}
    assert body["consoleUrl"] == "https://console.apify.com/actors/runs/run-abc123"
    assert body["datasetUrl"] == "https://console.apify.com/storage/datasets/ds-xyz"
    assert body["keyValueStoreUrl"] == "https://console.apify.com/storage/key-value-stores/kv-xyz"
    assert body["timestamp"] == GENERATED_AT.isoformat()


@pytest.mark.asyncio
async def test_missing_record_keys_map_to_null_and_extra_keys_are_dropped():
    platform = FakePlatform(records=[{"consultation_id": "c-1", "internal_debug": True}])

    response = await _mapper(platform).map(make_run(), generated_at=GENERATED_AT)
    data = response.to_json_dict()["data"]

    assert data == {
        "consultation_id": "c-1",
        "report_url": None,
        "primary_epic_focus": None,
        "epic_scores": None,
        "consultation_output": None,
        "timestamp": None,
    }


@pytest.mark.asyncio
async def test_repeated_mapping_is_byte_identical():
    platform = FakePlatform()
    mapper = _mapper(platform)
    run = make_run()

    first = await mapper.map(run, generated_at=GENERATED_AT)
    second = await mapper.map(run, generated_at=GENERATED_AT)

    assert json.dumps(first.to_json_dict()) == json.dumps(second.to_json_dict())


@pytest.mark.asyncio
async def test_empty_dataset_raises_no_result():
    platform = FakePlatform(records=[])

    with pytest.raises(NoResultError) as exc_info:
        await _mapper(platform).map(make_run(), generated_at=GENERATED_AT)

    error = exc_info.value
    assert error.status_code == 500
    assert error.code == "NO_RESULT"
    assert error.details["runId"] == "run-abc123"
    assert error.details["datasetUrl"] == "https://console.apify.com/storage/datasets/ds-xyz"
    assert "get_record" not in platform.calls


@pytest.mark.asyncio
async def test_run_without_dataset_raises_no_result():
    platform = FakePlatform()

    with pytest.raises(NoResultError):
        await _mapper(platform).map(make_run(defaultDatasetId=None), generated_at=GENERATED_AT)

    assert "list_output_records" not in platform.calls


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, message, code",
    [
        ("FAILED", "GTM consultation failed", "JOB_FAILED"),
        ("ABORTED", "GTM consultation was aborted", "JOB_ABORTED"),
        ("TIMED-OUT", "GTM consultation timed out", "JOB_TIMED_OUT"),
        ("SOMETHING-NEW", "GTM consultation completed with unexpected status", "JOB_SOMETHING_NEW"),
    ],
)
async def test_failure_statuses_produce_failure_envelope(status, message, code):
    platform = FakePlatform()
    run = make_run(status, statusMessage="Actor exited with code 1")

    response = await _mapper(platform).map(run, generated_at=GENERATED_AT)
    body = response.to_json_dict()

    assert body == {
        "success": False,
        "message": message,
        "code": code,
        "status": status,
        "error": "Actor exited with code 1",
        "runId": "run-abc123",
        "consoleUrl": "https://console.apify.com/actors/runs/run-abc123",
        "datasetUrl": "https://console.apify.com/storage/datasets/ds-xyz",
        "timestamp": GENERATED_AT.isoformat(),
    }
    assert platform.calls == []


@pytest.mark.asyncio
async def test_output_record_errors_are_ignored():
    platform = FakePlatform(output_error=PlatformError("Key-value store was not found", status_code=404))

    response = await _mapper(platform).map(make_run(), generated_at=GENERATED_AT)

    assert response.success is True
    assert response.additional_data is None


@pytest.mark.asyncio
async def test_mapping_does_not_mutate_run():
    run = make_run()
    before = run.model_dump()

    await _mapper(FakePlatform()).map(run, generated_at=GENERATED_AT)

    assert run.model_dump() == before
