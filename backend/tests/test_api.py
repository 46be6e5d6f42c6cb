"""HTTP surface tests with the generation backend replaced by FakeGenerator."""

import json

import pytest
from fastapi.testclient import TestClient

from integration_service.api.deps import get_record_mapper
from integration_service.main import app
from integration_service.mapping.errors import GenerationUnavailableError
from integration_service.mapping.mapper import RecordMapper

from conftest import (
    PRODUCT_MAPPING_RULES,
    PRODUCT_SOURCE_SCHEMA,
    PRODUCT_TARGET_SCHEMA,
    FakeGenerator,
)

MAP_PAYLOAD = {
    "source_data": {"id": "p-1", "name": "Oak Desk", "price": 349.99, "stock": 12},
    "source_schema": PRODUCT_SOURCE_SCHEMA,
    "target_schema": PRODUCT_TARGET_SCHEMA,
    "mapping_rules": PRODUCT_MAPPING_RULES,
}

BATCH_PAYLOAD = {
    "file_name": "products.csv",
    "rows": [
        {"id": "p-1", "name": "Oak Desk"},
        {"id": "p-2", "name": "Walnut Shelf"},
    ],
    "source_schema": {"id": "UUID", "name": "String"},
    "target_schema": PRODUCT_TARGET_SCHEMA,
    "mapping_rules": PRODUCT_MAPPING_RULES,
}


@pytest.fixture
def use_generator():
    """Route every request through a FakeGenerator with the given script."""
    def _use(script) -> FakeGenerator:
        generator = FakeGenerator(script)
        app.dependency_overrides[get_record_mapper] = lambda: RecordMapper(generator)
        return generator

    yield _use
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_status(client):
    body = client.get("/api/integration/status").json()
    assert body["service"] == "integration-service"
    assert body["status"] == "UP"
    assert body["model"]


class TestMapRecord:
    def test_success(self, client, use_generator):
        use_generator(['```json\n{"product_id": "p-1", "product_name": "Oak Desk"}\n```'])

        response = client.post("/api/integration/ai/map", json=MAP_PAYLOAD)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "SUCCESS"
        assert body["mapped_data"] == {"product_id": "p-1", "product_name": "Oak Desk"}
        assert body["transformation_details"].startswith("```json")

    def test_failure_is_500_with_result_body(self, client, use_generator):
        use_generator([GenerationUnavailableError("Ollama service is unavailable")])

        response = client.post("/api/integration/ai/map", json=MAP_PAYLOAD)

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "FAILED"
        assert body["error_type"] == "TRANSPORT_ERROR"
        assert body["error_message"] == "Ollama service is unavailable"
        assert body["mapping_id"]

    def test_nan_in_model_output_is_a_failed_result(self, client, use_generator):
        use_generator(['{"product_id": "p-1", "unit_price": NaN}'])

        response = client.post("/api/integration/ai/map", json=MAP_PAYLOAD)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        assert body["status"] == "FAILED"
        assert body["error_type"] == "PARSE_ERROR"
        assert "NaN is not a valid JSON value" in body["error_message"]

    def test_missing_fields_rejected(self, client, use_generator):
        use_generator([])
        response = client.post("/api/integration/ai/map", json={"source_data": {}})
        assert response.status_code == 422


class TestSuggestRules:
    def test_rules(self, client, use_generator):
        use_generator(["- Map id to id\n"])

        response = client.post(
            "/api/integration/ai/rules",
            json={"source_schema": '{"id": "UUID"}', "target_schema": '{"id": "UUID"}'},
        )

        assert response.status_code == 200
        assert response.json() == {"mapping_rules": "- Map id to id"}

    def test_generation_failure_is_502(self, client, use_generator):
        use_generator([GenerationUnavailableError("down")])

        response = client.post(
            "/api/integration/ai/rules",
            json={"source_schema": "{}", "target_schema": "{}"},
        )

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to generate mapping rules: down"


class TestBatch:
    def test_batch_map(self, client, use_generator):
        use_generator(['{"product_id": "p-1", "extra": 1}', "not json"])

        response = client.post("/api/integration/batch/map", json=BATCH_PAYLOAD)

        assert response.status_code == 200
        body = response.json()
        assert body["total_rows_processed"] == 2
        assert body["successful_mappings"] == 1
        assert body["failed_mappings"] == 1
        assert body["mapped_data"] == [{"product_id": "p-1"}]
        assert body["errors"] == [{
            "row_index": 1,
            "error": "No JSON object found in AI response",
            "error_type": "MAPPING_ERROR",
        }]
        assert body["download_url"] == f"/api/integration/batch/{body['batch_id']}/download"

    def test_batch_row_with_infinity_fails_instead_of_leaking_null(self, client, use_generator):
        use_generator(['{"product_id": "p-1"}', '{"product_id": "p-2", "unit_price": Infinity}'])

        body = client.post("/api/integration/batch/map", json=BATCH_PAYLOAD).json()

        assert body["mapped_data"] == [{"product_id": "p-1"}]
        assert body["failed_mappings"] == 1
        assert body["errors"][0]["row_index"] == 1
        assert body["errors"][0]["error_type"] == "MAPPING_ERROR"

    def test_export_json_by_default(self, client, use_generator):
        use_generator(['{"product_id": "p-1"}', '{"product_id": "p-2"}'])

        response = client.post("/api/integration/batch/map/export", json=BATCH_PAYLOAD)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        batch_id = response.headers["x-batch-id"]
        assert response.headers["content-disposition"] == f'attachment; filename="batch-{batch_id}.json"'
        assert response.headers["x-failed-mappings"] == "0"
        assert json.loads(response.text) == [{"product_id": "p-1"}, {"product_id": "p-2"}]

    def test_export_csv(self, client, use_generator):
        use_generator(['{"product_id": "p-1", "product_name": "Oak Desk"}', "{}"])

        response = client.post("/api/integration/batch/map/export?format=csv", json=BATCH_PAYLOAD)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"].endswith('.csv"')
        assert response.headers["x-failed-mappings"] == "1"
        assert response.text == 'product_id,product_name\n"p-1","Oak Desk"\n'

    def test_unknown_export_format_rejected(self, client, use_generator):
        use_generator([])
        response = client.post("/api/integration/batch/map/export?format=xml", json=BATCH_PAYLOAD)
        assert response.status_code == 422
