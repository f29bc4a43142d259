"""OpenAPI parity checks for the implemented project endpoints."""

from __future__ import annotations

from app.main import app

HTTP_METHODS = {"get", "post", "put", "patch", "delete"}
CONTRACT = {
    "/api/projects": {"get": {"200"}, "post": {"201"}},
    "/api/projects/options": {"get": {"200"}},
    "/api/projects/{project_id}": {"get": {"200"}, "put": {"200"}, "delete": {"200"}},
    "/health": {"get": {"200"}},
    "/api": {"get": {"200"}},
}


def test_openapi_parity_for_project_paths() -> None:
    generated = app.openapi()["paths"]

    for path, methods in sorted(CONTRACT.items()):
        assert path in generated, f"Missing implemented path: {path}"

        actual_methods = set(generated[path].keys()) & HTTP_METHODS
        assert set(methods) == actual_methods, (
            f"Method mismatch for {path}: expected {sorted(methods)} got {sorted(actual_methods)}"
        )

        for method, expected_success in methods.items():
            actual_codes = set(generated[path][method].get("responses", {}).keys())
            assert expected_success <= actual_codes, (
                f"Success status mismatch for {path} {method.upper()}: "
                f"expected {sorted(expected_success)} to be present in {sorted(actual_codes)}"
            )


def test_project_schema_uses_camel_case_fields() -> None:
    schemas = app.openapi()["components"]["schemas"]

    properties = schemas["Project"]["properties"]
    assert {"clientName", "clientEmail", "termsAccepted", "createdAt"} <= set(properties)
