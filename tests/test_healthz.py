"""
Test health endpoint for the palette extraction service.
"""


def test_health_check(test_client):
    """Test health check response fields."""
    response = test_client.get("/healthz")
    
    assert response.status_code == 200
    data = response.json()
    
    assert data["ok"] is True
    assert "version" in data
    assert data["service"] == "palette-extractor"


def test_error_responses_documented(test_client):
    """Palette routes advertise the shared error body in the OpenAPI schema."""
    schema = test_client.get("/openapi.json").json()
    ref = "#/components/schemas/ErrorResponse"

    assert "ErrorResponse" in schema["components"]["schemas"]

    expected = {
        "/palette/extract": {"400", "415", "422"},
        "/palette/export": {"400", "415", "422"},
        "/palette/pick": {"400", "404", "415"},
    }
    for path, codes in expected.items():
        responses = schema["paths"][path]["post"]["responses"]
        for code in codes:
            body = responses[code]["content"]["application/json"]["schema"]
            assert body["$ref"] == ref
