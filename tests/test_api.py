# tests/test_api.py
"""Tests for the HTTP endpoints."""

import pytest

from advisor.relay import AdvisorRelay


class TestCategorizeEndpoint:
    def test_bulletin_category(self, client):
        response = client.post("/api/categorize", json={"code": "CSE2010", "name": "Data Structures"})
        assert response.status_code == 200
        assert response.json() == {"category": "cs", "source": "bulletin"}

    def test_prefix_category(self, client):
        response = client.post("/api/categorize", json={"code": "MATH2200"})
        assert response.json() == {"category": "foundation", "source": "prefix"}

    def test_empty_body_is_default(self, client):
        response = client.post("/api/categorize", json={})
        assert response.json() == {"category": "breadth", "source": "default"}

    @pytest.mark.parametrize("body", ["{not json", "", "[1, 2]", "null"])
    def test_malformed_json_is_treated_as_empty(self, client, body):
        response = client.post(
            "/api/categorize", content=body, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 200
        assert response.json() == {"category": "breadth", "source": "default"}

    def test_wrong_field_type_is_error(self, client):
        response = client.post("/api/categorize", json={"code": ["CSE2010"]})
        assert response.status_code == 200
        assert response.json() == {"category": "breadth", "source": "error"}

    @pytest.mark.parametrize("name", [5, None, ["Data", "Structures"]])
    def test_non_string_name_is_coerced(self, client, name):
        response = client.post("/api/categorize", json={"code": "CSE2010", "name": name})
        assert response.json() == {"category": "cs", "source": "bulletin"}

    def test_numeric_name_alone_uses_prefix_tier(self, client):
        response = client.post("/api/categorize", json={"name": 101})
        assert response.json() == {"category": "breadth", "source": "prefix"}


class TestChatEndpoint:
    def test_reply(self, client, upstream):
        response = client.post(
            "/api/chat",
            json={
                "message": "What next?",
                "history": [{"role": "user", "content": "hi"}],
                "checked": [{"code": "CSE2010", "category": "cs", "units": 3}],
            },
        )
        assert response.status_code == 200
        assert response.json() == {"reply": "Take CSE2010 next."}
        assert "  • CSE2010 (3u)" in upstream.sent_payload()["input"]

    def test_invalid_json(self, client, upstream):
        response = client.post(
            "/api/chat", content="{oops", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 200
        assert response.json() == {"reply": "Advisor error: invalid JSON body."}
        assert upstream.requests == []

    @pytest.mark.parametrize("body", [{}, {"message": ""}, {"message": 7}, {"message": None}])
    def test_message_is_required(self, client, upstream, body):
        response = client.post("/api/chat", json=body)
        assert response.status_code == 200
        assert response.json() == {"reply": "Advisor error: message is required."}
        assert upstream.requests == []

    def test_malformed_history_and_checked_are_ignored(self, client, upstream):
        response = client.post(
            "/api/chat",
            json={"message": "hi", "history": "nope", "checked": [1, {"code": "MATH1510"}]},
        )
        assert response.json() == {"reply": "Take CSE2010 next."}
        prompt = upstream.sent_payload()["input"]
        assert "- other:\n  • MATH1510" in prompt
        assert prompt.endswith("\n\nUser: hi")

    def test_upstream_error_is_still_200(self, client, upstream):
        upstream.status_code = 429
        upstream.body = {"error": {"message": "rate limited"}}
        response = client.post("/api/chat", json={"message": "hi"})
        assert response.status_code == 200
        assert response.json() == {"reply": "Advisor error: rate limited"}

    def test_relay_failure_is_still_200(self, client, monkeypatch, upstream):
        from app.main import app

        relay = AdvisorRelay(api_key="\ufeffsk-test", transport=upstream.transport)
        monkeypatch.setattr(app.state, "relay", relay)
        response = client.post("/api/chat", json={"message": "hi"})
        assert response.status_code == 200
        assert response.json() == {"reply": "Advisor error: unable to reach OpenAI."}


class TestRouting:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/api/unknown")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    def test_wrong_method_is_json_404(self, client):
        response = client.get("/api/chat")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    def test_bare_options_is_204(self, client):
        assert client.options("/api/chat").status_code == 204

    def test_cors_allows_any_origin(self, client):
        response = client.post(
            "/api/categorize", json={}, headers={"Origin": "http://localhost:5173"}
        )
        assert response.headers["access-control-allow-origin"] == "*"

    def test_missing_index_is_plain_404(self, client, monkeypatch, tmp_path):
        from app import main

        monkeypatch.setattr(main.settings, "static_dir", str(tmp_path))
        response = client.get("/")
        assert response.status_code == 404
        assert response.text == "Not found"

    def test_index_falls_back_to_public_dir(self, client, monkeypatch, tmp_path):
        from app import main

        (tmp_path / "public").mkdir()
        (tmp_path / "public" / "index.html").write_text("<h1>Advisor</h1>")
        monkeypatch.setattr(main.settings, "static_dir", str(tmp_path))
        response = client.get("/index.html")
        assert response.status_code == 200
        assert "<h1>Advisor</h1>" in response.text
