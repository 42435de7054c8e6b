"""갤러리 API (create, variations, list, get, delete, clear) 테스트."""

from fakes import rate_limit_error


def _create(client, prompt: str = "a red fox in snow", **extra):
    return client.post("/api/images", json={"prompt": prompt, **extra})


class TestCreate:
    def test_create_image(self, client):
        """생성 → 201 + 저장된 레코드 (enhancedPrompt 없음)."""
        resp = _create(client)

        assert resp.status_code == 201
        data = resp.json()
        assert data["prompt"] == "a red fox in snow"
        assert data["url"].startswith("https://")
        assert "id" in data and "timestamp" in data
        assert "enhancedPrompt" not in data

    def test_create_with_enhancement(self, client, fake_openai):
        resp = _create(client, "고양이 한 마리", enhance=True, language="ko")

        assert resp.status_code == 201
        data = resp.json()
        assert data["prompt"] == "고양이 한 마리"
        assert data["enhancedPrompt"] == fake_openai.images.calls[0]["prompt"]

    def test_create_short_prompt(self, client, fake_openai):
        resp = _create(client, "hi")

        assert resp.status_code == 400
        assert resp.json()["error_code"] == "VALIDATION_ERROR"
        assert fake_openai.images.calls == []

    def test_failed_create_not_persisted(self, client, fake_openai):
        fake_openai.images.always_fail = rate_limit_error()

        resp = _create(client)

        assert resp.status_code == 429
        assert client.get("/api/images").json() == []

    def test_create_variation(self, client):
        original = _create(client).json()

        resp = client.post(
            "/api/images/variations",
            json={"prompt": "make it night", "referenceImageUrl": original["url"]},
        )

        assert resp.status_code == 201
        assert resp.json()["prompt"] == "make it night"
        assert len(client.get("/api/images").json()) == 2


class TestListAndGet:
    def test_list_newest_first(self, client):
        first = _create(client, "first image").json()
        second = _create(client, "second image").json()

        resp = client.get("/api/images")

        assert resp.status_code == 200
        assert [img["id"] for img in resp.json()] == [second["id"], first["id"]]

    def test_list_empty(self, client):
        resp = client.get("/api/images")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_get_image(self, client):
        created = _create(client).json()

        resp = client.get(f"/api/images/{created['id']}")

        assert resp.status_code == 200
        assert resp.json() == created

    def test_image_not_found(self, client):
        """없는 id 조회 → 404 IMAGE_NOT_FOUND."""
        resp = client.get("/api/images/does-not-exist")
        assert resp.status_code == 404
        assert resp.json()["error_code"] == "IMAGE_NOT_FOUND"


class TestDelete:
    def test_delete_image(self, client):
        """삭제 → 200, 이후 조회 → 404."""
        created = _create(client).json()

        resp = client.delete(f"/api/images/{created['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"deleted": True}

        resp = client.get(f"/api/images/{created['id']}")
        assert resp.status_code == 404

    def test_delete_unknown(self, client):
        _create(client)

        resp = client.delete("/api/images/unknown")

        assert resp.status_code == 404
        assert len(client.get("/api/images").json()) == 1

    def test_clear(self, client):
        _create(client, "first image")
        _create(client, "second image")

        resp = client.delete("/api/images")

        assert resp.status_code == 200
        assert client.get("/api/images").json() == []


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
