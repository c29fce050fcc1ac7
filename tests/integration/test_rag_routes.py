"""Integration tests for the knowledge-base endpoints.

Requests go through the real FastAPI app; only the remote RAG service is
replaced, by injecting a KnowledgeBaseProxy bound to a RecordingBackend.
"""

import json

import httpx
import pytest
import pytest_check as check

from support_chat.rag.config import MISSING_KEY_ERROR, RagConfig
from support_chat.rag.proxy import KnowledgeBaseProxy, get_rag_proxy
from tests.helpers import RecordingBackend, route


@pytest.fixture
def rag_backend() -> RecordingBackend:
    """A RAG service that knows one document and accepts parse, train and delete."""
    return RecordingBackend(
        route(
            {
                "/v3/document": httpx.Response(
                    200,
                    json={"documents": [{"_id": "d1", "file_name": "faq.pdf", "file_type": "pdf"}]},
                ),
                "/v3/document/parse": httpx.Response(
                    200, json={"documents": [{"content": "Shipping takes 3 days"}]}
                ),
                "/v3/train": httpx.Response(200, json={"status": "ok"}),
            }
        )
    )


@pytest.fixture
def install_proxy(override_dependency, rag_config: RagConfig, rag_backend: RecordingBackend):
    """Route the app's knowledge-base requests to rag_backend."""
    proxy = KnowledgeBaseProxy(config=rag_config, transport=rag_backend.transport)
    override_dependency(get_rag_proxy, proxy)
    return proxy


class ExplodingProxy:
    """Proxy stand-in whose every operation raises."""

    async def list_documents(self, rag_id):
        raise RuntimeError("boom")

    async def upload_and_train(self, rag_id, file):
        raise RuntimeError("boom")

    async def delete_documents(self, rag_id, document_names):
        raise RuntimeError("boom")


@pytest.mark.usefixtures("install_proxy")
class TestListEndpoint:
    """Tests for GET /api/rag."""

    async def test_lists_documents(
        self, async_client: httpx.AsyncClient, rag_backend: RecordingBackend
    ) -> None:
        response = await async_client.get("/api/rag", params={"ragId": "kb-1"})

        check.equal(response.status_code, 200)
        body = response.json()
        check.is_true(body["success"])
        check.equal(body["ragId"], "kb-1")
        check.equal(
            body["documents"],
            [{"id": "d1", "fileName": "faq.pdf", "fileType": "pdf", "status": "active"}],
        )
        check.equal(rag_backend.requests[0].url.params["rag_id"], "kb-1")

    async def test_missing_rag_id(
        self, async_client: httpx.AsyncClient, rag_backend: RecordingBackend
    ) -> None:
        response = await async_client.get("/api/rag")

        assert response.status_code == 400
        assert response.json()["error"] == "ragId is required"
        assert rag_backend.calls == 0


@pytest.mark.usefixtures("install_proxy")
class TestUploadEndpoint:
    """Tests for POST /api/rag."""

    async def test_upload_and_train(
        self, async_client: httpx.AsyncClient, rag_backend: RecordingBackend
    ) -> None:
        response = await async_client.post(
            "/api/rag",
            data={"ragId": "kb-1"},
            files={"file": ("faq.txt", b"Shipping takes 3 days", "text/plain")},
        )

        check.equal(response.status_code, 200)
        body = response.json()
        check.is_true(body["success"])
        check.equal(body["fileName"], "faq.txt")
        check.equal(body["fileType"], "txt")
        check.equal(body["documentCount"], 1)
        check.equal(rag_backend.paths, ["/v3/document/parse", "/v3/train"])

        train_body = json.loads(rag_backend.requests[1].content)
        check.equal(train_body["documents"][0]["metadata"]["file_name"], "faq.txt")

    async def test_unsupported_type(
        self, async_client: httpx.AsyncClient, rag_backend: RecordingBackend
    ) -> None:
        response = await async_client.post(
            "/api/rag",
            data={"ragId": "kb-1"},
            files={"file": ("logo.png", b"\x89PNG", "image/png")},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Unsupported file type: image/png")
        assert rag_backend.calls == 0

    async def test_missing_file(
        self, async_client: httpx.AsyncClient, rag_backend: RecordingBackend
    ) -> None:
        response = await async_client.post("/api/rag", data={"ragId": "kb-1"})

        assert response.status_code == 400
        assert response.json()["error"] == "ragId and file are required"
        assert rag_backend.calls == 0

    async def test_missing_rag_id(
        self, async_client: httpx.AsyncClient, rag_backend: RecordingBackend
    ) -> None:
        response = await async_client.post(
            "/api/rag", files={"file": ("faq.txt", b"text", "text/plain")}
        )

        assert response.status_code == 400
        assert rag_backend.calls == 0


@pytest.mark.usefixtures("install_proxy")
class TestDeleteEndpoint:
    """Tests for DELETE /api/rag."""

    async def test_deletes_documents(
        self, async_client: httpx.AsyncClient, rag_backend: RecordingBackend
    ) -> None:
        response = await async_client.request(
            "DELETE",
            "/api/rag",
            json={"ragId": "kb-1", "documentNames": ["faq.pdf", "old.pdf"]},
        )

        check.equal(response.status_code, 200)
        check.equal(response.json()["deletedCount"], 2)
        check.equal(rag_backend.requests[0].method, "DELETE")
        check.equal(
            json.loads(rag_backend.requests[0].content),
            {"rag_id": "kb-1", "document_names": ["faq.pdf", "old.pdf"]},
        )

    async def test_invalid_json(
        self, async_client: httpx.AsyncClient, rag_backend: RecordingBackend
    ) -> None:
        response = await async_client.request(
            "DELETE",
            "/api/rag",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Request body must be valid JSON"
        assert rag_backend.calls == 0

    @pytest.mark.parametrize(
        "payload",
        [{"ragId": "kb-1", "documentNames": []}, {"ragId": "kb-1"}, ["faq.pdf"]],
    )
    async def test_invalid_payload(
        self, async_client: httpx.AsyncClient, rag_backend: RecordingBackend, payload
    ) -> None:
        response = await async_client.request("DELETE", "/api/rag", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "ragId and documentNames array are required"
        assert rag_backend.calls == 0


async def test_missing_credential_reported(
    async_client: httpx.AsyncClient,
    override_dependency,
    unconfigured_rag_config: RagConfig,
) -> None:
    backend = RecordingBackend(lambda request: httpx.Response(200, json={}))
    override_dependency(
        get_rag_proxy,
        KnowledgeBaseProxy(config=unconfigured_rag_config, transport=backend.transport),
    )

    response = await async_client.get("/api/rag", params={"ragId": "kb-1"})

    assert response.status_code == 500
    assert response.json()["error"] == MISSING_KEY_ERROR
    assert backend.calls == 0


@pytest.mark.parametrize(
    ("method", "kwargs"),
    [
        ("GET", {"params": {"ragId": "kb-1"}}),
        ("POST", {"data": {"ragId": "kb-1"}, "files": {"file": ("a.txt", b"x", "text/plain")}}),
        ("DELETE", {"json": {"ragId": "kb-1", "documentNames": ["a.txt"]}}),
    ],
)
async def test_unexpected_error_becomes_server_error(
    async_client: httpx.AsyncClient, override_dependency, method: str, kwargs: dict
) -> None:
    override_dependency(get_rag_proxy, ExplodingProxy())

    response = await async_client.request(method, "/api/rag", **kwargs)

    check.equal(response.status_code, 500)
    check.is_false(response.json()["success"])
    check.equal(response.json()["error"], "boom")
    check.is_in("timestamp", response.json())


async def test_health(async_client: httpx.AsyncClient) -> None:
    response = await async_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "support-chat"}


async def test_cors_headers_present(async_client: httpx.AsyncClient) -> None:
    response = await async_client.get("/health", headers={"Origin": "https://shop.example"})

    assert "access-control-allow-origin" in response.headers
