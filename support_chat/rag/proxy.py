"""Knowledge-base proxy for the hosted RAG service.

Validates document-management requests, forwards them to the RAG service and
normalizes both directions into a stable envelope:

    {"success": bool, ...payload | "error", "timestamp": iso8601}

The proxy holds no document state. Every operation returns a ProxyResult
carrying the HTTP status the inbound route should answer with:

- 400/413 for invalid input, checked before any network call
- 500 when the service credential is missing, also before any network call
- the backend's own status (with its raw body in "details") on backend failure
- 500 on transport errors
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

import httpx
from fastapi import status
from pydantic import ValidationError

from support_chat.models.schemas import Document, ProxyResult, UploadedFile, utc_timestamp
from support_chat.rag.config import MISSING_KEY_ERROR, RagConfig, get_rag_config

logger = logging.getLogger(__name__)


class FileTypeConfig(NamedTuple):
    """Canonical file type and the backend parser that handles it."""

    file_type: str
    parser: str


FILE_TYPE_CONFIG: dict[str, FileTypeConfig] = {
    "application/pdf": FileTypeConfig("pdf", "pypdf"),
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": FileTypeConfig(
        "docx", "docx2txt"
    ),
    "text/plain": FileTypeConfig("txt", "txt_parser"),
}

# Canonical Document field -> backend keys, first present wins
DOCUMENT_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "_id"),
    "file_name": ("file_name", "fileName", "name"),
    "file_type": ("file_type", "fileType"),
    "file_size": ("file_size", "fileSize"),
    "status": ("status",),
    "uploaded_at": ("uploaded_at", "createdAt"),
    "document_count": ("document_count", "chunks"),
}

LIST_ITEM_KEYS = ("documents", "data")
PARSED_UNIT_KEYS = ("documents", "chunks")
UNIT_CONTENT_KEYS = ("content", "text")


def resolve_file_type(content_type: str | None) -> FileTypeConfig | None:
    """Look up the allow-list entry for a declared content type.

    Media type parameters such as "; charset=utf-8" are ignored.
    """
    if not content_type:
        return None
    media_type = content_type.split(";", 1)[0].strip().lower()
    return FILE_TYPE_CONFIG.get(media_type)


def _first_present(raw: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def normalize_document(raw: Mapping[str, Any]) -> Document:
    """Map one backend document record onto the canonical Document shape."""
    fields: dict[str, Any] = {}
    for field, keys in DOCUMENT_FIELD_ALIASES.items():
        value = _first_present(raw, keys)
        if value is not None:
            fields[field] = value
    return Document(**fields)


def _extract_items(data: Any, keys: Iterable[str]) -> list[Any]:
    """Pull the item list out of a backend payload.

    Accepts either a bare list or an object holding the list under one of keys.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, Mapping):
        for key in keys:
            items = data.get(key)
            if items:
                return list(items)
    return []


def _training_document(unit: Any, file_name: str, file_type: str) -> dict[str, Any]:
    """Build one train-endpoint entry from a parsed content unit."""
    content: Any = unit
    extra: Mapping[str, Any] = {}
    if isinstance(unit, Mapping):
        found = _first_present(unit, UNIT_CONTENT_KEYS)
        if found is not None:
            content = found
        metadata = unit.get("metadata")
        if isinstance(metadata, Mapping):
            extra = metadata
    return {
        "content": content,
        "metadata": {"file_name": file_name, "file_type": file_type, **extra},
    }


def _ok(**payload: Any) -> ProxyResult:
    return ProxyResult(
        status_code=status.HTTP_200_OK,
        body={"success": True, **payload, "timestamp": utc_timestamp()},
    )


def _fail(status_code: int, error: str, details: str | None = None) -> ProxyResult:
    body: dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    body["timestamp"] = utc_timestamp()
    return ProxyResult(status_code=status_code, body=body)


def _backend_failure(action: str, response: httpx.Response) -> ProxyResult:
    logger.warning(f"RAG backend failed to {action}: HTTP {response.status_code}")
    return _fail(
        response.status_code,
        f"Failed to {action}: {response.status_code}",
        details=response.text,
    )


def _transport_failure(exc: Exception) -> ProxyResult:
    logger.warning(f"RAG request failed: {exc!r}")
    return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Server error")


class KnowledgeBaseProxy:
    """Forwards list, upload-and-train and delete requests to the RAG service.

    Each call opens its own short-lived HTTP client, so one instance can serve
    concurrent requests without coordination.
    """

    def __init__(
        self,
        config: RagConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the proxy.

        Args:
            config: Optional RAG configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport, used to stub the backend.
        """
        self._config = config or get_rag_config()
        self._transport = transport

    @property
    def config(self) -> RagConfig:
        return self._config

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.base_url,
            headers={"x-api-key": self._config.api_key},
            timeout=self._config.timeout,
            transport=self._transport,
        )

    def _missing_credential(self) -> ProxyResult:
        logger.error("RAG request rejected: LYZR_API_KEY is not set")
        return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, MISSING_KEY_ERROR)

    async def list_documents(self, rag_id: str | None) -> ProxyResult:
        """List the documents of a knowledge base.

        Args:
            rag_id: Knowledge base identifier.

        Returns:
            ProxyResult whose body holds "documents" (canonical shape) and "ragId".
        """
        if not rag_id:
            return _fail(status.HTTP_400_BAD_REQUEST, "ragId is required")
        if not self._config.is_configured:
            return self._missing_credential()

        try:
            async with self._client() as client:
                response = await client.get("/document", params={"rag_id": rag_id})
            if not response.is_success:
                return _backend_failure("get documents", response)
            items = _extract_items(response.json(), LIST_ITEM_KEYS)
        except (httpx.HTTPError, ValueError) as e:
            return _transport_failure(e)

        documents = []
        for item in items:
            if not isinstance(item, Mapping):
                continue
            try:
                document = normalize_document(item)
            except ValidationError as e:
                logger.warning(
                    f"Skipping unreadable document record in {rag_id}: {e.error_count()} error(s)"
                )
                continue
            documents.append(document.model_dump(by_alias=True, exclude_none=True))

        return _ok(documents=documents, ragId=rag_id)

    async def upload_and_train(self, rag_id: str | None, file: UploadedFile | None) -> ProxyResult:
        """Parse a file with the backend parser, then train the knowledge base on it.

        Parsing that yields no content units aborts before training. A failed
        train after a successful parse is reported as-is; nothing is rolled back.

        Args:
            rag_id: Knowledge base identifier.
            file: The uploaded file.

        Returns:
            ProxyResult whose body reports the number of trained content units.
        """
        if not self._config.is_configured:
            return self._missing_credential()
        if not rag_id or file is None:
            return _fail(status.HTTP_400_BAD_REQUEST, "ragId and file are required")

        file_config = resolve_file_type(file.content_type)
        if file_config is None:
            return _fail(
                status.HTTP_400_BAD_REQUEST,
                f"Unsupported file type: {file.content_type}. Supported: PDF, DOCX, TXT",
            )

        if len(file.content) > self._config.max_upload_bytes:
            size_mb = len(file.content) / (1024 * 1024)
            limit_mb = self._config.max_upload_bytes / (1024 * 1024)
            return _fail(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb:g}MB)",
            )

        try:
            async with self._client() as client:
                parse_response = await client.post(
                    "/document/parse",
                    files={"file": (file.filename, file.content, file.content_type)},
                    data={"parser": file_config.parser},
                )
                if not parse_response.is_success:
                    return _backend_failure("parse document", parse_response)

                units = _extract_items(parse_response.json(), PARSED_UNIT_KEYS)
                if not units:
                    logger.warning(f"No content extracted from {file.filename}")
                    return _fail(status.HTTP_400_BAD_REQUEST, "No content extracted from document")

                train_response = await client.post(
                    "/train",
                    json={
                        "rag_id": rag_id,
                        "documents": [
                            _training_document(unit, file.filename, file_config.file_type)
                            for unit in units
                        ],
                    },
                )
                if not train_response.is_success:
                    return _backend_failure("train knowledge base", train_response)
        except (httpx.HTTPError, ValueError) as e:
            return _transport_failure(e)

        logger.info(f"Trained {rag_id} on {file.filename} ({len(units)} content units)")
        return _ok(
            message="Document uploaded and trained successfully",
            fileName=file.filename,
            fileType=file_config.file_type,
            documentCount=len(units),
            ragId=rag_id,
        )

    async def delete_documents(self, rag_id: Any, document_names: Any) -> ProxyResult:
        """Delete documents from a knowledge base by name.

        The reported deletedCount is the number of names requested; the
        backend's own count is not reconciled.

        Args:
            rag_id: Knowledge base identifier.
            document_names: Non-empty list of document names.

        Returns:
            ProxyResult whose body reports deletedCount.
        """
        if not self._config.is_configured:
            return self._missing_credential()
        if (
            not rag_id
            or not isinstance(rag_id, str)
            or not isinstance(document_names, list)
            or not document_names
            or not all(isinstance(name, str) and name for name in document_names)
        ):
            return _fail(
                status.HTTP_400_BAD_REQUEST,
                "ragId and documentNames array are required",
            )

        try:
            async with self._client() as client:
                response = await client.request(
                    "DELETE",
                    "/document",
                    json={"rag_id": rag_id, "document_names": document_names},
                )
        except httpx.HTTPError as e:
            return _transport_failure(e)

        if not response.is_success:
            return _backend_failure("delete documents", response)

        logger.info(f"Deleted {len(document_names)} document(s) from {rag_id}")
        return _ok(
            message="Documents deleted successfully",
            deletedCount=len(document_names),
            ragId=rag_id,
        )


# Module-level singleton instance
_rag_proxy: KnowledgeBaseProxy | None = None


def get_rag_proxy() -> KnowledgeBaseProxy:
    """Get or create the global knowledge-base proxy.

    Returns:
        The KnowledgeBaseProxy instance.
    """
    global _rag_proxy
    if _rag_proxy is None:
        _rag_proxy = KnowledgeBaseProxy()
    return _rag_proxy
