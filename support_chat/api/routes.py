"""Knowledge-base endpoints.

Thin HTTP layer over KnowledgeBaseProxy: reads the inbound request, hands it
to the proxy and answers with the proxy's envelope and status code.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse

from support_chat.models.schemas import ProxyResult, UploadedFile, utc_timestamp
from support_chat.rag.proxy import KnowledgeBaseProxy, get_rag_proxy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rag", tags=["knowledge-base"])

ProxyDep = Annotated[KnowledgeBaseProxy, Depends(get_rag_proxy)]


def _respond(result: ProxyResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.body)


def _error(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "timestamp": utc_timestamp()},
    )


def _server_error(exc: Exception) -> JSONResponse:
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Server error")


@router.get("")
async def list_documents(
    proxy: ProxyDep,
    rag_id: Annotated[str | None, Query(alias="ragId")] = None,
) -> JSONResponse:
    """List documents in a knowledge base.

    Raises:
        400: ragId missing.
        500: Credential not configured or unexpected error.
    """
    try:
        return _respond(await proxy.list_documents(rag_id))
    except Exception as e:
        logger.exception("Unexpected error listing documents")
        return _server_error(e)


@router.post("")
async def upload_document(
    proxy: ProxyDep,
    rag_id: Annotated[str | None, Form(alias="ragId")] = None,
    file: Annotated[UploadFile | None, File()] = None,
) -> JSONResponse:
    """Upload a document and train the knowledge base on it.

    Accepts multipart/form-data with fields ragId and file (PDF, DOCX or TXT).

    Raises:
        400: Missing field, unsupported type, or nothing extracted.
        413: File exceeds the upload limit.
        500: Credential not configured or unexpected error.
    """
    try:
        uploaded: UploadedFile | None = None
        if file is not None:
            uploaded = UploadedFile(
                filename=file.filename or "",
                content_type=file.content_type or "",
                content=await file.read(),
            )
        return _respond(await proxy.upload_and_train(rag_id, uploaded))
    except Exception as e:
        logger.exception("Unexpected error uploading document")
        return _server_error(e)


@router.delete("")
async def delete_documents(proxy: ProxyDep, request: Request) -> JSONResponse:
    """Delete documents by name.

    Expects a JSON body {"ragId": str, "documentNames": [str, ...]}.

    Raises:
        400: Invalid JSON, ragId missing, or documentNames empty.
        500: Credential not configured or unexpected error.
    """
    try:
        try:
            payload: Any = await request.json()
        except ValueError:
            return _error(status.HTTP_400_BAD_REQUEST, "Request body must be valid JSON")
        if not isinstance(payload, dict):
            payload = {}
        return _respond(
            await proxy.delete_documents(payload.get("ragId"), payload.get("documentNames"))
        )
    except Exception as e:
        logger.exception("Unexpected error deleting documents")
        return _server_error(e)
