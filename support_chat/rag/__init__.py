"""Knowledge-base proxy for the hosted RAG service.

Responsibilities:
    - List documents of a knowledge base in one canonical shape
    - Upload a file: backend parse, then train on the parsed content units
    - Delete documents by name

Parsing, chunking and indexing all happen in the RAG service.
"""

from support_chat.rag.config import RagConfig, get_rag_config
from support_chat.rag.proxy import KnowledgeBaseProxy, get_rag_proxy

__all__ = ["KnowledgeBaseProxy", "RagConfig", "get_rag_config", "get_rag_proxy"]
