"""Filesystem storage for rendered documents."""

from srecha.infrastructure.storage.files.document_store import FileSystemDocumentStore

__all__ = ["FileSystemDocumentStore"]
