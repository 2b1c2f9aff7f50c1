"""
Filesystem storage for rendered invoice documents.

Layout::

    <root>/<document_type>/<YYYY>/<MM>/<invoice number, '/' and '\\' -> '-'>.html

Content is opaque text and comes back byte-for-byte: files are written and
read as UTF-8 with newline translation disabled. Writes go to a temporary
file in the target directory and are renamed into place, so a reader never
sees a partial document and concurrent saves resolve to the last rename.
"""

import asyncio
import os
import tempfile
from pathlib import Path

from srecha.config import get_logger
from srecha.core.entities.document import DocumentKey, safe_invoice_filename
from srecha.core.exceptions import DocumentNotFoundError
from srecha.core.interfaces.document_store import IDocumentStore
from srecha.infrastructure.storage.retry import StorageRetry

logger = get_logger(__name__)


class FileSystemDocumentStore(IDocumentStore):
    """Stores one file per DocumentKey under a root directory."""

    def __init__(
        self,
        root: Path,
        file_extension: str = ".html",
        retry: StorageRetry | None = None,
    ):
        self.root = root
        self.file_extension = file_extension
        self.retry = retry or StorageRetry()

    def path_for(self, key: DocumentKey) -> Path:
        """Storage path derived from the key alone."""
        return self.root / key.relative_dir() / f"{key.filename_stem}{self.file_extension}"

    # ------------------------------------------------------------------ save

    async def save(self, key: DocumentKey, content: str) -> Path:
        return await self.retry.run("save_document", self._save, key, content)

    async def _save(self, key: DocumentKey, content: str) -> Path:
        path = self.path_for(key)
        await asyncio.to_thread(self._write_atomic, path, content)
        logger.info(
            "document_saved",
            invoice_number=key.invoice_number,
            document_type=key.document_type,
            path=str(path),
            size=len(content),
        )
        return path

    @staticmethod
    def _write_atomic(path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    # ------------------------------------------------------------------ load

    async def load(self, key: DocumentKey) -> str:
        return await self.retry.run("load_document", self._load, key)

    async def _load(self, key: DocumentKey) -> str:
        path = self.path_for(key)
        try:
            return await asyncio.to_thread(self._read, path)
        except FileNotFoundError:
            raise DocumentNotFoundError(
                key.invoice_number, key.document_type, key.year, key.month
            ) from None

    @staticmethod
    def _read(path: Path) -> str:
        with open(path, encoding="utf-8", newline="") as handle:
            return handle.read()

    async def exists(self, key: DocumentKey) -> bool:
        return await asyncio.to_thread(self.path_for(key).is_file)

    # ------------------------------------------------------------------ delete

    async def delete(self, key: DocumentKey) -> None:
        await self.retry.run("delete_document", self._delete, key)

    async def _delete(self, key: DocumentKey) -> None:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            raise DocumentNotFoundError(
                key.invoice_number, key.document_type, key.year, key.month
            ) from None
        logger.info(
            "document_deleted",
            invoice_number=key.invoice_number,
            document_type=key.document_type,
            path=str(path),
        )

    async def delete_for_invoice(
        self, invoice_number: str, year: int, month: int
    ) -> list[DocumentKey]:
        """Delete the invoice's artifacts of every document type in one period."""
        return await self.retry.run(
            "delete_invoice_documents", self._delete_for_invoice, invoice_number, year, month
        )

    async def _delete_for_invoice(
        self, invoice_number: str, year: int, month: int
    ) -> list[DocumentKey]:
        removed = []
        for document_type in await asyncio.to_thread(self._document_types):
            try:
                key = DocumentKey(
                    invoice_number=invoice_number,
                    document_type=document_type,
                    year=year,
                    month=month,
                )
            except ValueError:
                continue
            try:
                await asyncio.to_thread(self.path_for(key).unlink)
            except FileNotFoundError:
                continue
            removed.append(key)

        if removed:
            logger.info(
                "invoice_documents_deleted",
                invoice_number=invoice_number,
                document_types=[k.document_type for k in removed],
            )
        return removed

    # ------------------------------------------------------------------ move

    async def move(self, source: DocumentKey, target: DocumentKey) -> Path:
        return await self.retry.run("move_document", self._move, source, target)

    async def _move(self, source: DocumentKey, target: DocumentKey) -> Path:
        src_path = self.path_for(source)
        dst_path = self.path_for(target)
        try:
            await asyncio.to_thread(self._rename, src_path, dst_path)
        except FileNotFoundError:
            raise DocumentNotFoundError(
                source.invoice_number, source.document_type, source.year, source.month
            ) from None
        logger.info("document_moved", source=str(src_path), target=str(dst_path))
        return dst_path

    @staticmethod
    def _rename(src: Path, dst: Path) -> None:
        if not src.is_file():
            raise FileNotFoundError(str(src))
        dst.parent.mkdir(parents=True, exist_ok=True)
        os.replace(src, dst)

    # ------------------------------------------------------------------ listing

    async def list_keys(self) -> list[DocumentKey]:
        """Keys of all stored artifacts.

        File names are sanitized invoice numbers, so a listed key carries
        the sanitized form (``12-2024`` for invoice ``12/2024``).
        """
        return await self.retry.run("list_documents", self._list_keys)

    async def _list_keys(self) -> list[DocumentKey]:
        return await asyncio.to_thread(self._scan)

    def _document_types(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())

    def _scan(self) -> list[DocumentKey]:
        keys = []
        for path in sorted(self.root.glob(f"*/*/*/*{self.file_extension}")):
            document_type, year, month = path.parts[-4:-1]
            if not (year.isdigit() and month.isdigit()):
                continue
            try:
                keys.append(
                    DocumentKey(
                        invoice_number=path.stem,
                        document_type=document_type,
                        year=int(year),
                        month=int(month),
                    )
                )
            except ValueError:
                # Foreign files that do not form a valid key
                logger.warning("document_skipped", path=str(path))
        return keys

    @staticmethod
    def matches(key: DocumentKey, invoice_number: str) -> bool:
        """Whether an artifact key files the given invoice number."""
        return key.filename_stem == safe_invoice_filename(invoice_number)
