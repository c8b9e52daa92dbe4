"""Document store access.

The engine needs four operations from a store: enumerate notes, look up one
note, read it and write it back. ``FileSystemStore`` serves a vault directory;
``MemoryStore`` keeps notes in a dict for tests and embedding hosts.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Protocol

from .engine.core.document import DocumentRecord
from .errors import TransientIOError

logger = logging.getLogger(__name__)

_FRONTMATTER_RE = re.compile(r"\A---\n(.*?)\n---", re.DOTALL)
_FM_TAGS_INLINE_RE = re.compile(r"^tags:\s*\[(.*?)\]\s*$", re.MULTILINE)
_FM_TAGS_BLOCK_RE = re.compile(r"^tags:\s*\n((?:\s*-\s*.+\n?)+)", re.MULTILINE)
_FM_TAGS_SCALAR_RE = re.compile(r"^tags:\s*([^\[\n]+)$", re.MULTILINE)
_INLINE_TAG_RE = re.compile(r"(?<![\w#])#([\w/-]+)")


class DocumentStore(Protocol):
    """What the engine needs from a document store."""

    async def list_documents(self) -> list[DocumentRecord]: ...

    async def get(self, path: str) -> DocumentRecord | None: ...

    async def read(self, path: str) -> str: ...

    async def write(self, path: str, text: str) -> None: ...


def extract_tags(text: str) -> set[str]:
    """Collect frontmatter ``tags`` and inline ``#tags`` from a note."""
    tags: set[str] = set()
    fm = _FRONTMATTER_RE.match(text)
    body = text
    if fm:
        block = fm.group(1) + "\n"
        body = text[fm.end() :]
        if m := _FM_TAGS_INLINE_RE.search(block):
            tags.update(t.strip().strip("'\"") for t in m.group(1).split(","))
        elif m := _FM_TAGS_BLOCK_RE.search(block):
            tags.update(
                line.strip()[1:].strip().strip("'\"") for line in m.group(1).splitlines() if line.strip()
            )
        elif m := _FM_TAGS_SCALAR_RE.search(block):
            tags.update(t.strip().strip("'\"") for t in re.split(r"[,\s]+", m.group(1)))
    tags.update(_INLINE_TAG_RE.findall(body))
    return {t.lstrip("#").lower() for t in tags if t.strip()}


class FileSystemStore:
    """Markdown notes under a vault directory.

    Blocking file I/O runs in worker threads so batch runs stay cooperative.
    """

    def __init__(self, root: str | Path, encoding: str = "utf-8"):
        self.root = Path(root)
        self.encoding = encoding

    def _resolve(self, path: str) -> Path:
        return self.root / path

    def _record(self, file: Path) -> DocumentRecord:
        stat = file.stat()
        text = file.read_text(encoding=self.encoding, errors="replace")
        return DocumentRecord.from_path(
            file.relative_to(self.root).as_posix(),
            size=stat.st_size,
            mtime=stat.st_mtime,
            tags=extract_tags(text),
        )

    def _scan(self) -> list[DocumentRecord]:
        records = []
        for file in sorted(self.root.rglob("*.md")):
            if any(part.startswith(".") for part in file.relative_to(self.root).parts):
                continue
            try:
                records.append(self._record(file))
            except OSError as e:
                logger.warning(f"Skipping unreadable note {file}: {e}")
        return records

    def _lookup(self, path: str) -> DocumentRecord | None:
        file = self._resolve(path)
        if not file.is_file():
            return None
        return self._record(file)

    async def list_documents(self) -> list[DocumentRecord]:
        return await asyncio.to_thread(self._scan)

    async def get(self, path: str) -> DocumentRecord | None:
        return await asyncio.to_thread(self._lookup, path)

    # newline="" keeps CRLF notes byte-for-byte outside the inserted links
    def _read_file(self, path: str) -> str:
        with open(self._resolve(path), encoding=self.encoding, newline="") as f:
            return f.read()

    def _write_file(self, path: str, text: str) -> None:
        with open(self._resolve(path), "w", encoding=self.encoding, newline="") as f:
            f.write(text)

    async def read(self, path: str) -> str:
        return await asyncio.to_thread(self._read_file, path)

    async def write(self, path: str, text: str) -> None:
        await asyncio.to_thread(self._write_file, path, text)


class MemoryStore:
    """Dict-backed store.

    ``fail_reads`` / ``fail_writes`` map a path to the number of upcoming
    calls that raise ``TransientIOError``, to simulate a flaky backend.
    """

    def __init__(self, notes: dict[str, str] | None = None, mtimes: dict[str, float] | None = None):
        self.notes: dict[str, str] = dict(notes or {})
        self.mtimes: dict[str, float] = dict(mtimes or {})
        self.fail_reads: dict[str, int] = {}
        self.fail_writes: dict[str, int] = {}
        self.reads = 0
        self.writes = 0

    async def list_documents(self) -> list[DocumentRecord]:
        return [
            DocumentRecord.from_path(
                path,
                size=len(text.encode()),
                mtime=self.mtimes.get(path, 0.0),
                tags=extract_tags(text),
            )
            for path, text in sorted(self.notes.items())
        ]

    async def get(self, path: str) -> DocumentRecord | None:
        if path not in self.notes:
            return None
        text = self.notes[path]
        return DocumentRecord.from_path(
            path, size=len(text.encode()), mtime=self.mtimes.get(path, 0.0), tags=extract_tags(text)
        )

    async def read(self, path: str) -> str:
        self.reads += 1
        await asyncio.sleep(0)
        if self.fail_reads.get(path, 0) > 0:
            self.fail_reads[path] -= 1
            raise TransientIOError(path, "read failed")
        if path not in self.notes:
            raise FileNotFoundError(path)
        return self.notes[path]

    async def write(self, path: str, text: str) -> None:
        self.writes += 1
        await asyncio.sleep(0)
        if self.fail_writes.get(path, 0) > 0:
            self.fail_writes[path] -= 1
            raise TransientIOError(path, "write failed")
        self.notes[path] = text
