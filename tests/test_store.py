"""
Tests for document stores and tag extraction
"""

import pytest

from backlinker.errors import TransientIOError
from backlinker.store import FileSystemStore, MemoryStore, extract_tags


class TestExtractTags:
    def test_frontmatter_inline_list(self):
        text = "---\ntags: [Work, 'draft']\n---\nBody"

        assert extract_tags(text) == {"work", "draft"}

    def test_frontmatter_block_list(self):
        text = "---\ntitle: x\ntags:\n  - private\n  - Ideas\n---\nBody"

        assert extract_tags(text) == {"private", "ideas"}

    def test_frontmatter_scalar(self):
        text = "---\ntags: alpha beta\n---\n"

        assert extract_tags(text) == {"alpha", "beta"}

    def test_inline_tags(self):
        text = "# Heading\n\nSome #Project/alpha text and an#anchor"

        assert extract_tags(text) == {"project/alpha"}

    def test_no_tags(self):
        assert extract_tags("plain") == set()


class TestFileSystemStore:
    @pytest.mark.asyncio
    async def test_list_read_write(self, tmp_path):
        (tmp_path / "People").mkdir()
        (tmp_path / "People" / "Alice.md").write_text("#friend Alice", encoding="utf-8")
        (tmp_path / "Journal.md").write_text("Met Alice", encoding="utf-8")
        (tmp_path / "image.png").write_bytes(b"\x89PNG")
        (tmp_path / ".obsidian").mkdir()
        (tmp_path / ".obsidian" / "Hidden.md").write_text("x", encoding="utf-8")

        store = FileSystemStore(tmp_path)
        docs = await store.list_documents()

        assert [d.path for d in docs] == ["Journal.md", "People/Alice.md"]
        alice = docs[1]
        assert alice.title == "Alice"
        assert alice.tags == {"friend"}
        assert alice.size == len("#friend Alice")

        await store.write("Journal.md", "Met [[Alice]]")
        assert await store.read("Journal.md") == "Met [[Alice]]"

    @pytest.mark.asyncio
    async def test_crlf_preserved(self, tmp_path):
        (tmp_path / "Notes.md").write_bytes(b"line one\r\nline two\r\n")
        store = FileSystemStore(tmp_path)

        text = await store.read("Notes.md")
        assert text == "line one\r\nline two\r\n"

        await store.write("Notes.md", text.replace("one", "[[one]]"))
        assert (tmp_path / "Notes.md").read_bytes() == b"line [[one]]\r\nline two\r\n"

    @pytest.mark.asyncio
    async def test_crlf_note_linked_in_place(self, tmp_path, make_engine):
        (tmp_path / "Alice.md").write_bytes(b"About Alice")
        (tmp_path / "Journal.md").write_bytes(b"Met Alice.\r\nSecond line\r\n")
        engine = await make_engine(FileSystemStore(tmp_path))

        result = await engine.synthesize("Journal.md")

        assert result.link_count == 1
        assert (tmp_path / "Journal.md").read_bytes() == b"Met [[Alice]].\r\nSecond line\r\n"

    @pytest.mark.asyncio
    async def test_get(self, tmp_path):
        (tmp_path / "Alice.md").write_text("hello", encoding="utf-8")
        store = FileSystemStore(tmp_path)

        record = await store.get("Alice.md")

        assert record.title == "Alice"
        assert await store.get("Missing.md") is None

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await FileSystemStore(tmp_path).read("Missing.md")


class TestMemoryStore:
    @pytest.mark.asyncio
    async def test_documents(self):
        store = MemoryStore({"b.md": "x #tag", "a.md": "yy"}, mtimes={"a.md": 5.0})

        docs = await store.list_documents()

        assert [d.path for d in docs] == ["a.md", "b.md"]
        assert docs[0].mtime == 5.0
        assert docs[1].tags == {"tag"}

    @pytest.mark.asyncio
    async def test_injected_failures(self):
        store = MemoryStore({"a.md": "text"})
        store.fail_reads["a.md"] = 1
        store.fail_writes["a.md"] = 1

        with pytest.raises(TransientIOError):
            await store.read("a.md")
        assert await store.read("a.md") == "text"

        with pytest.raises(TransientIOError):
            await store.write("a.md", "new")
        await store.write("a.md", "new")

        assert store.notes["a.md"] == "new"
        assert store.reads == 2
        assert store.writes == 2

    @pytest.mark.asyncio
    async def test_missing(self):
        store = MemoryStore()

        assert await store.get("a.md") is None
        with pytest.raises(FileNotFoundError):
            await store.read("a.md")
