"""
Tests for document records, exclusion rules and the title index
"""

from backlinker.engine.core.document import (
    SECONDS_PER_DAY,
    DocumentRecord,
    TitleIndex,
    is_excluded,
    normalize_tag,
)
from backlinker.models.options import ExclusionRules


def record(path, size=100, mtime=0.0, tags=()):
    return DocumentRecord.from_path(path, size=size, mtime=mtime, tags=tags)


class TestDocumentRecord:
    def test_title_from_path(self):
        doc = record("People/Alice Smith.md")

        assert doc.title == "Alice Smith"
        assert doc.is_markdown

    def test_backslashes_normalized(self):
        doc = record("People\\Alice.md")

        assert doc.path == "People/Alice.md"
        assert doc.title == "Alice"

    def test_non_markdown(self):
        doc = record("assets/diagram.png")

        assert not doc.is_markdown
        assert doc.title == "diagram.png"

    def test_tags_normalized(self):
        assert record("a.md", tags=["#Private", "Draft", " "]).tags == {"private", "draft"}
        assert normalize_tag(" #Work ") == "work"


class TestExclusion:
    def test_no_rules(self):
        assert not is_excluded(record("a.md"), ExclusionRules())

    def test_folder_prefix(self):
        rules = ExclusionRules(folders=("Templates", "Daily Notes"))

        assert is_excluded(record("Templates/Meeting.md"), rules)
        assert is_excluded(record("Daily Notes/2024/01.md"), rules)
        assert not is_excluded(record("TemplatesX/Meeting.md"), rules)
        assert not is_excluded(record("Notes/Templates.md"), rules)

    def test_tags(self):
        rules = ExclusionRules(tags=frozenset({"private"}))

        assert is_excluded(record("a.md", tags=["private"]), rules)
        assert not is_excluded(record("a.md", tags=["public"]), rules)

    def test_size_limits(self):
        rules = ExclusionRules(min_size=10, max_size=1000)

        assert is_excluded(record("a.md", size=5), rules)
        assert is_excluded(record("a.md", size=5000), rules)
        assert not is_excluded(record("a.md", size=500), rules)

    def test_age(self):
        rules = ExclusionRules(max_age_days=30)
        now = 100 * SECONDS_PER_DAY

        assert is_excluded(record("old.md", mtime=0.0), rules, now=now)
        assert not is_excluded(record("new.md", mtime=now - SECONDS_PER_DAY), rules, now=now)


class TestTitleIndex:
    def test_rebuild(self):
        index = TitleIndex()
        corpus = [record("Alice.md"), record("People/Bob.md"), record("Templates/T1.md")]

        titles = index.rebuild(corpus, ExclusionRules(folders=("Templates",)))

        assert titles == {"Alice", "Bob"}
        assert "Alice" in index
        assert "T1" not in index
        assert len(index) == 2
        assert index.document_count == 3
        assert index.excluded_count == 1

    def test_duplicate_base_names_collapse(self):
        index = TitleIndex()

        index.rebuild([record("a/Note.md"), record("b/Note.md")], ExclusionRules())

        assert index.titles == {"Note"}

    def test_empty_corpus(self):
        index = TitleIndex()
        index.rebuild([record("Alice.md")], ExclusionRules())

        assert index.rebuild([], ExclusionRules()) == frozenset()
        assert len(index) == 0
