"""
Tests for candidate selection: eligibility, synonyms, ordering, subsumption
"""

from backlinker.engine.core.candidates import (
    Candidate,
    expand_synonyms,
    is_linkable_title,
    select_candidates,
)
from backlinker.models.options import SynonymGroup


class TestEligibility:
    def test_blank_and_single_char_titles(self):
        assert not is_linkable_title("")
        assert not is_linkable_title("   ")
        assert not is_linkable_title("X")
        assert is_linkable_title("JS")

    def test_own_title_is_never_linkable(self):
        assert not is_linkable_title("Alice", self_title="Alice")
        assert is_linkable_title("Alice", self_title="Bob")

    def test_phrases_always_qualify(self):
        assert is_linkable_title("A B")


class TestSelectCandidates:
    def test_longest_first_with_alphabetical_ties(self):
        result = select_candidates(["Bob", "Amy", "Carol"], "Journal")

        assert [c.text for c in result] == ["Carol", "Amy", "Bob"]

    def test_self_title_removed(self):
        result = select_candidates(["Alice", "Bob"], "Bob")

        assert [c.text for c in result] == ["Alice"]

    def test_subsumption(self):
        """A title contained in a longer kept one is dropped"""
        result = select_candidates(["Alice", "Alice Smith", "Bob"], "Journal")

        assert [c.text for c in result] == ["Alice Smith", "Bob"]

    def test_no_duplicates(self):
        result = select_candidates(["Alice", "Alice"], "Journal")

        assert result == [Candidate(text="Alice", target="Alice")]

    def test_empty_index(self):
        assert select_candidates([], "Journal") == []


class TestSynonyms:
    def test_variant_links_to_primary(self):
        groups = [SynonymGroup(primary="JavaScript", variants=("JS",))]

        result = select_candidates(["JavaScript"], "Journal", groups)

        assert Candidate(text="JS", target="JavaScript") in result
        assert result[0] == Candidate(text="JavaScript", target="JavaScript")

    def test_first_indexed_member_used_when_primary_missing(self):
        groups = [SynonymGroup(primary="JS", variants=("JavaScript", "ECMAScript"))]

        expanded = expand_synonyms(["JavaScript"], groups)

        assert Candidate(text="JS", target="JavaScript") in expanded
        assert Candidate(text="ECMAScript", target="JavaScript") in expanded

    def test_inactive_group_adds_nothing(self):
        groups = [SynonymGroup(primary="Python", variants=("py",))]

        assert expand_synonyms(["Alice"], groups) == []

    def test_case_sensitive_group(self):
        groups = [SynonymGroup(primary="javascript", variants=("js",), case_sensitive=True)]

        assert expand_synonyms(["JavaScript"], groups) == []

    def test_case_insensitive_group(self):
        groups = [SynonymGroup(primary="javascript", variants=("js",))]

        expanded = expand_synonyms(["JavaScript"], groups)

        assert Candidate(text="js", target="JavaScript") in expanded

    def test_synonyms_of_own_note_are_skipped(self):
        groups = [SynonymGroup(primary="JavaScript", variants=("JS",))]

        result = select_candidates(["JavaScript", "Alice"], "JavaScript", groups)

        assert [c.text for c in result] == ["Alice"]
