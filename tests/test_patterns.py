"""
Tests for title pattern compilation and the pattern cache
"""

import re

import pytest

from backlinker.engine.core.patterns import (
    PatternCache,
    build_pattern,
    classify_title,
    has_hangul,
    is_latin_only,
)
from backlinker.models.enums import ScriptClass
from backlinker.models.options import PatternOptions

DEFAULTS = PatternOptions()


class TestClassification:
    def test_ascii_title_is_latin(self):
        assert is_latin_only("Alice Smith")
        assert classify_title("Ciel") is ScriptClass.LATIN

    def test_hangul_title_is_script_sensitive(self):
        assert has_hangul("시엘")
        assert classify_title("시엘") is ScriptClass.SCRIPT_SENSITIVE

    def test_other_non_ascii_is_script_sensitive(self):
        """Accented titles are matched literally, without ASCII boundaries"""
        assert not has_hangul("Café")
        assert classify_title("Café") is ScriptClass.SCRIPT_SENSITIVE


class TestLatinPatterns:
    def test_whole_word_only(self):
        pattern = build_pattern("Ciel", DEFAULTS)

        assert pattern.search("Ciel went home") is not None
        assert pattern.search("Cielo went home") is None
        assert pattern.search("xCiel") is None

    def test_particle_after_latin_title(self):
        """Hangul is not an ASCII word char, so the word still ends after the title"""
        m = build_pattern("Ciel", DEFAULTS).search("Ciel을 간다")

        assert m is not None
        assert m.group("title") == "Ciel"
        assert m.group("suffix") == "을"

    def test_partial_match(self):
        pattern = build_pattern("Ciel", PatternOptions(partial_match=True))

        m = pattern.search("Cielo")
        assert m is not None
        assert m.group("title") == "Ciel"

    def test_ignore_case(self):
        assert build_pattern("Alice", DEFAULTS).search("ALICE") is None
        assert build_pattern("Alice", PatternOptions(ignore_case=True)).search("ALICE") is not None

    def test_metacharacters_are_literal(self):
        plus = build_pattern("C++", DEFAULTS)
        dotted = build_pattern("a.b", DEFAULTS)

        assert plus.search("I like C++ a lot") is not None
        assert dotted.search("a.b") is not None
        assert dotted.search("axb") is None


class TestScriptSensitivePatterns:
    def test_particle_kept_outside_title(self):
        m = build_pattern("시엘", DEFAULTS).search("시엘을 만났다")

        assert m.group("title") == "시엘"
        assert m.group("suffix") == "을"

    def test_longest_particle_wins(self):
        m = build_pattern("시엘", DEFAULTS).search("시엘에서 왔다")

        assert m.group("suffix") == "에서"

    def test_no_suffix_group_without_particles(self):
        m = build_pattern("시엘", PatternOptions(allow_particles=False)).search("시엘을")

        assert m.group("title") == "시엘"
        assert "suffix" not in m.groupdict()

    def test_matches_inside_longer_text(self):
        """No word boundaries for script-sensitive titles"""
        assert build_pattern("시엘", DEFAULTS).search("그시엘") is not None


class TestPatternCache:
    def test_reuses_compiled_pattern(self):
        cache = PatternCache()

        first = cache.get("Alice", DEFAULTS)
        second = cache.get("Alice", DEFAULTS)

        assert first is second
        assert cache.hits == 1
        assert cache.misses == 1

    def test_options_are_part_of_the_key(self):
        cache = PatternCache()

        cache.get("Alice", DEFAULTS)
        cache.get("Alice", PatternOptions(ignore_case=True))

        assert len(cache) == 2
        assert ("Alice", DEFAULTS) in cache

    def test_invalidate_clears_everything(self):
        cache = PatternCache()
        cache.get("Alice", DEFAULTS)
        cache.get("Bob", DEFAULTS)

        cache.invalidate()

        assert len(cache) == 0
        assert ("Alice", DEFAULTS) not in cache

    def test_compiled_regex_flags(self):
        pattern = PatternCache().get("Alice", PatternOptions(ignore_case=True))

        assert pattern.regex.flags & re.IGNORECASE
        assert pattern.title == "Alice"


@pytest.mark.parametrize("title", ["Alice", "C#", "(draft)", "a|b", "시엘", "[x]"])
def test_any_title_compiles(title):
    """Titles are escaped, so every title yields a valid matcher that finds itself"""
    pattern = build_pattern(title, PatternOptions(partial_match=True))
    assert pattern.search(f"see {title} here") is not None
