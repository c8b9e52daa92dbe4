"""
Tests for link masking (protect, match, restore)
"""

import re

from backlinker.engine.core.masking import (
    LINK_RE,
    PLACEHOLDER_RE,
    mask,
    placeholder,
    unmask,
    unmask_fragment,
)


class TestMask:
    def test_links_are_replaced(self):
        masked = mask("See [[Alice]] and [[Bob|bobby]].")

        assert "[[" not in masked.text
        assert len(masked.slots) == 2
        assert masked.slots[1].rendered == "[[Bob|bobby]]"
        assert all(slot.preexisting for slot in masked.slots)

    def test_restore_is_exact(self):
        raw = "A [[x]]\n\nB [[multi\nline]] C"
        masked = mask(raw)

        assert masked.restore() == raw
        assert unmask(masked.text, masked.slots) == raw

    def test_text_without_links_is_untouched(self):
        masked = mask("plain text")

        assert masked.text == "plain text"
        assert masked.slots == []

    def test_placeholder_has_no_ascii_word_characters(self):
        """Titles such as "1" or "E" must never match inside a placeholder"""
        for index in (0, 7, 10, 123):
            token = placeholder(index)
            assert re.search(r"[0-9A-Za-z_]", token) is None
            assert PLACEHOLDER_RE.fullmatch(token)

    def test_link_regex_is_non_greedy(self):
        assert LINK_RE.findall("[[a]] b [[c]]") == ["[[a]]", "[[c]]"]


class TestMaskedText:
    def test_protect_registers_new_slot(self):
        masked = mask("[[Old]] Alice")

        token = masked.protect("[[Alice]]", source="Alice")
        masked.text = masked.text.replace("Alice", token)

        assert masked.slots[-1].preexisting is False
        assert masked.restore() == "[[Old]] [[Alice]]"

    def test_preexisting_offsets_skip_new_links(self):
        masked = mask("[[Old]] Alice")
        token = masked.protect("[[Alice]]", source="Alice")
        masked.text = masked.text.replace("Alice", token)

        assert masked.preexisting_offsets() == [0]

    def test_original_offset_accounts_for_placeholders(self):
        raw = "See [[Bob]] and Alice."
        masked = mask(raw)
        start = masked.text.index("Alice")

        assert raw[masked.original_offset(start) :].startswith("Alice")

    def test_unmask_fragment_drops_cut_placeholders(self):
        masked = mask("x [[Alice]] y")
        token = placeholder(0)
        # Cut the placeholder in half
        fragment = masked.text[: masked.text.index(token) + 1]

        assert unmask_fragment(fragment, masked.slots) == "x "
