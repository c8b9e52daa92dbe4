"""Protect existing [[links]] while titles are matched.

Every link span is swapped for a placeholder built only from private-use
code points, so no title (and no word boundary) can match inside it. The
slot table is local to one synthesis pass.
"""

import re
from dataclasses import dataclass, field

MASK_OPEN = "\ue000"
MASK_CLOSE = "\ue001"
# Digits of the slot index, also private-use: U+E010..U+E019
_DIGIT_BASE = 0xE010

LINK_RE = re.compile(r"\[\[[\s\S]*?\]\]")
_DIGITS = "".join(chr(_DIGIT_BASE + d) for d in range(10))

LINK_PLACEHOLDER_PATTERN = f"{MASK_OPEN}([{_DIGITS}]+){MASK_CLOSE}"
PLACEHOLDER_RE = re.compile(LINK_PLACEHOLDER_PATTERN)
_SENTINEL_RE = re.compile(f"[{MASK_OPEN}{MASK_CLOSE}{_DIGITS}]")


def _encode_index(index: int) -> str:
    return "".join(chr(_DIGIT_BASE + int(d)) for d in str(index))


def _decode_index(encoded: str) -> int:
    return int("".join(str(ord(c) - _DIGIT_BASE) for c in encoded))


@dataclass
class Slot:
    """One protected span.

    Attributes:
        rendered: Text written back on unmask
        source: Text the placeholder replaced in the original input
        preexisting: True for links the author wrote, False for links
            created during this pass
    """

    rendered: str
    source: str
    preexisting: bool = True


@dataclass
class MaskedText:
    """Text with link spans replaced by placeholders, plus the slot table."""

    text: str
    slots: list[Slot] = field(default_factory=list)

    def protect(self, rendered: str, source: str) -> str:
        """Register a newly created link and return its placeholder."""
        self.slots.append(Slot(rendered=rendered, source=source, preexisting=False))
        return placeholder(len(self.slots) - 1)

    def preexisting_offsets(self) -> list[int]:
        """Offsets of placeholders for links that were in the input."""
        return [
            m.start()
            for m in PLACEHOLDER_RE.finditer(self.text)
            if self.slots[_decode_index(m.group(1))].preexisting
        ]

    def original_offset(self, offset: int) -> int:
        """Map an offset in the masked text back to the unmasked input."""
        shift = 0
        for m in PLACEHOLDER_RE.finditer(self.text, 0, offset):
            shift += len(self.slots[_decode_index(m.group(1))].source) - len(m.group(0))
        return offset + shift

    def restore(self, text: str | None = None) -> str:
        """Put every slot's rendered text back."""
        return unmask(self.text if text is None else text, self.slots)


def placeholder(index: int) -> str:
    return f"{MASK_OPEN}{_encode_index(index)}{MASK_CLOSE}"


def mask(raw: str) -> MaskedText:
    """Replace every ``[[...]]`` span in ``raw`` with a placeholder."""
    slots: list[Slot] = []

    def _swap(m: re.Match[str]) -> str:
        slots.append(Slot(rendered=m.group(0), source=m.group(0)))
        return placeholder(len(slots) - 1)

    return MaskedText(text=LINK_RE.sub(_swap, raw), slots=slots)


def unmask(masked: str, slots: list[Slot]) -> str:
    """Restore every placeholder in ``masked`` to its slot text."""
    return PLACEHOLDER_RE.sub(lambda m: slots[_decode_index(m.group(1))].rendered, masked)


def unmask_fragment(fragment: str, slots: list[Slot]) -> str:
    """Unmask a slice of masked text, dropping placeholders cut at its edges."""
    return _SENTINEL_RE.sub("", unmask(fragment, slots))
