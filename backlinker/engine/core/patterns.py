"""Compile note titles into matchers.

Latin-only titles match on ASCII word boundaries. Titles containing Hangul
(or any other non-ASCII character) match literally and may carry one
trailing Korean particle, captured separately so it stays outside the link.
"""

import logging
import re
from dataclasses import dataclass, field

from ...errors import PatternCompilationError
from ...models.enums import ScriptClass
from ...models.options import PatternOptions
from ..scoring.constants import ASCII_WORD_CLASS, HANGUL_RANGES, PARTICLES_LONGEST_FIRST

logger = logging.getLogger(__name__)

_HANGUL_RE = re.compile("[" + "".join(f"{lo}-{hi}" for lo, hi in HANGUL_RANGES) + "]")
_PARTICLE_GROUP = "(?P<suffix>" + "|".join(re.escape(p) for p in PARTICLES_LONGEST_FIRST) + ")?"
_WORD_START = f"(?<!{ASCII_WORD_CLASS})"
_WORD_END = f"(?!{ASCII_WORD_CLASS})"


def has_hangul(text: str) -> bool:
    return bool(_HANGUL_RE.search(text))


def is_latin_only(title: str) -> bool:
    """True if the title is plain ASCII with no Hangul."""
    return title.isascii() and not has_hangul(title)


def classify_title(title: str) -> ScriptClass:
    return ScriptClass.LATIN if is_latin_only(title) else ScriptClass.SCRIPT_SENSITIVE


@dataclass(frozen=True)
class CompiledPattern:
    """A compiled title matcher.

    Attributes:
        title: Text the pattern searches for
        script: How the title is matched
        regex: Compiled pattern; group ``title`` is the title text, group
            ``suffix`` (may be None) the particle kept outside the link
    """

    title: str
    script: ScriptClass
    regex: re.Pattern[str]

    def search(self, text: str, pos: int = 0) -> re.Match[str] | None:
        return self.regex.search(text, pos)


def build_pattern(title: str, options: PatternOptions) -> CompiledPattern:
    """Compile ``title`` under ``options``.

    The title is always escaped, so it is matched literally.

    Raises:
        PatternCompilationError: If the resulting expression is invalid.
    """
    script = classify_title(title)
    core = f"(?P<title>{re.escape(title)})"
    suffix = _PARTICLE_GROUP if options.allow_particles else ""

    if script is ScriptClass.LATIN:
        if options.partial_match:
            source = core + suffix
        else:
            # Boundaries are ASCII-only: "Ciel을" still ends the word after "Ciel"
            source = f"{_WORD_START}{core}{suffix}{_WORD_END}"
    else:
        source = core + suffix

    flags = re.IGNORECASE if options.ignore_case else 0
    try:
        regex = re.compile(source, flags)
    except re.error as e:
        raise PatternCompilationError(title, str(e)) from e
    return CompiledPattern(title=title, script=script, regex=regex)


@dataclass
class PatternCache:
    """Compiled patterns keyed by ``(title, options)``.

    Entries are immutable once built. Any settings change that affects
    matching clears the whole cache through ``invalidate``.
    """

    _entries: dict[tuple[str, PatternOptions], CompiledPattern] = field(default_factory=dict)
    hits: int = 0
    misses: int = 0

    def get(self, title: str, options: PatternOptions) -> CompiledPattern:
        key = (title, options)
        pattern = self._entries.get(key)
        if pattern is not None:
            self.hits += 1
            return pattern
        self.misses += 1
        pattern = build_pattern(title, options)
        self._entries[key] = pattern
        return pattern

    def invalidate(self) -> None:
        if self._entries:
            logger.debug(f"Pattern cache cleared ({len(self._entries)} entries)")
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
