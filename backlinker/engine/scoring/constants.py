"""Matching and scoring constants for the link synthesizer.

This module contains all constants used when turning title mentions into links:
- Korean particle suffixes kept outside the link span
- Script classification ranges
- Confidence scoring weights
- Over-linking filter parameters
"""

# ---------------------------------------------------------------------------
# Korean particles: grammatical suffixes attached directly to a noun.
# "Ciel을" must link as "[[Ciel]]을", never "[[Ciel을]]".
# ---------------------------------------------------------------------------
PARTICLES = (
    "의",
    "이",
    "가",
    "은",
    "는",
    "을",
    "를",
    "에",
    "에서",
    "에게",
    "께",
    "으로",
    "로",
    "와",
    "과",
    "도",
    "만",
    "뿐",
    "까지",
    "부터",
    "보다",
    "처럼",
    "마다",
    "씩",
    "조차",
    "마저",
    "라도",
    "께서",
)

# Regex alternation picks the first branch that matches, so "에서" has to be
# tried before "에".
PARTICLES_LONGEST_FIRST = tuple(sorted(PARTICLES, key=len, reverse=True))

# Hangul compatibility jamo + precomposed syllables
HANGUL_RANGES = (
    ("\u3131", "\u318e"),
    ("\uac00", "\ud7a3"),
)

# ASCII word characters. Boundaries for Latin titles are ASCII-only so that a
# Hangul particle right after "Ciel" still counts as the end of the word.
ASCII_WORD_CLASS = "[0-9A-Za-z_]"


# ---------------------------------------------------------------------------
# Confidence scoring
# ---------------------------------------------------------------------------
# Every surviving match starts at the base score.
CONFIDENCE_BASE = 0.5
# Matched text equals the title (case-insensitive) and stands as a whole word.
CONFIDENCE_EXACT_BONUS = 0.3
# Scaled by the fraction of the title's words found around the match.
CONFIDENCE_CONTEXT_BONUS = 0.2
# Characters of context taken on each side of the match.
CONTEXT_WINDOW = 50


# ---------------------------------------------------------------------------
# Over-linking filters
# ---------------------------------------------------------------------------
# Matches closer than len(title) + margin to a pre-existing link are dropped.
PROXIMITY_MARGIN = 20
# Paragraphs are separated by blank lines, LF or CRLF.
PARAGRAPH_BREAK_PATTERN = r"\r?\n[ \t]*\r?\n"
