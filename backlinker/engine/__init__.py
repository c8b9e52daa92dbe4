"""Linking engine: title index, candidate selection, synthesis and the facade."""

from .linker import AutoLinkEngine, Reviewer
from .synthesizer import LinkSynthesizer, render_link

__all__ = [
    "AutoLinkEngine",
    "LinkSynthesizer",
    "Reviewer",
    "render_link",
]
