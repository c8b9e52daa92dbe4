"""Auto-backlinker: rewrites mentions of note titles into [[wikilinks]]."""

from .config import Settings
from .engine import AutoLinkEngine
from .store import FileSystemStore, MemoryStore

__version__ = "0.3.0"

__all__ = [
    "AutoLinkEngine",
    "FileSystemStore",
    "MemoryStore",
    "Settings",
]
