"""Core modules for promptpanel."""

from .backends import FileBackend, MemoryBackend
from .errors import (
    ImportFailure,
    NotAFile,
    NotASequence,
    NothingToExport,
    ParseError,
    PromptPanelError,
    ReadError,
    StorageWriteError,
    WrongMimeOrFormat,
)
from .file_reader import ImportSource, read_text
from .git_manager import GitManager
from .models import Prompt, generate_id, normalize_tags
from .preferences import Preferences
from .prompt_store import PromptStore
from .tag_manager import TagManager

__all__ = [
    "FileBackend",
    "MemoryBackend",
    "ImportFailure",
    "NotAFile",
    "NotASequence",
    "NothingToExport",
    "ParseError",
    "PromptPanelError",
    "ReadError",
    "StorageWriteError",
    "WrongMimeOrFormat",
    "ImportSource",
    "read_text",
    "GitManager",
    "Prompt",
    "generate_id",
    "normalize_tags",
    "Preferences",
    "PromptStore",
    "TagManager",
]
