"""
Errors raised by promptpanel

Import failures all derive from ImportFailure so callers can report any of
them with a single except clause. None of these are fatal: every one carries
a message meant to be shown to the user as-is.
"""


class PromptPanelError(Exception):
    """Base class for all promptpanel errors."""


class StorageWriteError(PromptPanelError):
    """Persisting a value failed (disk full, quota exceeded, no access)."""


class NothingToExport(PromptPanelError):
    """Export was requested but the collection is empty."""


class ImportFailure(PromptPanelError):
    """An import was rejected; persisted state is unchanged."""


class NotAFile(ImportFailure):
    """No file was given, or the path is not a regular file."""


class WrongMimeOrFormat(ImportFailure):
    """The file does not declare itself as a JSON document."""


class ParseError(ImportFailure):
    """The file contents are not valid JSON."""


class NotASequence(ImportFailure):
    """The file parsed, but its top-level value is not an array."""


class ReadError(ImportFailure):
    """Reading the file failed."""
