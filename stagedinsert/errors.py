class StagedInsertError(Exception):
    """Base exception for stagedinsert errors."""


class ConfigurationError(StagedInsertError):
    """Invalid column mapping, inserter definition or configuration."""


class PreconditionError(StagedInsertError):
    """A call was made with arguments that cannot be honoured, before any I/O."""


class RetrievalError(StagedInsertError):
    """Generated values could not be read back for the whole batch."""
