"""Error types raised by the scheduling core and its storage adapter."""


class VocabError(Exception):
    """Base class for all vocab errors."""


class PersistenceError(VocabError):
    """A read or write against the store failed."""


class PhaseTransitionError(VocabError):
    """A session entry point was called in a phase that does not support it."""


class ImportFormatError(VocabError):
    """An import payload has an unsupported version or invalid shape."""
