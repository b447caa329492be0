class DupekeeperError(Exception):
    """Base exception for domain-specific errors."""


class ConfigurationError(DupekeeperError):
    """Bad CLI args or unusable config (e.g., unreadable ignore file). Fatal."""


class PersistenceError(DupekeeperError):
    """Job file unreadable, corrupt or unwritable. Fatal for the run."""


class FilesystemError(DupekeeperError):
    """Unreadable paths, broken entries, failed canonicalization. Skips one entry."""


class NonUtf8NameError(FilesystemError):
    """A file name that cannot be represented as text, so no filter decision is possible."""


class HashingError(DupekeeperError):
    """File could not be opened or read while computing its digest. Skips one entry."""
