from .errors import (
    ConfigurationError,
    DupekeeperError,
    FilesystemError,
    HashingError,
    NonUtf8NameError,
    PersistenceError,
)
from .models import DigestPair, FileEntry, RunMode, RunResult, RunState

__all__ = [
    "ConfigurationError",
    "DigestPair",
    "DupekeeperError",
    "FileEntry",
    "FilesystemError",
    "HashingError",
    "NonUtf8NameError",
    "PersistenceError",
    "RunMode",
    "RunResult",
    "RunState",
]
