from .errors import OptVaultError
from .hooks import Hooks
from .reporting import ErrorLog, ValidationError
from .sanitizers import Sanitizers
from .snapshot import SnapshotManager
from .store import FileStore, MemoryStore, SchemaEntry, load_schema
from .translation import StringRegistry
from .validation import RULES, ValidationResult, Validator, register_rule


__all__ = [
    "OptVaultError",
    "Hooks",
    "ErrorLog",
    "ValidationError",
    "Sanitizers",
    "SnapshotManager",
    "FileStore",
    "MemoryStore",
    "SchemaEntry",
    "load_schema",
    "StringRegistry",
    "RULES",
    "ValidationResult",
    "Validator",
    "register_rule",
]
