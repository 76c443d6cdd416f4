class OptVaultError(Exception):
    """Base class for optvault errors."""


class ConfigError(OptVaultError):
    """Raised when the optvault configuration is malformed."""


class StoreLoadError(OptVaultError):
    """Raised when a store backend fails to parse its file."""


class UnknownCodecError(OptVaultError):
    """Raised when a snapshot codec is not registered."""


class SnapshotDecodeError(OptVaultError):
    """Raised when a snapshot blob cannot be decoded."""


class InvalidContextError(OptVaultError, ValueError):
    """Raised when a context id cannot be used as a snapshot name."""
