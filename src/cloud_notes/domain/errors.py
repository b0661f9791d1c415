"""Error taxonomy for cloud provider failures."""


class BackendError(Exception):
    """Base class for failures reported by the cloud provider."""


class ConfigurationError(BackendError):
    """Raised when the cloud provider cannot be configured."""


class AuthError(BackendError):
    """Raised when a sign-in, sign-out or session call fails."""


class DataError(BackendError):
    """Raised when a note record cannot be created, deleted or listed."""


class StorageError(BackendError):
    """Raised when an image object cannot be stored or retrieved."""
