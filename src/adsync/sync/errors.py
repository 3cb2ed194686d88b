"""Fatal sync-run errors. Per-window failures are outcomes, not exceptions."""


class SyncError(RuntimeError):
    """Base class for errors that abort a whole sync run."""


class ConfigurationError(SyncError):
    """Raised when required configuration (the Meta access token) is missing."""


class ProjectSourceError(SyncError):
    """Raised when the eligible-project query fails."""
