"""
Domain-specific errors for the bildspel supervisor.

Using these exceptions allows callers to tell a missing watched directory or
viewer executable apart from generic `OSError` failures.
"""

class BildspelError(Exception):
    """Base class for all bildspel domain errors.

    This exception should not be raised directly. Instead, subclass it to create
    more specific error types.
    """

class WatchedDirectoryMissing(BildspelError):
    """Raised when the directory to watch does not exist."""


class ViewerNotFound(BildspelError):
    """Raised when the viewer executable cannot be started."""
