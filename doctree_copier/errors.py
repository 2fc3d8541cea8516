"""
Exception types raised by doctree-copier
"""


class MigrationError(Exception):
    """Base class for every failure that aborts a migration run"""


class StoreAccessError(MigrationError):
    """A read against a store failed (network, permission, missing path)

    Args:
        message: Human readable description
        path: Collection or document path being read, if known
        retryable: True when the failure is transient and the read may be retried
    """

    def __init__(self, message: str, path: str | None = None, retryable: bool = False):
        super().__init__(message)
        self.path = path
        self.retryable = retryable

    def __str__(self) -> str:
        message = super().__str__()
        if self.path:
            return f"{message} (path: {self.path})"
        return message


class BatchCommitError(MigrationError):
    """An atomic write batch could not be committed

    Args:
        message: Human readable description
        committed: Number of documents written by batches that did commit
        failed_paths: Document paths belonging to the batches that failed
    """

    def __init__(self, message: str, committed: int = 0, failed_paths: tuple[str, ...] = ()):
        super().__init__(message)
        self.committed = committed
        self.failed_paths = tuple(failed_paths)


class MigrationCancelled(MigrationError):
    """The run was cancelled before it finished"""
