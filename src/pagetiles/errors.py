"""Custom exceptions raised by the render worker."""

__all__ = [
    "WorkerError",
    "DocumentOpenError",
    "NoDocumentError",
    "NoPageError",
    "PageLoadError",
    "PageMismatchError",
]


class WorkerError(Exception):
    """Base class for recoverable worker failures."""

    pass


class DocumentOpenError(WorkerError):
    """Raised when a path cannot be opened or parsed as a document."""

    pass


class NoDocumentError(WorkerError):
    """Raised when an operation needs a loaded document and none is open."""

    def __init__(self, message: str = "No document loaded") -> None:
        super().__init__(message)


class NoPageError(WorkerError):
    """Raised when an operation needs a current page and none is set."""

    def __init__(self, message: str = "No page set") -> None:
        super().__init__(message)


class PageLoadError(WorkerError):
    """Raised when a page index cannot be loaded from the open document."""

    pass


class PageMismatchError(WorkerError):
    """Raised when a render request targets a page other than the current one."""

    def __init__(self, current: int, requested: int) -> None:
        super().__init__(
            f"Page mismatch: worker has page {current}, request {requested}"
        )
        self.current = current
        self.requested = requested
