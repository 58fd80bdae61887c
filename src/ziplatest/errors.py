"""ziplatest exception hierarchy.

Upstream failures are never wrapped: the exception a source produced is
carried as ``Failed(error)`` and raised as-is by the async driver. Only
errors that originate in this library live here.
"""


class ZipLatestError(Exception):
    """Base for all ziplatest-specific errors."""


class ConfigurationError(ZipLatestError):
    """Raised when a ``ZipConfig`` is invalid.

    Validation happens eagerly in ``ZipConfig.__post_init__`` so a bad
    config never reaches a running stream.
    """


class ChannelClosedError(ZipLatestError):
    """Raised when a value is sent to a channel that was closed or failed."""

    def __init__(self, detail: str = "send on a closed channel") -> None:
        self.detail = detail
        super().__init__(detail)
