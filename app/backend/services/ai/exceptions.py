"""
Shared exceptions for AI service modules.
"""


class RemoteClassificationError(Exception):
    """Raised when the remote model call fails or returns no usable label."""

    pass
