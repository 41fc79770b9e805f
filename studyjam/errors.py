# studyjam/errors.py
"""Errors raised by the upload and storage paths.

Malformed values inside a row are never errors; the normalizer defaults or
drops them. Only problems with the upload as a whole, or with the database,
surface to the caller.
"""


class LeaderboardError(Exception):
    """Base class for all leaderboard failures."""


class UploadError(LeaderboardError):
    """The uploaded file is not a usable CSV export."""


class StorageError(LeaderboardError):
    """The leaderboard document could not be read or written."""


class ConcurrentUpdateError(StorageError):
    """Another upload replaced the document after we read it."""

    def __init__(self, expected_version):
        self.expected_version = expected_version
        super().__init__(
            f"Leaderboard changed while processing (expected version {expected_version}). "
            "Please upload again."
        )
