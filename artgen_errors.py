"""
Error types raised while generating artwork previews.

Per-game errors are caught by the batch runner and reported; only
DirectoryUnreadable aborts a console's batch.
"""


class ArtgenError(Exception):
    """Base class for all artwork generation errors."""


class ArchiveUnavailable(ArtgenError):
    """The titles archive is missing, unreadable or not a valid zip."""


class ArtworkNotFound(ArtgenError):
    """No source image matched the game by any strategy."""


class InvalidSource(ArtgenError):
    """The decoded source image has a zero dimension."""


class DirectoryUnreadable(ArtgenError):
    """The console's ROM directory could not be listed."""


class OutputWriteFailed(ArtgenError):
    """The output PNG could not be created, encoded or written."""
