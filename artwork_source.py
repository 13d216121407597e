"""
Artwork source resolution.

A game's source image comes either from loose files in the console's media
folder (<game>.png / .gif / .jpg) or, for archive-backed consoles such as
mame2000, from an entry in the titles.zip found in the extras folder.
"""
import os
import zipfile
from io import BytesIO
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from artgen_errors import ArchiveUnavailable, ArtworkNotFound

DEFAULT_EXTENSIONS = (".png", ".gif", ".jpg")
DEFAULT_ARCHIVE_NAME = "titles.zip"
DEFAULT_ARCHIVE_CONSOLES = ("mame2000",)

# Formats are sniffed from content, never trusted from the file extension
DECODE_FORMATS = ("PNG", "GIF", "JPEG")

# Anything that means "this file is not usable artwork"
DECODE_ERRORS = (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError)


def strip_extension(filename: str) -> str:
    return os.path.splitext(filename)[0]


def decode_image(fp) -> Image.Image:
    """Decode a path or binary stream and release the underlying handle."""
    with Image.open(fp, formats=DECODE_FORMATS) as img:
        img.load()
        # Drop the reference to the open file so nothing outlives the with block
        return img.copy()


# ==========================
# Strategies
# ==========================
class ArtworkSource:
    """Base class for a way of finding a game's source image."""

    def resolve(self, game: str) -> Image.Image:
        raise NotImplementedError


class LooseFileSource(ArtworkSource):
    """Probes <media_dir>/<game><ext> for each extension in priority order."""

    def __init__(self, media_dir: Path, extensions: Sequence[str] = DEFAULT_EXTENSIONS):
        self.media_dir = Path(media_dir)
        self.extensions = tuple(extensions)

    def candidates(self, game: str) -> Iterable[Path]:
        for ext in self.extensions:
            yield self.media_dir / f"{game}{ext}"

    def resolve(self, game: str) -> Image.Image:
        for path in self.candidates(game):
            if not path.is_file():
                continue
            try:
                return decode_image(path)
            except DECODE_ERRORS:
                # Broken file counts as missing; try the next extension
                continue
        tried = ", ".join(p.name for p in self.candidates(game))
        raise ArtworkNotFound(f"No artwork file found in {self.media_dir} (tried {tried})")


class ArchiveSource(ArtworkSource):
    """Scans a zip archive for an entry whose stripped file name equals the game."""

    def __init__(self, archive_path: Optional[Path]):
        self.archive_path = Path(archive_path) if archive_path else None

    def resolve(self, game: str) -> Image.Image:
        if self.archive_path is None:
            raise ArchiveUnavailable("No extras directory configured for archive artwork")

        try:
            archive = zipfile.ZipFile(self.archive_path, "r")
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveUnavailable(f"Can't open {self.archive_path}: {e}") from e

        with archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                name = PurePosixPath(info.filename).name
                if strip_extension(name) != game:
                    continue
                # NotImplementedError: unsupported compression, RuntimeError: encrypted entry
                try:
                    with archive.open(info) as fh:
                        data = fh.read()
                    return decode_image(BytesIO(data))
                except DECODE_ERRORS + (zipfile.BadZipFile, NotImplementedError, RuntimeError) as e:
                    raise ArtworkNotFound(
                        f"Entry {info.filename} in {self.archive_path.name} could not be decoded: {e}"
                    ) from e

        raise ArtworkNotFound(f"No artwork found in {self.archive_path.name}")


# ==========================
# Resolver
# ==========================
class SourceResolver:
    """
    Picks the artwork strategy for a console and resolves a game's image.

    Args:
        media_root: Folder holding one media sub-folder per console
        extras_dir: Folder holding the titles archive (may be None)
        archive_consoles: Consoles whose artwork lives in the archive
        archive_name: File name of the archive inside extras_dir
        extensions: Loose-file suffixes in priority order
    """

    def __init__(
        self,
        media_root: Path,
        extras_dir: Optional[Path] = None,
        archive_consoles: Iterable[str] = DEFAULT_ARCHIVE_CONSOLES,
        archive_name: str = DEFAULT_ARCHIVE_NAME,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ):
        self.media_root = Path(media_root)
        self.extras_dir = Path(extras_dir) if extras_dir else None
        self.archive_consoles = set(archive_consoles)
        self.archive_name = archive_name
        self.extensions = tuple(extensions)

    def is_archive_backed(self, console: str) -> bool:
        return console in self.archive_consoles

    def source_for(self, console: str) -> ArtworkSource:
        if self.is_archive_backed(console):
            archive_path = self.extras_dir / self.archive_name if self.extras_dir else None
            return ArchiveSource(archive_path)
        return LooseFileSource(self.media_root / console, self.extensions)

    def resolve(self, console: str, game: str) -> Image.Image:
        """
        Return the decoded source image for a game.

        Raises:
            ArchiveUnavailable: archive-backed console whose archive can't be opened
            ArtworkNotFound: nothing matched the game
        """
        return self.source_for(console).resolve(game)
