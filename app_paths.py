"""Utility module for resolving application paths."""
from pathlib import Path


def get_app_dir() -> Path:
    """Get the application's base directory (where this module and config.yaml live)."""
    return Path(__file__).parent


def get_config_path() -> Path:
    return get_app_dir() / "config.yaml"


def resolve_media_root(rom_root: Path, media_dir: str) -> Path:
    """The media folder is relative to the ROM root unless given as an absolute path."""
    media = Path(media_dir)
    if media.is_absolute():
        return media
    return Path(rom_root) / media
