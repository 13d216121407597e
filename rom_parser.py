"""
ROM Parser Module for rg35xx artgen
Lists a console's ROM folder and derives game identifiers from file names.
"""
import os
from pathlib import Path
from typing import List, Tuple

from artgen_errors import DirectoryUnreadable

# Consoles processed when none are requested explicitly
DEFAULT_CONSOLES = ["gb", "gbc", "gba", "arcade", "mame2000"]

# Output folder created inside each console's ROM folder
IMGS_DIR_NAME = "imgs"


def game_id_from_filename(filename: str) -> str:
    """Strip the extension: 'Tetris (World).gb' -> 'Tetris (World)'."""
    return os.path.splitext(filename)[0]


def parse_console_list(value) -> List[str]:
    """
    Accept either a comma-separated string or a list of console ids.
    Whitespace is trimmed and empty ids are dropped; order is preserved.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)
    return [str(c).strip() for c in items if str(c).strip()]


def scan_rom_folder(rom_dir: Path) -> List[Tuple[str, Path]]:
    """
    List the ROM files of one console folder.

    Every non-directory entry counts as a ROM; its content is never read.
    Two files with the same stem yield the same game id; both are returned
    and the one processed last wins when outputs are written.

    Returns:
        List of (game_id, rom_path) tuples sorted by file name

    Raises:
        DirectoryUnreadable: if the folder is missing or can't be listed
    """
    rom_dir = Path(rom_dir)
    try:
        entries = sorted(rom_dir.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DirectoryUnreadable(f"Can't read ROM directory {rom_dir}: {e}") from e

    games: List[Tuple[str, Path]] = []
    for item in entries:
        if item.is_dir():
            continue
        games.append((game_id_from_filename(item.name), item))
    return games
