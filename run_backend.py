from pathlib import Path
from typing import Dict, List, Optional, Any, Tuple, Union

import yaml
from PIL import Image

from app_paths import get_config_path, resolve_media_root
from artgen_errors import (
    ArtgenError,
    ArchiveUnavailable,
    ArtworkNotFound,
    DirectoryUnreadable,
    InvalidSource,
    OutputWriteFailed,
)
from artwork_source import (
    DEFAULT_ARCHIVE_CONSOLES,
    DEFAULT_ARCHIVE_NAME,
    DEFAULT_EXTENSIONS,
    SourceResolver,
)
from compositor import compose
from rom_parser import DEFAULT_CONSOLES, IMGS_DIR_NAME, parse_console_list, scan_rom_folder

# Per-game failures; anything else propagates
GAME_ERRORS = (ArchiveUnavailable, ArtworkNotFound, InvalidSource, OutputWriteFailed)


# ==========================
# Utilities
# ==========================
def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def load_yaml(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_settings(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read config.yaml and fill in defaults for anything it leaves out.

    A missing file just yields the defaults. Unreadable or malformed YAML
    raises (OSError / yaml.YAMLError).
    """
    path = Path(config_path) if config_path else get_config_path()
    cfg = load_yaml(path) if path.exists() else {}
    return _settings_from(cfg)


def default_settings() -> Dict[str, Any]:
    return _settings_from({})


def _settings_from(cfg: dict) -> Dict[str, Any]:
    archive = cfg.get("archive", {}) or {}
    artwork = cfg.get("artwork", {}) or {}

    return {
        "consoles": parse_console_list(cfg.get("consoles")) or list(DEFAULT_CONSOLES),
        "media_dir": str(cfg.get("media_dir") or "media"),
        "archive_consoles": parse_console_list(archive.get("consoles")) or list(DEFAULT_ARCHIVE_CONSOLES),
        "archive_name": str(archive.get("filename") or DEFAULT_ARCHIVE_NAME),
        "extensions": [str(e) for e in (artwork.get("extensions") or DEFAULT_EXTENSIONS)],
    }


def save_png(img: Image.Image, path: Path) -> None:
    """Write the canvas as PNG, overwriting any previous output."""
    try:
        img.save(path, "PNG")
    except (OSError, ValueError) as e:
        raise OutputWriteFailed(f"Can't write {path}: {e}") from e


# ==========================
# Reporting
# ==========================
def _callback(callbacks, name: str):
    if callbacks is None:
        return None
    # Handle dict-style callbacks
    if isinstance(callbacks, dict):
        cb = callbacks.get(name)
        return cb if callable(cb) else None
    # Handle object-style callbacks (log/progress/preview attributes)
    cb = getattr(callbacks, name, None)
    return cb if callable(cb) else None

def _emit_log(callbacks, msg: str):
    cb = _callback(callbacks, "log")
    if cb is not None:
        cb(msg)

def _emit_progress(callbacks, done: int, total: int):
    cb = _callback(callbacks, "progress")
    if cb is not None:
        cb(done, total)

def _emit_preview(callbacks, img_path: Path):
    cb = _callback(callbacks, "preview")
    if cb is not None:
        cb(str(img_path))


class ConsoleResult:
    """Outcome of one console's batch: written images and per-game failures."""

    def __init__(self, console: str):
        self.console = console
        self.created: List[Path] = []
        self.failures: List[Tuple[str, ArtgenError]] = []

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        return f"{self.console}: {len(self.created)} created, {len(self.failures)} failed"


# ==========================
# Batch
# ==========================
def generate_image(resolver: SourceResolver, console: str, game: str) -> Image.Image:
    artwork = resolver.resolve(console, game)
    return compose(artwork)


def generate_console_images(
    rom_root: Path,
    resolver: SourceResolver,
    console: str,
    callbacks=None
) -> ConsoleResult:
    """
    Generate a preview PNG for every ROM of one console.

    Games whose artwork can't be found, composed or written are reported
    and skipped; the batch always runs to the end.

    Args:
        rom_root: Root folder holding one ROM folder per console
        resolver: Artwork lookup (media folders and titles archive)
        console: Console id, also the ROM folder name
        callbacks: Optional log/progress/preview sink

    Returns:
        ConsoleResult with created paths and failures

    Raises:
        DirectoryUnreadable: if the console's ROM folder can't be listed
    """
    rom_dir = Path(rom_root) / console
    target_dir = rom_dir / IMGS_DIR_NAME
    result = ConsoleResult(console)

    if rom_dir.is_dir():
        try:
            ensure_dir(target_dir)
        except OSError as e:
            _emit_log(callbacks, f"[WARN] Can't create {target_dir}: {e}")

    games = scan_rom_folder(rom_dir)
    total = len(games)

    for idx, (game, rom_path) in enumerate(games, start=1):
        target = target_dir / f"{game}.png"
        try:
            img = generate_image(resolver, console, game)
            save_png(img, target)
        except GAME_ERRORS as e:
            result.failures.append((game, e))
            _emit_log(callbacks, f"[SKIP] Can't generate image for {console}/{rom_path.name}: {e}")
        else:
            result.created.append(target)
            _emit_log(callbacks, f"[ART] Created image for {console}/{game} in {target}")
            _emit_preview(callbacks, target)
        _emit_progress(callbacks, idx, total)

    return result


def run_job(
    rom_root: Optional[Path],
    consoles: Optional[Union[str, List[str]]] = None,
    media_dir: Optional[str] = None,
    extras_dir: Optional[Path] = None,
    config_path: Optional[Path] = None,
    callbacks=None
) -> Tuple[bool, str]:
    """
    Process each requested console in order.

    A console whose ROM folder can't be read is reported as failed and the
    next console is still attempted.

    An unreadable config file is reported and the built-in defaults are used.

    Returns:
        (False, message) if the ROM root is unset, otherwise (True, summary)
        once every console was attempted
    """
    if not rom_root or not str(rom_root).strip():
        return False, "--rom_dir not set!"
    rom_root = Path(rom_root)

    try:
        settings = load_settings(config_path)
    except (OSError, yaml.YAMLError) as e:
        _emit_log(callbacks, f"[WARN] Failed to read config: {e}; using defaults")
        settings = default_settings()

    consoles = parse_console_list(consoles) if consoles is not None else settings["consoles"]
    media_root = resolve_media_root(rom_root, media_dir or settings["media_dir"])

    resolver = SourceResolver(
        media_root=media_root,
        extras_dir=Path(extras_dir) if extras_dir else None,
        archive_consoles=settings["archive_consoles"],
        archive_name=settings["archive_name"],
        extensions=settings["extensions"],
    )

    lines = []
    for console in consoles:
        _emit_log(callbacks, f"[RUN] Processing {console}")
        try:
            result = generate_console_images(rom_root, resolver, console, callbacks=callbacks)
        except DirectoryUnreadable as e:
            _emit_log(callbacks, f"[ERROR] {console}: {e}")
            lines.append(f"{console}: failed ({e})")
            continue
        _emit_log(callbacks, f"[RUN] {result.summary()}")
        lines.append(result.summary())

    return True, "\n".join(lines)
