"""
Shared pytest fixtures for artgen tests
"""

import zipfile
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image


def make_image(size=(64, 48), color=(200, 40, 40, 255), mode="RGBA"):
    img = Image.new("RGBA", size, color)
    return img if mode == "RGBA" else img.convert(mode)


def image_bytes(img, fmt):
    buf = BytesIO()
    if fmt == "JPEG":
        img = img.convert("RGB")
    img.save(buf, fmt)
    return buf.getvalue()


def write_image(path: Path, size=(64, 48), fmt="PNG", color=(200, 40, 40, 255)):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(image_bytes(make_image(size, color), fmt))
    return path


@pytest.fixture
def rom_root(tmp_path):
    """Empty ROM root with a media folder"""
    root = tmp_path / "roms"
    (root / "media").mkdir(parents=True)
    return root


@pytest.fixture
def extras_dir(tmp_path):
    d = tmp_path / "extras"
    d.mkdir()
    return d


@pytest.fixture
def make_roms(rom_root):
    """Create empty ROM files for a console"""
    def _make(console, *filenames):
        console_dir = rom_root / console
        console_dir.mkdir(parents=True, exist_ok=True)
        for name in filenames:
            (console_dir / name).write_bytes(b"\x00" * 16)
        return console_dir
    return _make


@pytest.fixture
def make_media(rom_root):
    """Create a loose artwork file for a console"""
    def _make(console, filename, size=(64, 48), fmt="PNG", color=(200, 40, 40, 255)):
        return write_image(rom_root / "media" / console / filename, size, fmt, color)
    return _make


@pytest.fixture
def make_archive(extras_dir):
    """Build titles.zip from (entry_name, bytes) pairs; bytes=None adds a directory entry"""
    def _make(entries, name="titles.zip"):
        path = extras_dir / name
        with zipfile.ZipFile(path, "w") as z:
            for entry_name, data in entries:
                if data is None:
                    z.writestr(zipfile.ZipInfo(entry_name), b"")
                else:
                    z.writestr(entry_name, data)
        return path
    return _make


@pytest.fixture
def log_sink():
    """Dict-style callbacks collecting every emitted event"""
    events = {"log": [], "progress": [], "preview": []}
    callbacks = {
        "log": events["log"].append,
        "progress": lambda done, total: events["progress"].append((done, total)),
        "preview": events["preview"].append,
    }
    return callbacks, events
