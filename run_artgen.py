#!/usr/bin/env python3
"""
Command-line launcher for rg35xx artgen.

Generates a 640x480 preview PNG per ROM in <rom_dir>/<console>/imgs/.
"""
import sys
import argparse
from pathlib import Path

from app_paths import get_config_path
from rom_parser import DEFAULT_CONSOLES
from run_backend import run_job


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate RG35XX game preview images")
    parser.add_argument("--rom_dir", type=str, default="", help="Root directory of all roms")
    parser.add_argument("--mame_extras", type=str, default="", help="MAME Extras directory (holds titles.zip)")
    parser.add_argument("--media_dir", type=str, default=None,
                        help="Media directory, relative to --rom_dir unless absolute (default: media)")
    parser.add_argument("--consoles", type=str, default=None,
                        help=f"Consoles to look at (default: {','.join(DEFAULT_CONSOLES)})")
    parser.add_argument("--config", type=str, default=None,
                        help=f"Optional YAML config (default: {get_config_path()})")
    parser.add_argument("--quiet", action="store_true", help="Only print errors and the final summary")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if not args.rom_dir.strip():
        print("--rom_dir not set!", file=sys.stderr)
        return 1

    def log(msg: str):
        if args.quiet and not msg.startswith("[ERROR]"):
            return
        print(msg)

    ok, message = run_job(
        rom_root=Path(args.rom_dir),
        consoles=args.consoles,
        media_dir=args.media_dir,
        extras_dir=Path(args.mame_extras) if args.mame_extras else None,
        config_path=Path(args.config) if args.config else None,
        callbacks={"log": log},
    )

    if not ok:
        print(message, file=sys.stderr)
        return 1

    print(message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
