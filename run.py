"""Command-line entry point for the CHIP-8 interpreter.

Controls: Esc quit, P pause/resume, T reset, B debug (one instruction per
frame with trace output), Tab cycle the instruction-set mode selector.
The hex keypad is mapped onto 1234/QWER/ASDF/ZXCV.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.system import INSTRUCTIONS_PER_FRAME
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import GREY, parse_color


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 interpreter",
    )
    parser.add_argument(
        "rom",
        type=Path,
        help="Path to the CHIP-8 program image",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=12,
        help="Integer window scale factor (default: 12)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the interpreter in fullscreen mode",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Start in debug mode (one instruction per frame, trace output)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random number generator used by CXNN",
    )
    parser.add_argument(
        "--ipf",
        type=int,
        default=INSTRUCTIONS_PER_FRAME,
        help=f"Instructions executed per frame (default: {INSTRUCTIONS_PER_FRAME})",
    )
    parser.add_argument(
        "--foreground",
        default=None,
        help="Lit pixel colour as #rrggbb or r,g,b",
    )
    parser.add_argument(
        "--background",
        default=None,
        help="Unlit pixel colour as #rrggbb or r,g,b",
    )
    parser.add_argument(
        "--no-audio",
        action="store_true",
        help="Disable the sound timer tone",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.ipf <= 0:
        parser.error("--ipf must be positive")

    background, foreground = GREY
    try:
        if args.background:
            background = parse_color(args.background)
        if args.foreground:
            foreground = parse_color(args.foreground)
    except ValueError as exc:
        parser.error(str(exc))

    config = AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        fullscreen=args.fullscreen,
        debug=args.debug,
        seed=args.seed,
        instructions_per_frame=args.ipf,
        palette=(background, foreground),
        enable_audio=not args.no_audio,
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
