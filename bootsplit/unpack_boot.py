#!/usr/bin/env python3
"""
Boot image splitter: command line front end

Lists the sections of a Samsung boot image, shows its decoded header, or
unpacks the kernel, ramdisk, second stage and device tree into files.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import BinaryIO

from .config import (
    DEFAULT_OUTPUTS,
    ConfigError,
    RegionKind,
    UnpackConfig,
    load_config,
)
from .errors import BootImageError
from .extractor import RegionExtractor
from .headers import BootImageHeader, read_header
from .layout import ImageLayout, compute_layout
from .lister import format_listing, layout_to_dict, list_regions

log = logging.getLogger(__name__)

# Command line flag → region it unpacks
_OUTPUT_FLAGS: dict[str, RegionKind] = {
    "kernel": RegionKind.KERNEL,
    "ramdisk": RegionKind.RAMDISK,
    "second": RegionKind.SECOND,
    "tree": RegionKind.DEVICE_TREE,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_image(
    source: BinaryIO, config: UnpackConfig
) -> tuple[BootImageHeader, ImageLayout]:
    header = read_header(source, check_magic=config.check_magic)
    log.info("Parsed header")
    layout = compute_layout(header, config.page_size)
    return header, layout


def _build_config(args: argparse.Namespace) -> UnpackConfig:
    """Merge an optional YAML config with command line flags (flags win)."""
    config_path = getattr(args, "config", None)
    config = load_config(config_path) if config_path else UnpackConfig()

    if args.page_size is not None:
        config.page_size = args.page_size
    if args.no_magic_check:
        config.check_magic = False

    for flag, kind in _OUTPUT_FLAGS.items():
        path = getattr(args, f"output_{flag}", None)
        if path is not None:
            config.outputs[kind] = path

    if getattr(args, "unpack_all", False):
        for kind, path in DEFAULT_OUTPUTS.items():
            config.outputs.setdefault(kind, path)

    return config


def _print_header(header: BootImageHeader) -> None:
    fields = [
        ("Magic", header.magic.decode("ascii", errors="replace")),
        ("Kernel size", f"{header.kernel_size}"),
        ("Kernel address", f"0x{header.kernel_addr:08X}"),
        ("Ramdisk size", f"{header.ramdisk_size}"),
        ("Ramdisk address", f"0x{header.ramdisk_addr:08X}"),
        ("Second size", f"{header.second_size}"),
        ("Second address", f"0x{header.second_addr:08X}"),
        ("Device tree size", f"{header.device_tree_size}"),
        ("Tags address", f"0x{header.tags_addr:08X}"),
        ("Page size", f"{header.page_size}"),
        ("Product name", header.name),
        ("Command line", header.boot_arguments),
        ("Unique ID", header.unique_id.hex()),
    ]
    for label, value in fields:
        print(f"{label + ':':<18} {value}")


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def cmd_sections(args: argparse.Namespace) -> int:
    config = _build_config(args)
    with open(args.input_file, "rb") as source:
        _, layout = _load_image(source, config)

    if args.json:
        print(json.dumps(layout_to_dict(layout), indent=2))
    else:
        for line in format_listing(list_regions(layout)):
            print(line)
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    config = _build_config(args)
    with open(args.input_file, "rb") as source:
        header = read_header(source, check_magic=config.check_magic)
    _print_header(header)
    return 0


def cmd_unpack(args: argparse.Namespace) -> int:
    config = _build_config(args)

    with open(args.input_file, "rb") as source:
        _, layout = _load_image(source, config)

        if not config.outputs:
            log.warning(
                "No sections extracted, as no sections were requested to be extracted."
            )
            return 0

        results = RegionExtractor(source, layout).extract_all(config.outputs)

    failed = [r for r in results if not r.success]
    if failed:
        log.error(
            "%d of %d sections could not be unpacked",
            len(failed), len(results),
        )
        return 1
    return 0


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _add_common_arguments(parser: argparse.ArgumentParser, page_size: bool = True) -> None:
    parser.add_argument(
        "input_file",
        type=Path,
        metavar="INPUT_FILE",
        help="The boot image, for example 'boot.img'",
    )
    parser.add_argument(
        "--no-magic-check",
        action="store_true",
        help="Do not check if the magic signature is correct",
    )
    if page_size:
        parser.add_argument(
            "--page-size", "-p",
            type=int,
            default=None,
            metavar="PAGE_SIZE",
            help="Use a custom page size. This may be required on some boot images.",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bootsplit",
        description="Program for handling Samsung boot images.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sections = subparsers.add_parser(
        "sections", help="Lists the sections in a boot image.",
    )
    _add_common_arguments(sections)
    sections.add_argument(
        "--json",
        action="store_true",
        help="Print the layout as JSON",
    )
    sections.set_defaults(func=cmd_sections)

    info = subparsers.add_parser(
        "info", help="Shows the decoded boot image header.",
    )
    _add_common_arguments(info, page_size=False)
    info.set_defaults(func=cmd_info, page_size=None)

    unpack = subparsers.add_parser(
        "unpack", help="Unpacks Samsung boot images.",
    )
    _add_common_arguments(unpack)
    unpack.add_argument(
        "--unpack-all", "-a",
        action="store_true",
        help=(
            "Unpack all sections of the boot image to their default locations "
            "('boot/SECTION_NAME.img')"
        ),
    )
    for flag, kind in _OUTPUT_FLAGS.items():
        unpack.add_argument(
            f"--{flag}",
            dest=f"output_{flag}",
            type=Path,
            default=None,
            metavar=f"OUTPUT_{flag.upper()}_FILE",
            help=(
                f"The file to extract the {kind.display_name.lower()} into. "
                "If this file already exists it will be emptied first."
            ),
        )
    unpack.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with page_size, check_magic and outputs",
    )
    unpack.set_defaults(func=cmd_unpack)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-5s %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        return args.func(args)
    except ConfigError as e:
        log.error("Could not load config from '%s': %s", e.path, e.reason)
        return 1
    except (BootImageError, OSError, ValueError) as e:
        log.error("Could not read boot image from '%s': %s", args.input_file, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
