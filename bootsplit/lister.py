"""Region listing and report formatting."""

from typing import Any, NamedTuple

from .config import RegionKind
from .layout import ImageLayout

_UNITS = ["B", "KiB", "MiB", "GiB", "TiB"]


class RegionEntry(NamedTuple):
    kind: RegionKind
    offset: int
    size: int  # declared size, padding excluded


def list_regions(layout: ImageLayout) -> list[RegionEntry]:
    """Present regions in image order, header first."""
    return [
        RegionEntry(region.kind, region.offset, region.declared_size)
        for region in layout
        if region.declared_size > 0
    ]


def format_size(num_bytes: int) -> str:
    """Human-readable size in binary units, e.g. ``5.31 MiB``."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    value = float(num_bytes)
    unit = _UNITS[0]
    for unit in _UNITS[1:]:
        value /= 1024
        if value < 1024:
            break
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {unit}"


def format_listing(entries: list[RegionEntry]) -> list[str]:
    """One ``offset - name (size: ...)`` line per region."""
    return [
        f"0x{e.offset:08X} - {e.kind.display_name:<14} (size: {format_size(e.size)})"
        for e in entries
    ]


def layout_to_dict(layout: ImageLayout) -> dict[str, Any]:
    """Convert an ImageLayout to a JSON-safe dict."""
    return {
        "page_size": layout.page_size,
        "end": layout.end,
        "regions": [
            {
                "kind": r.kind.value,
                "offset": r.offset,
                "size": r.declared_size,
                "padded_size": r.padded_size,
            }
            for r in layout
        ],
    }
