"""Layout engine: region ordering, sizing and page alignment for boot images."""

import logging
from dataclasses import dataclass
from typing import Iterator

from .config import REGION_ORDER, RegionKind
from .errors import InvalidPageSize, UnknownPageSize
from .headers import BootImageHeader

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """A single present region of a boot image."""

    kind: RegionKind
    offset: int
    declared_size: int  # true data length
    padded_size: int  # declared_size rounded up to the page size

    @property
    def end(self) -> int:
        """First byte after the region's data (padding excluded)."""
        return self.offset + self.declared_size


@dataclass(frozen=True)
class ImageLayout:
    """Computed layout of one boot image."""

    page_size: int
    regions: tuple[Region, ...]

    def __iter__(self) -> Iterator[Region]:
        return iter(self.regions)

    def __len__(self) -> int:
        return len(self.regions)

    def __contains__(self, kind: object) -> bool:
        return any(r.kind == kind for r in self.regions)

    def get(self, kind: RegionKind) -> Region | None:
        """Region of the given kind, or None when it is absent."""
        for region in self.regions:
            if region.kind == kind:
                return region
        return None

    @property
    def kinds(self) -> list[RegionKind]:
        return [r.kind for r in self.regions]

    @property
    def end(self) -> int:
        """Offset just past the last region's padded extent."""
        if not self.regions:
            return 0
        last = self.regions[-1]
        return last.offset + last.padded_size


def _align_up(value: int, alignment: int) -> int:
    """Round up to next alignment boundary (any positive alignment)."""
    return -(-value // alignment) * alignment


def resolve_page_size(header: BootImageHeader, override: int | None = None) -> int:
    """Pick the effective page size: the override if given, else the header's."""
    if override is not None:
        if isinstance(override, bool) or not isinstance(override, int) or override <= 0:
            raise InvalidPageSize(override)
        if header.page_size and header.page_size != override:
            log.info(
                "Overriding header page size %d with %d",
                header.page_size, override,
            )
        return override

    if header.page_size == 0:
        raise UnknownPageSize()
    return header.page_size


def compute_layout(
    header: BootImageHeader, page_size_override: int | None = None
) -> ImageLayout:
    """
    Compute every present region's offset and padded extent.

    The header always sits at offset 0. Each following region with a
    non-zero size starts on the page boundary after the previous one and is
    padded to a whole number of pages, the last one included. Regions with
    size 0 are left out and take no space.
    """
    page_size = resolve_page_size(header, page_size_override)

    regions: list[Region] = []
    cursor = 0
    for kind in REGION_ORDER:
        size = header.region_size(kind)
        if size == 0:
            continue
        padded = _align_up(size, page_size)
        regions.append(Region(
            kind=kind,
            offset=cursor,
            declared_size=size,
            padded_size=padded,
        ))
        cursor += padded

    log.debug(
        "Computed layout: %d regions, page size %d, end 0x%08X",
        len(regions), page_size, cursor,
    )
    return ImageLayout(page_size=page_size, regions=tuple(regions))
