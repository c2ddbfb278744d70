"""Copying region data out of a boot image."""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from .config import REGION_ORDER, RegionKind
from .errors import BootImageError, RegionAbsent, SourceTooShort
from .layout import ImageLayout

log = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def _stream_length(source: BinaryIO) -> int:
    return source.seek(0, io.SEEK_END)


def extract_region(
    source: BinaryIO, layout: ImageLayout, kind: RegionKind, sink: BinaryIO
) -> int:
    """
    Copy one region's data from ``source`` to ``sink``.

    Exactly ``declared_size`` bytes are written, never the page padding.
    The source is seeked before reading and left wherever the copy ends.
    Returns the number of bytes copied.
    """
    region = layout.get(kind)
    if region is None:
        raise RegionAbsent(kind)

    available = _stream_length(source)
    if region.end > available:
        raise SourceTooShort(kind, region.offset, region.declared_size, available)

    source.seek(region.offset)
    remaining = region.declared_size
    while remaining > 0:
        chunk = source.read(min(CHUNK_SIZE, remaining))
        if not chunk:
            # stream shrank underneath us
            raise SourceTooShort(
                kind, region.offset, region.declared_size,
                region.end - remaining,
            )
        sink.write(chunk)
        remaining -= len(chunk)

    return region.declared_size


@dataclass
class ExtractionResult:
    """Result of unpacking a single region to a file."""

    kind: RegionKind
    output: str | None
    success: bool
    error: str | None = None
    size_bytes: int = 0


class RegionExtractor:
    """Unpacks regions of an open boot image into files."""

    def __init__(self, source: BinaryIO, layout: ImageLayout):
        self.source = source
        self.layout = layout

    def extract(self, kind: RegionKind, output_path: Path) -> ExtractionResult:
        """Write one region to ``output_path``, replacing any existing file."""
        output_path = Path(output_path)

        # Fail before touching the filesystem
        region = self.layout.get(kind)
        error: BootImageError | None = None
        if region is None:
            error = RegionAbsent(kind)
        else:
            available = _stream_length(self.source)
            if region.end > available:
                error = SourceTooShort(kind, region.offset, region.declared_size, available)
        if error is not None:
            log.warning("Failed to read '%s' section: %s", kind.value, error)
            return ExtractionResult(kind=kind, output=None, success=False, error=str(error))

        parent = output_path.parent
        if not parent.exists():
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                log.warning("Could not create '%s' directory: %s", parent, e)
                return ExtractionResult(kind=kind, output=None, success=False, error=str(e))
            log.info("Created directory '%s'", parent)

        try:
            with open(output_path, "wb") as sink:
                copied = extract_region(self.source, self.layout, kind, sink)
        except (BootImageError, OSError) as e:
            if output_path.exists():
                output_path.unlink()
            log.warning(
                "Failed to write '%s' section into '%s': %s",
                kind.value, output_path, e,
            )
            return ExtractionResult(kind=kind, output=None, success=False, error=str(e))

        log.info(
            "Unpacked '%s' section into '%s' (%d bytes)",
            kind.value, output_path, copied,
        )
        return ExtractionResult(
            kind=kind,
            output=str(output_path),
            success=True,
            size_bytes=copied,
        )

    def extract_all(self, outputs: dict[RegionKind, Path]) -> list[ExtractionResult]:
        """
        Unpack every selected region, in image order.

        A failure for one region is recorded in its result and does not stop
        the remaining ones.
        """
        results = []
        for kind in REGION_ORDER:
            if kind in outputs:
                results.append(self.extract(kind, outputs[kind]))

        ok = sum(1 for r in results if r.success)
        log.debug("Extraction finished: %d/%d sections", ok, len(results))
        return results
