"""Error types raised while reading and splitting boot images."""

from typing import Any


class BootImageError(Exception):
    """Base class for every boot image failure."""


class MagicMismatch(BootImageError):
    """The header does not start with the expected signature."""

    def __init__(self, expected: bytes, found: bytes):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Bad header magic: expected {expected!r}, found {found!r}"
        )


class Truncated(BootImageError):
    """Fewer bytes were available than the fixed header needs."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Header truncated: need {expected} bytes, got {actual}"
        )


class UnknownPageSize(BootImageError):
    """The header's page size is 0 and no override was supplied."""

    def __init__(self) -> None:
        super().__init__(
            "The header's page size is 0; pass an explicit page size"
        )


class InvalidPageSize(BootImageError, ValueError):
    """A page size override that cannot produce a layout."""

    def __init__(self, page_size: Any):
        self.page_size = page_size
        super().__init__(
            f"Invalid page size {page_size!r}: must be a positive integer"
        )


class RegionAbsent(BootImageError):
    """The requested region has no data in this image."""

    def __init__(self, kind: Any):
        self.kind = kind
        name = getattr(kind, "value", kind)
        super().__init__(f"The '{name}' section does not exist")


class SourceTooShort(BootImageError):
    """The source ends before a region's declared extent."""

    def __init__(self, kind: Any, offset: int, size: int, actual: int):
        self.kind = kind
        self.offset = offset
        self.size = size
        self.required = offset + size
        self.actual = actual
        name = getattr(kind, "value", kind)
        super().__init__(
            f"Source too short for '{name}' section: "
            f"needs bytes up to 0x{self.required:08X}, "
            f"source has 0x{actual:08X}"
        )
