"""Samsung boot image header decoding."""

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO

from .config import RegionKind
from .errors import MagicMismatch, Truncated

log = logging.getLogger(__name__)

MAGIC = b"ANDROID!"

# magic, 10 little-endian u32 fields, product name, cmdline, unique id
HEADER_FORMAT = "<8s10I24s512s32s"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 616


@dataclass(frozen=True)
class BootImageHeader:
    """
    Decoded boot image header.

    Layout (all integers little-endian u32):

        0x000  magic             8 bytes, "ANDROID!"
        0x008  kernel_size       0x00C  kernel_addr
        0x010  ramdisk_size      0x014  ramdisk_addr
        0x018  second_size       0x01C  second_addr
        0x020  device_tree_size  0x024  reserved
        0x028  tags_addr         0x02C  page_size
        0x030  product_name      24 bytes
        0x048  cmdline           512 bytes
        0x248  unique_id         32 bytes

    Load addresses are informational and play no part in the layout.
    """

    magic: bytes
    kernel_size: int
    kernel_addr: int
    ramdisk_size: int
    ramdisk_addr: int
    second_size: int
    second_addr: int
    device_tree_size: int
    reserved: int
    tags_addr: int
    page_size: int  # 0 on some devices
    product_name: bytes
    cmdline: bytes
    unique_id: bytes

    @property
    def has_valid_magic(self) -> bool:
        return self.magic == MAGIC

    @property
    def name(self) -> str:
        """Product name up to the first NUL."""
        return _c_string(self.product_name)

    @property
    def boot_arguments(self) -> str:
        """Kernel command line up to the first NUL."""
        return _c_string(self.cmdline)

    def region_size(self, kind: RegionKind) -> int:
        """Declared size of a region in bytes (0 = absent)."""
        sizes = {
            RegionKind.HEADER: HEADER_SIZE,
            RegionKind.KERNEL: self.kernel_size,
            RegionKind.RAMDISK: self.ramdisk_size,
            RegionKind.SECOND: self.second_size,
            RegionKind.DEVICE_TREE: self.device_tree_size,
        }
        return sizes[kind]


def _c_string(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("ascii", errors="replace")


def parse_header(data: bytes, check_magic: bool = True) -> BootImageHeader:
    """
    Decode the fixed-size header from the start of ``data``.

    Raises Truncated if fewer than HEADER_SIZE bytes are given and
    MagicMismatch if the signature is wrong (unless ``check_magic`` is off).
    """
    if len(data) < HEADER_SIZE:
        raise Truncated(HEADER_SIZE, len(data))

    header = BootImageHeader(*struct.unpack_from(HEADER_FORMAT, data))

    if not header.has_valid_magic:
        if check_magic:
            raise MagicMismatch(MAGIC, header.magic)
        log.warning("Skipping header magic check (found %r)", header.magic)

    return header


def read_header(source: BinaryIO, check_magic: bool = True) -> BootImageHeader:
    """Read and decode the header from the start of a seekable stream."""
    source.seek(0)
    return parse_header(source.read(HEADER_SIZE), check_magic=check_magic)
