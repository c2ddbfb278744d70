import struct

import pytest

from bootsplit.headers import HEADER_FORMAT, HEADER_SIZE, MAGIC


def build_header(
    kernel_size=0,
    ramdisk_size=0,
    second_size=0,
    device_tree_size=0,
    page_size=2048,
    magic=MAGIC,
    kernel_addr=0x10008000,
    ramdisk_addr=0x11000000,
    second_addr=0x100F0000,
    tags_addr=0x10000100,
    reserved=0x02000000,
    product_name=b"",
    cmdline=b"",
    unique_id=b"",
):
    """Pack a header the same way the vendor tools lay it out."""
    return struct.pack(
        HEADER_FORMAT,
        magic,
        kernel_size, kernel_addr,
        ramdisk_size, ramdisk_addr,
        second_size, second_addr,
        device_tree_size, reserved,
        tags_addr, page_size,
        product_name, cmdline, unique_id,
    )


def _align(value, page_size):
    return -(-value // page_size) * page_size


def build_image(page_size=2048, header_page_size=None, **sizes):
    """
    Build a complete image whose regions are filled with distinct bytes
    and whose padding is 0xFF, so tests can tell data from filler.
    """
    if header_page_size is None:
        header_page_size = page_size
    header = build_header(page_size=header_page_size, **sizes)
    image = bytearray(header)
    image.extend(b"\xFF" * (_align(len(image), page_size) - len(image)))

    fills = {
        "kernel_size": 0x4B,
        "ramdisk_size": 0x52,
        "second_size": 0x53,
        "device_tree_size": 0x44,
    }
    for key in ("kernel_size", "ramdisk_size", "second_size", "device_tree_size"):
        size = sizes.get(key, 0)
        if not size:
            continue
        image.extend(bytes([fills[key]]) * size)
        image.extend(b"\xFF" * (_align(size, page_size) - size))
    return bytes(image)


@pytest.fixture
def small_image():
    return build_image(
        page_size=512,
        kernel_size=1000,
        ramdisk_size=700,
        device_tree_size=64,
    )


@pytest.fixture
def image_file(tmp_path, small_image):
    path = tmp_path / "boot.img"
    path.write_bytes(small_image)
    return path

