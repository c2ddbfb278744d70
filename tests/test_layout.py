from itertools import product

import pytest

from bootsplit.config import REGION_ORDER, RegionKind
from bootsplit.errors import InvalidPageSize, UnknownPageSize
from bootsplit.headers import parse_header
from bootsplit.layout import _align_up, compute_layout, resolve_page_size

from conftest import build_header


def _layout(page_size=2048, override=None, **sizes):
    return compute_layout(parse_header(build_header(page_size=page_size, **sizes)), override)


def test_samsung_device_layout():
    # Sizes as reported for a 5.31 MiB kernel / 4.48 MiB ramdisk image
    layout = _layout(
        page_size=2048,
        kernel_size=0x54E800,
        ramdisk_size=0x47A800,
        device_tree_size=256,
    )

    assert [(r.kind, r.offset, r.declared_size) for r in layout] == [
        (RegionKind.HEADER, 0x00000000, 616),
        (RegionKind.KERNEL, 0x00000800, 0x54E800),
        (RegionKind.RAMDISK, 0x0054F000, 0x47A800),
        (RegionKind.DEVICE_TREE, 0x009C9800, 256),
    ]
    assert layout.get(RegionKind.HEADER).padded_size == 0x800
    assert layout.get(RegionKind.DEVICE_TREE).padded_size == 0x800
    assert layout.page_size == 2048


def test_unaligned_sizes_are_padded():
    layout = _layout(
        page_size=2048,
        kernel_size=5570560,
        ramdisk_size=4697088,
        device_tree_size=256,
    )

    kernel = layout.get(RegionKind.KERNEL)
    ramdisk = layout.get(RegionKind.RAMDISK)
    tree = layout.get(RegionKind.DEVICE_TREE)

    assert kernel.offset == 0x800
    assert kernel.padded_size == 5570560  # already page aligned
    assert ramdisk.offset == 0x800 + 5570560
    assert ramdisk.padded_size == 4698112  # 4697088 rounded up to 2048
    assert tree.offset == ramdisk.offset + 4698112
    assert layout.get(RegionKind.SECOND) is None


def test_zero_page_size_without_override():
    header = parse_header(build_header(page_size=0, kernel_size=100))
    with pytest.raises(UnknownPageSize):
        compute_layout(header)


def test_override_matches_baked_in_page_size():
    sizes = dict(kernel_size=0x54E800, ramdisk_size=0x47A800, device_tree_size=256)
    without = parse_header(build_header(page_size=0, **sizes))
    baked = parse_header(build_header(page_size=2048, **sizes))

    assert compute_layout(without, 2048) == compute_layout(baked)


def test_override_replaces_header_page_size():
    layout = _layout(page_size=2048, override=4096, kernel_size=100)

    assert layout.page_size == 4096
    assert layout.get(RegionKind.KERNEL).offset == 4096


@pytest.mark.parametrize("bad", [0, -2048, 2048.0, "2048", True])
def test_invalid_override(bad):
    header = parse_header(build_header(page_size=2048, kernel_size=100))
    with pytest.raises(InvalidPageSize):
        compute_layout(header, bad)


def test_invalid_override_is_a_value_error():
    header = parse_header(build_header(page_size=0))
    with pytest.raises(ValueError):
        resolve_page_size(header, 0)


def test_non_power_of_two_page_size():
    layout = _layout(page_size=3000, kernel_size=3001, ramdisk_size=10)

    assert layout.get(RegionKind.KERNEL).offset == 3000
    assert layout.get(RegionKind.KERNEL).padded_size == 6000
    assert layout.get(RegionKind.RAMDISK).offset == 9000


def test_header_only_image():
    layout = _layout(page_size=2048)

    assert layout.kinds == [RegionKind.HEADER]
    assert layout.end == 2048


def test_small_page_size_header_spans_pages():
    layout = _layout(page_size=512, kernel_size=1)

    assert layout.get(RegionKind.HEADER).padded_size == 1024
    assert layout.get(RegionKind.KERNEL).offset == 1024


def test_zero_size_regions_take_no_space():
    layout = _layout(page_size=2048, kernel_size=2048, second_size=100)

    assert RegionKind.RAMDISK not in layout
    assert layout.get(RegionKind.SECOND).offset == 4096


def test_align_up():
    assert _align_up(0, 2048) == 0
    assert _align_up(1, 2048) == 2048
    assert _align_up(2048, 2048) == 2048
    assert _align_up(616, 2048) == 2048
    assert _align_up(7, 3) == 9


SIZES = [0, 1, 616, 2047, 2048, 2049, 100000]
PAGE_SIZES = [1, 512, 2048, 3000, 4096]


@pytest.mark.parametrize("page_size", PAGE_SIZES)
def test_layout_properties(page_size):
    for kernel, ramdisk, second, tree in product(SIZES, repeat=4):
        layout = _layout(
            page_size=page_size,
            kernel_size=kernel,
            ramdisk_size=ramdisk,
            second_size=second,
            device_tree_size=tree,
        )
        regions = list(layout)

        # every region starts on a page boundary
        assert all(r.offset % page_size == 0 for r in regions)
        # padded size is the smallest page multiple holding the data
        for r in regions:
            assert r.padded_size % page_size == 0
            assert r.declared_size <= r.padded_size < r.declared_size + page_size
        # canonical order, no overlap
        assert regions[0].kind == RegionKind.HEADER and regions[0].offset == 0
        for prev, nxt in zip(regions, regions[1:]):
            assert nxt.offset >= prev.offset + prev.padded_size
            assert REGION_ORDER.index(nxt.kind) > REGION_ORDER.index(prev.kind)
        # absent regions never appear
        assert all(r.declared_size > 0 for r in regions)
        expected = {RegionKind.HEADER} | {
            kind for kind, size in (
                (RegionKind.KERNEL, kernel),
                (RegionKind.RAMDISK, ramdisk),
                (RegionKind.SECOND, second),
                (RegionKind.DEVICE_TREE, tree),
            ) if size
        }
        assert set(layout.kinds) == expected
