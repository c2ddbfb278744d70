"""Region definitions and unpack configuration."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml


class RegionKind(Enum):
    HEADER = "header"
    KERNEL = "kernel"
    RAMDISK = "ramdisk"
    SECOND = "second"
    DEVICE_TREE = "device_tree"

    @property
    def display_name(self) -> str:
        return DISPLAY_NAMES[self]


# Order in which regions are stored in the image. This is fixed by the
# vendor format and must not follow enum declaration order implicitly.
REGION_ORDER: tuple[RegionKind, ...] = (
    RegionKind.HEADER,
    RegionKind.KERNEL,
    RegionKind.RAMDISK,
    RegionKind.SECOND,
    RegionKind.DEVICE_TREE,
)

DISPLAY_NAMES: dict[RegionKind, str] = {
    RegionKind.HEADER: "Header",
    RegionKind.KERNEL: "Kernel",
    RegionKind.RAMDISK: "Ramdisk",
    RegionKind.SECOND: "Second Ramdisk",
    RegionKind.DEVICE_TREE: "Device Tree",
}

# Regions that can be unpacked, with the locations used by --unpack-all
DEFAULT_OUTPUTS: dict[RegionKind, Path] = {
    RegionKind.KERNEL: Path("boot/kernel.img"),
    RegionKind.RAMDISK: Path("boot/ramdisk.img"),
    RegionKind.SECOND: Path("boot/second.img"),
    RegionKind.DEVICE_TREE: Path("boot/device_tree.img"),
}


@dataclass
class UnpackConfig:
    """Per-invocation settings for reading and unpacking an image."""

    page_size: int | None = None  # None = use the header's value
    check_magic: bool = True
    outputs: dict[RegionKind, Path] = field(default_factory=dict)


def get_region_kind(name: str) -> RegionKind:
    """Look up a region kind by its name ("kernel", "device_tree", ...)."""
    try:
        return RegionKind(name)
    except ValueError:
        raise ValueError(f"Unknown region: {name}") from None


class ConfigError(ValueError):
    """A config file that could not be read or is invalid."""

    def __init__(self, path: Path, reason: Any):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config '{path}': {reason}")


def config_from_mapping(data: dict[str, Any] | None) -> UnpackConfig:
    """Build an UnpackConfig from a parsed YAML document."""
    if data is None:
        return UnpackConfig()
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping")

    unknown = set(data) - {"page_size", "check_magic", "outputs"}
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    page_size = data.get("page_size")
    if page_size is not None:
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise ValueError(f"page_size must be a positive integer, got {page_size!r}")

    check_magic = data.get("check_magic", True)
    if not isinstance(check_magic, bool):
        raise ValueError(f"check_magic must be true or false, got {check_magic!r}")

    raw_outputs = data.get("outputs")
    if raw_outputs is None:
        raw_outputs = {}
    if not isinstance(raw_outputs, dict):
        raise ValueError("outputs must map region names to file paths")

    outputs: dict[RegionKind, Path] = {}
    for name, path in raw_outputs.items():
        kind = get_region_kind(str(name))
        if kind not in DEFAULT_OUTPUTS:
            raise ValueError(f"Region cannot be unpacked: {name}")
        if not isinstance(path, str) or not path:
            raise ValueError(f"Output path for '{name}' must be a non-empty string, got {path!r}")
        outputs[kind] = Path(path)

    return UnpackConfig(
        page_size=page_size,
        check_magic=check_magic,
        outputs=outputs,
    )


def load_config(config_path: Path) -> UnpackConfig:
    """Load unpack settings from a YAML file."""
    try:
        with open(config_path) as f:
            return config_from_mapping(yaml.safe_load(f))
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(config_path, e) from e
