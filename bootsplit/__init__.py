"""Samsung boot image inspection and splitting."""

from .config import (
    DEFAULT_OUTPUTS,
    REGION_ORDER,
    RegionKind,
    UnpackConfig,
    config_from_mapping,
    get_region_kind,
    load_config,
)
from .errors import (
    BootImageError,
    InvalidPageSize,
    MagicMismatch,
    RegionAbsent,
    SourceTooShort,
    Truncated,
    UnknownPageSize,
)
from .extractor import ExtractionResult, RegionExtractor, extract_region
from .headers import (
    HEADER_SIZE,
    MAGIC,
    BootImageHeader,
    parse_header,
    read_header,
)
from .layout import (
    ImageLayout,
    Region,
    compute_layout,
    resolve_page_size,
)
from .lister import (
    RegionEntry,
    format_listing,
    format_size,
    layout_to_dict,
    list_regions,
)

__all__ = [
    # Config
    "DEFAULT_OUTPUTS",
    "REGION_ORDER",
    "RegionKind",
    "UnpackConfig",
    "config_from_mapping",
    "get_region_kind",
    "load_config",
    # Errors
    "BootImageError",
    "InvalidPageSize",
    "MagicMismatch",
    "RegionAbsent",
    "SourceTooShort",
    "Truncated",
    "UnknownPageSize",
    # Extractor
    "ExtractionResult",
    "RegionExtractor",
    "extract_region",
    # Headers
    "HEADER_SIZE",
    "MAGIC",
    "BootImageHeader",
    "parse_header",
    "read_header",
    # Layout
    "ImageLayout",
    "Region",
    "compute_layout",
    "resolve_page_size",
    # Lister
    "RegionEntry",
    "format_listing",
    "format_size",
    "layout_to_dict",
    "list_regions",
]
