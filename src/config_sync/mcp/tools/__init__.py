"""MCP tool handlers for configuration operations.

Each module defines its ``types.Tool`` list and the matching
``ToolSpec`` list; ``ALL_SPECS`` is what the server registers.
"""

from .config_read import CONFIG_READ_SPECS, CONFIG_READ_TOOLS
from .config_write import CONFIG_WRITE_SPECS, CONFIG_WRITE_TOOLS
from .errors import build_error_response, translate_error
from .registry import ToolRegistry, ToolSpec, load_permissions_file
from .transfer import TRANSFER_SPECS, TRANSFER_TOOLS

ALL_SPECS: list[ToolSpec] = (
    CONFIG_READ_SPECS + CONFIG_WRITE_SPECS + TRANSFER_SPECS
)

__all__ = [
    "build_error_response",
    "translate_error",
    # Registry
    "ToolSpec",
    "ToolRegistry",
    "load_permissions_file",
    # Spec lists
    "ALL_SPECS",
    "CONFIG_READ_SPECS",
    "CONFIG_WRITE_SPECS",
    "TRANSFER_SPECS",
    # Tool lists
    "CONFIG_READ_TOOLS",
    "CONFIG_WRITE_TOOLS",
    "TRANSFER_TOOLS",
]
