"""Error response builders for MCP tool handlers.

Structured error responses carry a corrective action so an agent can
recover without human intervention.
"""

import mcp.types as types

from ...exceptions import (
    ConfigNotFoundError,
    ConfigSyncError,
    ImportAborted,
    KeyNotFoundError,
    StorageError,
    TypeMismatchError,
)


def build_error_response(
    error_type: str, message: str, corrective_action: str
) -> types.CallToolResult:
    """Build a structured error response with corrective action.

    Args:
        error_type: Error category (not_found, type_mismatch, storage_error,
            validation_error, aborted, server_error)
        message: Human-readable error description
        corrective_action: Specific action the agent can take to resolve the error

    Returns:
        CallToolResult with isError=True

    Examples:
        >>> build_error_response("not_found", "Config system.site does not exist", "Use config_status to list names.")
        CallToolResult(content=[TextContent(...)], isError=True)
    """
    error_text = f"Error ({error_type}): {message}\n\nAction: {corrective_action}"

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=error_text)],
        isError=True,
    )


def translate_error(error: Exception) -> types.CallToolResult:
    """Translate a config_sync exception into a structured error response."""
    match error:
        case ConfigNotFoundError():
            return build_error_response(
                "not_found",
                str(error),
                "Use config_status with state='Any' to list configuration names.",
            )
        case KeyNotFoundError():
            return build_error_response(
                "not_found",
                str(error),
                f"Use config_get(name='{error.name or ''}') to see the available keys.",
            )
        case TypeMismatchError():
            return build_error_response(
                "type_mismatch",
                str(error),
                "Set the parent key to a mapping first, or choose a different key.",
            )
        case StorageError():
            return build_error_response(
                "storage_error",
                str(error),
                "Check that the store directory exists and is writable, then retry.",
            )
        case ImportAborted():
            return build_error_response(
                "aborted",
                str(error),
                "Review the changes with config_diff and retry.",
            )
        case ConfigSyncError() | ValueError():
            return build_error_response(
                "validation_error",
                str(error),
                "Check parameter values and retry.",
            )
        case _:
            return build_error_response(
                "server_error",
                str(error),
                "Check the server log for details and retry.",
            )
