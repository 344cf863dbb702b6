"""Tests for the read-only MCP tools.

Covers:
- Tool definitions (names, read-only annotations, required params)
- config_get whole object, single key, json format, missing object
- config_status default filter, Any, label, unknown state
- config_diff against default and explicit directories
"""

from __future__ import annotations

import json

import mcp.types as types
import pytest

from config_sync.mcp.tools import ALL_SPECS, ToolRegistry
from config_sync.mcp.tools.config_read import CONFIG_READ_TOOLS
from config_sync.storage import FileStorage

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _call(ctx, name: str, args: dict | None = None) -> types.CallToolResult:
    return await ToolRegistry(ALL_SPECS).call_tool(name, args, ctx)


def _text(result: types.CallToolResult) -> str:
    content = result.content[0]
    assert isinstance(content, types.TextContent)
    return content.text


@pytest.fixture
def populated(server_context, tmp_path):
    server_context.active.write(
        "system.site", {"name": "Example", "page": {"front": "/node"}}
    )
    server_context.active.write("user.role.admin", {"weight": 0})
    sync = FileStorage(tmp_path / "sync")
    sync.write("system.site", {"name": "Example", "page": {"front": "/home"}})
    sync.write("user.settings", {"anonymous": "Anonymous"})
    return server_context


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------


class TestToolDefinitions:
    def test_names(self):
        assert [t.name for t in CONFIG_READ_TOOLS] == [
            "config_get",
            "config_status",
            "config_diff",
        ]

    def test_read_only(self):
        for tool in CONFIG_READ_TOOLS:
            assert tool.annotations.readOnlyHint is True

    def test_config_get_requires_name(self):
        assert CONFIG_READ_TOOLS[0].inputSchema["required"] == ["name"]


# ---------------------------------------------------------------------------
# config_get
# ---------------------------------------------------------------------------


class TestConfigGet:
    async def test_whole_object(self, populated):
        result = await _call(populated, "config_get", {"name": "system.site"})
        assert not result.isError
        assert _text(result) == "name: Example\npage:\n  front: /node"
        assert result.structuredContent["value"]["page"]["front"] == "/node"

    async def test_key_as_json(self, populated):
        result = await _call(
            populated,
            "config_get",
            {"name": "system.site", "key": "page.front", "format": "json"},
        )
        assert json.loads(_text(result)) == {"system.site:page.front": "/node"}
        assert result.structuredContent["key"] == "page.front"

    async def test_missing_object(self, populated):
        result = await _call(populated, "config_get", {"name": "nope"})
        assert result.isError
        assert _text(result).startswith("Error (not_found): Config nope does not exist")

    async def test_name_required(self, populated):
        result = await _call(populated, "config_get", {})
        assert result.isError
        assert "validation_error" in _text(result)


# ---------------------------------------------------------------------------
# config_status
# ---------------------------------------------------------------------------


class TestConfigStatus:
    async def test_default_filter(self, populated):
        result = await _call(populated, "config_status")
        assert not result.isError
        assert result.structuredContent["rows"] == [
            {"name": "system.site", "state": "Different"},
            {"name": "user.role.admin", "state": "Only in DB"},
            {"name": "user.settings", "state": "Only in sync dir"},
        ]

    async def test_any_with_prefix(self, populated):
        result = await _call(
            populated, "config_status", {"state": "Any", "prefix": "system."}
        )
        assert result.structuredContent["counts"]["Different"] == 1
        assert len(result.structuredContent["rows"]) == 1

    async def test_label(self, populated, tmp_path):
        FileStorage(tmp_path / "staging").write("system.site", {"name": "Example", "page": {"front": "/node"}})
        result = await _call(populated, "config_status", {"label": "staging"})
        assert [r["name"] for r in result.structuredContent["rows"]] == [
            "user.role.admin"
        ]

    async def test_unknown_label(self, populated):
        result = await _call(populated, "config_status", {"label": "prod"})
        assert result.isError
        assert "Unknown config directory label 'prod'" in _text(result)

    async def test_unknown_state(self, populated):
        result = await _call(populated, "config_status", {"state": "Bogus"})
        assert result.isError
        assert "Unknown state" in _text(result)

    async def test_no_differences(self, server_context):
        result = await _call(server_context, "config_status")
        assert _text(result) == "No differences between DB and sync directory."


# ---------------------------------------------------------------------------
# config_diff
# ---------------------------------------------------------------------------


class TestConfigDiff:
    async def test_default_directory(self, populated):
        result = await _call(populated, "config_diff")
        assert result.structuredContent == {
            "has_changes": True,
            "collections": {
                "": {
                    "create": ["user.role.admin"],
                    "update": ["system.site"],
                    "delete": ["user.settings"],
                }
            },
        }
        assert "Collection" in _text(result)

    async def test_explicit_directory(self, populated, tmp_path):
        result = await _call(
            populated, "config_diff", {"directory": str(tmp_path / "elsewhere")}
        )
        assert result.structuredContent["collections"][""]["create"] == [
            "system.site",
            "user.role.admin",
        ]
