"""MCP stdio server exposing configuration tools."""
