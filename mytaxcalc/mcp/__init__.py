"""My Tax Calc MCP server."""
