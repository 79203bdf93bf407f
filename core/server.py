"""
FastMCP server instance shared by every tool module.
"""

import logging

from fastmcp import FastMCP

logger = logging.getLogger(__name__)

SERVER_NAME = "docmark"

SERVER_INSTRUCTIONS = (
    "Formats Markdown syntax typed into a Google Doc as native styling: headings, "
    "bold, italics, links, inline code, bullet and numbered lists, and syntax-highlighted "
    "code blocks. Use preview_markdown_formatting to see what would change."
)

server = FastMCP(name=SERVER_NAME, instructions=SERVER_INSTRUCTIONS)
