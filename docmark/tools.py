"""
Google Docs Markdown Formatting Tools

MCP tools that fetch a document, run the Markdown formatter over it and write
the result back in a single batchUpdate.
"""

import asyncio
import json
import logging
from typing import Any

from auth.service_decorator import require_google_service
from core.config import get_formatter_config
from core.container import get_container
from core.server import server
from core.utils import document_link, handle_http_errors, validate_document_id
from docmark.docs_loader import body_end_index, load_document
from docmark.docs_renderer import render_requests
from docmark.pipeline import FormatReport, MarkdownFormatter

logger = logging.getLogger(__name__)


def build_formatter() -> MarkdownFormatter:
    """Formatter wired to the configured highlighter."""
    return MarkdownFormatter(config=get_formatter_config(), highlighter=get_container().highlighter)


async def run_format(
    service: Any,
    document_id: str,
    formatter: MarkdownFormatter,
    dry_run: bool = False,
) -> tuple[FormatReport, list[dict]]:
    """
    Format one document.

    Nothing is written when dry_run is set or when the formatter found no
    Markdown. The write is guarded by the revision that was read, so a document
    edited in the meantime is rejected by the API instead of overwritten.

    Returns:
        The per-pass report and the requests that were (or would be) sent.
    """
    doc_json = await asyncio.to_thread(service.documents().get(documentId=document_id).execute)
    document = load_document(doc_json)

    # Highlighting makes blocking HTTP calls.
    report = await asyncio.to_thread(formatter.format, document)
    if not report.changes:
        return report, []

    requests = render_requests(document, body_end_index(doc_json))
    if dry_run:
        logger.info(f"Dry run for {document_id}: {len(requests)} request(s) not sent")
        return report, requests

    body: dict[str, Any] = {"requests": requests}
    revision_id = doc_json.get("revisionId")
    if revision_id:
        body["writeControl"] = {"requiredRevisionId": revision_id}
    await asyncio.to_thread(service.documents().batchUpdate(documentId=document_id, body=body).execute)
    logger.info(f"Wrote {len(requests)} request(s) to document {document_id}")
    return report, requests


@server.tool()
@handle_http_errors("format_markdown_in_doc", service_type="docs")
@require_google_service("docs", "docs_write")
async def format_markdown_in_doc(
    service: Any,
    user_google_email: str,
    document_id: str,
    dry_run: bool = False,
) -> str:
    """
    Converts Markdown typed into a Google Doc into native formatting.

    Rewrites fenced code blocks as syntax-highlighted tables, `inline code`,
    **bold**, [links](https://example.com), _italics_ / *italics*, "#"-"###"
    headings and "-", "*", "+", "1." list markers.

    Args:
        user_google_email: The user's Google email address.
        document_id: Document ID or full Google Docs URL.
        dry_run: Report what would change without writing to the document.

    Returns:
        str: Number of changes, a per-pass report and the document link.
    """
    logger.info(f"[format_markdown_in_doc] Invoked. Email: '{user_google_email}', Document: '{document_id}'")
    document_id = validate_document_id(document_id)

    report, requests = await run_format(service, document_id, build_formatter(), dry_run=dry_run)
    link = document_link(document_id)
    if dry_run and report.changes:
        return f"Dry run: {report.summary()}\nWould send {len(requests)} request(s). Link: {link}"
    return f"{report.summary()}\nLink: {link}"


@server.tool()
@handle_http_errors("preview_markdown_formatting", is_read_only=True, service_type="docs")
@require_google_service("docs", "docs_read")
async def preview_markdown_formatting(
    service: Any,
    user_google_email: str,
    document_id: str,
) -> str:
    """
    Reports which Markdown constructs would be formatted, without modifying the document.

    Args:
        user_google_email: The user's Google email address.
        document_id: Document ID or full Google Docs URL.

    Returns:
        str: JSON with per-pass change counts and the number of API requests a write would send.
    """
    logger.info(f"[preview_markdown_formatting] Invoked. Email: '{user_google_email}', Document: '{document_id}'")
    document_id = validate_document_id(document_id)

    report, requests = await run_format(service, document_id, build_formatter(), dry_run=True)
    result = {
        "document_id": document_id,
        **report.to_dict(),
        "request_count": len(requests),
        "link": document_link(document_id),
    }
    return json.dumps(result, indent=2)
