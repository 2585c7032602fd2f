import logging
import sqlite3
from typing import Any, Dict, List

from webproxy.fetch import gateway
from webproxy.history import db as history_db
from webproxy.rewrite.formatter import render_content

logger = logging.getLogger(__name__)

async def process_proxy_request(target: str) -> Dict[str, Any]:
    """
    Main pipeline for one proxy request.

    1. Normalize and fetch the target (single attempt)
    2. Render: rewrite HTML, escape other text, placeholder for the rest
    3. Record the final URL in history
    4. Return the response payload
    """
    result = await gateway.fetch(target)
    logger.info(
        "Fetched %s -> %s (%s, %d bytes)",
        result.url, result.final_url, result.content_type, len(result.body)
    )

    content = render_content(result)

    try:
        history_db.add_entry(result.final_url, timestamp=result.fetched_at)
    except sqlite3.Error:
        logger.exception("Failed to record history for %s", result.final_url)

    return {
        "success": True,
        "content": content,
        "contentType": result.content_type,
        "url": result.final_url,
    }

def get_history() -> List[Dict[str, str]]:
    return history_db.list_entries()

def clear_history():
    history_db.clear_all()

def get_history_stats() -> Dict[str, Any]:
    return history_db.get_stats()
