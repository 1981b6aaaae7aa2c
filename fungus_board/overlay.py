"""Fetch HTML fragments shown in modal overlays, e.g. the how-to-play page."""
from __future__ import annotations

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


def error_markup(url: str) -> str:
    return f'<p class="error">Error loading {url}<p>'


async def fetch_overlay(url: str, client: Optional[httpx.AsyncClient] = None) -> str:
    """Return the markup at ``url`` or an error paragraph if it can't be loaded."""

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=30) as own_client:
                response = await own_client.get(url, headers={"Accept": "text/html"})
        else:
            response = await client.get(url, headers={"Accept": "text/html"})
        response.raise_for_status()
    except httpx.HTTPError:
        logger.exception("Failed to load overlay %s", url)
        return error_markup(url)
    return response.text


__all__ = ["error_markup", "fetch_overlay"]
