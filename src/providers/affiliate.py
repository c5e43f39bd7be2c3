# src/providers/affiliate.py

"""Affiliate-link rewriting for outbound product URLs.

Tagging is best-effort: missing configuration or an unusable URL
returns the input unchanged and never raises.
"""

from typing import Any

EBAY_MKCID = "1"
EBAY_MKRID = "711-53200-19255-0"


def _append(url: str, params: str) -> str:
    """Append a pre-encoded query fragment with the right separator."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{params}"


def tag_amazon(url: Any, tag: str | None) -> Any:
    """Append ``tag=<tag>`` to an Amazon product URL."""
    if not tag or not isinstance(url, str) or not url:
        return url
    return _append(url, f"tag={tag}")


def tag_ebay(
    url: Any,
    campaign_id: str | None,
    custom_id: str | None = None,
) -> Any:
    """Append eBay Partner Network tracking parameters."""
    if not campaign_id or not isinstance(url, str) or not url:
        return url
    return _append(
        url,
        f"campid={campaign_id}&customid={custom_id or ''}"
        f"&mkcid={EBAY_MKCID}&mkrid={EBAY_MKRID}",
    )
