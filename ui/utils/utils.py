import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

_TICKER_RE = re.compile(r"^[A-Z][A-Z0-9.\-]{0,9}$")


def convert_error_to_str(error) -> str:
    """
    Normalize various error representations into a human-readable string.

    Supports:
        - str          → returned as-is
        - dict         → multiple field errors joined line by line:
                           "field: msg1, msg2"
        - anything else → converted via str(error)

    Args:
        error: Error object (string, dict, etc.).

    Returns:
        Error message as string.
    """
    if isinstance(error, str):
        return error
    if isinstance(error, dict):
        return '\n'.join(
            f'{field}: {", ".join(messages) if isinstance(messages, list) else messages}'
            for field, messages in error.items()
        )
    return str(error)


def handle_api_error(response) -> str:
    """
    Extract and normalize an error message from an HTTP response.

    Strategy:
        1. Try response.json() and look for 'error', 'message' or 'detail' keys.
        2. If JSON decoding fails, fall back to response.text.
        3. Convert the result via `convert_error_to_str`.

    Args:
        response: HTTP response object (e.g. httpx.Response).

    Returns:
        Human-readable error message string.
    """
    try:
        json_data = response.json()
        error = (
            json_data.get('error') or json_data.get('message') or json_data.get('detail') or json_data
        ) if isinstance(json_data, dict) else json_data
    except Exception:
        error = response.text

    error_text = convert_error_to_str(error)
    logger.info(f"handle_api_error: normalized error_text={error_text!r}")
    return error_text


def normalize_ticker(raw: Optional[str]) -> Optional[str]:
    """
    Upper-case and validate a ticker symbol.

    Returns:
        The cleaned ticker, or None when it is blank or malformed.
    """
    s = (raw or '').strip().upper()
    return s if _TICKER_RE.match(s) else None


def fmt_price(v: Optional[float]) -> str:
    """'$1,234.50' style price; em-dash placeholder for missing values."""
    if v is None:
        return '—'
    return f'${v:,.2f}'


def fmt_signed(v: float) -> str:
    """Signed 2-decimal number: '+2.00', '-0.35'."""
    return f'{v:+,.2f}'


def fmt_pct(v: Optional[float]) -> str:
    """Signed percentage: '+1.25%'; 'n/a' when undefined."""
    if v is None:
        return 'n/a'
    return f'{v:+.2f}%'
