"""Internal constants shared across the library."""

BASE_URL = "http://localhost:8000"
USER_AGENT = "assetdash/0.1"

#: Rows shown per table page.
PAGE_SIZE = 10

#: Status filter value that keeps every record.
STATUS_ALL = "all"

# ------------------------------------------------------------------
# Push channel
# ------------------------------------------------------------------

TELEMETRY_WS_PATH = "/ws/telemetry"

_SCHEME_SWAP: dict[str, str] = {"https": "wss", "http": "ws"}


def telemetry_ws_url(base_url: str) -> str:
    """Derive the telemetry WebSocket URL from the HTTP API base.

    Only the scheme changes (``http`` → ``ws``, ``https`` → ``wss``) and
    the fixed ``/ws/telemetry`` path is appended.

    Raises :class:`ValueError` if *base_url* is not an http(s) URL.
    """
    base = base_url.strip().rstrip("/")
    scheme, sep, rest = base.partition("://")
    ws_scheme = _SCHEME_SWAP.get(scheme.lower()) if sep else None
    if ws_scheme is None:
        raise ValueError(f"base URL must start with http:// or https://, got {base_url!r}")
    return f"{ws_scheme}://{rest}{TELEMETRY_WS_PATH}"


# ------------------------------------------------------------------
# Save validation fallback
# ------------------------------------------------------------------

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."
