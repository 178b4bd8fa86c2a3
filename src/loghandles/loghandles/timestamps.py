from datetime import datetime, timezone


def utc_timestamp() -> str:
    """Current UTC time in RFC 3339, second precision (2026-10-19T12:00:00Z)."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
