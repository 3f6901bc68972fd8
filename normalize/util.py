"""
Normalization utility helpers.
Small helpers to turn raw GitHub payload fragments into normalize.models entities and to compare timestamps.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from normalize.models import UserRef


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp as returned by the GitHub API into an aware UTC datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format an aware datetime the way the GitHub API expects `since` (UTC, trailing Z)."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def window_start(days: int, now: Optional[datetime] = None) -> datetime:
    """Return the `since` instant for an interval of `days` ending at `now`."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc) - timedelta(days=days)


def is_after(value: Optional[str], since: datetime) -> bool:
    """True when the timestamp is present and strictly after `since`."""
    if not value:
        return False
    return parse_timestamp(value) > since


def first_line(message: str) -> str:
    """Return the first line of the message (CRLF aware), or the whole message."""
    lines = (message or "").splitlines()
    return lines[0] if lines else ""


def login_of(raw_user: Optional[Dict[str, Any]]) -> Optional[str]:
    """Extract the login from an embedded user object, or None for unassociated entries."""
    if not isinstance(raw_user, dict):
        return None
    return raw_user.get("login") or None


def user_ref_from_raw(raw: Dict[str, Any], fallback_url: str = "") -> UserRef:
    """Create a UserRef from a `/users/{login}` payload (or an embedded user object)."""
    login = raw.get("login") or ""
    return UserRef(
        login=login,
        display_name=raw.get("name") or login,
        profile_url=raw.get("html_url") or fallback_url,
    )
