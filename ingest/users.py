"""
User resolution: login -> UserRef with the user's display name.
"""
import logging
import threading
from typing import Dict, Any, Optional
from normalize.models import UserRef
from normalize.util import user_ref_from_raw

logger = logging.getLogger(__name__)


class UserResolver:
    """Resolve GitHub logins to display names via /users/{login}.

    Lookups are memoized per instance when `memoize` is set; the memo is guarded by a lock so
    a resolver can be shared between worker threads. Lookup failures propagate to the caller.
    """

    def __init__(self, fetcher, memoize: bool = True):
        self.fetcher = fetcher
        self.memoize = memoize
        self._memo: Dict[str, UserRef] = {}
        self._lock = threading.Lock()

    def resolve(self, login: str, embedded: Optional[Dict[str, Any]] = None) -> UserRef:
        """Return the UserRef for `login`; `embedded` is the user object already present in the payload, if any."""
        if self.memoize:
            with self._lock:
                cached = self._memo.get(login)
            if cached is not None:
                return cached
        raw = self.fetcher.fetch(f"/users/{login}")
        fallback_url = (embedded or {}).get("html_url") or ""
        user = user_ref_from_raw({**raw, "login": raw.get("login") or login}, fallback_url=fallback_url)
        logger.debug("Resolved user %s as %r", login, user.display_name)
        if self.memoize:
            with self._lock:
                self._memo.setdefault(login, user)
        return user

    def resolve_embedded(self, raw_user: Dict[str, Any]) -> UserRef:
        """Resolve the user object embedded in an issue, pull or event payload."""
        return self.resolve(raw_user["login"], embedded=raw_user)
