"""
Record types for resolved repository activity.
Every record is frozen and validates its required fields on construction.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Tuple

OTHERS_BUCKET = "[others]"


def _require_text(owner: str, name: str, value: Any):
    if not isinstance(value, str) or not value:
        raise ValueError(f"{owner}.{name} must be a non-empty string, got {value!r}")


@dataclass(frozen=True)
class UserRef:
    """
    A resolved hosting-service user.
    """
    login: str
    display_name: str = ""
    profile_url: str = ""

    def __post_init__(self):
        _require_text("UserRef", "login", self.login)
        if not self.display_name:
            object.__setattr__(self, "display_name", self.login)


@dataclass(frozen=True)
class ResolvedIssue:
    """
    A closed issue together with the commit that fixed it.
    """
    title: str
    url: str
    reporter: UserRef
    fix_title: str
    fix_author: UserRef

    def __post_init__(self):
        _require_text("ResolvedIssue", "url", self.url)
        if self.fix_title is None or self.fix_author is None:
            raise ValueError("ResolvedIssue requires a fix title and a fix author")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "reporterName": self.reporter.display_name,
            "reporterLogin": self.reporter.login,
            "reporterUrl": self.reporter.profile_url,
            "fixTitle": self.fix_title,
            "fixAuthorName": self.fix_author.display_name,
            "fixAuthorLogin": self.fix_author.login,
            "fixAuthorUrl": self.fix_author.profile_url,
        }


@dataclass(frozen=True)
class ResolvedPull:
    title: str
    url: str
    author: UserRef

    def __post_init__(self):
        _require_text("ResolvedPull", "url", self.url)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "authorName": self.author.display_name,
            "authorLogin": self.author.login,
            "authorUrl": self.author.profile_url,
        }


@dataclass(frozen=True)
class ResolvedRelease:
    name: str
    url: str

    def __post_init__(self):
        _require_text("ResolvedRelease", "url", self.url)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url}


@dataclass(frozen=True)
class AuthorCount:
    """
    Commit count for one author, or for the collective others bucket.
    """
    author: str
    count: int

    def __post_init__(self):
        _require_text("AuthorCount", "author", self.author)
        if not isinstance(self.count, int) or self.count < 1:
            raise ValueError(f"AuthorCount.count must be a positive integer, got {self.count!r}")

    @property
    def is_others(self) -> bool:
        return self.author == OTHERS_BUCKET

    def to_dict(self) -> Dict[str, Any]:
        return {"author": self.author, "count": self.count}


@dataclass(frozen=True)
class RepositoryActivity:
    """
    Everything resolved for one repository within the time window.
    """
    issues: Tuple[ResolvedIssue, ...] = field(default_factory=tuple)
    pulls: Tuple[ResolvedPull, ...] = field(default_factory=tuple)
    releases: Tuple[ResolvedRelease, ...] = field(default_factory=tuple)
    commit_counts: Tuple[AuthorCount, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # accept any iterable from callers, store tuples
        for name in ("issues", "pulls", "releases", "commit_counts"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        authors = [c.author for c in self.commit_counts]
        if len(authors) != len(set(authors)):
            raise ValueError(f"duplicate author entries in commit counts: {authors}")

    @property
    def has_activity(self) -> bool:
        return bool(self.issues or self.pulls)

    @property
    def commit_total(self) -> int:
        return sum(c.count for c in self.commit_counts)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "issues": [i.to_dict() for i in self.issues],
            "pulls": [p.to_dict() for p in self.pulls],
            "releases": [r.to_dict() for r in self.releases],
            "commitCounts": [c.to_dict() for c in self.commit_counts],
        }


# repository path -> activity, in configuration order
AggregateReport = Dict[str, RepositoryActivity]


def report_to_dict(report: AggregateReport) -> Dict[str, Any]:
    """Convert an aggregate report into plain JSON-serializable data, preserving key order."""
    return {path: activity.to_dict() for path, activity in report.items()}
