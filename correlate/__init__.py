"""
Correlate package: link closed issues to the commits that fixed them.
"""

from .linker import resolve_issues, find_referenced_event

__all__ = ["resolve_issues", "find_referenced_event"]
