"""Collect the people around a GitHub repository.

Commit authors, fork owners, watchers, stargazers, issue reporters and
explicit user lists are gathered through one paginated collection engine and
written out as tab-separated rows.
"""

from __future__ import annotations

__version__ = "0.1.0"
