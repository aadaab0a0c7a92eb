"""Repository slug utilities.

Slugs are GitHub identifiers in ``owner/name`` format. They also label every
row the output formatter writes when the repository prefix column is enabled.
"""

from __future__ import annotations


def repo_slug(owner: str, name: str) -> str:
    """Build a repository slug from owner and name.

    Examples
    --------
    >>> repo_slug("pingcap", "tidb")
    'pingcap/tidb'

    """
    return f"{owner}/{name}"


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Parse a repository slug into owner and name.

    Parameters
    ----------
    slug:
        Repository slug in ``owner/name`` format. Surrounding whitespace is
        ignored.

    Returns
    -------
    tuple[str, str]
        ``(owner, name)``.

    Raises
    ------
    ValueError
        If the slug is not in ``owner/name`` format.

    Examples
    --------
    >>> parse_repo_slug("pingcap/tidb")
    ('pingcap', 'tidb')

    """
    text = slug.strip()
    if text.count("/") != 1:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    owner, name = text.split("/")
    if not owner or not name or any(part != part.strip() for part in (owner, name)):
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)

    return owner, name
