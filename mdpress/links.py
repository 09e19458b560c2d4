"""Resolution of relative links between documents."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import unquote

from .constants import RELATIVE_LINK_PREFIX
from .exceptions import LinkResolutionError


def is_relative_link(link: str) -> bool:
    return link.startswith(RELATIVE_LINK_PREFIX)


def resolve_internal_link(link: str, permalinks: Mapping[str, str]) -> str:
    """Turn a ``./path.md`` link into the permalink of the target document.

    Any ``#fragment`` is split off before the lookup and re-attached to the
    resolved permalink. The path is percent-decoded first, since the tokenizer
    hands over normalized URLs.

    Args:
        link: Link target as written in the document, starting with ``./``.
        permalinks: Mapping of document paths (without the ``./`` prefix) to
            their permalinks.

    Returns:
        str: The resolved permalink, including the fragment when present.

    Raises:
        LinkResolutionError: If the path has no entry in `permalinks`.

    Examples:
        resolve_internal_link("./pages/about.md", {"pages/about.md": "/about/"})  # "/about/"
        resolve_internal_link("./about.md#team", {"about.md": "/about/"})  # "/about/#team"
    """
    path, hash_sign, fragment = link[len(RELATIVE_LINK_PREFIX) :].partition("#")

    try:
        permalink = permalinks[unquote(path)]
    except KeyError as error:
        raise LinkResolutionError(link) from error

    return f"{permalink}#{fragment}" if hash_sign else permalink
