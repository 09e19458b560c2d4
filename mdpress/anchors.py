"""Header identifiers: slugs and per-document collision handling."""

from __future__ import annotations

import logging
import re
import string
import unicodedata
from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

_PUNCTUATION_TABLE = str.maketrans(
    "", "", string.punctuation.replace("-", "").replace("_", "")
)


def generate_slug(title: str, preserve_unicode: bool = False) -> str:
    """Generate a URL-style slug from header text.

    Converts the text to lowercase ASCII (or Unicode when preserving), removes
    punctuation except hyphens and underscores, collapses whitespace to single
    hyphens, and returns ``"untitled"`` when nothing is left.

    Args:
        title: The header text to convert into a slug.
        preserve_unicode: When True, retain Unicode characters instead of
            transliterating to ASCII.

    Returns:
        str: Hyphen-separated slug suitable for an ``id`` attribute.

    Examples:
        generate_slug("Hello World")  # "hello-world"
        generate_slug("What's New?")  # "whats-new"
        generate_slug("   ")  # "untitled"
        generate_slug("Café", preserve_unicode=True)  # "café"
    """
    if preserve_unicode:
        slug = unicodedata.normalize("NFKC", title)
    else:
        slug = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")

    slug = slug.casefold().translate(_PUNCTUATION_TABLE)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-{2,}", "-", slug).strip("-")

    return slug or "untitled"


class AnchorRegistry:
    """Ordered, append-only record of the identifiers used in one document.

    Args:
        reserved: Identifiers that are already taken before rendering starts,
            for example ids used by the surrounding page template.

    Examples:
        registry = AnchorRegistry(["example"])
        find_anchor(registry, "example")  # "example-1"
    """

    def __init__(self, reserved: Iterable[str] = ()):
        self._anchors: list[str] = []
        self._seen: set[str] = set()
        for anchor in reserved:
            self.register(anchor)

    def __contains__(self, anchor: object) -> bool:
        return anchor in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(self._anchors)

    def __len__(self) -> int:
        return len(self._anchors)

    def register(self, anchor: str) -> None:
        """Append an identifier, refusing duplicates.

        Raises:
            ValueError: If `anchor` was registered before.
        """
        if anchor in self._seen:
            raise ValueError(f"Anchor `{anchor}` is already registered")
        self._anchors.append(anchor)
        self._seen.add(anchor)


def find_anchor(registry: AnchorRegistry, name: str) -> str:
    """Return the first identifier derived from `name` that is still free.

    The bare name is used when possible; otherwise ``-1``, ``-2``... is
    appended, picking the smallest suffix not in `registry`. A numbered
    header can itself collide with an earlier auto-numbered one (``"Header"``,
    ``"Header"``, ``"Header 1"``), so every candidate is checked.

    Args:
        registry: Identifiers already used in the document.
        name: Slug computed from the header text.

    Returns:
        str: An identifier not present in `registry`. The registry is not
            modified.

    Examples:
        find_anchor(AnchorRegistry(), "intro")  # "intro"
        find_anchor(AnchorRegistry(["intro", "intro-1"]), "intro")  # "intro-2"
    """
    if name not in registry:
        return name

    suffix = 1
    while f"{name}-{suffix}" in registry:
        suffix += 1

    anchor = f"{name}-{suffix}"
    logger.debug("Anchor `%s` already used, allocated `%s`", name, anchor)
    return anchor
