"""Text helpers: slug derivation, literal search matching and safe markup."""

import html
import re


_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Basic formatting that survives escaping
ALLOWED_TAGS = frozenset({"b", "i", "em", "strong", "code", "pre"})


def generate_slug(title: str) -> str:
    """Generate URL-friendly slug from title.

    Lowercases, collapses every run of characters outside ``[a-z0-9]`` into a
    single ``-`` and trims leading/trailing dashes. The transform is lossy:
    ``"Hello, World!"`` and ``"hello world"`` share the slug ``hello-world``,
    and a title without letters or digits yields ``""``.
    """
    return _NON_ALNUM.sub("-", title.lower()).strip("-")


def search_pattern(query: str) -> re.Pattern[str]:
    """Case-insensitive pattern matching ``query`` literally."""
    return re.compile(re.escape(query.strip()), re.IGNORECASE)


def matches_any(pattern: re.Pattern[str], *values: str | None) -> bool:
    return any(value and pattern.search(value) for value in values)


def sanitize_html(text: str) -> str:
    """Escape markup for display, re-allowing only :data:`ALLOWED_TAGS`.

    Applied when rendering; stored text stays exactly as the author wrote it.
    """
    escaped = html.escape(text)
    for tag in ALLOWED_TAGS:
        escaped = escaped.replace(f"&lt;{tag}&gt;", f"<{tag}>")
        escaped = escaped.replace(f"&lt;/{tag}&gt;", f"</{tag}>")
    return escaped
