"""Blog content helpers: slug generation, listing filters and HTML rendering."""
from __future__ import annotations

import re
from collections import Counter
from typing import Any, Iterable

from markupsafe import Markup, escape

BLOG_CATEGORIES = ("leadership", "coaching", "transformation", "business")
SORT_ORDERS = ("newest", "oldest", "popular")

_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"\*(.+?)\*")
_ORDERED_ITEM = re.compile(r"^(\d+)\. (.*)$")


def generate_slug(title: str) -> str:
    """Return a URL slug: lowercase, alphanumerics and single hyphens only."""

    slug = re.sub(r"[^a-z0-9\s-]", "", (title or "").lower())
    slug = re.sub(r"\s+", "-", slug.strip())
    return re.sub(r"-+", "-", slug)


def filter_posts(
    posts: Iterable[dict[str, Any]],
    category: str | None = None,
    search: str | None = None,
    sort: str = "newest",
) -> list[dict[str, Any]]:
    """Filter by category and title/excerpt search, then order by ``sort``."""

    if sort not in SORT_ORDERS:
        raise ValueError(f"sort must be one of: {', '.join(SORT_ORDERS)}.")

    selected = list(posts)
    if category and category != "all":
        selected = [post for post in selected if post.get("category") == category]

    needle = (search or "").strip().lower()
    if needle:
        selected = [
            post
            for post in selected
            if needle in (post.get("title") or "").lower()
            or needle in (post.get("excerpt") or "").lower()
        ]

    if sort == "popular":
        selected.sort(key=lambda post: post.get("views") or 0, reverse=True)
    else:
        selected.sort(key=lambda post: post.get("created_at") or "", reverse=sort == "newest")
    return selected


def category_counts(posts: Iterable[dict[str, Any]]) -> dict[str, int]:
    posts = list(posts)
    counts = Counter(post.get("category") for post in posts)
    result = {"all": len(posts)}
    for category in BLOG_CATEGORIES:
        result[category] = counts.get(category, 0)
    return result


def _inline(text: str) -> str:
    html = str(escape(text))
    html = _BOLD.sub(r"<strong>\1</strong>", html)
    return _ITALIC.sub(r"<em>\1</em>", html)


def _render_line(line: str) -> str:
    if line.startswith("### "):
        return f"<h3>{_inline(line[4:])}</h3>"
    if line.startswith("## "):
        return f"<h2>{_inline(line[3:])}</h2>"
    if line.startswith("# "):
        return f"<h1>{_inline(line[2:])}</h1>"
    if line.startswith("- "):
        return f"<li>{_inline(line[2:])}</li>"
    match = _ORDERED_ITEM.match(line)
    if match:
        return f"<li>{match.group(1)}. {_inline(match.group(2))}</li>"
    return _inline(line)


def render_post_content(content: str | None) -> Markup:
    """Render the lightweight markdown used in blog posts as HTML.

    Headings, ``**bold**``, ``*italic*`` and list items are recognised. Runs of
    other lines become paragraphs, broken at blank lines and at any heading or
    list item. Input text is escaped before markup is applied.
    """

    blocks: list[str] = []
    for block in re.split(r"\n\s*\n", (content or "").strip()):
        paragraph: list[str] = []
        for line in block.splitlines():
            line = line.strip()
            if not line:
                continue
            rendered = _render_line(line)
            if rendered.startswith(("<h1>", "<h2>", "<h3>", "<li>")):
                if paragraph:
                    blocks.append(f"<p>{'<br>'.join(paragraph)}</p>")
                    paragraph = []
                blocks.append(rendered)
            else:
                paragraph.append(rendered)
        if paragraph:
            blocks.append(f"<p>{'<br>'.join(paragraph)}</p>")
    return Markup("\n".join(blocks))
