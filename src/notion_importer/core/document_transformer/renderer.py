"""
Markup-to-markdown rendering.

The transformer treats rendering as an opaque pure function ``str -> str``.
``markdownify_renderer`` is the default; any other callable can be injected.
"""

from typing import Callable

from markdownify import markdownify

MarkdownRenderer = Callable[[str], str]


def markdownify_renderer(markup: str) -> str:
    """Render serialized markup to markdown with ATX headings and ``-`` bullets.

    Underscores and brackets are left unescaped so TeX, block references and
    the link syntax written by earlier stages survive.
    """
    markdown = markdownify(
        markup,
        heading_style="ATX",
        bullets="-",
        escape_underscores=False,
        escape_misc=False,
    )
    markdown = markdown.strip()
    return markdown + "\n" if markdown else ""
