"""
Front Matter Module

Serializes the property mapping of a page as a YAML front-matter block and
reads such a block back from a converted document.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DELIMITER = "---"


class FrontMatterParseError(Exception):
    """Raised when a front-matter block is not valid YAML.

    Attributes:
        message: Description of the parsing error
        line_number: Line of the YAML error, if known
        content_preview: Start of the offending block
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        content_preview: Optional[str] = None
    ):
        self.message = message
        self.line_number = line_number
        self.content_preview = content_preview

        error_parts = [message]
        if line_number:
            error_parts.append(f"at line {line_number}")
        if content_preview:
            error_parts.append(f"Content: {content_preview[:100]}...")
        super().__init__(" ".join(error_parts))


@dataclass
class FrontMatterResult:
    """A document split into its front matter and body."""
    has_front_matter: bool
    metadata: Dict[str, Any] = field(default_factory=dict)
    body: str = ""


def serialize_front_matter(front_matter: Dict[str, Any]) -> str:
    """
    Render a mapping as a ``---`` delimited YAML block.

    Keys keep their insertion order and non-ASCII text is written as-is.
    An empty mapping renders as the empty string.
    """
    if not front_matter:
        return ""
    dumped = yaml.safe_dump(
        front_matter,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"{DELIMITER}\n{dumped}{DELIMITER}\n"


class FrontMatterReader:
    """Splits converted documents into metadata and body."""

    def __init__(self):
        self.pattern = re.compile(r'^---\s*\n(.*?\n)---\s*\n', re.DOTALL)

    def read(self, content: str) -> FrontMatterResult:
        """
        Parse the leading front-matter block of ``content``, if any.

        Raises:
            FrontMatterParseError: If the block is not a YAML mapping
        """
        match = self.pattern.match(content)
        if not match:
            return FrontMatterResult(has_front_matter=False, body=content)

        block = match.group(1)
        try:
            metadata = yaml.safe_load(block) or {}
        except yaml.YAMLError as e:
            line_number = None
            mark = getattr(e, 'problem_mark', None)
            if mark is not None:
                line_number = mark.line + 2
            raise FrontMatterParseError(
                f"Invalid YAML front matter: {e}",
                line_number=line_number,
                content_preview=block
            )

        if not isinstance(metadata, dict):
            raise FrontMatterParseError("Front matter must be a mapping", content_preview=block)

        return FrontMatterResult(has_front_matter=True, metadata=metadata, body=content[match.end():])
