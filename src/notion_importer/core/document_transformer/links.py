"""
Link Resolver Module

Discovers the anchor-like nodes of a scope, classifies each one as a page
relation, an attachment or an image, and rewrites it to SiYuan reference
syntax using the resolver registry.

Usage:
    >>> resolver = LinkResolver(registry)
    >>> references = resolver.discover(body)
    >>> resolver.rewrite(soup, references)
"""

import logging
import posixpath
from typing import List, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup, Tag

from ...utils.dom import new_tag, snapshot
from ..archive import DOCUMENT_EXTENSION
from ..resolver import (
    LinkKind,
    LinkReference,
    ResolverRegistry,
    get_notion_id,
    strip_notion_id,
    strip_parent_directories,
)
from ..resolver.notion_ids import split_extension

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({
    "png", "jpg", "jpeg", "gif", "bmp", "svg", "webp", "tiff", "ico", "avif",
})


def decode_target(raw_target: str) -> str:
    """Percent-decode a link target and drop its leading ``../`` segments."""
    return strip_parent_directories(unquote(raw_target.strip()))


def block_reference(block_id: str, title: str) -> str:
    return f'(({block_id} "{title}"))'


def label_reference(label: str) -> str:
    return f"[[{label}]]"


class LinkResolver:
    """Classifies and rewrites links against a populated registry."""

    def __init__(self, registry: ResolverRegistry):
        self.registry = registry

    def discover(self, scope: Tag) -> List[LinkReference]:
        """
        Find and classify every anchor-like node under ``scope``.

        Anchor-like nodes are ``a[href]`` and ``img[src]``; an image nested in
        an anchor that was already classified is covered by that anchor.
        Nodes that are neither relations nor known attachments are not
        returned and stay untouched.

        Args:
            scope: Page body or property table

        Returns:
            Classified references in document order
        """
        references: List[LinkReference] = []
        claimed = set()

        for node in snapshot(scope, ['a', 'img']):
            if node.name == 'a':
                raw_target = node.get('href')
            else:
                if any(id(parent) in claimed for parent in node.parents):
                    continue
                raw_target = node.get('src')

            if not raw_target:
                continue

            reference = self.classify(node, raw_target)
            if reference is None:
                continue

            references.append(reference)
            claimed.add(id(node))

        logger.debug("Discovered %d link references", len(references))
        return references

    def classify(self, node: Tag, raw_target: str) -> Optional[LinkReference]:
        """Classify one link target, or return None for plain links."""
        target = decode_target(raw_target)
        if not target:
            return None

        notion_id = get_notion_id(target)
        if notion_id and target.endswith(f".{DOCUMENT_EXTENSION}"):
            return LinkReference(LinkKind.RELATION, notion_id, node, raw_target)

        attachment_path = self.registry.find_attachment_path(target)
        if attachment_path is None:
            return None

        _, extension = split_extension(attachment_path)
        kind = LinkKind.IMAGE if extension in IMAGE_EXTENSIONS else LinkKind.ATTACHMENT
        return LinkReference(kind, attachment_path, node, raw_target)

    def rewrite(
        self,
        soup: BeautifulSoup,
        references: List[LinkReference],
        embed_images: bool = True
    ) -> None:
        """Replace each referenced node by a span holding its SiYuan syntax.

        Args:
            soup: Document tree the references belong to
            references: Output of ``discover``
            embed_images: Render images as ``![...]`` embeds; off for
                property tables, whose values must stay plain references
        """
        for reference in references:
            node = reference.node
            if node.parent is None:
                continue
            text = self.render(reference, embed_images)
            if text is None:
                text = node.get_text()
            node.replace_with(new_tag(soup, 'span', text))

    def render(self, reference: LinkReference, embed_images: bool = True) -> Optional[str]:
        """SiYuan syntax for a reference, or None if its attachment vanished."""
        if reference.kind is LinkKind.RELATION:
            return self._render_relation(reference)

        attachment = self.registry.get_attachment(reference.target)
        if attachment is None:
            logger.warning("Missing attachment data for %s", reference.target)
            return None

        link = f"[{attachment.display_name}]({attachment.reference_path})"
        if reference.kind is LinkKind.IMAGE and embed_images:
            return "!" + link
        return link

    def _render_relation(self, reference: LinkReference) -> str:
        record = self.registry.get_file(reference.target)
        if record is not None and record.target_block_id:
            return block_reference(record.target_block_id, record.title)

        if record is None:
            logger.warning("Missing relation data for id %s", reference.target)
        else:
            logger.warning("Page %s has no block id yet, using its label", reference.target)

        basename = posixpath.basename(unquote(reference.raw_target))
        stem, _ = split_extension(basename)
        return label_reference(strip_notion_id(stem).strip())
