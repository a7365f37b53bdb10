"""
Document Transformer Module

Phase two of an import: converts one exported page into a SiYuan markdown
document with YAML front matter and the attribute views of its databases.

The stages run in a fixed order:

1. collection tables are extracted (row identity needs intact anchors)
2. body links are discovered and classified
3. body links are rewritten to SiYuan syntax
4. the property table is parsed into front matter
5. structural normalizers clean up Notion-specific markup
6. the body is serialized and bold/italic spans are split around breaks
7. the markup is rendered to markdown
8. markdown fix-ups run and database placeholders become embeds
9. the page description and the front matter are prepended
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from ...exceptions import MissingBodyError, MissingIdError
from ...utils.dom import find_content_scope, find_page_body, parse_html, text_of
from ...utils.ids import IdGenerator, new_block_id
from ..archive import ArchiveEntry
from ..inventory import extract_title, find_page_id
from ..resolver import ResolverRegistry
from .database_model import DEFAULT_PAGE_SIZE, DatabaseModel
from .fixups import FixupChain, markdown_rules, markup_rules
from .frontmatter import serialize_front_matter
from .links import LinkResolver
from .normalizers import normalize
from .properties import PropertyParser
from .renderer import MarkdownRenderer, markdownify_renderer
from .tables import TableExtractor

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    """Converted page.

    Attributes:
        source_id: Notion id of the page
        title: Page title, also the destination document name
        destination_path: Folder path of the document, ending in ``/``
        markdown_body: Front matter, description and rendered body
        front_matter: Parsed properties in row order
        attribute_views: Databases embedded in the body, in document order
    """
    source_id: str
    title: str
    destination_path: str
    markdown_body: str
    front_matter: Dict[str, Any] = field(default_factory=dict)
    attribute_views: List[DatabaseModel] = field(default_factory=list)


class DocumentTransformer:
    """Runs the per-page conversion pipeline against a populated registry."""

    def __init__(
        self,
        registry: ResolverRegistry,
        renderer: MarkdownRenderer = markdownify_renderer,
        id_generator: IdGenerator = new_block_id,
        page_size: int = DEFAULT_PAGE_SIZE
    ):
        """
        Initialize the transformer.

        Args:
            registry: Registry filled by a complete inventory pass
            renderer: Pure markup-to-markdown function
            id_generator: Source of database, column and detached row ids
            page_size: Page size of generated database views
        """
        self.registry = registry
        self.renderer = renderer
        self.link_resolver = LinkResolver(registry)
        self.table_extractor = TableExtractor(registry, id_generator, page_size)
        self.property_parser = PropertyParser(self.link_resolver)
        self.markup_fixups = FixupChain(markup_rules())

    def transform(self, entry: ArchiveEntry) -> DocumentResult:
        """Convert one archive entry; see ``transform_markup``."""
        return self.transform_markup(entry.read_text(), entry.path)

    def transform_markup(self, markup: str, entry_path: Optional[str] = None) -> DocumentResult:
        """
        Convert the markup of one exported page.

        Args:
            markup: Page HTML
            entry_path: Archive path of the page, used for errors and for
                the destination path of pages missing from the registry

        Returns:
            DocumentResult of the page

        Raises:
            MissingBodyError: If the page has no body to convert
            MissingIdError: If the page carries no Notion id
            UnrecognizedPropertyTypeError: If a property has an unknown type
        """
        soup = parse_html(markup)

        scope = find_content_scope(soup)
        if scope is None:
            raise MissingBodyError(entry_path)

        source_id = find_page_id(soup)
        if source_id is None:
            raise MissingIdError(entry_path)

        record = self.registry.get_file(source_id)
        title = record.title if record is not None else extract_title(soup)
        destination_path = self.registry.resolve_path_for_entry(record) if record is not None else "/"

        description = self._page_description(soup)
        header = None
        if find_page_body(soup) is None:
            # Page-level database: the article header holds title and properties
            header = scope.find('header')
            if header is not None:
                header.extract()

        attribute_views = self.table_extractor.extract(soup, scope, title)

        references = self.link_resolver.discover(scope)
        self.link_resolver.rewrite(soup, references)

        front_matter = self.property_parser.parse(soup, entry_path, root=header)

        normalize(soup, scope)

        body_markup = self.markup_fixups.apply(scope.decode_contents())
        markdown = self.renderer(body_markup)

        embeds = {view.id: view.embed for view in attribute_views}
        markdown = FixupChain(markdown_rules(self.registry.single_line_breaks, embeds)).apply(markdown)

        if description:
            markdown = f"{description}\n\n{markdown}"
        markdown = serialize_front_matter(front_matter) + markdown

        logger.info(
            "Converted %s (%d links, %d databases, %d properties)",
            entry_path or source_id, len(references), len(attribute_views), len(front_matter)
        )

        return DocumentResult(
            source_id=source_id,
            title=title,
            destination_path=destination_path,
            markdown_body=markdown,
            front_matter=front_matter,
            attribute_views=attribute_views,
        )

    @staticmethod
    def _page_description(soup: BeautifulSoup) -> str:
        node = soup.select_one('p.page-description')
        return text_of(node) if node is not None else ""
