"""
Document Transformer Module

Phase two of an import: per-page conversion to SiYuan markdown.

Components:
- transformer: DocumentTransformer pipeline and DocumentResult
- tables: TableExtractor for collection tables
- database_model: attribute view model of extracted tables
- links: LinkResolver for relations, attachments and images
- properties: property table to front matter
- normalizers: structural clean-up of Notion markup
- fixups: regex rules over serialized markup and rendered markdown
- frontmatter: YAML front matter serialization
- renderer: markdownify-based markup-to-markdown renderer
"""

from .database_model import (
    DEFAULT_PAGE_SIZE,
    BlockValue,
    Column,
    ColumnType,
    DatabaseModel,
    DateValue,
    RowValue,
    SelectOption,
    embed_for,
    placeholder_for,
)

from .fixups import FixupChain, FixupError, Pattern, Rule, markdown_rules, markup_rules

from .frontmatter import (
    FrontMatterParseError,
    FrontMatterReader,
    FrontMatterResult,
    serialize_front_matter,
)

from .links import IMAGE_EXTENSIONS, LinkResolver

from .normalizers import STRUCTURAL_NORMALIZERS, normalize

from .properties import PropertyParser, PropertyType

from .renderer import MarkdownRenderer, markdownify_renderer

from .tables import TableExtractor

from .transformer import DocumentResult, DocumentTransformer

__all__ = [
    'DEFAULT_PAGE_SIZE',
    'BlockValue',
    'Column',
    'ColumnType',
    'DatabaseModel',
    'DateValue',
    'RowValue',
    'SelectOption',
    'embed_for',
    'placeholder_for',
    'FixupChain',
    'FixupError',
    'Pattern',
    'Rule',
    'markdown_rules',
    'markup_rules',
    'FrontMatterParseError',
    'FrontMatterReader',
    'FrontMatterResult',
    'serialize_front_matter',
    'IMAGE_EXTENSIONS',
    'LinkResolver',
    'STRUCTURAL_NORMALIZERS',
    'normalize',
    'PropertyParser',
    'PropertyType',
    'MarkdownRenderer',
    'markdownify_renderer',
    'TableExtractor',
    'DocumentResult',
    'DocumentTransformer',
]
