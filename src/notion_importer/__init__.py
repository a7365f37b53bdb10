"""
Notion Importer.

Converts a Notion HTML export archive into SiYuan-style markdown documents
with YAML front matter and attribute-view databases.

The conversion runs in two phases:
- Inventory: every archive entry is registered in a ResolverRegistry
- Transformation: each document is rewritten using the completed registry
"""

__version__ = "0.3.0"
