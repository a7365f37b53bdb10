"""
Utilities for Notion Importer: text and date helpers, block id generation,
BeautifulSoup helpers, configuration and logging.
"""

from .config import ConfigManager
from .ids import IdGenerator, SequentialIdGenerator, new_block_id
from .logging_config import JSONFormatter, LogFormat, LoggingManager, LogLevel

__all__ = [
    'ConfigManager',
    'IdGenerator',
    'SequentialIdGenerator',
    'new_block_id',
    'JSONFormatter',
    'LogFormat',
    'LoggingManager',
    'LogLevel',
]
