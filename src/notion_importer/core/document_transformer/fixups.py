"""
String Fix-up Module

Regex rules applied to serialized output only; nothing here touches the
markup tree. Two rule sets exist:

- markup rules run on the serialized body before rendering (bracket repair
  of bold/italic spans around line breaks)
- markdown rules run on the rendered markdown (blank-line collapsing,
  hashtag escaping, table link backslash repair, database embedding)

Key Components:
- Pattern: compiled, validated regex with a name
- Rule: Pattern plus string or callable replacement
- FixupChain: ordered rules applied in sequence
- FixupError: raised when a rule cannot be compiled or applied

Usage:
    >>> chain = FixupChain(markdown_rules(single_line_breaks=True))
    >>> chain.apply("a\\n\\nb")
    'a\\nb'
"""

import logging
import re
from typing import Callable, Dict, List, Match, Optional, Tuple, Union

logger = logging.getLogger(__name__)

LINE_BREAK = "<br/>"
HASHTAG_RE = re.compile(r'#[a-z0-9\-]+', re.IGNORECASE)
# Spans whose hashtags stay as written: [[..]], [..](..), ((..)) and inline code
PROTECTED_SPAN_RE = re.compile(r'`[^`\n]*`|\[\[[^\]]*\]\]|\[[^\]]*\]\([^)]*\)|\(\([^)]*\)\)')


class FixupError(Exception):
    """A fix-up rule failed to compile or apply.

    Attributes:
        message: Human-readable error description
        pattern_name: Name of the failing pattern
        regex: Regex string of the failing pattern
    """

    def __init__(self, message: str, pattern_name: Optional[str] = None, regex: Optional[str] = None):
        super().__init__(message)
        self.pattern_name = pattern_name
        self.regex = regex


class Pattern:
    """A named, pre-compiled regex."""

    def __init__(self, name: str, regex_pattern: str, flags: int = re.MULTILINE) -> None:
        """
        Compile a named pattern.

        Raises:
            ValueError: If name or pattern is empty
            FixupError: If the regex does not compile
        """
        if not name or not name.strip():
            raise ValueError("Pattern name cannot be empty")
        if not regex_pattern:
            raise ValueError("Regex pattern cannot be empty")

        self.name = name.strip()
        self.regex_pattern = regex_pattern

        try:
            self.compiled_regex = re.compile(regex_pattern, flags)
        except re.error as e:
            raise FixupError(
                f"Invalid regex pattern for '{name}': {e}",
                pattern_name=name,
                regex=regex_pattern
            )

    def __repr__(self) -> str:
        return f"Pattern(name='{self.name}', regex='{self.regex_pattern}')"


class Rule:
    """A Pattern with its replacement (backreference string or callable)."""

    def __init__(self, pattern: Pattern, replacement: Union[str, Callable[[Match[str]], str]]) -> None:
        if not isinstance(pattern, Pattern):
            raise TypeError("Pattern must be a Pattern instance")
        if not isinstance(replacement, str) and not callable(replacement):
            raise ValueError("Replacement must be string or callable")

        self.pattern = pattern
        self.replacement = replacement

    def apply(self, text: str) -> str:
        """
        Apply the rule to every match in ``text``.

        Raises:
            FixupError: If the replacement fails
        """
        if not text:
            return text

        try:
            return self.pattern.compiled_regex.sub(self.replacement, text)
        except (re.error, IndexError, KeyError, TypeError, ValueError) as e:
            raise FixupError(
                f"Rule application failed for pattern '{self.pattern.name}': {e}",
                pattern_name=self.pattern.name,
                regex=self.pattern.regex_pattern
            )

    def __repr__(self) -> str:
        repl_type = "callable" if callable(self.replacement) else "string"
        return f"Rule(pattern='{self.pattern.name}', replacement_type={repl_type})"


class FixupChain:
    """Applies rules in order; each rule sees the previous rule's output."""

    def __init__(self, rules: Optional[List[Rule]] = None) -> None:
        self.rules = list(rules or [])

    def get_rule(self, name: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.pattern.name == name:
                return rule
        return None

    def apply(self, text: str) -> str:
        for rule in self.rules:
            text = rule.apply(text)
        return text


def _split_around_breaks(tag: str) -> Callable[[Match[str]], str]:
    def replace(match: Match[str]) -> str:
        opening, inner = match.group(1), match.group(2)
        if LINE_BREAK not in inner:
            return match.group(0)
        closing = f"</{tag}>"
        return opening + inner.replace(LINE_BREAK, closing + LINE_BREAK + opening) + closing
    return replace


def bracket_repair_rule(tag: str) -> Rule:
    """Close and reopen ``<tag>`` spans around each line break they contain."""
    pattern = Pattern(f"split_{tag}_breaks", rf'(<{tag}(?:\s[^>]*)?>)(.*?)</{tag}>', re.DOTALL)
    return Rule(pattern, _split_around_breaks(tag))


def markup_rules() -> List[Rule]:
    """Rules for the serialized markup, before rendering."""
    return [bracket_repair_rule('strong'), bracket_repair_rule('em')]


def _protected_spans(line: str) -> List[Tuple[int, int]]:
    return [match.span() for match in PROTECTED_SPAN_RE.finditer(line)]


def escape_hashtags_in_line(line: str) -> str:
    """Escape tag-like ``#word`` tokens that are not escaped, in a link or in inline code."""
    spans = _protected_spans(line)

    def replace(match: Match[str]) -> str:
        start = match.start()
        if start > 0 and line[start - 1] == '\\':
            return match.group(0)
        if any(span_start <= start < span_end for span_start, span_end in spans):
            return match.group(0)
        return '\\' + match.group(0)

    return HASHTAG_RE.sub(replace, line)


def _escape_hashtags_outside_fences(match: Match[str]) -> str:
    if match.group('fence'):
        return match.group(0)
    return escape_hashtags_in_line(match.group(0))


def _fix_double_backslash(match: Match[str]) -> str:
    return match.group(0).replace('\\\\|', '\\|')


def _embed_databases(embeds: Dict[str, str]) -> Callable[[Match[str]], str]:
    def replace(match: Match[str]) -> str:
        embed = embeds.get(match.group(1))
        if embed is None:
            logger.warning("No database for placeholder %s", match.group(0))
            return match.group(0)
        return embed
    return replace


def markdown_rules(
    single_line_breaks: bool = False,
    embeds: Optional[Dict[str, str]] = None
) -> List[Rule]:
    """
    Rules for the rendered markdown, in application order.

    Args:
        single_line_breaks: Collapse blank lines, except before block quotes
        embeds: Database id to embed markup, for placeholder substitution
    """
    rules = []

    if single_line_breaks:
        rules.append(Rule(Pattern("collapse_blank_lines", r'\n\n(?!>)'), '\n'))

    # A fenced block is matched whole so none of its lines are escaped
    rules.append(Rule(
        Pattern(
            "escape_hashtags",
            r'^(?P<fence>`{3,}|~{3,}).*\n(?:.*\n)*?(?:(?P=fence)[ \t]*$|.*\Z)'
            r'|^.*#[A-Za-z0-9\-].*$'
        ),
        _escape_hashtags_outside_fences
    ))
    rules.append(Rule(
        Pattern("table_link_backslash", r'\[\[[^\]]*\\\\\|[^\]]*\]\]'),
        _fix_double_backslash
    ))

    if embeds:
        rules.append(Rule(
            Pattern("database_placeholder", r'@@database:([^@\s]+)@@'),
            _embed_databases(embeds)
        ))

    return rules
