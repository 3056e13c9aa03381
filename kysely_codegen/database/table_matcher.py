"""Include/exclude filtering of introspected tables."""

import re
from typing import Optional, List, Pattern, Sequence, Tuple

# /pattern/flags
REGEX_LITERAL = re.compile(r'^/(.+)/([a-z]*)$', re.DOTALL)


def parse_regex_literal(literal: str) -> Optional[Tuple[str, int]]:
    """Split a ``/pattern/flags`` literal into a pattern and ``re`` flags.

    Returns None when the string is not written as a regex literal.
    """
    match = REGEX_LITERAL.match(literal)
    if not match:
        return None
    source, flag_chars = match.groups()
    flags = 0
    for char in flag_chars:
        if char == 'i':
            flags |= re.IGNORECASE
        elif char == 'm':
            flags |= re.MULTILINE
        elif char == 's':
            flags |= re.DOTALL
        elif char in ('g', 'u', 'y'):
            # Meaningless for a single match
            continue
        else:
            raise ValueError(f"Unsupported regex flag '{char}'")
    return source, flags


def glob_to_regex(glob: str) -> str:
    """Translate a segment glob into a regular expression.

    ``*`` and ``?`` never cross a ``.``; ``**`` does. ``{a,b}`` is an
    alternation.
    """
    parts = []
    depth = 0
    i = 0
    while i < len(glob):
        char = glob[i]
        if char == '*':
            if glob[i:i + 2] == '**':
                parts.append('.*')
                i += 1
            else:
                parts.append('[^.]*')
        elif char == '?':
            parts.append('[^.]')
        elif char == '{':
            depth += 1
            parts.append('(?:')
        elif char == '}' and depth:
            depth -= 1
            parts.append(')')
        elif char == ',' and depth:
            parts.append('|')
        else:
            parts.append(re.escape(char))
        i += 1
    if depth:
        raise ValueError(f"Unbalanced braces in pattern {glob!r}")
    return ''.join(parts)


class _CompiledPattern:
    """One include or exclude pattern, compiled once."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        regex = parse_regex_literal(pattern)
        if regex is not None:
            source, flags = regex
            self._regex: Pattern = re.compile(source, flags)
            self._is_regex = True
            self._qualified = True
        else:
            self._regex = re.compile(glob_to_regex(pattern))
            self._is_regex = False
            self._qualified = '.' in pattern

    def matches(self, schema: Optional[str], table: str) -> bool:
        if self._qualified and schema:
            subject = f"{schema}.{table}"
        else:
            subject = table
        if self._is_regex:
            return self._regex.search(subject) is not None
        return self._regex.fullmatch(subject) is not None


class TableMatcher:
    """Decides which tables take part in code generation.

    Exclusion wins over inclusion. Without an include pattern, a table is
    accepted when its schema is one of the default schemas, or always when
    no default schemas are configured.
    """

    def __init__(
        self,
        include_pattern: Optional[str] = None,
        exclude_pattern: Optional[str] = None,
        default_schemas: Optional[Sequence[str]] = None,
    ):
        self.include = _CompiledPattern(include_pattern) if include_pattern else None
        self.exclude = _CompiledPattern(exclude_pattern) if exclude_pattern else None
        self.default_schemas: List[str] = list(default_schemas or [])

    def matches(self, schema: Optional[str], table: str) -> bool:
        if self.exclude is not None and self.exclude.matches(schema, table):
            return False
        if self.include is not None:
            return self.include.matches(schema, table)
        if self.default_schemas:
            return schema in self.default_schemas
        return True
