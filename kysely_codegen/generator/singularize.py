"""Rule-based singularization of table names.

Rules are data: an ordered list of ``(pattern, replacement)`` pairs evaluated
by one engine. The first rule whose pattern matches wins; a name no rule
matches is returned unchanged. Replacements use ``$1``-style group
references.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence, Tuple, Union

from ..database.table_matcher import parse_regex_literal
from ..errors import SingularizationRuleError

# Ordered most specific first; the last rule strips a plain trailing "s".
DEFAULT_RULES: List[Tuple[str, str]] = [
    (r"/^(equipment|information|rice|money|species|series|fish|sheep|deer|moose|news|metadata|staff|bison)$/i", "$1"),
    (r"/(pe)ople$/i", "$1rson"),
    (r"/(child)ren$/i", "$1"),
    (r"/(m|wom)en$/i", "$1an"),
    (r"/(t)eeth$/i", "$1ooth"),
    (r"/(f)eet$/i", "$1oot"),
    (r"/(m|l)ice$/i", "$1ouse"),
    (r"/(g)eese$/i", "$1oose"),
    (r"/(ox)en$/i", "$1"),
    (r"/(matr|append)ices$/i", "$1ix"),
    (r"/(vert|ind)ices$/i", "$1ex"),
    (r"/(analy|ba|diagno|parenthe|progno|synop|the|cri|ax|test)ses$/i", "$1sis"),
    (r"/(octop|vir|radi|cact|foc|fung|stimul|alumn|bacill)i$/i", "$1us"),
    (r"/(alias|status|bus|campus|census)(es)?$/i", "$1"),
    (r"/(quiz)zes$/i", "$1"),
    (r"/(her|potat|tomat|ech|vet)oes$/i", "$1o"),
    (r"/(wi|kni|^li)ves$/i", "$1fe"),
    (r"/(ar|(?:wo|[ae])l|[eo][ao])ves$/i", "$1f"),
    (r"/(movie|shoe|cookie|tie)s$/i", "$1"),
    (r"/(x|ch|ss|sh|zz)es$/i", "$1"),
    (r"/([^aeiouy]|qu)ies$/i", "$1y"),
    (r"/(ss|us|is)$/i", "$1"),
    (r"/s$/i", ""),
]

GROUP_REFERENCE = re.compile(r"\$(\$|&|\d{1,2})")


def _expand(template: str, match: "re.Match") -> str:
    def substitute(reference: "re.Match") -> str:
        token = reference.group(1)
        if token == "$":
            return "$"
        if token == "&":
            return match.group(0)
        index = int(token)
        if index > (match.re.groups or 0):
            return reference.group(0)
        return match.group(index) or ""

    return GROUP_REFERENCE.sub(substitute, template)


@dataclass(frozen=True)
class SingularizationRule:
    """One compiled ``(pattern, replacement)`` pair."""

    source: str
    pattern: Pattern
    replacement: str

    @classmethod
    def parse(cls, source: str, replacement: str) -> "SingularizationRule":
        """Compile a rule from a ``/pattern/flags`` literal or a bare word.

        A bare word matches the whole name, case-insensitively.

        Raises:
            SingularizationRuleError: If the pattern does not compile
        """
        try:
            regex = parse_regex_literal(source)
            if regex is None:
                pattern = re.compile(f"^{re.escape(source)}$", re.IGNORECASE)
            else:
                pattern = re.compile(*regex)
        except (re.error, ValueError) as e:
            raise SingularizationRuleError(source, str(e)) from e
        return cls(source=source, pattern=pattern, replacement=replacement)

    def apply(self, name: str) -> Optional[str]:
        """Return the rewritten name, or None when the rule does not match."""
        match = self.pattern.search(name)
        if match is None:
            return None
        return name[:match.start()] + _expand(self.replacement, match) + name[match.end():]


class Singularizer:
    """Applies an ordered rule list to names."""

    def __init__(self, rules: Sequence[SingularizationRule]):
        self.rules = list(rules)

    def singularize(self, name: str) -> str:
        for rule in self.rules:
            result = rule.apply(name)
            if result is not None:
                return result
        return name

    @classmethod
    def from_rules(cls, rules: Sequence[Tuple[str, str]]) -> "Singularizer":
        return cls([SingularizationRule.parse(source, replacement) for source, replacement in rules])


def build_singularizer(option: Union[bool, Dict[str, str]]) -> Optional[Singularizer]:
    """Build the singularizer for a ``singularize`` option value.

    ``False`` disables singularization, ``True`` uses the built-in English
    rules, and a mapping adds custom rules that are tried, in declaration
    order, before the built-in ones.
    """
    if option is False:
        return None
    custom = list(option.items()) if isinstance(option, dict) else []
    return Singularizer.from_rules(custom + DEFAULT_RULES)
