"""Literal placeholder substitution for resource templates."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Sequence

_TOKEN_PATTERN = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")

TEMPLATE_SUFFIX = ".yaml.template"
OUTPUT_SUFFIX = ".yaml"

# Apply order matters: namespaced resources need the namespace, and the
# warehouse and stages reference the project.
RESOURCE_KINDS: Sequence[str] = ("namespace", "project", "warehouse", "stages")


def expand(template_text: str, replacements: Mapping[str, str]) -> str:
    """Replace every ``{{KEY}}`` with its value; unknown tokens are left as-is.

    Tokens are resolved in a single pass over ``template_text``, so a value
    that itself contains ``{{OTHER}}`` is inserted verbatim.
    """

    def _substitute(match: "re.Match[str]") -> str:
        return replacements.get(match.group(1), match.group(0))

    return _TOKEN_PATTERN.sub(_substitute, template_text)


def find_unresolved_tokens(text: str) -> List[str]:
    """Return the distinct placeholder names still present in ``text``."""
    return sorted({match.group(1) for match in _TOKEN_PATTERN.finditer(text)})


@dataclass(frozen=True)
class TemplateSet:
    """The fixed group of templates that make up one resource set."""

    root: Path
    kinds: Sequence[str] = RESOURCE_KINDS

    def template_path(self, kind: str) -> Path:
        return self.root / f"{kind}{TEMPLATE_SUFFIX}"

    @staticmethod
    def output_name(kind: str) -> str:
        return f"{kind}{OUTPUT_SUFFIX}"

    @classmethod
    def bundled(cls) -> "TemplateSet":
        """Return the template pack shipped with kargogen."""
        return cls(Path(__file__).with_name("templates"))


__all__ = [
    "RESOURCE_KINDS",
    "TemplateSet",
    "expand",
    "find_unresolved_tokens",
]
