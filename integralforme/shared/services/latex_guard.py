"""LaTeX guard — keep math spans away from the translator.

``protect`` swaps every math span for a numbered placeholder token and
remembers the originals; ``restore`` puts them back after translation.

Recognized spans, tried in this order at each position (leftmost match wins,
matches never overlap):

    $$ ... $$     display, may span lines
    $ ... $       inline, no newline and no ``$`` inside
    \\[ ... \\]     display, may span lines
    \\( ... \\)     inline, may span lines

Text that already looks like a placeholder token is masked as well, so
``restore(*protect(text)) == text`` holds for every input.
"""

import re
from typing import List, NamedTuple

PLACEHOLDER = "[[[MATH_{index}]]]"

MATH_PATTERN = re.compile(
    r"\$\$[\s\S]*?\$\$"
    r"|\$[^$\n]+\$"
    r"|\\\[[\s\S]*?\\\]"
    r"|\\\([\s\S]*?\\\)"
    r"|\[\[\[MATH_\d+\]\]\]"
)

TOKEN_PATTERN = re.compile(r"\[\[\[MATH_(\d+)\]\]\]")


class MaskedText(NamedTuple):
    """Text with math spans replaced, plus the spans in occurrence order."""

    text: str
    substitutions: List[str]


def placeholder(index: int) -> str:
    return PLACEHOLDER.format(index=index)


def protect(text: str) -> MaskedText:
    """Replace each math span with ``[[[MATH_i]]]``, ``i`` counting from 0."""
    substitutions: List[str] = []

    def _mask(match: re.Match) -> str:
        token = placeholder(len(substitutions))
        substitutions.append(match.group(0))
        return token

    return MaskedText(MATH_PATTERN.sub(_mask, text), substitutions)


def restore(text: str, substitutions: List[str]) -> str:
    """Put the original spans back in place of their tokens.

    Every occurrence of a token is replaced, in a single pass, so restored
    math is never rescanned for tokens. Tokens with no substitution are left
    alone.
    """

    def _unmask(match: re.Match) -> str:
        index = int(match.group(1))
        if index < len(substitutions):
            return substitutions[index]
        return match.group(0)

    return TOKEN_PATTERN.sub(_unmask, text)
