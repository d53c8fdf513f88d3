"""Symbolic module/function paths kept as identifier segments."""

from __future__ import annotations

import re
from dataclasses import dataclass

SEPARATOR = "::"
_IDENTIFIER = re.compile(r"(?:r#)?[^\W\d]\w*")


def is_identifier(value: str) -> bool:
    return bool(_IDENTIFIER.fullmatch(value or ""))


@dataclass(frozen=True, slots=True)
class SymbolPath:
    segments: tuple[str, ...]

    @classmethod
    def root(cls, name: str) -> "SymbolPath":
        return cls((name,))

    @classmethod
    def parse(cls, text: str) -> "SymbolPath":
        """Parse `a::b::c`, rejecting empty or non-identifier segments."""
        if not isinstance(text, str) or not text:
            raise ValueError(f"Invalid symbolic path: {text!r}")
        segments = tuple(part.strip() for part in text.split(SEPARATOR))
        for segment in segments:
            if not is_identifier(segment):
                raise ValueError(f"Invalid symbolic path: {text!r}")
        return cls(segments)

    def child(self, name: str) -> "SymbolPath":
        return SymbolPath(self.segments + (name,))

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)
