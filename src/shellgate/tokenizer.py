"""Command line tokenization."""

from __future__ import annotations

from shellgate.types import TokenizedCommand


def tokenize(line: str) -> TokenizedCommand:
    """Split one command line into a name and its arguments on whitespace runs."""

    words = line.split()
    if not words:
        return TokenizedCommand(name=None, args=[])
    return TokenizedCommand(name=words[0], args=words[1:])
