"""
Splits a tournament summary export into one text block per tournament.

Blocks are separated by a line of four or more hyphens:

    Tournament #100, Sunday Major, Hold'em No Limit
    Buy-in: $10.00 + $1.00
    50 Players
    ----
    Tournament #101, ...
"""

import re
from typing import Iterator

DELIMITER = "----"
# the delimiter, optionally longer, alone on its line
DELIMITER_PATTERN = re.compile(r"^" + re.escape(DELIMITER) + r"-*[ \t]*\r?$", re.MULTILINE)


class TournamentBlocks:
    """Lazy, restartable sequence of the non-blank blocks of a text.

    Blocks are yielded unstripped, so DELIMITER.join(blocks) gives the
    original text minus blank segments.
    """

    def __init__(self, text: str):
        self.text = text or ""

    def __iter__(self) -> Iterator[str]:
        start = 0
        for match in DELIMITER_PATTERN.finditer(self.text):
            segment = self.text[start:match.start()]
            if segment.strip():
                yield segment
            start = match.end()

        tail = self.text[start:]
        if tail.strip():
            yield tail

    def __repr__(self):
        return f"TournamentBlocks({len(self.text)} chars)"


def split_blocks(text: str) -> TournamentBlocks:
    """Convenience function to split an export into tournament blocks"""
    return TournamentBlocks(text)
