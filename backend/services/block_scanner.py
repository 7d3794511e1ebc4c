"""
Block Scanner - Locate route declaration blocks in raw source text

Line-oriented heuristic: the first line binding an identifier to a router
factory fixes the identifier, and every later line starting with
``<identifier>.`` opens a block that runs until the terminator token.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Sequence

from models.route import BlockKind, RouteBlock

from .errors import ReadError

DEFAULT_DECLARATION_PATTERN = r"(?:const|let|var)\s+(\w+)\s*=\s*express\.Router\(\s*\)"
TERMINATOR = ");"


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, the way git numbers lines; a final newline ends the last line"""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def closes_block(line: str) -> bool:
    """Return True if the line terminates a multi-line block.

    Any occurrence of the terminator counts, including inside strings or
    nested calls.
    """
    return line.strip() == TERMINATOR or TERMINATOR in line


def closes_single_line(line: str) -> bool:
    """Return True if a block's start line also ends it"""
    return line.strip().endswith(TERMINATOR)


class ScanState(str, Enum):
    SEARCHING_DECLARATION = "searching_declaration"
    SEARCHING_BLOCK_START = "searching_block_start"
    INSIDE_BLOCK = "inside_block"


class BlockScanner:
    """Scan file lines into an ordered list of RouteBlock"""

    def __init__(
        self,
        declaration_pattern: str = DEFAULT_DECLARATION_PATTERN,
        closes_block: Callable[[str], bool] = closes_block,
        closes_single_line: Callable[[str], bool] = closes_single_line,
    ):
        self.declaration_re = re.compile(declaration_pattern)
        self.closes_block = closes_block
        self.closes_single_line = closes_single_line

    def scan_text(self, text: str | None, file_path: str | None = None, identifier: str | None = None) -> list[RouteBlock]:
        """Scan raw file content. ``None`` means the content could not be read."""
        if text is None:
            raise ReadError("file content unavailable", file_path)
        return self.scan(split_lines(text), identifier)

    def scan(self, lines: Sequence[str], identifier: str | None = None) -> list[RouteBlock]:
        """Single forward pass over ``lines`` (line 1 is ``lines[0]``)"""
        blocks: list[RouteBlock] = []
        state = ScanState.SEARCHING_BLOCK_START if identifier else ScanState.SEARCHING_DECLARATION
        start_re = re.compile(rf"^\s*{re.escape(identifier)}\.") if identifier else None
        start_line = 0

        for line_number, line in enumerate(lines, start=1):
            if state == ScanState.SEARCHING_DECLARATION:
                match = self.declaration_re.search(line)
                if not match:
                    continue
                identifier = match.group(1)
                start_re = re.compile(rf"^\s*{re.escape(identifier)}\.")
                state = ScanState.SEARCHING_BLOCK_START
                continue

            if state == ScanState.SEARCHING_BLOCK_START:
                if not start_re.match(line):
                    continue
                start_line = line_number
                if self.closes_single_line(line):
                    blocks.append(self._block(lines, start_line, line_number, BlockKind.SINGLE_LINE))
                else:
                    state = ScanState.INSIDE_BLOCK
                continue

            # INSIDE_BLOCK: nested start lines are plain content
            if self.closes_block(line):
                blocks.append(self._block(lines, start_line, line_number, BlockKind.MULTI_LINE))
                state = ScanState.SEARCHING_BLOCK_START

        if state == ScanState.INSIDE_BLOCK:
            blocks.append(self._block(lines, start_line, len(lines), BlockKind.INCOMPLETE))

        return blocks

    @staticmethod
    def _block(lines: Sequence[str], start_line: int, end_line: int, kind: BlockKind) -> RouteBlock:
        return RouteBlock(
            start_line=start_line,
            end_line=end_line,
            body="\n".join(lines[start_line - 1 : end_line]),
            kind=kind,
        )
