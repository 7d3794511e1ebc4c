"""Route block data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class BlockKind(str, Enum):
    """How a route block was closed"""

    SINGLE_LINE = "single-line"
    MULTI_LINE = "multi-line"
    INCOMPLETE = "incomplete"


class RouteBlock(BaseModel):
    """A contiguous route declaration inside one file"""

    start_line: int  # 1-indexed
    end_line: int
    body: str
    kind: BlockKind

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


class CandidatePair(BaseModel):
    """A block matched to the single line chosen to host its annotation"""

    block: RouteBlock
    selected_line: int
