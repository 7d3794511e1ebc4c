"""
Block Change Matcher - Pick one annotation line per affected route block
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from models.route import CandidatePair, RouteBlock


def match_blocks(blocks: Sequence[RouteBlock], changed_lines: Iterable[int]) -> list[CandidatePair]:
    """First-fit by ascending changed line; at most one pair per block.

    Additional changed lines inside an already-assigned block are dropped.
    """
    assigned: dict[int, int] = {}  # block index -> selected line
    for line in sorted(set(changed_lines)):
        for index, block in enumerate(blocks):
            if index not in assigned and block.contains(line):
                assigned[index] = line
                break

    return [
        CandidatePair(block=blocks[index], selected_line=assigned[index])
        for index in sorted(assigned)
    ]


def find_removed_blocks(parent_blocks: Sequence[RouteBlock], removed_lines: Iterable[int]) -> list[CandidatePair]:
    """Blocks of the parent revision deleted in full, anchored at their first line"""
    removed = set(removed_lines)
    return [
        CandidatePair(block=block, selected_line=block.start_line)
        for block in parent_blocks
        if all(line in removed for line in range(block.start_line, block.end_line + 1))
    ]
