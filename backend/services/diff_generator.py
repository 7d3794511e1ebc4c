"""
Diff Generator Service - Generate unified diffs between two revisions of a file
"""

from __future__ import annotations

from difflib import unified_diff


def _split_keepends(text: str) -> list[str]:
    # "\n" only, as git counts lines
    lines = [line + "\n" for line in text.split("\n")]
    lines[-1] = lines[-1][:-1]
    if not lines[-1]:
        lines.pop()
    return lines


class DiffGenerator:
    """Generate unified diffs for file revisions"""

    def generate_diff(
        self,
        original_content: str,
        new_content: str,
        file_path: str,
        context_lines: int = 0,
    ) -> str:
        """Unified diff text from original to new content"""
        original_lines = _split_keepends(original_content)
        new_lines = _split_keepends(new_content)

        # Ensure last lines have newlines for proper diff
        if original_lines and not original_lines[-1].endswith("\n"):
            original_lines[-1] += "\n"
        if new_lines and not new_lines[-1].endswith("\n"):
            new_lines[-1] += "\n"

        return "".join(
            unified_diff(
                original_lines,
                new_lines,
                fromfile=f"a/{file_path}",
                tofile=f"b/{file_path}",
                n=context_lines,
            )
        )
