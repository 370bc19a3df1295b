#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Front matter extraction.

A document may open with a metadata block delimited by ``---`` lines. The
block is split off before parsing and reattached unchanged after
formatting; the formatter never looks inside it.
"""

from __future__ import annotations

from mdfmt.constants import FRONTMATTER_DELIMITER


def extract_frontmatter(content: str) -> tuple[str | None, str]:
    """Split an optional front matter block from the document body.

    Parameters
    ----------
    content : str
        Full document text with ``\\n`` line endings

    Returns
    -------
    tuple[str or None, str]
        ``(block, body)``. ``block`` holds the opening delimiter, the
        metadata lines, the closing delimiter and one blank line; it is
        None when the document has no front matter, in which case ``body``
        is the whole input.

    Examples
    --------
        >>> extract_frontmatter("---\\ntitle: Test\\n---\\n\\n# Heading\\n")
        ('---\\ntitle: Test\\n---\\n\\n', '\\n# Heading\\n')
        >>> extract_frontmatter("# No metadata\\n")
        (None, '# No metadata\\n')

    """
    opening = FRONTMATTER_DELIMITER + "\n"
    if not content.startswith(opening):
        return None, content

    lines = content.splitlines(keepends=True)
    end_index = -1
    for i in range(1, len(lines)):
        if lines[i].rstrip() == FRONTMATTER_DELIMITER:
            end_index = i
            break

    if end_index <= 0:
        return None, content

    metadata = "".join(lines[1:end_index])
    block = f"{opening}{metadata}{FRONTMATTER_DELIMITER}\n\n"
    body = "".join(lines[end_index + 1 :])
    return block, body
