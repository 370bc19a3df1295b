#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for mdfmt.

This module centralizes the hardcoded values used across the formatter:
default option values, the fixed markers emitted by the renderer, and the
file discovery defaults used by the batch helpers and the CLI.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Render options
# =============================================================================

DEFAULT_WIDTH: Final[int] = 80
DEFAULT_WRAP: Final[str] = "preserve"
DEFAULT_ORDERED_LIST: Final[str] = "ascending"

# =============================================================================
# Emitted markup
# =============================================================================

RULE_MARKER: Final[str] = "---"
HEADING_CHAR: Final[str] = "#"
QUOTE_PREFIX: Final[str] = "> "
HARD_BREAK_SUFFIX: Final[str] = "  "
CODE_FENCE_CHAR: Final[str] = "`"
CODE_FENCE_ALT_CHAR: Final[str] = "~"
CODE_FENCE_MIN: Final[int] = 3

BULLET_MARKERS: Final[tuple[str, str]] = ("-", "*")
ORDERED_DELIMITERS: Final[tuple[str, str]] = (".", ")")

TASK_CHECKED: Final[str] = "[x]"
TASK_UNCHECKED: Final[str] = "[ ]"

# =============================================================================
# Front matter
# =============================================================================

FRONTMATTER_DELIMITER: Final[str] = "---"

# =============================================================================
# File discovery
# =============================================================================

DEFAULT_EXCLUDES: Final[tuple[str, ...]] = ("node_modules", "target", ".git", "vendor", "dist", "build")
MARKDOWN_EXTENSIONS: Final[tuple[str, ...]] = (".md",)

# =============================================================================
# Configuration files
# =============================================================================

CONFIG_FILENAMES: Final[tuple[str, ...]] = (".mdfmt.toml", ".mdfmt.yaml", ".mdfmt.yml", ".mdfmt.json")
PYPROJECT_SECTION: Final[str] = "mdfmt"
ENV_PREFIX: Final[str] = "MDFMT_"
