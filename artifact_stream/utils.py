"""Utility functions for artifact-stream."""

import re
from typing import Any, Literal

ActionType = Literal["file", "shell"]
NodeType = Literal["file", "folder"]
JsonType = str | int | float | bool | None | dict[str, Any] | list[Any]

DEFAULT_ARTIFACT_TAG = "boltArtifact"
DEFAULT_ACTION_TAG = "boltAction"

ATTRIBUTE_PATTERN = re.compile(r'([A-Za-z_][\w:.-]*)="([^"]*)"')
INSTALL_PATTERN = re.compile(r"(?:^|[\s;&|(])[\w.@/-]+[ \t]+install[ \t]+([^;&|\n]+)")

LANGUAGE_BY_EXTENSION = {
    "tsx": "typescript",
    "ts": "typescript",
    "jsx": "javascript",
    "js": "javascript",
    "json": "json",
    "html": "markup",
    "css": "css",
}


def open_tag_pattern(tag_name: str) -> re.Pattern[str]:
    """Compile the pattern of an opening tag with quoted attributes."""
    return re.compile(
        rf'<{re.escape(tag_name)}((?:\s+[A-Za-z_][\w:.-]*="[^"]*")*)\s*>'
    )


def close_tag(tag_name: str) -> str:
    """Return the literal closing tag for ``tag_name``."""
    return f"</{tag_name}>"


def parse_attributes(raw: str) -> dict[str, str]:
    """Parse ``key="value"`` pairs; later duplicates win."""
    return dict(ATTRIBUTE_PATTERN.findall(raw))


def partial_suffix_length(text: str, token: str) -> int:
    """Length of the longest suffix of ``text`` that is a proper prefix of ``token``.

    Such a suffix may still turn into ``token`` once more text arrives, so it
    must not be consumed yet.
    """
    longest = min(len(text), len(token) - 1)
    for size in range(longest, 0, -1):
        if token.startswith(text[-size:]):
            return size
    return 0


def install_packages(command: str) -> list[str]:
    """Extract package names from ``<tool> install <args...>`` clauses.

    Flag-like tokens (starting with ``-``) are dropped. A command may hold
    several clauses, e.g. ``npm install a && pip install b``.
    """
    packages: list[str] = []
    for match in INSTALL_PATTERN.finditer(command):
        packages.extend(
            token for token in match.group(1).split() if not token.startswith("-")
        )
    return packages


def language_for_path(path: str) -> str:
    """Map a file path to the language name a syntax highlighter expects."""
    extension = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    return LANGUAGE_BY_EXTENSION.get(extension, "typescript")
