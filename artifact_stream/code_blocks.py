"""Extraction of markdown fenced code blocks from chat replies."""

import re

from .dataclasses import ExtractedCode

CODE_BLOCK_PATTERN = re.compile(r"```(\w+)?(?:[ \t]+(\S+))?\n([\s\S]*?)```")

PREVIEWABLE_LANGUAGES = frozenset(
    ["html", "jsx", "tsx", "javascript", "js", "typescript", "ts", "react"]
)


def extract_code_blocks(*messages: str) -> list[ExtractedCode]:
    """Return the non-empty fenced code blocks of ``messages`` in order.

    A fence may name a language and a file, e.g. ``"```tsx src/App.tsx"``.
    """
    blocks: list[ExtractedCode] = []
    for message in messages:
        for match in CODE_BLOCK_PATTERN.finditer(message):
            code = match.group(3).strip()
            if code:
                blocks.append(
                    ExtractedCode(
                        language=match.group(1) or "text",
                        code=code,
                        file_name=match.group(2),
                    )
                )
    return blocks


def latest_previewable(blocks: list[ExtractedCode]) -> ExtractedCode | None:
    """The most recent block written in a language a browser preview can run."""
    for block in reversed(blocks):
        if block.language.lower() in PREVIEWABLE_LANGUAGES:
            return block
    return None
