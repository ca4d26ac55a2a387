"""artifact-stream Command Line Interface."""

import asyncio
import dataclasses
import json
import logging
import os
import shlex
import sys
from pathlib import Path
from typing import Any

import fire
import httpx
import yaml
from dotenv import load_dotenv

from artifact_stream.async_chat_stream import AsyncChatStream
from artifact_stream.classes import FileTreeNode
from artifact_stream.code_blocks import extract_code_blocks
from artifact_stream.session import ProjectSession
from artifact_stream.utils import DEFAULT_ACTION_TAG, DEFAULT_ARTIFACT_TAG, JsonType

logger = logging.getLogger(__name__)

load_dotenv()


def load_file_content(file_path: str) -> JsonType:
    """Load content from a JSON or YAML file.

    Parameters
    ----------
    file_path: str
        Path of the file; ``.yaml``/``.yml`` is read as YAML, anything else
        as JSON with YAML as the fallback.

    """
    path = Path(file_path)
    content = path.read_text(encoding="utf-8")

    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(content)

    try:
        return json.loads(content)
    except json.JSONDecodeError:
        return yaml.safe_load(content)


def read_source(source: str) -> str:
    """Read a saved reply from a file, or from stdin when ``source`` is ``-``."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def split_chunks(text: str, chunk_size: int) -> list[str]:
    """Cut ``text`` into pieces of ``chunk_size`` characters."""
    if chunk_size < 1:
        error_msg = f"Chunk size must be a positive integer, got {chunk_size}"
        raise ValueError(error_msg)
    return [text[i : i + chunk_size] for i in range(0, len(text), chunk_size)]


def format_file_tree(nodes: list[FileTreeNode], depth: int = 0) -> list[str]:
    """Render tree nodes as indented lines."""
    lines: list[str] = []
    for node in nodes:
        emoji = "📁" if node["type"] == "folder" else "📄"
        lines.append(f"{'  ' * depth}{emoji} {node['name']}")
        lines.extend(format_file_tree(node.get("children", []), depth + 1))
    return lines


class ArtifactStreamCLI(ProjectSession):
    """Command Line Interface for artifact-stream."""

    def __init__(
        self,
        source: str | None = None,
        chunk_size: int | None = None,
        artifact_tag: str | None = None,
        action_tag: str | None = None,
        *,
        full: bool = False,
    ) -> None:
        """Load a saved reply and parse it.

        Args:
            source (str | None, optional): File holding a model reply, or "-"
                for stdin. Defaults to None (start empty, e.g. for chat).
            chunk_size (int | None, optional): Feed the reply in pieces of
                this many characters to mimic a stream. Defaults to None.
            artifact_tag (str | None, optional): Artifact tag name. Defaults
                to ARTIFACT_TAG or "boltArtifact".
            action_tag (str | None, optional): Action tag name. Defaults to
                ACTION_TAG or "boltAction".
            full (bool, optional): Re-parse the whole text so far for every
                piece instead of feeding deltas. Defaults to False.

        """
        super().__init__(
            artifact_tag or os.getenv("ARTIFACT_TAG") or DEFAULT_ARTIFACT_TAG,
            action_tag or os.getenv("ACTION_TAG") or DEFAULT_ACTION_TAG,
        )
        self.reply = ""
        if source is not None:
            self.load(read_source(source), chunk_size, full=full)

    def load(
        self,
        text: str,
        chunk_size: int | None = None,
        *,
        full: bool = False,
    ) -> None:
        """Parse ``text`` as one reply, optionally in chunks."""
        pieces = split_chunks(text, chunk_size) if chunk_size is not None else [text]
        for piece in pieces:
            self.reply += piece
            if full:
                self.feed_full(self.reply)
            else:
                self.feed(piece)
        logger.info("Parsed %d characters, artifact %s", len(self.reply), self.status)

    def tree(self) -> str:
        """Show the project tree."""
        lines = format_file_tree(self.vfs.get_file_tree())
        return "\n".join(lines) if lines else "📁 (empty)"

    def files(self) -> list[str]:
        """List file paths, marking files that are still being written."""
        return [
            file.path if file.is_complete else f"{file.path} (writing)"
            for file in self.vfs.get_all_files()
        ]

    def cat(self, path: str) -> str:
        """Show the content of a file."""
        file = self.vfs.get_file(path)
        if file is None:
            error_msg = f"No such file yet: {path}"
            raise FileNotFoundError(error_msg)
        return file.content

    def commands(self) -> list[str]:
        """List the shell commands of the artifact."""
        artifact = self.artifact
        return artifact.shell_commands if artifact else []

    def deps(self) -> list[str]:
        """List the packages named by install commands."""
        return sorted(self.vfs.dependencies)

    def info(self) -> dict[str, Any]:
        """Summarize the parsed artifact."""
        artifact = self.artifact
        return {
            "status": self.status,
            "id": artifact.id if artifact else None,
            "title": self.vfs.project_title,
            "files": len(self.vfs.files),
            "currently_writing": self.currently_writing,
            "active_file": self.vfs.active_file,
        }

    def dump(self, fmt: str = "json") -> str:
        """Dump the parsed artifact as JSON or YAML."""
        artifact = self.artifact
        data = dataclasses.asdict(artifact) if artifact else None
        if data is not None:
            data["files"] = list(data["files"].values())
            data["dependencies"] = sorted(self.vfs.dependencies)

        if fmt in ("yaml", "yml"):
            return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        if fmt == "json":
            return json.dumps(data, indent=2)
        error_msg = f"Unknown format: {fmt}. Use 'json' or 'yaml'"
        raise ValueError(error_msg)

    def blocks(self) -> list[dict[str, Any]]:
        """List markdown code blocks found in the reply."""
        return [dataclasses.asdict(block) for block in extract_code_blocks(self.reply)]

    def chat(
        self,
        prompt: str,
        messages: str | None = None,
        chat_url: str | None = None,
        token: str | None = None,
    ) -> str:
        """Send a prompt to the chat endpoint and stream the reply into the project.

        Args:
            prompt (str): The user message.
            messages (str | None, optional): JSON or YAML file with earlier
                messages. Defaults to None.
            chat_url (str | None, optional): Chat endpoint. Defaults to
                ARTIFACT_CHAT_URL.
            token (str | None, optional): Bearer token. Defaults to
                ARTIFACT_CHAT_TOKEN.

        """
        history = load_file_content(messages) if messages else []
        if not isinstance(history, list):
            error_msg = f"Expected a list of messages in {messages}"
            raise ValueError(error_msg)
        for entry in history:
            if not isinstance(entry, dict) or "role" not in entry or "content" not in entry:
                error_msg = f"Each message in {messages} needs a role and a content"
                raise ValueError(error_msg)
        history.append({"role": "user", "content": prompt})

        self.reset()
        self.reply = asyncio.run(self._stream(history, chat_url, token))
        return self.tree()

    async def _stream(
        self,
        messages: list[Any],
        chat_url: str | None,
        token: str | None,
    ) -> str:
        async with AsyncChatStream(chat_url, token) as stream:
            return await stream.stream_into(self, messages)

    def run_shell(self) -> None:
        """Interactive mode."""
        initial_msg = (
            "Welcome to the artifact-stream shell!"
            " Type 'exit' or Ctrl+C to quit."
            " For help, type '--help'"
        )
        print(initial_msg)  # noqa: T201
        while True:
            try:
                cmd = input("> ").strip()
                if cmd.lower() in ("exit", "quit"):
                    print("Exiting shell.")  # noqa: T201
                    break
                if not cmd:
                    continue

                fire.Fire(self, shlex.split(cmd))
            except (KeyboardInterrupt, EOFError):
                print("\nExiting shell.")  # noqa: T201
                break

    # Hide some methods from CLI
    def __dir__(self) -> list[str]:
        """Get a list of public methods in the CLI.

        Returns:
            list[str]: A list of public method names.

        """
        method_names = super().__dir__()
        hidden_names = ["feed", "feed_full", "load", "close", "parser", "vfs"]

        return [
            method_name
            for method_name in method_names
            if method_name not in hidden_names
        ]


def main() -> None:
    """Run main CLI entry point."""
    logging.basicConfig(
        level=os.getenv("ARTIFACT_STREAM_LOG_LEVEL", "WARNING").upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        fire.Fire(ArtifactStreamCLI)
    except (OSError, ValueError, httpx.HTTPError) as e:
        error_msg = f"{type(e).__name__}: {e}"
        logger.error(error_msg)
        sys.exit(1)


if __name__ == "__main__":
    main()
