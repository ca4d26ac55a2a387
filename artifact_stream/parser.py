"""Incremental parser for artifact markup streamed inside a chat reply.

The reply is prose with an embedded artifact::

    <boltArtifact id="counter-app" title="Counter">
      <boltAction type="shell">npm install lucide-react</boltAction>
      <boltAction type="file" filePath="src/App.tsx">...</boltAction>
    </boltArtifact>

Text may be fed as true deltas through :meth:`ArtifactStreamParser.parse_chunk`
or as the whole reply so far through
:meth:`ArtifactStreamParser.parse_full_content`. Both drive the same state
machine and converge on the same artifact. Re-feeding the whole reply rescans
a growing buffer on every update, which is fine at chat message scale.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from enum import Enum
from typing import Self

from .dataclasses import Artifact, ParsedFile
from .utils import (
    DEFAULT_ACTION_TAG,
    DEFAULT_ARTIFACT_TAG,
    ActionType,
    close_tag,
    open_tag_pattern,
    parse_attributes,
    partial_suffix_length,
)

logger = logging.getLogger(__name__)

ArtifactListener = Callable[[Artifact], None]


class ParserState(Enum):
    """States of the artifact parser."""

    SCANNING = "scanning"
    IN_ARTIFACT = "in_artifact"
    IN_FILE_ACTION = "in_file_action"
    IN_SHELL_ACTION = "in_shell_action"


def snapshot(artifact: Artifact) -> Artifact:
    """Shallow copy of ``artifact`` that later parsing cannot mutate."""
    return dataclasses.replace(
        artifact,
        files=dict(artifact.files),
        shell_commands=list(artifact.shell_commands),
    )


class ArtifactStreamParser:
    """Turns streamed artifact markup into an :class:`Artifact`.

    Parameters
    ----------
    artifact_tag: str
        Name of the tag wrapping the whole artifact.
    action_tag: str
        Name of the tag wrapping each file or shell action.
    """

    def __init__(
        self: Self,
        artifact_tag: str = DEFAULT_ARTIFACT_TAG,
        action_tag: str = DEFAULT_ACTION_TAG,
    ) -> None:
        self.artifact_tag = artifact_tag
        self.action_tag = action_tag
        self._artifact_open = open_tag_pattern(artifact_tag)
        self._artifact_close = close_tag(artifact_tag)
        self._action_open = open_tag_pattern(action_tag)
        self._action_close = close_tag(action_tag)
        self._listeners: list[ArtifactListener] = []
        self.reset()

    def reset(self: Self) -> None:
        """Clear the buffer, the state machine and the current artifact."""
        self._buffer = ""
        self._state = ParserState.SCANNING
        self._artifact: Artifact | None = None
        self._action_path: str | None = None
        self._action_content = ""

    @property
    def state(self: Self) -> ParserState:
        """The current state of the parser."""
        return self._state

    @property
    def artifact(self: Self) -> Artifact | None:
        """A snapshot of the artifact parsed so far, or None."""
        if self._artifact is None:
            return None
        return snapshot(self._artifact)

    def subscribe(self: Self, listener: ArtifactListener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every structural change.

        Returns
        -------
        Callable[[], None]
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def parse_full_content(self: Self, content: str) -> Artifact | None:
        """Parse the whole reply so far from a clean state."""
        self.reset()
        return self.parse_chunk(content)

    def parse_chunk(self: Self, chunk: str) -> Artifact | None:
        """Append ``chunk`` to the buffer and advance as far as it allows.

        Text that cannot be classified yet, such as half a tag, stays
        buffered for the next call.

        Returns
        -------
        Artifact | None
            A snapshot of the current artifact, if one has been opened.
        """
        self._buffer += chunk
        while self._step():
            pass
        return self.artifact

    def _step(self: Self) -> bool:
        """Run one transition. Returns False when more input is needed."""
        if self._state is ParserState.SCANNING:
            return self._scan_for_artifact()
        if self._state is ParserState.IN_ARTIFACT:
            return self._scan_for_action()
        return self._read_action_body()

    def _scan_for_artifact(self: Self) -> bool:
        for match in self._artifact_open.finditer(self._buffer):
            attributes = parse_attributes(match.group(1))
            if "id" not in attributes or "title" not in attributes:
                continue
            self._artifact = Artifact(id=attributes["id"], title=attributes["title"])
            self._buffer = self._buffer[match.end() :]
            self._state = ParserState.IN_ARTIFACT
            logger.debug("Opened artifact %s (%s)", attributes["id"], attributes["title"])
            self._publish()
            return True
        return False

    def _find_action_open(self: Self) -> tuple[int, int, ActionType, str | None] | None:
        """Locate the earliest recognised action-open tag in the buffer."""
        for match in self._action_open.finditer(self._buffer):
            attributes = parse_attributes(match.group(1))
            action_type = attributes.get("type")
            if action_type == "file" and "filePath" in attributes:
                return match.start(), match.end(), "file", attributes["filePath"]
            if action_type == "shell":
                return match.start(), match.end(), "shell", None
        return None

    def _scan_for_action(self: Self) -> bool:
        if self._artifact is None:
            return False
        action = self._find_action_open()
        close_at = self._buffer.find(self._artifact_close)

        if close_at != -1 and (action is None or close_at < action[0]):
            self._buffer = self._buffer[close_at + len(self._artifact_close) :]
            self._artifact.is_complete = True
            self._artifact.current_file = None
            self._state = ParserState.SCANNING
            logger.debug("Closed artifact %s", self._artifact.id)
            self._publish()
            return True

        if action is None:
            return False

        _, end, action_type, path = action
        self._buffer = self._buffer[end:]
        self._action_content = ""
        if action_type == "file" and path is not None:
            self._action_path = path
            previous = self._artifact.files.get(path)
            self._artifact.files[path] = ParsedFile(
                path=path,
                is_complete=previous is not None and previous.is_complete,
            )
            self._artifact.current_file = path
            self._state = ParserState.IN_FILE_ACTION
            logger.debug("Started file action %s", path)
        else:
            self._action_path = None
            self._state = ParserState.IN_SHELL_ACTION
            logger.debug("Started shell action")
        self._publish()
        return True

    def _read_action_body(self: Self) -> bool:
        if self._artifact is None:
            return False
        close_at = self._buffer.find(self._action_close)
        if close_at == -1:
            keep = partial_suffix_length(self._buffer, self._action_close)
            consumed = self._buffer[: len(self._buffer) - keep]
            self._buffer = self._buffer[len(consumed) :]
            if consumed:
                self._action_content += consumed
                if self._state is ParserState.IN_FILE_ACTION:
                    self._store_file(is_complete=False)
                    self._publish()
            return False

        self._action_content += self._buffer[:close_at]
        self._buffer = self._buffer[close_at + len(self._action_close) :]
        if self._state is ParserState.IN_FILE_ACTION:
            self._store_file(is_complete=True)
            self._artifact.current_file = None
            logger.debug("Finished file action %s", self._action_path)
        else:
            self._add_shell_command(self._action_content.strip())
        self._action_path = None
        self._action_content = ""
        self._state = ParserState.IN_ARTIFACT
        self._publish()
        return True

    def _store_file(self: Self, *, is_complete: bool) -> None:
        if self._artifact is None or self._action_path is None:
            return
        previous = self._artifact.files.get(self._action_path)
        self._artifact.files[self._action_path] = ParsedFile(
            path=self._action_path,
            content=self._action_content.strip(),
            is_complete=is_complete or (previous is not None and previous.is_complete),
        )

    def _add_shell_command(self: Self, command: str) -> None:
        if self._artifact is None:
            return
        if command and command not in self._artifact.shell_commands:
            self._artifact.shell_commands.append(command)
            logger.debug("Recorded shell command %r", command)

    def _publish(self: Self) -> None:
        if self._artifact is None:
            return
        for listener in list(self._listeners):
            listener(snapshot(self._artifact))
