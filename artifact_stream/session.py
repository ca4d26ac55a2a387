"""Wires an artifact parser to a virtual file system."""

from __future__ import annotations

import logging
from typing import Self

from .dataclasses import Artifact, SessionStatus
from .parser import ArtifactStreamParser
from .utils import DEFAULT_ACTION_TAG, DEFAULT_ARTIFACT_TAG
from .vfs import VirtualFileSystem

logger = logging.getLogger(__name__)


class ProjectSession:
    """One conversation turn: a parser whose snapshots are replayed into a VFS.

    Every snapshot is replayed before :meth:`feed` or :meth:`feed_full`
    returns, so readers never observe a half-applied update.
    """

    def __init__(
        self: Self,
        artifact_tag: str = DEFAULT_ARTIFACT_TAG,
        action_tag: str = DEFAULT_ACTION_TAG,
    ) -> None:
        self.parser = ArtifactStreamParser(artifact_tag, action_tag)
        self.vfs = VirtualFileSystem()
        self._unsubscribe = self.parser.subscribe(self.vfs.apply_artifact)

    def feed(self: Self, delta: str) -> Artifact | None:
        """Feed a true increment of the reply."""
        return self.parser.parse_chunk(delta)

    def feed_full(self: Self, text: str) -> Artifact | None:
        """Feed the whole reply so far, re-parsing it from scratch."""
        return self.parser.parse_full_content(text)

    def reset(self: Self) -> None:
        """Abandon the current turn and clear the file system."""
        logger.debug("Resetting project session")
        self.parser.reset()
        self.vfs.reset()

    def close(self: Self) -> None:
        """Detach the file system from the parser."""
        self._unsubscribe()

    @property
    def artifact(self: Self) -> Artifact | None:
        return self.parser.artifact

    @property
    def currently_writing(self: Self) -> str | None:
        """The file whose content is still streaming, if any."""
        artifact = self.parser.artifact
        return artifact.current_file if artifact else None

    @property
    def status(self: Self) -> SessionStatus:
        """``idle`` before any artifact, ``writing`` until it closes, then ``complete``.

        A reply that ends while still ``writing`` is a stalled artifact.
        """
        artifact = self.parser.artifact
        if artifact is None:
            return "idle"
        if artifact.is_complete:
            return "complete"
        return "writing"
