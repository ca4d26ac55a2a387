"""In-memory virtual file system fed by parsed artifacts."""

from __future__ import annotations

import logging
from typing import Self

from .classes import FileTreeNode
from .dataclasses import Artifact, VirtualFile, VirtualFSState
from .utils import install_packages

logger = logging.getLogger(__name__)


class VirtualFileSystem:
    """Keeps a path-keyed file table, an active file and a dependency set.

    The table is only changed through the methods below; readers get copies
    from :attr:`state`, :meth:`get_all_files` and :meth:`get_file_tree`.
    """

    def __init__(self: Self) -> None:
        self._state = VirtualFSState()

    @property
    def state(self: Self) -> VirtualFSState:
        """A copy of the current state."""
        return VirtualFSState(
            files=dict(self._state.files),
            dependencies=set(self._state.dependencies),
            active_file=self._state.active_file,
            project_title=self._state.project_title,
        )

    @property
    def files(self: Self) -> dict[str, VirtualFile]:
        return dict(self._state.files)

    @property
    def dependencies(self: Self) -> set[str]:
        return set(self._state.dependencies)

    @property
    def active_file(self: Self) -> str | None:
        return self._state.active_file

    @property
    def project_title(self: Self) -> str:
        return self._state.project_title

    def set_project_title(self: Self, title: str) -> None:
        self._state.project_title = title

    def add_file(self: Self, path: str, content: str, is_complete: bool = True) -> None:
        """Insert or replace a file and make it the active one."""
        self._state.files[path] = VirtualFile(path, content, is_complete)
        self._state.active_file = path

    def update_file_content(
        self: Self,
        path: str,
        content: str,
        is_complete: bool = False,
    ) -> None:
        """Insert or update a file without letting ``is_complete`` regress."""
        existing = self._state.files.get(path)
        self._state.files[path] = VirtualFile(
            path,
            content,
            is_complete or (existing is not None and existing.is_complete),
        )

    def set_active_file(self: Self, path: str | None) -> None:
        self._state.active_file = path

    def add_dependency(self: Self, command: str) -> None:
        """Record the packages named by an install-style shell command.

        Commands without an ``<tool> install <args...>`` clause are ignored.
        """
        packages = install_packages(command)
        if packages:
            logger.debug("Dependencies from %r: %s", command, packages)
        self._state.dependencies.update(packages)

    def reset(self: Self) -> None:
        self._state = VirtualFSState()

    def apply_artifact(self: Self, artifact: Artifact) -> None:
        """Replay an artifact snapshot into the file table.

        Replaying the same or a later snapshot again is harmless: completion
        flags never regress and dependencies are a set.
        """
        self.set_project_title(artifact.title)
        for parsed in artifact.files.values():
            self.update_file_content(parsed.path, parsed.content, parsed.is_complete)
        for command in artifact.shell_commands:
            self.add_dependency(command)
        if artifact.current_file is not None:
            self.set_active_file(artifact.current_file)

    def get_file(self: Self, path: str) -> VirtualFile | None:
        """Return the file at ``path``, or None if it has not been seen yet."""
        return self._state.files.get(path)

    def get_all_files(self: Self) -> list[VirtualFile]:
        return list(self._state.files.values())

    def get_file_tree(self: Self) -> list[FileTreeNode]:
        """Derive the folder/file hierarchy from the known paths.

        Paths are walked in lexicographic order and each folder is created the
        first time its cumulative prefix is seen, so siblings keep the order
        of that single sorted pass.

        Returns
        -------
        list[FileTreeNode]
            The top level nodes.
        """
        root: list[FileTreeNode] = []
        folders: dict[str, FileTreeNode] = {}

        for file_path in sorted(self._state.files):
            parts = file_path.split("/")
            level = root
            current_path = ""

            for index, part in enumerate(parts):
                current_path = f"{current_path}/{part}" if current_path else part
                if index == len(parts) - 1:
                    level.append({"name": part, "path": file_path, "type": "file"})
                    continue

                folder = folders.get(current_path)
                if folder is None:
                    folder = {
                        "name": part,
                        "path": current_path,
                        "type": "folder",
                        "children": [],
                    }
                    folders[current_path] = folder
                    level.append(folder)
                level = folder["children"]

        return root
