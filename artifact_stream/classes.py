"""Represents a node in the derived file tree of a virtual file system."""

from typing import NotRequired, TypedDict

from .utils import NodeType


class FileTreeNode(TypedDict):
    """
    Represents a file or folder in the project tree, derived from file paths.
    """

    name: str
    path: str
    type: NodeType
    children: NotRequired[list["FileTreeNode"]]
