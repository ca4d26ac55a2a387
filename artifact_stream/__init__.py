"""
artifact-stream parses project artifacts out of streamed chat replies.
"""

from .utils import ActionType, JsonType, language_for_path
from .classes import FileTreeNode
from .dataclasses import Artifact, ExtractedCode, ParsedFile, VirtualFile, VirtualFSState
from .parser import ArtifactStreamParser, ParserState
from .vfs import VirtualFileSystem
from .session import ProjectSession
from .code_blocks import extract_code_blocks, latest_previewable
from .async_chat_stream import AsyncChatStream

__all__ = [
    "ArtifactStreamParser",
    "ParserState",
    "VirtualFileSystem",
    "ProjectSession",
    "AsyncChatStream",
    "Artifact",
    "ParsedFile",
    "VirtualFile",
    "VirtualFSState",
    "FileTreeNode",
    "ExtractedCode",
    "ActionType",
    "JsonType",
    "extract_code_blocks",
    "latest_previewable",
    "language_for_path",
]
