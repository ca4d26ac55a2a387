from dataclasses import dataclass, field
from typing import Literal

SessionStatus = Literal["idle", "writing", "complete"]


@dataclass(frozen=True)
class ParsedFile:
    """
    Represents a file action parsed out of a streamed artifact.

    Attributes:
        path (str): The file path, unique within an artifact.
        content (str): The file content received so far.
        is_complete (bool): Whether the closing action tag has been seen.
    """

    path: str
    content: str = ""
    is_complete: bool = False


@dataclass
class Artifact:
    """
    Represents one project-generation reply as parsed so far.

    Attributes:
        id (str): The artifact identifier from the opening tag.
        title (str): The human readable project title.
        files (dict[str, ParsedFile]): Files keyed by path, in insertion order.
        shell_commands (list[str]): Distinct shell commands in first-seen order.
        is_complete (bool): Whether the closing artifact tag has been seen.
        current_file (str | None): The path still being written, if any.
    """

    id: str
    title: str
    files: dict[str, ParsedFile] = field(default_factory=dict)
    shell_commands: list[str] = field(default_factory=list)
    is_complete: bool = False
    current_file: str | None = None


@dataclass(frozen=True)
class VirtualFile:
    """A file as stored by the virtual file system."""

    path: str
    content: str
    is_complete: bool


@dataclass
class VirtualFSState:
    """
    Represents the project-shaped view kept by the virtual file system.

    Attributes:
        files (dict[str, VirtualFile]): Files keyed by path.
        dependencies (set[str]): Package names collected from install commands.
        active_file (str | None): The path shown in the code viewer.
        project_title (str): The title of the artifact being replayed.
    """

    files: dict[str, VirtualFile] = field(default_factory=dict)
    dependencies: set[str] = field(default_factory=set)
    active_file: str | None = None
    project_title: str = ""


@dataclass(frozen=True)
class ExtractedCode:
    """A fenced code block found in a chat reply."""

    language: str
    code: str
    file_name: str | None = None
