"""
Tests for the virtual file system.

Covers file upserts, completion flags, dependency extraction, tree
derivation and artifact replay.
"""

import itertools

import pytest

from artifact_stream import Artifact, ParsedFile, VirtualFile, VirtualFileSystem


@pytest.fixture(name="vfs")
def get_vfs() -> VirtualFileSystem:
    """Provide an empty virtual file system."""
    return VirtualFileSystem()


class TestFiles:
    """Adding, updating and reading files."""

    def test_add_file_sets_active(self, vfs: VirtualFileSystem) -> None:
        vfs.add_file("src/App.tsx", "const x=1;")

        assert vfs.get_file("src/App.tsx") == VirtualFile("src/App.tsx", "const x=1;", True)
        assert vfs.active_file == "src/App.tsx"

    def test_add_file_replaces(self, vfs: VirtualFileSystem) -> None:
        vfs.add_file("a.ts", "old")
        vfs.add_file("a.ts", "new", is_complete=False)

        assert vfs.get_file("a.ts") == VirtualFile("a.ts", "new", False)
        assert len(vfs.get_all_files()) == 1

    def test_update_inserts_incomplete(self, vfs: VirtualFileSystem) -> None:
        vfs.update_file_content("a.ts", "par")

        assert vfs.get_file("a.ts") == VirtualFile("a.ts", "par", False)
        assert vfs.active_file is None

    def test_update_never_regresses_completion(self, vfs: VirtualFileSystem) -> None:
        vfs.update_file_content("a.ts", "done", is_complete=True)
        vfs.update_file_content("a.ts", "done again", is_complete=False)

        file = vfs.get_file("a.ts")
        assert file is not None
        assert file.content == "done again"
        assert file.is_complete is True

    def test_unknown_file(self, vfs: VirtualFileSystem) -> None:
        assert vfs.get_file("missing.ts") is None

    def test_all_files_in_insertion_order(self, vfs: VirtualFileSystem) -> None:
        vfs.update_file_content("b.ts", "b")
        vfs.update_file_content("a.ts", "a")

        assert [file.path for file in vfs.get_all_files()] == ["b.ts", "a.ts"]

    def test_state_is_a_copy(self, vfs: VirtualFileSystem) -> None:
        vfs.add_file("a.ts", "a")
        state = vfs.state
        state.files.clear()
        state.dependencies.add("left-pad")

        assert vfs.get_file("a.ts") is not None
        assert vfs.dependencies == set()

    def test_set_active_file_and_title(self, vfs: VirtualFileSystem) -> None:
        vfs.set_project_title("Demo")
        vfs.add_file("a.ts", "a")
        vfs.set_active_file(None)

        assert vfs.project_title == "Demo"
        assert vfs.active_file is None

    def test_reset(self, vfs: VirtualFileSystem) -> None:
        vfs.set_project_title("Demo")
        vfs.add_file("a.ts", "a")
        vfs.add_dependency("npm install zod")
        vfs.reset()

        state = vfs.state
        assert state.files == {}
        assert state.dependencies == set()
        assert state.active_file is None
        assert state.project_title == ""


class TestDependencies:
    """Package names from install-style shell commands."""

    @pytest.mark.parametrize(
        ("command", "expected"),
        [
            ("npm install lucide-react", {"lucide-react"}),
            ("npm install -D tailwindcss postcss", {"tailwindcss", "postcss"}),
            ("pip install --upgrade httpx", {"httpx"}),
            ("npm install @radix-ui/react-dialog", {"@radix-ui/react-dialog"}),
            ("npm install zod && npm run dev", {"zod"}),
            ("npm install a; yarn install b", {"a", "b"}),
            ("npm run dev", set()),
            ("npm install", set()),
            ("npm install\nnpm run dev", set()),
            ("npm install a\nnpm install b", {"a", "b"}),
        ],
    )
    def test_add_dependency(
        self, vfs: VirtualFileSystem, command: str, expected: set[str]
    ) -> None:
        vfs.add_dependency(command)
        assert vfs.dependencies == expected

    def test_dependencies_are_deduplicated(self, vfs: VirtualFileSystem) -> None:
        vfs.add_dependency("npm install zod")
        vfs.add_dependency("npm install zod react")

        assert vfs.dependencies == {"zod", "react"}


class TestFileTree:
    """Tree derivation from flat paths."""

    def test_nested_folders(self, vfs: VirtualFileSystem) -> None:
        vfs.add_file("a/b/c.ts", "c")
        vfs.add_file("a/d.ts", "d")

        assert vfs.get_file_tree() == [
            {
                "name": "a",
                "path": "a",
                "type": "folder",
                "children": [
                    {
                        "name": "b",
                        "path": "a/b",
                        "type": "folder",
                        "children": [{"name": "c.ts", "path": "a/b/c.ts", "type": "file"}],
                    },
                    {"name": "d.ts", "path": "a/d.ts", "type": "file"},
                ],
            }
        ]

    def test_lexicographic_interleaving(self, vfs: VirtualFileSystem) -> None:
        """Folders and files keep the order of one sorted pass over full paths."""
        for path in ["src/z.ts", "index.html", "src/App.tsx", "package.json", "src/lib/a.ts"]:
            vfs.add_file(path, "")

        tree = vfs.get_file_tree()
        assert [node["name"] for node in tree] == ["index.html", "package.json", "src"]
        src = tree[2]
        assert [node["name"] for node in src["children"]] == ["App.tsx", "lib", "z.ts"]

    def test_folder_created_once(self, vfs: VirtualFileSystem) -> None:
        for path in ["src/a.ts", "src/b.ts", "src/c/d.ts", "src/c/e.ts"]:
            vfs.add_file(path, "")

        tree = vfs.get_file_tree()
        assert len(tree) == 1
        folders = [node for node in tree[0]["children"] if node["type"] == "folder"]
        assert [folder["path"] for folder in folders] == ["src/c"]
        assert len(folders[0]["children"]) == 2

    def test_tree_is_deterministic(self) -> None:
        paths = ["src/main.tsx", "index.html", "src/components/Button.tsx", "src/App.tsx"]
        trees = []
        for order in itertools.permutations(paths):
            vfs = VirtualFileSystem()
            for path in order:
                vfs.update_file_content(path, "")
            trees.append(vfs.get_file_tree())
            assert vfs.get_file_tree() == trees[-1]

        assert all(tree == trees[0] for tree in trees)

    def test_empty_tree(self, vfs: VirtualFileSystem) -> None:
        assert vfs.get_file_tree() == []


class TestReplay:
    """Applying parsed artifact snapshots."""

    def test_apply_artifact(self, vfs: VirtualFileSystem) -> None:
        artifact = Artifact(
            id="a1",
            title="Demo",
            files={
                "a.ts": ParsedFile("a.ts", "a", True),
                "b.ts": ParsedFile("b.ts", "b", False),
            },
            shell_commands=["npm install zod"],
            current_file="b.ts",
        )
        vfs.apply_artifact(artifact)

        assert vfs.project_title == "Demo"
        assert vfs.get_file("a.ts") == VirtualFile("a.ts", "a", True)
        assert vfs.get_file("b.ts") == VirtualFile("b.ts", "b", False)
        assert vfs.dependencies == {"zod"}
        assert vfs.active_file == "b.ts"

    def test_replaying_older_snapshot_keeps_completion(
        self, vfs: VirtualFileSystem
    ) -> None:
        done = Artifact("a1", "Demo", files={"a.ts": ParsedFile("a.ts", "abc", True)})
        older = Artifact("a1", "Demo", files={"a.ts": ParsedFile("a.ts", "ab", False)})

        vfs.apply_artifact(done)
        vfs.apply_artifact(older)

        file = vfs.get_file("a.ts")
        assert file is not None
        assert file.is_complete is True

    def test_active_file_kept_when_nothing_is_written(
        self, vfs: VirtualFileSystem
    ) -> None:
        vfs.set_active_file("chosen.ts")
        vfs.apply_artifact(Artifact("a1", "Demo", is_complete=True))

        assert vfs.active_file == "chosen.ts"
