"""Shared test fixtures and utilities for artifact-stream tests.

This module contains sample replies and assertion helpers used by the
parser, file system, session and CLI test suites.
"""

from typing import Any

import pytest

from artifact_stream import Artifact, ArtifactStreamParser, ProjectSession

COUNTER_REPLY = """Certainly! I'll build a React counter app using Tailwind CSS.

<boltArtifact id="counter-app" title="Simple Counter">
  <boltAction type="shell">
    npm install lucide-react
  </boltAction>

  <boltAction type="file" filePath="index.html">
    <!DOCTYPE html>
    <html lang="en">
      <body>
        <div id="root"></div>
        <script type="module" src="/src/main.tsx"></script>
      </body>
    </html>
  </boltAction>

  <boltAction type="file" filePath="src/main.tsx">
    import App from './App';
    createRoot(document.getElementById('root')!).render(<App />);
  </boltAction>

  <boltAction type="file" filePath="src/App.tsx">
    export default function App() {
      const [count, setCount] = useState(0);
      return <button onClick={() => setCount(count + 1)}>{count}</button>;
    }
  </boltAction>

  <boltAction type="shell">npm run dev</boltAction>
</boltArtifact>

Click the button to increment the counter."""

SCENARIO_REPLY = (
    '<artifactTag id="a1" title="Demo">'
    '<actionTag type="file" filePath="src/App.tsx">const x=1;</actionTag>'
    "</artifactTag>"
)


@pytest.fixture(name="counter_reply")
def get_counter_reply() -> str:
    """Provide a complete reply in the default tag spelling."""
    return COUNTER_REPLY


@pytest.fixture(name="scenario_reply")
def get_scenario_reply() -> str:
    """Provide a minimal reply using placeholder tag names."""
    return SCENARIO_REPLY


@pytest.fixture(name="parser")
def get_parser() -> ArtifactStreamParser:
    """Provide a parser with the default tag names."""
    return ArtifactStreamParser()


@pytest.fixture(name="placeholder_parser")
def get_placeholder_parser() -> ArtifactStreamParser:
    """Provide a parser for the ``artifactTag``/``actionTag`` spelling."""
    return ArtifactStreamParser(artifact_tag="artifactTag", action_tag="actionTag")


@pytest.fixture(name="session")
def get_session() -> ProjectSession:
    """Provide a session with the default tag names."""
    return ProjectSession()


def feed_in_chunks(
    parser: ArtifactStreamParser,
    text: str,
    offsets: list[int],
) -> Artifact | None:
    """Feed ``text`` to ``parser`` cut at the given offsets."""
    parser.reset()
    bounds = [0, *sorted(offsets), len(text)]
    for start, end in zip(bounds, bounds[1:]):
        parser.parse_chunk(text[start:end])
    return parser.artifact


class ArtifactAssertionsMixin:
    """Mixin class containing common checks on parsed artifacts."""

    def _assert_same_artifact(
        self,
        actual: Artifact | None,
        expected: Artifact | None,
        context: Any = None,
    ) -> None:
        """Validate that two parses produced the same artifact."""
        assert actual is not None, f"No artifact parsed ({context})"
        assert expected is not None
        assert actual == expected, f"Artifacts differ ({context})"
        assert list(actual.files) == list(
            expected.files
        ), f"File order differs ({context})"

    def _assert_complete_file(
        self,
        artifact: Artifact,
        path: str,
        content: str,
    ) -> None:
        """Validate that a file was closed with the expected content."""
        assert path in artifact.files, f"File {path} not found in {list(artifact.files)}"
        parsed = artifact.files[path]
        assert parsed.is_complete is True, f"File {path} should be complete"
        assert (
            parsed.content == content
        ), f"Content of {path} doesn't match. Expected: '{content}', Got: '{parsed.content}'"
