from __future__ import annotations

from datetime import date
from pathlib import Path

from deliverb_release.cli.context import CLIContext
from deliverb_release.cli.release_flow import next_steps, print_usage, run_release
from deliverb_release.core.config import ReleaseConfig
from deliverb_release.core.result import Err, Ok, Result
from deliverb_release.git.repository import GitError, GitStatus, Repository, StatusEntry
from deliverb_release.output.console import MockConsole, Style

TODAY = date(2024, 3, 9)


class _FakeRepo(Repository):
    def __init__(self, path: Path, result: Result[GitStatus, GitError]) -> None:
        super().__init__(path)
        self._result = result
        self.calls = 0

    def status(self) -> Result[GitStatus, GitError]:
        self.calls += 1
        return self._result


def _ctx(root: Path) -> CLIContext:
    return CLIContext(root=root, config=ReleaseConfig(), console=MockConsole(), today=TODAY)


def _clean(root: Path) -> _FakeRepo:
    return _FakeRepo(root, Ok(GitStatus(branch="main")))


def _project(root: Path, version: str) -> None:
    (root / "package.json").write_text(
        f'{{\n  "name": "deliverb",\n  "version": "{version}"\n}}\n', encoding="utf-8"
    )
    (root / "CMakeLists.txt").write_text(
        f"cmake_minimum_required(VERSION 3.22)\nproject(DeliVerb VERSION {version} LANGUAGES CXX)\n",
        encoding="utf-8",
    )


def _snapshot(root: Path) -> dict[str, bytes]:
    return {p.name: p.read_bytes() for p in sorted(root.iterdir()) if p.is_file()}


def test_patch_release_updates_every_file(tmp_path: Path) -> None:
    _project(tmp_path, "1.2.3")
    ctx = _ctx(tmp_path)

    result = run_release(["patch"], ctx, repo=_clean(tmp_path))

    assert isinstance(result, Ok)
    session = result.value
    assert session.step == "files_updated"
    assert session.bump == "patch"
    assert session.current_version == "1.2.3"
    assert session.new_version == "1.2.4"
    assert '"version": "1.2.4"' in (tmp_path / "package.json").read_text(encoding="utf-8")
    cmake = (tmp_path / "CMakeLists.txt").read_text(encoding="utf-8")
    assert "project(DeliVerb VERSION 1.2.4 LANGUAGES CXX)" in cmake
    assert "cmake_minimum_required(VERSION 3.22)" in cmake


def test_major_release(tmp_path: Path) -> None:
    _project(tmp_path, "2.0.0")

    result = run_release(["major"], _ctx(tmp_path), repo=_clean(tmp_path))

    assert isinstance(result, Ok)
    assert result.value.new_version == "3.0.0"


def test_creates_changelog_when_missing(tmp_path: Path) -> None:
    _project(tmp_path, "1.0.0")

    run_release(["patch"], _ctx(tmp_path), repo=_clean(tmp_path))

    text = (tmp_path / "CHANGELOG.md").read_text(encoding="utf-8")
    assert "## [Unreleased]" in text
    assert "## [1.0.1] - 2024-03-09" in text
    assert "- Initial release" in text


def test_existing_changelog_keeps_surrounding_text(tmp_path: Path) -> None:
    _project(tmp_path, "1.0.0")
    head = "# Changelog\n\nAll notable changes.\n\n"
    tail = "\n\n## [1.0.0] - 2023-12-01\n\n- First\n"
    (tmp_path / "CHANGELOG.md").write_text(head + "## [Unreleased]" + tail, encoding="utf-8")

    run_release(["minor"], _ctx(tmp_path), repo=_clean(tmp_path))

    text = (tmp_path / "CHANGELOG.md").read_text(encoding="utf-8")
    assert text.startswith(head + "## [Unreleased]")
    assert text.endswith("## [1.1.0] - 2024-03-09" + tail)


def test_summary_lists_next_steps(tmp_path: Path) -> None:
    _project(tmp_path, "1.2.3")
    ctx = _ctx(tmp_path)

    run_release(["patch"], ctx, repo=_clean(tmp_path))

    console = ctx.console
    assert isinstance(console, MockConsole)
    assert console.find("Creating patch release")
    assert console.find("OK Version updated successfully!")
    assert [o.style for o in console.find("Next steps:")] == [Style.HEADER]
    assert console.find("  2. Commit the changes")
    assert console.find("  3. Create a git tag: git tag v1.2.4")
    assert console.find("  7. Push changes: git push && git push --tags")


def test_invalid_release_type_touches_nothing(tmp_path: Path) -> None:
    _project(tmp_path, "1.2.3")
    before = _snapshot(tmp_path)
    repo = _clean(tmp_path)

    result = run_release(["foo"], _ctx(tmp_path), repo=repo)

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_argument"
    assert "foo" in result.error.message
    assert repo.calls == 0
    assert _snapshot(tmp_path) == before


def test_requires_exactly_one_argument(tmp_path: Path) -> None:
    for args in ([], ["patch", "minor"]):
        result = run_release(args, _ctx(tmp_path), repo=_clean(tmp_path))
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_argument"


def test_dirty_tree_aborts_before_any_write(tmp_path: Path) -> None:
    _project(tmp_path, "1.2.3")
    before = _snapshot(tmp_path)
    repo = _FakeRepo(
        tmp_path,
        Ok(GitStatus(branch="main", entries=(StatusEntry(" M", "src/DSP/Reverb.h"),))),
    )

    result = run_release(["patch"], _ctx(tmp_path), repo=repo)

    assert isinstance(result, Err)
    assert result.error.kind == "dirty_working_tree"
    assert _snapshot(tmp_path) == before
    assert not (tmp_path / "CHANGELOG.md").exists()


def test_missing_manifest_is_io_error(tmp_path: Path) -> None:
    result = run_release(["patch"], _ctx(tmp_path), repo=_clean(tmp_path))

    assert isinstance(result, Err)
    assert result.error.kind == "io_error"


def test_print_usage_lists_numbered_options() -> None:
    console = MockConsole()

    print_usage(console)

    assert console.outputs[0].style == Style.ERROR
    assert console.messages[0].startswith("Usage:")
    assert console.messages[2:] == [
        "  1. major: Breaking changes (1.0.0 -> 2.0.0)",
        "  2. minor: New features (1.0.0 -> 1.1.0)",
        "  3. patch: Bug fixes (1.0.0 -> 1.0.1)",
    ]


def test_next_steps_mention_version() -> None:
    steps = next_steps("3.0.0")
    assert len(steps) == 7
    assert 'git commit -m "chore: release v3.0.0"' in steps[1]
