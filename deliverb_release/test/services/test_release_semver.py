from __future__ import annotations

import pytest

from deliverb_release.core.result import Err, Ok
from deliverb_release.services.release.semver import SemVer, bump_version, is_release_bump, parse_version


def test_parse_version() -> None:
    assert parse_version("1.2.3") == SemVer(1, 2, 3)
    assert parse_version("0.0.1") == SemVer(0, 0, 1)
    assert parse_version(" 10.20.30\n") == SemVer(10, 20, 30)


def test_parse_version_rejects_other_shapes() -> None:
    assert parse_version("v1.2.3") is None
    assert parse_version("1.2") is None
    assert parse_version("1.2.3-beta.1") is None
    assert parse_version("a.b.c") is None


def test_str_renders_dotted_triple() -> None:
    assert str(SemVer(3, 0, 12)) == "3.0.12"


@pytest.mark.parametrize(
    ("version", "kind", "expected"),
    [
        ("1.2.3", "patch", "1.2.4"),
        ("1.2.3", "minor", "1.3.0"),
        ("1.2.3", "major", "2.0.0"),
        ("2.0.0", "major", "3.0.0"),
        ("0.9.9", "minor", "0.10.0"),
    ],
)
def test_bump_version(version: str, kind: str, expected: str) -> None:
    assert bump_version(version, kind) == Ok(expected)


def test_bump_resets_lower_components() -> None:
    v = SemVer(4, 5, 6)
    assert v.bump("major") == SemVer(5, 0, 0)
    assert v.bump("minor") == SemVer(4, 6, 0)
    assert v.bump("patch") == SemVer(4, 5, 7)


@pytest.mark.parametrize("kind", ["foo", "", "Patch", "premajor"])
def test_bump_version_rejects_unknown_kind(kind: str) -> None:
    result = bump_version("1.2.3", kind)

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_argument"
    assert kind in result.error.message


def test_bump_version_names_offending_kind() -> None:
    result = bump_version("1.2.3", "foo")

    assert isinstance(result, Err)
    assert "foo" in result.error.message


def test_bump_version_rejects_unparseable_version() -> None:
    result = bump_version("1.2", "patch")

    assert isinstance(result, Err)
    assert result.error.kind == "parse_error"


def test_is_release_bump() -> None:
    assert all(is_release_bump(k) for k in ("major", "minor", "patch"))
    assert not is_release_bump("foo")
