from utils.commit_models import Commit, Release
from utils.release_aggregator import bucket_key, group_releases


def _release(tag, name=None, date="", message=None, type_key=None):
    commits = {type_key: [Commit(type=type_key, subject=message)]} if type_key else {}
    return Release(tag=tag, name=name, date=date, messages=[message] if message else [], commits=commits)


def test_groups_by_minor_by_default():
    releases = {
        "1.2.3": _release("1.2.3", "Release 1", "2023-01-01", "Fix bug", "fix"),
        "1.2.4": _release("1.2.4", "Release 2", "2023-01-15", "Add feature", "feat"),
        "1.3.0": _release("1.3.0", "Release 3", "2023-02-01", "Major update", "feat"),
    }

    result = group_releases(releases)

    assert list(result) == ["1.2", "1.3"]
    assert result["1.2"] == Release(
        tag="1.2",
        name="Release 1, Release 2",
        date="2023-01-01, 2023-01-15",
        messages=["Fix bug", "Add feature"],
        commits={
            "fix": [Commit(type="fix", subject="Fix bug")],
            "feat": [Commit(type="feat", subject="Add feature")],
        },
    )
    assert result["1.3"] == Release(
        tag="1.3",
        name="Release 3",
        date="2023-02-01",
        messages=["Major update"],
        commits={"feat": [Commit(type="feat", subject="Major update")]},
    )


def test_groups_by_major():
    releases = {
        "1.2.3": _release("1.2.3", "Release 1", "2023-01-01", "Fix bug", "fix"),
        "1.3.0": _release("1.3.0", "Release 2", "2023-02-01", "Add feature", "feat"),
        "2.0.0": _release("2.0.0", "Release 3", "2023-03-01", "Major update", "feat"),
    }

    result = group_releases(releases, "major")

    assert list(result) == ["1", "2"]
    assert result["1"].name == "Release 1, Release 2"
    assert result["1"].date == "2023-01-01, 2023-02-01"
    assert result["1"].messages == ["Fix bug", "Add feature"]
    assert list(result["1"].commits) == ["fix", "feat"]
    assert result["2"].name == "Release 3"


def test_missing_properties():
    releases = {
        "1.0.0": Release(tag="1.0.0", name="Release 1"),
        "1.1.0": Release(tag="1.1.0", date="2023-01-01"),
        "1.2.0": _release("1.2.0", message="Update", type_key="chore"),
    }

    result = group_releases(releases)

    assert list(result) == ["1.0", "1.1", "1.2"]
    assert result["1.0"] == Release(tag="1.0", name="Release 1", date="", messages=[], commits={})
    assert result["1.1"] == Release(tag="1.1", name=None, date="2023-01-01", messages=[], commits={})
    assert result["1.2"].commits == {"chore": [Commit(type="chore", subject="Update")]}


def test_prerelease_and_invalid_tags():
    releases = {
        "1.0.0-beta.1": _release("1.0.0-beta.1", "Beta 1", "2023-01-15", "Beta release", "feat"),
        "nightly": _release("nightly", "Nightly", "2023-01-16", "Nightly", "chore"),
        "v1.0.0": _release("v1.0.0", "Final", "2023-02-01", "Stable", "fix"),
    }

    result = group_releases(releases)

    assert list(result) == ["1.0"]
    assert result["1.0"].name == "Beta 1, Final"


def test_bucket_key():
    assert bucket_key("v2.3.4") == "2.3"
    assert bucket_key("v2.3.4", "MAJOR") == "2"
    assert bucket_key("latest") is None


def test_empty_input():
    assert group_releases({}) == {}
