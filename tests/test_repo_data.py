from datetime import date

import pytest

from clients.github_client import GithubApiError
from configs.changelog_options import ChangelogOptions
from utils.commit_models import Tag
from utils.repo_data import filter_repo_data, previous_tag

TAGS = [
    {"name": "v1.0.0", "commit": {"sha": "c1"}},
    {"name": "nightly", "commit": {"sha": "c9"}},
    {"name": "v1.1.0", "commit": {"sha": "c3"}},
]
COMMITS = [
    {"sha": "c3", "commit": {"message": "Add export"}},
    {"sha": "c2", "commit": {"message": "fix: crash on empty input"}},
    {"sha": "c1", "commit": {"message": "feat: initial api"}},
]
RELEASES = [{"tag_name": "v1.0.0", "name": "First", "published_at": "2024-01-05T10:00:00Z"}]


class FakeGithub:
    def __init__(self, fail=None):
        self.fail = fail
        self.limits = []

    def _answer(self, kind, data, limit):
        self.limits.append(limit)
        if self.fail == kind:
            raise GithubApiError(f"{kind} unavailable", code="NETWORK")
        return data

    def list_commits(self, owner, repo, limit):
        return self._answer("commits", COMMITS, limit)

    def list_tags(self, owner, repo, limit):
        return self._answer("tags", TAGS, limit)

    def list_releases(self, owner, repo, limit):
        return self._answer("releases", RELEASES, limit)


class FakeGit:
    ranges = {
        ("v1.0.0", "v1.1.0"): ["c3", "c2"],
        (None, "v1.0.0"): ["c1"],
    }
    annotations = {"v1.1.0": "Export support"}

    def get_commit_shas(self, base=None, head="HEAD"):
        return self.ranges[(base, head)]

    def get_tag_message(self, tag):
        return self.annotations.get(tag)


def test_builds_one_release_per_version_tag(parser):
    github = FakeGithub()
    options = ChangelogOptions.from_mapping({"addDate": "2024-02-01", "limit": 50})

    data = filter_repo_data(github, FakeGit(), parser, "octo", "app", options)

    assert [t.name for t in data.tags] == ["v1.1.0", "v1.0.0"]
    assert data.head_tag == "v1.1.0"
    assert list(data.releases) == ["v1.1.0", "v1.0.0"]
    assert github.limits == [50, 50, 50]

    newest = data.releases["v1.1.0"]
    assert newest.date == "2024-02-01"
    assert newest.name is None
    assert newest.description == "Export support"
    assert newest.messages == ["Add export", "fix: crash on empty input"]
    assert list(newest.commits) == ["feat_add", "fix"]

    first = data.releases["v1.0.0"]
    assert first.name == "First"
    assert first.date == "2024-01-05"
    assert first.description is None
    assert list(first.commits) == ["feat_change"]


def test_add_date_today_only_for_newest_tag(parser):
    data = filter_repo_data(FakeGithub(), FakeGit(), parser, "octo", "app", ChangelogOptions())
    assert data.releases["v1.1.0"].date == date.today().isoformat()
    assert data.releases["v1.0.0"].date == "2024-01-05"


def test_add_date_disabled(parser):
    options = ChangelogOptions(add_date=False)
    data = filter_repo_data(FakeGithub(), FakeGit(), parser, "octo", "app", options)
    assert data.releases["v1.1.0"].date == ""


@pytest.mark.parametrize("kind", ["commits", "tags", "releases"])
def test_any_listing_failure_aborts(parser, kind):
    with pytest.raises(GithubApiError):
        filter_repo_data(FakeGithub(fail=kind), FakeGit(), parser, "octo", "app")


def test_previous_tag_maps_back_to_tag_name():
    tags = [Tag(name="v2.0.0", sha="b"), Tag(name="release-1.5", sha="a")]
    assert previous_tag(tags, tags[0]) == "release-1.5"
    assert previous_tag(tags, tags[1]) is None
