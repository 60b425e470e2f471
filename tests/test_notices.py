import re

import pytest

from utils.commit_models import Commit, Note
from utils.notices import as_check, extract_notices

BREAKING = re.compile(r"^BREAKING[ -]CHANGE$")


def test_pattern_check():
    commit = Commit(type="feat", notes=[Note(title="BREAKING CHANGE", text="config format changed")])
    assert extract_notices(commit, "BREAKING CHANGES", BREAKING) == ["config format changed"]


def test_literal_check_defaults_to_label():
    commit = Commit(type="fix", notes=[Note(title="DEPRECATED", text="old flag"), Note(title="Other", text="x")])
    assert extract_notices(commit, "DEPRECATED") == ["old flag"]


def test_slash_delimited_string_is_a_pattern():
    check = as_check("/^DEPREC/")
    assert isinstance(check, re.Pattern)
    commit = Commit(type="fix", notes=[Note(title="DEPRECATION", text="soon gone")])
    assert extract_notices(commit, "Deprecations", "/^DEPREC/") == ["soon gone"]


def test_breaking_text_fallback_only_for_breaking_label():
    commit = Commit(type="feat", breaking="drops python 3.8")
    assert extract_notices(commit, "BREAKING CHANGE") == ["drops python 3.8"]
    assert extract_notices(commit, "BREAKING CHANGES", BREAKING) == []


def test_nothing_found():
    assert extract_notices(Commit(type="chore"), "BREAKING CHANGE") == []


def test_malformed_pattern_is_rejected_by_as_check():
    with pytest.raises(ValueError, match="Invalid notice pattern"):
        as_check("/[/")


def test_malformed_pattern_matches_literally():
    commit = Commit(type="fix", notes=[Note(title="/[/", text="odd title"), Note(title="[", text="x")])
    assert extract_notices(commit, "Odd", "/[/") == ["odd title"]
    assert extract_notices(Commit(type="fix", notes=[Note(title="[", text="x")]), "Odd", "/[/") == []
