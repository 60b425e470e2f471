import re

import pytest
from pydantic import ValidationError

from configs.changelog_options import DEFAULT_TYPES, ChangelogOptions
from utils.commit_models import MessageType


def test_defaults():
    options = ChangelogOptions()
    assert options.coerce is True
    assert options.only_first is False
    assert options.only_body is False
    assert options.types == DEFAULT_TYPES
    assert options.limit == 500
    assert options.add_date is True
    assert options.default_type == MessageType(type="feat", subtype="change")
    assert options.notice.in_footer is True
    assert options.notice.all is False
    assert options.notice.keys["BREAKING CHANGES"].pattern == r"^BREAKING[ -]CHANGE$"


def test_from_json_camel_case():
    options = ChangelogOptions.from_json(
        '{"onlyFirst": true, "addDate": "2024-02-01", "defaultType": false,'
        ' "notice": {"inFooter": false, "keys": {"DEPRECATIONS": "/^DEPRECATED$/", "NOTES": "NOTE"}}}'
    )
    assert options.only_first is True
    assert options.add_date == "2024-02-01"
    assert options.default_type is None
    assert options.notice.in_footer is False
    assert isinstance(options.notice.keys["DEPRECATIONS"], re.Pattern)
    assert options.notice.keys["NOTES"] == "NOTE"
    assert "BREAKING CHANGES" not in options.notice.keys


def test_nulls_keep_defaults():
    options = ChangelogOptions.from_mapping({"limit": None, "notice": {"inFooter": None}})
    assert options.limit == 500
    assert options.notice.in_footer is True


def test_types_are_replaced():
    options = ChangelogOptions.from_mapping({"types": {"fix": "Bug Fixes"}})
    assert options.types == {"fix": "Bug Fixes"}


def test_default_type_mapping():
    options = ChangelogOptions.from_mapping({"defaultType": {"type": "fix"}})
    assert options.default_type == MessageType(type="fix")


@pytest.mark.parametrize("text", ["", "   ", None])
def test_empty_json(text):
    assert ChangelogOptions.from_json(text) == ChangelogOptions()


@pytest.mark.parametrize("overrides", [{"bogus": 1}, {"limit": 0}, {"notice": {"where": "top"}}])
def test_invalid_overrides(overrides):
    with pytest.raises(ValidationError):
        ChangelogOptions.from_mapping(overrides)


def test_options_are_frozen():
    options = ChangelogOptions()
    with pytest.raises(ValidationError):
        options.only_first = True


def test_malformed_notice_pattern_is_a_validation_error():
    with pytest.raises(ValidationError, match="Invalid notice pattern"):
        ChangelogOptions.from_mapping({"notice": {"keys": {"X": "/[/"}}})
