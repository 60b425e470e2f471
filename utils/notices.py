#!/usr/bin/env python3
from __future__ import annotations

import re
from typing import List, Optional, Pattern, Union

from utils.commit_models import Commit

NoticeCheck = Union[str, Pattern[str]]

BREAKING_LABEL = "BREAKING CHANGE"


def as_check(check: NoticeCheck) -> NoticeCheck:
	"""Compile ``/pattern/`` strings; leave literals and patterns alone.

	Raises:
		ValueError: If a ``/pattern/`` string is not a valid regex
	"""
	if isinstance(check, str) and len(check) >= 2 and check.startswith("/") and check.endswith("/"):
		try:
			return re.compile(check[1:-1])
		except re.error as e:
			raise ValueError(f"Invalid notice pattern {check!r}: {e}") from e
	return check


def _title_matches(title: str, check: NoticeCheck) -> bool:
	if isinstance(check, re.Pattern):
		return bool(check.search(title))
	return title == check


def extract_notices(
	commit: Commit,
	label: str,
	check: Optional[NoticeCheck] = None,
	breaking_label: str = BREAKING_LABEL,
) -> List[str]:
	"""Collect note texts whose titles satisfy ``check`` (defaults to ``label``).

	Falls back to the commit's inline breaking text when nothing matched and
	``label`` is the breaking label.
	"""
	check = label if check is None else check
	try:
		check = as_check(check)
	except ValueError:
		# uncompilable pattern, compare titles literally
		check = str(check)
	notices = [note.text for note in commit.notes or [] if _title_matches(note.title, check)]
	if notices:
		return notices
	if label == breaking_label and commit.breaking:
		return [commit.breaking]
	return []
