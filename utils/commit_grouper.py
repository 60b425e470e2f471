#!/usr/bin/env python3
"""Commit normalization and type grouping.

Raw messages go through the header parser, then through the classifier when
they do not declare a valid conventional type. The resulting commits are
bucketed by ``type`` or ``type_subtype``.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from utils.classifier import classify
from utils.commit_models import Commit, GroupedCommits, MessageType, ParsedCommit
from utils.commit_parser import CommitParser

logger = logging.getLogger(__name__)

VALID_TYPES: List[str] = ["feat", "fix", "chore", "perf", "style", "refactor", "ci", "build", "test", "docs"]


def _with_type(parsed: ParsedCommit, type_: str, subtype: Optional[str] = None, **extra) -> Commit:
	data = parsed.model_dump()
	data.update(extra)
	data["type"] = type_
	data["subtype"] = subtype
	return Commit.model_validate(data)


def normalize_commit(
	parsed: ParsedCommit,
	parser: CommitParser,
	default_type: Optional[MessageType] = None,
	valid_types: Sequence[str] = VALID_TYPES,
) -> Commit:
	"""Resolve the final type of a parsed commit.

	Merge and revert records keep those types outright. Otherwise the parsed
	type wins over the classifier's guess, and ``feat`` always gets a
	subtype. A type outside ``valid_types`` makes the original text go back
	through the parser behind a synthetic ``"<type>: "`` header so scope,
	body and notes come out consistently.
	"""
	for special in ("merge", "revert"):
		if getattr(parsed, special):
			return _with_type(parsed, special)

	guess = classify(parsed.subject or parsed.header, default_type=default_type, force_type=parsed.type)
	type_ = parsed.type or guess.type
	subtype = (guess.subtype or "change") if type_ == "feat" else None

	if type_ in valid_types:
		return _with_type(parsed, type_, subtype)

	reparsed = parser.parse(f"{type_}: {parsed.orig}")
	return _with_type(reparsed, type_, subtype, raw=parsed.raw, orig=parsed.orig)


def sort_group_keys(groups: Dict[str, List[Commit]], types: Optional[Sequence[str]] = None) -> Dict[str, List[Commit]]:
	"""Reorder buckets by ``types``; unlisted keys go last in first-seen order.

	A ``type_subtype`` key without its own entry ranks with its base type.
	"""
	order = {t: i for i, t in enumerate(VALID_TYPES if types is None else types)}
	last = len(order)

	def rank(key: str) -> int:
		if key in order:
			return order[key]
		return order.get(key.split("_", 1)[0], last)

	return {key: groups[key] for key in sorted(groups, key=rank)}


def group_commits(
	messages: Iterable[str],
	parser: CommitParser,
	default_type: Optional[MessageType] = None,
	valid_types: Sequence[str] = VALID_TYPES,
	type_order: Optional[Sequence[str]] = None,
) -> GroupedCommits:
	"""Parse, normalize and bucket a list of raw commit messages.

	A message that fails to parse or classify is logged and listed in
	``skipped``; the rest of the batch is still processed.
	"""
	commits: List[Commit] = []
	groups: Dict[str, List[Commit]] = {}
	skipped: List[str] = []

	for message in messages:
		if not message:
			continue
		try:
			commit = _process_message(message, parser, default_type, valid_types)
		except Exception:
			logger.warning(f"Skipping commit that could not be classified: {message[:80]!r}", exc_info=True)
			skipped.append(message)
			continue
		commits.append(commit)
		groups.setdefault(commit.type_key, []).append(commit)

	groups = sort_group_keys(groups, valid_types if type_order is None else type_order)
	logger.debug(f"Grouped {len(commits)} commits into {len(groups)} buckets ({len(skipped)} skipped)")
	return GroupedCommits(commits=commits, groups=groups, skipped=skipped)


def _process_message(
	message: str,
	parser: CommitParser,
	default_type: Optional[MessageType],
	valid_types: Sequence[str],
) -> Commit:
	orig = message
	parsed = parser.parse(orig)
	type_ = parsed.type
	if type_ and type_ not in valid_types:
		# Break the header so the parser stops recognizing the unknown type.
		orig = orig.replace(": ", " ", 1)
		parsed = parser.parse(orig)
		type_ = None

	parsed = parsed.model_copy(update={"type": type_, "orig": orig, "raw": message})
	commit = normalize_commit(parsed, parser, default_type=default_type, valid_types=valid_types)
	return commit.model_copy(update={"orig": orig, "raw": message})
