#!/usr/bin/env python3
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from utils.commit_models import Commit, Release
from utils.versions import coerce_version

logger = logging.getLogger(__name__)


@dataclass
class ReleaseBucket:
	"""Accumulates the releases that fall into one major or minor line."""

	key: str
	names: List[str] = field(default_factory=list)
	dates: List[str] = field(default_factory=list)
	messages: List[str] = field(default_factory=list)
	commits: Dict[str, List[Commit]] = field(default_factory=dict)

	def add(self, release: Release) -> None:
		if release.name:
			self.names.append(release.name)
		if release.date:
			self.dates.append(release.date)
		self.messages.extend(release.messages or [])
		for type_key, commits in (release.commits or {}).items():
			self.commits.setdefault(type_key, []).extend(commits)

	def build(self) -> Release:
		return Release(
			tag=self.key,
			name=", ".join(self.names) or None,
			date=", ".join(self.dates),
			messages=list(self.messages),
			commits={k: list(v) for k, v in self.commits.items()},
		)


def bucket_key(tag: str, group_by: str = "minor") -> Optional[str]:
	version = coerce_version(tag)
	if version is None:
		return None
	parts = version.split(".")
	if len(parts) != 3:
		return None
	parts.pop()
	if group_by.lower() == "major":
		parts.pop()
	return ".".join(parts)


def group_releases(releases: Mapping[str, Release], group_by: str = "minor") -> Dict[str, Release]:
	"""Merge tag-level releases into ``major.minor`` (or ``major``) buckets.

	Args:
		releases: Releases keyed by tag, in the order they should be merged
		group_by: ``minor`` (default) or ``major``

	Returns:
		Aggregated releases keyed by bucket, in first-seen order
	"""
	buckets: Dict[str, ReleaseBucket] = {}
	for tag, release in releases.items():
		key = bucket_key(tag, group_by)
		if key is None:
			logger.debug(f"Skipping release with non-version tag: {tag!r}")
			continue
		if key not in buckets:
			buckets[key] = ReleaseBucket(key)
		buckets[key].add(release)
	return {key: bucket.build() for key, bucket in buckets.items()}
