#!/usr/bin/env python3
"""Assemble per-tag releases from repository listings and git history.

Commits, tags and releases are fetched in parallel; a failure in any of the
three aborts the whole build.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from configs.changelog_options import ChangelogOptions
from utils.commit_grouper import group_commits
from utils.commit_models import Release, Tag
from utils.commit_parser import CommitParser
from utils.git_client import GitClient
from utils.versions import coerce_version, find_previous_version, is_valid_version, parse_version

logger = logging.getLogger(__name__)


class RepoData(BaseModel):
	tags: List[Tag] = Field(default_factory=list, description="Version tags, newest first")
	commits: Dict[str, str] = Field(default_factory=dict, description="Commit SHA to message")
	releases: Dict[str, Release] = Field(default_factory=dict, description="Releases keyed by tag, newest first")
	head_tag: Optional[str] = None


def _version_tags(raw_tags: List[Dict[str, Any]]) -> List[Tag]:
	tags = [
		Tag(name=t["name"], sha=t["commit"]["sha"])
		for t in raw_tags
		if is_valid_version(t.get("name", ""))
	]
	tags.sort(key=lambda t: parse_version(t.name), reverse=True)
	return tags


def _release_meta(raw_releases: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
	meta = {}
	for rel in raw_releases:
		published = rel.get("published_at") or rel.get("created_at") or ""
		meta[rel["tag_name"]] = {"name": rel.get("name"), "date": published[:10]}
	return meta


def previous_tag(tags: List[Tag], tag: Tag) -> Optional[str]:
	"""Name of the tag that closes the commit range below ``tag``."""
	names = [t.name for t in tags]
	previous = find_previous_version(names, tag.name, "PATCH")
	if previous is None:
		return None
	by_version: Dict[str, str] = {}
	for name in names:
		by_version.setdefault(coerce_version(name, include_prerelease=True), name)
	return by_version.get(previous.lstrip("v"))


def filter_repo_data(
	github,
	git: GitClient,
	parser: CommitParser,
	owner: str,
	repo: str,
	options: Optional[ChangelogOptions] = None,
) -> RepoData:
	"""Fetch repository listings and build one Release per version tag.

	Args:
		github: Client exposing ``list_commits``/``list_tags``/``list_releases``
		git: Git client for commit ranges and tag annotations
		parser: Commit header parser
		owner: Repository owner
		repo: Repository name
		options: Build options (limit, add_date, default_type)

	Returns:
		RepoData with tags, commit messages, releases and the newest tag
	"""
	options = options or ChangelogOptions()
	limit = options.limit

	with ThreadPoolExecutor(max_workers=3) as pool:
		f_commits = pool.submit(github.list_commits, owner, repo, limit)
		f_tags = pool.submit(github.list_tags, owner, repo, limit)
		f_releases = pool.submit(github.list_releases, owner, repo, limit)
		all_commits = f_commits.result()
		all_tags = f_tags.result()
		all_releases = f_releases.result()

	tags = _version_tags(all_tags)
	commits = {c["sha"]: c["commit"]["message"] for c in all_commits}
	meta = _release_meta(all_releases)
	logger.info(f"✓ {len(commits)} commits, {len(tags)} version tags, {len(meta)} releases for {owner}/{repo}")

	releases: Dict[str, Release] = {}
	for index, tag in enumerate(tags):
		release_meta = meta.get(tag.name) or {}
		release_date = release_meta.get("date") or ""
		if options.add_date and not release_date and index == 0:
			release_date = date.today().isoformat() if options.add_date is True else str(options.add_date)

		shas = git.get_commit_shas(base=previous_tag(tags, tag), head=tag.name)
		messages = [commits[sha] for sha in shas if commits.get(sha)]
		grouped = group_commits(messages, parser, default_type=options.default_type)
		if grouped.skipped:
			logger.warning(f"{tag.name}: skipped {len(grouped.skipped)} unclassifiable commits")

		releases[tag.name] = Release(
			tag=tag.name,
			name=release_meta.get("name"),
			date=release_date,
			description=git.get_tag_message(tag.name),
			messages=messages,
			commits=grouped.groups,
		)

	return RepoData(
		tags=tags,
		commits=commits,
		releases=releases,
		head_tag=tags[0].name if tags else None,
	)
