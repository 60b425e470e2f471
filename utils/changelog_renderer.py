#!/usr/bin/env python3
"""Render grouped releases into Markdown changelog lines."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from configs.changelog_options import ChangelogOptions
from utils.commit_models import Commit, Release
from utils.notices import extract_notices
from utils.versions import coerce_version

logger = logging.getLogger(__name__)

TITLE = "# Changelog"

_HTML_ESCAPES = (
	("&", "&amp;"),
	("<", "&lt;"),
	(">", "&gt;"),
	('"', "&quot;"),
	("'", "&#39;"),
)


class ChangelogRenderError(ValueError):
	def __init__(self, message: str, code: str = "CONTRACT") -> None:
		super().__init__(message)
		self.code = code


def escape_html(s: str) -> str:
	for ch, entity in _HTML_ESCAPES:
		s = s.replace(ch, entity)
	return s


def display_text(commit: Commit) -> str:
	"""First available of subject, breaking text, header, merge line, reverted header."""
	revert_header = commit.revert.header if commit.revert else None
	for candidate in (commit.subject, commit.breaking, commit.header, commit.merge, revert_header):
		if candidate is not None:
			return candidate
	raise ChangelogRenderError(f"Commit has no displayable text: {commit.raw!r}")


class NoticeCollector:
	"""Notice texts per label, labels kept in configuration order."""

	def __init__(self, labels: List[str]) -> None:
		self._items: Dict[str, List[str]] = {label: [] for label in labels}

	def add(self, label: str, texts: List[str]) -> None:
		self._items[label].extend(texts)

	def __bool__(self) -> bool:
		return any(self._items.values())

	def lines(self) -> List[str]:
		out: List[str] = []
		for label, items in self._items.items():
			if not items:
				continue
			out.extend([f"### {label}", ""])
			out.extend(f"- {item}" for item in items)
			out.append("")
		return out


def _collect_notices(release: Release, options: ChangelogOptions) -> NoticeCollector:
	keys = options.notice.keys
	collector = NoticeCollector(list(keys))
	if not keys:
		return collector
	for type_key, commits in release.commits.items():
		if not (options.notice.all or type_key in options.types):
			continue
		for commit in commits:
			for label, check in keys.items():
				found = extract_notices(commit, label, check)
				if found:
					collector.add(label, found)
	return collector


def _version_heading(tag: str, release: Release, coerce: bool) -> str:
	version = (coerce_version(tag, include_prerelease=True) if coerce else None) or tag
	date = f" ({release.date})" if release.date else ""
	return f"## {version}{date}"


def _type_section(title: str, commits: List[Commit]) -> List[str]:
	out = [f"### {title}", ""]
	scopes: Dict[str, List[Commit]] = {}
	for commit in commits:
		scopes.setdefault(commit.scope or "", []).append(commit)
	for scope in sorted(scopes):
		if scope:
			out.append(f"- {scope}")
		indent = "  " if scope else ""
		for commit in scopes[scope]:
			out.append(f"{indent}- {escape_html(display_text(commit))}")
	out.append("")
	return out


def build_changelog(releases: Mapping[str, Release], options: Optional[ChangelogOptions] = None) -> List[str]:
	"""Build the changelog as a list of lines.

	Args:
		releases: Releases keyed by tag, rendered in the given order
		options: Rendering options; defaults when omitted

	Returns:
		Markdown lines; join with newlines for the document

	Raises:
		ChangelogRenderError: If a commit carries no displayable text
	"""
	options = options or ChangelogOptions()
	lines: List[str] = []

	if not options.only_body:
		lines.extend([TITLE, ""])

	for tag, release in releases.items():
		if not release.commits:
			logger.debug(f"Skipping {tag}: no commits")
			continue

		if not options.only_body:
			lines.extend(["", _version_heading(tag, release, options.coerce), ""])

		notices = _collect_notices(release, options)

		if release.header:
			lines.extend([release.header, ""])

		if notices and not options.notice.in_footer:
			lines.extend(notices.lines())
			lines.append("")

		for type_key, title in options.types.items():
			if type_key in release.commits:
				lines.extend(_type_section(title, release.commits[type_key]))

		if notices and options.notice.in_footer:
			lines.extend(notices.lines())
			lines.append("")

		if release.footer:
			lines.extend([release.footer, ""])

		if options.only_first:
			break

	return lines
