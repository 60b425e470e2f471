#!/usr/bin/env python3
"""Conventional Commit header parser.

Turns one raw commit message into a :class:`ParsedCommit`: header fields
(type, scope, breaking marker, subject), merge and revert detection, body,
footer, notes, mentions and issue references. Pure; no I/O.
"""

from __future__ import annotations

import re
from typing import List, Optional, Pattern, Tuple

from utils.commit_models import Note, ParsedCommit, Reference, Revert


HEADER_PATTERN = re.compile(r"^(\w*)(?:\(([^)]*)\))?(!)?:\s(.*)$")
BREAKING_HEADER_PATTERN = re.compile(r"^(\w*)(?:\(([^)]*)\))?!:\s(.*)$")
MERGE_PATTERN = re.compile(
	r"""^merge\s+(?:branch\s+)?['"`]?(.+?)['"`]?\s+(?:in)?to\s+(?:branch\s+)?['"`]?(.+?)['"`]?$""",
	re.IGNORECASE,
)
REVERT_PATTERN = re.compile(r'^(?:Revert|revert:)\s"?([\s\S]+?)"?\s*This reverts commit (\w*)\.', re.IGNORECASE)

NOTE_KEYWORDS = ("BREAKING CHANGE", "BREAKING-CHANGE")
REFERENCE_ACTIONS = ("close", "closes", "closed", "fix", "fixes", "fixed", "resolve", "resolves", "resolved")
BREAKING_NOTE_TITLE = "BREAKING CHANGE"

MENTION_PATTERN = re.compile(r"@([\w-]+)")


def _notes_pattern(keywords: Tuple[str, ...]) -> Pattern[str]:
	alternation = "|".join(re.escape(k) for k in keywords)
	return re.compile(rf"^[\s|*]*({alternation})[:\s]+(.*)")


def _references_pattern(actions: Tuple[str, ...]) -> Pattern[str]:
	alternation = "|".join(re.escape(a) for a in actions)
	return re.compile(
		rf"(?:\b(?P<action>{alternation})\s+)?(?:(?P<owner>[\w-]+)/(?P<repository>[\w.-]+))?#(?P<issue>\d+)",
		re.IGNORECASE,
	)


class CommitParser:
	"""Parser for Conventional Commit messages.

	The header grammar is ``type(scope)!: subject``. A first line matching the
	merge pattern is recorded as ``merge`` and the next line is treated as the
	header. ``Revert "..." This reverts commit <sha>.`` bodies populate
	``revert``. Footer notes start at a line beginning with one of the note
	keywords; a ``!`` marker without such a note yields a synthetic
	``BREAKING CHANGE`` note and sets ``breaking`` to the subject.
	"""

	def __init__(
		self,
		header_pattern: Pattern[str] = HEADER_PATTERN,
		breaking_header_pattern: Pattern[str] = BREAKING_HEADER_PATTERN,
		merge_pattern: Pattern[str] = MERGE_PATTERN,
		revert_pattern: Pattern[str] = REVERT_PATTERN,
		note_keywords: Tuple[str, ...] = NOTE_KEYWORDS,
		reference_actions: Tuple[str, ...] = REFERENCE_ACTIONS,
	) -> None:
		self.header_pattern = header_pattern
		self.breaking_header_pattern = breaking_header_pattern
		self.merge_pattern = merge_pattern
		self.revert_pattern = revert_pattern
		self.notes_pattern = _notes_pattern(note_keywords)
		self.references_pattern = _references_pattern(reference_actions)

	def parse(self, message: str) -> ParsedCommit:
		if not isinstance(message, str) or not message.strip():
			raise ValueError("Expected a non-empty commit message")

		lines = message.strip().splitlines()
		header: Optional[str] = lines.pop(0)
		merge = None
		if self.merge_pattern.match(header):
			merge = header
			header = lines.pop(0) if lines else None

		type_ = scope = subject = None
		if header:
			match = self.header_pattern.match(header)
			if match:
				type_, scope, _, subject = match.groups()
				type_ = type_ or None

		body_lines, footer_lines, notes = self._split_body(lines)

		breaking = None
		if header and self.breaking_header_pattern.match(header) and not any(n.title in NOTE_KEYWORDS for n in notes):
			breaking = subject
			notes.append(Note(title=BREAKING_NOTE_TITLE, text=subject or ""))

		revert = None
		revert_match = self.revert_pattern.match(message.strip())
		if revert_match:
			revert = Revert(header=revert_match.group(1), hash=revert_match.group(2) or None)

		return ParsedCommit(
			type=type_,
			scope=scope or None,
			subject=subject,
			header=header,
			body="\n".join(body_lines).strip() or None,
			footer="\n".join(footer_lines).strip() or None,
			breaking=breaking,
			notes=notes,
			merge=merge,
			revert=revert,
			mentions=MENTION_PATTERN.findall(message),
			references=self._references(message),
		)

	def _split_body(self, lines: List[str]) -> Tuple[List[str], List[str], List[Note]]:
		body: List[str] = []
		footer: List[str] = []
		notes: List[Note] = []
		current: Optional[List[str]] = None
		title = ""
		in_footer = False

		for line in lines:
			note_match = self.notes_pattern.match(line)
			if note_match:
				if current is not None:
					notes.append(Note(title=title, text="\n".join(current).strip()))
				title = note_match.group(1)
				current = [note_match.group(2)]
				in_footer = True
				footer.append(line)
				continue
			if not in_footer and self._is_reference_line(line):
				in_footer = True
			if in_footer:
				footer.append(line)
				if current is not None:
					current.append(line)
			else:
				body.append(line)

		if current is not None:
			notes.append(Note(title=title, text="\n".join(current).strip()))
		return body, footer, notes

	def _is_reference_line(self, line: str) -> bool:
		match = self.references_pattern.search(line)
		return bool(match and match.group("action"))

	def _references(self, message: str) -> List[Reference]:
		refs = []
		for match in self.references_pattern.finditer(message):
			refs.append(Reference(
				raw=match.group(0),
				action=match.group("action"),
				owner=match.group("owner"),
				repository=match.group("repository"),
				issue=match.group("issue"),
			))
		return refs
