#!/usr/bin/env python3
"""Pydantic models for commits, releases and tags.

Parsed commits come out of the header parser; normalized commits are the
frozen records that get grouped, aggregated and rendered.
"""

from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


SubType = Literal["add", "change", "remove"]


class _FrozenModel(BaseModel):
	model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class Note(_FrozenModel):
	"""A footer annotation such as ``BREAKING CHANGE: ...``."""

	title: str
	text: str


class Reference(_FrozenModel):
	"""An issue reference found in a commit message."""

	raw: str
	action: Optional[str] = None
	owner: Optional[str] = None
	repository: Optional[str] = None
	issue: str
	prefix: str = "#"


class Revert(_FrozenModel):
	header: Optional[str] = None
	hash: Optional[str] = None


class MessageType(_FrozenModel):
	"""Result of classifying a commit message."""

	type: str
	subtype: Optional[SubType] = Field(None, alias="subType")


class ParsedCommit(_FrozenModel):
	"""Structured record produced from one raw commit message."""

	type: Optional[str] = None
	scope: Optional[str] = None
	subject: Optional[str] = None
	header: Optional[str] = None
	body: Optional[str] = None
	footer: Optional[str] = None
	breaking: Optional[str] = Field(None, description="Breaking text when the header carried '!' without a footer note")
	notes: List[Note] = Field(default_factory=list)
	merge: Optional[str] = None
	revert: Optional[Revert] = None
	mentions: List[str] = Field(default_factory=list)
	references: List[Reference] = Field(default_factory=list)
	raw: Optional[str] = None
	orig: Optional[str] = None


class Commit(ParsedCommit):
	"""A normalized commit: exactly one type, subtype only for ``feat``."""

	type: str
	subtype: Optional[SubType] = Field(None, alias="subType")

	@property
	def type_key(self) -> str:
		return f"{self.type}_{self.subtype}" if self.subtype else self.type


class GroupedCommits(BaseModel):
	"""Flat commit list plus the type-keyed buckets, in bucket order."""

	commits: List[Commit] = Field(default_factory=list)
	groups: Dict[str, List[Commit]] = Field(default_factory=dict)
	skipped: List[str] = Field(default_factory=list, description="Messages that failed to parse or classify")


class Tag(_FrozenModel):
	name: str
	sha: str


class Release(_FrozenModel):
	"""One release (or an aggregated bucket of releases)."""

	tag: str
	name: Optional[str] = None
	date: str = ""
	description: Optional[str] = None
	header: Optional[str] = None
	footer: Optional[str] = None
	messages: List[str] = Field(default_factory=list)
	commits: Dict[str, List[Commit]] = Field(default_factory=dict)
