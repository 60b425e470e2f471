#!/usr/bin/env python3
"""Build options for changelog generation.

Every field carries its default here; caller input (JSON from the action
inputs, or a dict in code) is overlaid once by :meth:`ChangelogOptions.from_mapping`.
camelCase keys are accepted next to snake_case ones.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.commit_models import MessageType
from utils.notices import as_check

DEFAULT_TYPES: Dict[str, str] = {
	"feat_add": "Added",
	"feat_change": "Changed",
	"feat_remove": "Removed",
	"fix": "Fixed",
}

DEFAULT_NOTICE_KEYS: Dict[str, Any] = {
	"BREAKING CHANGES": re.compile(r"^BREAKING[ -]CHANGE$"),
}


class _Options(BaseModel):
	model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class NoticeOptions(_Options):
	"""Which footer notes surface as notices, and where they go."""

	keys: Dict[str, Any] = Field(default_factory=lambda: dict(DEFAULT_NOTICE_KEYS))
	all: bool = False
	in_footer: bool = Field(True, alias="inFooter")

	@field_validator("keys", mode="before")
	@classmethod
	def _compile_keys(cls, value: Any) -> Any:
		if value is None:
			return dict(DEFAULT_NOTICE_KEYS)
		if isinstance(value, Mapping):
			return {str(label): as_check(check) for label, check in value.items()}
		return value


class ChangelogOptions(_Options):
	"""Options recognized by the renderer and the repository data builder."""

	coerce: bool = True
	only_first: bool = Field(False, alias="onlyFirst")
	only_body: bool = Field(False, alias="onlyBody")
	types: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TYPES))
	notice: NoticeOptions = Field(default_factory=NoticeOptions)
	limit: int = Field(500, ge=1)
	add_date: Union[bool, str] = Field(True, alias="addDate")
	default_type: Optional[MessageType] = Field(
		default_factory=lambda: MessageType(type="feat", subtype="change"),
		alias="defaultType",
	)

	@field_validator("default_type", mode="before")
	@classmethod
	def _no_default_type(cls, value: Any) -> Any:
		# false disables the fallback, leaving unmatched messages as "other"
		return None if value is False else value

	@classmethod
	def from_mapping(cls, overrides: Optional[Mapping[str, Any]] = None) -> "ChangelogOptions":
		"""Overlay caller overrides on the defaults.

		Keys left out (or set to null) keep their default; the nested
		``notice`` mapping is merged the same way.
		"""
		data = {k: v for k, v in dict(overrides or {}).items() if v is not None}
		notice = data.get("notice")
		if isinstance(notice, Mapping):
			data["notice"] = {k: v for k, v in notice.items() if v is not None}
		return cls.model_validate(data)

	@classmethod
	def from_json(cls, text: Optional[str]) -> "ChangelogOptions":
		if not text or not text.strip():
			return cls()
		return cls.from_mapping(json.loads(text.strip()))
