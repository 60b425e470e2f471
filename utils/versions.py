#!/usr/bin/env python3
"""Semantic version helpers and the previous-version lookup.

Coercion follows the loose rules release tags tend to need: the first
``major[.minor[.patch]]`` run found anywhere in the string wins, missing
parts become ``0`` and a leading ``v`` (or any other prefix) is ignored.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import List, Optional

from semver import Version

logger = logging.getLogger(__name__)

GRANULARITIES = ("MAJOR", "MINOR", "PATCH")

_NUM = r"(\d{1,16})"
_PRERELEASE_ID = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][a-zA-Z0-9-]*)"
_PRERELEASE = rf"{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*"
_BUILD = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

_COERCE = re.compile(rf"(?:^|[^\d]){_NUM}(?:\.{_NUM})?(?:\.{_NUM})?(?:$|[^\d])")
_COERCE_FULL = re.compile(
	rf"(?:^|[^\d]){_NUM}(?:\.{_NUM})?(?:\.{_NUM})?(?:-({_PRERELEASE}))?(?:\+({_BUILD}))?(?:$|[^\d])"
)


class VersionError(ValueError):
	"""Raised for malformed version lookups."""
	def __init__(self, message: str, code: str = "VALIDATION") -> None:
		super().__init__(message)
		self.code = code


def coerce_version(value: str, include_prerelease: bool = False) -> Optional[str]:
	"""Coerce a loosely formatted version string to ``major.minor.patch``.

	Args:
		value: Tag or version text, e.g. ``v1.2``, ``release-2.0.1-rc.1``
		include_prerelease: Keep a ``-prerelease`` suffix when present

	Returns:
		Canonical version string, or None when no number run is found or
		the run is not valid SemVer (e.g. leading zeros)
	"""
	if not isinstance(value, str):
		return None
	pattern = _COERCE_FULL if include_prerelease else _COERCE
	match = pattern.search(value)
	if not match:
		return None
	major, minor, patch = (part or "0" for part in match.group(1, 2, 3))
	version = f"{major}.{minor}.{patch}"
	if include_prerelease and match.group(4):
		version += f"-{match.group(4)}"
	return version if Version.is_valid(version) else None


def _strip_v(value: str) -> str:
	value = value.strip()
	return value[1:] if value.startswith("v") else value


def is_valid_version(value: str) -> bool:
	"""Strict SemVer check; tolerates a single leading ``v``."""
	if not isinstance(value, str):
		return False
	return Version.is_valid(_strip_v(value))


def parse_version(value: str) -> Version:
	return Version.parse(_strip_v(value))


def _sorted_versions(versions: Sequence) -> List[Version]:
	parsed = []
	for raw in versions:
		coerced = coerce_version(raw, include_prerelease=True)
		if coerced is None:
			logger.debug(f"Ignoring uncoercible version: {raw!r}")
			continue
		parsed.append(Version.parse(coerced))
	return sorted(parsed)


def find_previous_version(versions: Sequence, target: str, granularity: str = "PATCH") -> Optional[str]:
	"""Find the version a target should be compared against.

	MAJOR and MINOR return the first release of the target's own major or
	minor line; PATCH returns the closest lower version.

	Args:
		versions: Version strings, in any order
		target: Version to look up
		granularity: ``MAJOR``, ``MINOR`` or ``PATCH`` (case-insensitive)

	Returns:
		Matching version (``v``-prefixed when the target is), or None

	Raises:
		VersionError: On malformed arguments or an uncoercible target
	"""
	if (
		isinstance(versions, (str, bytes))
		or not isinstance(versions, Sequence)
		or not isinstance(target, str)
		or not isinstance(granularity, str)
		or granularity.upper() not in GRANULARITIES
	):
		raise VersionError("Invalid input parameters")
	granularity = granularity.upper()

	coerced = coerce_version(target, include_prerelease=True)
	if coerced is None:
		raise VersionError(f"Invalid version string: {target!r}", code="INVALID_VERSION")
	wanted = Version.parse(coerced)

	ordered = _sorted_versions(versions)

	match: Optional[Version] = None
	if granularity == "MAJOR":
		floor = Version(wanted.major, 0, 0)
		match = next((v for v in ordered if v >= floor), None)
	elif granularity == "MINOR":
		floor = Version(wanted.major, wanted.minor, 0)
		match = next((v for v in ordered if v >= floor), None)
	else:
		lower = [v for v in ordered if v < wanted]
		match = lower[-1] if lower else None

	if match is None:
		return None
	return f"v{match}" if target.startswith("v") else str(match)
