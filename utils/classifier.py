#!/usr/bin/env python3
"""Heuristic commit message classifier.

Messages that do not declare a conventional type are classified by an
ordered cascade of rules. Each rule pairs a predicate over the lower-cased
message with a result; the first rule that matches wins, so specific rules
sit above the broad catch-alls at the bottom of the table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, List, Optional, Pattern, Tuple

from utils.commit_models import MessageType
from utils.versions import is_valid_version


Predicate = Callable[[str], bool]

# Word characters for boundary checks, ASCII only.
_W = "A-Za-z0-9_"

VERBS = "|".join(["add", "correct", "create", "improve", "include", "update"])
SUFFIX = "|".join(["s", "ed", "ing"])
E_SUFFIX = "|".join(["e", "es", "ed", "ing"])
Y_SUFFIX = "|".join(["y", "ies", "ied", "ying"])


@lru_cache(maxsize=None)
def _compile(expr: str, anchored: bool) -> Pattern[str]:
	start = "^" if anchored else f"(?<![{_W}])"
	return re.compile(f"{start}(?:{expr})(?![{_W}])")


def starts_with(*exprs: str) -> Predicate:
	"""Message begins with one of ``exprs``, ending at a word boundary."""
	patterns = [_compile(e, True) for e in exprs]
	return lambda text: any(p.search(text) for p in patterns)


def contains(*exprs: str) -> Predicate:
	"""Message contains one of ``exprs`` as a whole word run."""
	patterns = [_compile(e, False) for e in exprs]
	return lambda text: any(p.search(text) for p in patterns)


def any_of(*predicates: Predicate) -> Predicate:
	return lambda text: any(p(text) for p in predicates)


@dataclass(frozen=True)
class Rule:
	name: str
	predicate: Predicate
	result: MessageType

	def matches(self, text: str) -> bool:
		return self.predicate(text)


def _t(type_: str, subtype: Optional[str] = None) -> MessageType:
	return MessageType(type=type_, subtype=subtype)


FEAT_ADD = starts_with(
	f"add({SUFFIX})?",
	f"allow({SUFFIX})?",
	f"creat({E_SUFFIX})?",
	f"enabl({E_SUFFIX})?",
	f"implement({SUFFIX})?",
	f"includ({E_SUFFIX})?",
	f"incorporat({E_SUFFIX})?",
	f"install({SUFFIX})?",
	f"introduc({E_SUFFIX})?",
	f"support({SUFFIX})?",
)

FEAT_CHANGE = starts_with(
	f"adjust({SUFFIX})?",
	f"append({SUFFIX})?",
	f"chang({E_SUFFIX})?",
	f"extend({SUFFIX})?",
	f"hid({E_SUFFIX})?",
	f"mak({E_SUFFIX})?",
	f"modif({Y_SUFFIX})?",
	f"tweak({SUFFIX})?",
)

FEAT_REMOVE = starts_with(
	f"delet({E_SUFFIX})?",
	f"deprecat({E_SUFFIX})?",
	f"disabl({E_SUFFIX})?",
	f"remov({E_SUFFIX})?",
	f"uninstall({SUFFIX})?",
)

RULES: Tuple[Rule, ...] = (
	Rule("merge", starts_with("merge"), _t("merge")),
	Rule("docs", contains(
		"documentation",
		f"({VERBS}).*docs?",
		"read ?me",
		"docblocks?",
		f"({VERBS}).*comments?",
		"license",
		"change.?log",
	), _t("docs")),
	Rule("ci", contains("jenkins", "travis", "teamcity"), _t("ci")),
	Rule("fix", any_of(
		contains("bug fix"),
		starts_with(f"revert({SUFFIX})?", "typo", "prevent"),
	), _t("fix")),
	Rule("chore", any_of(
		contains("version bumps?"),
		starts_with(
			f"bump({SUFFIX})?",
			f"ignor({E_SUFFIX})?",
			f"cleanup({SUFFIX})?",
			f"renam({E_SUFFIX})?",
			f"upgrad({E_SUFFIX})?",
			"init.*commit",
			"init",
		),
	), _t("chore")),
	Rule("perf", starts_with(f"cach({E_SUFFIX})?", "optimize"), _t("perf")),
	Rule("test", any_of(
		starts_with(f"test({SUFFIX})?"),
		contains(
			"test cases?",
			f"(fix|{VERBS}|run|remove).*tests?",
			"unit tests?",
			"tests? pass(ed)?",
			"php.?unit",
			"behat",
			"pest",
			"jest",
			"mocha",
			"jasmine",
			"karma",
			"vitest",
		),
	), _t("test")),
	Rule("style", any_of(
		contains("prettier", "eslint", "jshint", "jslint", "tslint", "beautifier", "stylelint", "linting"),
		starts_with("lint"),
	), _t("style")),
	Rule("build", any_of(
		is_valid_version,
		starts_with("semver", f"build({SUFFIX})?", "version"),
		contains(
			"dist.*(build|folder|dir|directory|files?)",
			"build.*(status|steps?)",
			"(update).*build",
			"distributions?",
			f"({VERBS}).*dist",
			"peers?",
			"peer.?dependency",
			"package.?(lock|json)",
			"composer.?(lock|json)",
			"lock.?file",
			"bower",
			"brotli",
			"browserify",
			"esbuild",
			"grunt",
			"gulp",
			"maven",
			"node( |.)?js",
			"node versions?",
			"npm",
			"pnpm",
			"parcel",
			"rollup",
			"snowpack",
			"tsup",
			"vite",
			"webpack",
			"yarn",
		),
	), _t("build")),
	Rule("refactor", starts_with(
		f"convert({SUFFIX})?",
		f"improv({E_SUFFIX})?",
		f"mov({E_SUFFIX})?",
		f"refactor({SUFFIX})?",
		f"replac({E_SUFFIX})?",
		f"simplif({Y_SUFFIX})?",
		f"switch({SUFFIX})?",
		"tidy",
	), _t("refactor")),
	Rule("fix-generic", any_of(
		starts_with("fix", "correct(s|ed|ing|ion|ions)?"),
		contains(f"fix({E_SUFFIX})", "console.?log"),
	), _t("fix")),
	Rule("chore-update", starts_with(f"updat({E_SUFFIX})?"), _t("chore")),
	Rule("feat-add", FEAT_ADD, _t("feat", "add")),
	Rule("feat-change", FEAT_CHANGE, _t("feat", "change")),
	Rule("feat-remove", FEAT_REMOVE, _t("feat", "remove")),
	Rule("build-word", contains("build"), _t("build")),
	Rule("chore-version", contains("versions?", "upgrade"), _t("chore")),
	Rule("test-word", contains("tests?"), _t("test")),
	Rule("fix-word", contains("fix"), _t("fix")),
	Rule("refactor-clean", contains("clean"), _t("refactor")),
)

# Subtype detection for messages that already declared ``feat``.
FEAT_RULES: Tuple[Rule, ...] = (
	Rule("feat-add", FEAT_ADD, _t("feat", "add")),
	Rule("feat-remove", FEAT_REMOVE, _t("feat", "remove")),
)

OTHER = _t("other")


def first_match(text: str, rules: Tuple[Rule, ...] = RULES) -> Optional[Rule]:
	"""Return the first rule whose predicate matches the lower-cased text."""
	for rule in rules:
		if rule.matches(text):
			return rule
	return None


def classify(
	message: Optional[str],
	default_type: Optional[MessageType] = None,
	force_type: Optional[str] = None,
) -> MessageType:
	"""Determine the type (and feat subtype) of a commit message.

	Args:
		message: Commit subject or header
		default_type: Result used when no rule matches
		force_type: Type already declared by the message; ``feat`` only picks a subtype

	Returns:
		MessageType; never raises
	"""
	text = (message or "").lower()

	if force_type == "feat":
		rule = first_match(text, FEAT_RULES)
		return rule.result if rule else _t("feat", "change")

	rule = first_match(text)
	if rule:
		return rule.result
	return default_type or OTHER


def explain(message: str) -> List[str]:
	"""Names of every rule the message matches, in cascade order."""
	text = (message or "").lower()
	return [rule.name for rule in RULES if rule.matches(text)]
