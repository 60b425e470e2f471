#!/usr/bin/env python3
"""Changelog agent: build a Markdown changelog from a repository's history.

Fetches commits, tags and releases from GitHub, resolves each tag's commit
range with git, classifies the commits and renders the changelog. Runs as a
CLI or as a GitHub Action step (inputs and outputs through the environment).
"""

import json
import logging
import os
import sys
import uuid
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from clients.github_client import GithubClient, GithubAuthError, GithubApiError
from configs.changelog_options import ChangelogOptions
from configs.config import Config
from utils.changelog_renderer import ChangelogRenderError, build_changelog
from utils.classifier import classify, explain
from utils.commit_models import Release
from utils.commit_parser import CommitParser
from utils.git_client import GitClient, GitCommandError
from utils.release_aggregator import group_releases
from utils.repo_data import filter_repo_data
from utils.versions import VersionError, find_previous_version

# Set up logging
logger = logging.getLogger(__name__)


class ChangelogAgent:
	"""Agent wiring the GitHub and git collaborators to the changelog pipeline."""

	def __init__(self, github: Optional[GithubClient] = None, git: Optional[GitClient] = None,
				 parser: Optional[CommitParser] = None):
		self.github = github
		self.git = git or GitClient()
		self.parser = parser or CommitParser()
		logger.info("Changelog agent initialized")

	def fetch_releases(self, owner: str, repo: str, options: ChangelogOptions) -> Dict[str, Release]:
		"""Fetch and classify releases, newest first."""
		if self.github is None:
			self.github = GithubClient()
		data = filter_repo_data(self.github, self.git, self.parser, owner, repo, options)
		logger.info(f"✓ Built {len(data.releases)} releases for {owner}/{repo} (head: {data.head_tag})")
		return data.releases

	def build(self, owner: str, repo: str, options: ChangelogOptions, *,
			  desc_header: bool = False, group_by: Optional[str] = None) -> str:
		releases = self.fetch_releases(owner, repo, options)
		if desc_header:
			releases = {tag: r.model_copy(update={"header": r.description}) for tag, r in releases.items()}
		if group_by:
			releases = group_releases(releases, group_by)
		return "\n".join(build_changelog(releases, options))

	def close(self) -> None:
		if self.github:
			self.github.close()
		logger.info("Changelog agent closed")


def write_changelog(changelog: str, file: str, workspace: str) -> str:
	path = os.path.join(workspace, file.strip())
	os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
	with open(path, "w", encoding="utf-8") as f:
		f.write(changelog)
	logger.info(f"✓ Changelog written to {path}")
	return path


def set_output(name: str, value: str, output_file: str) -> None:
	"""Append a multi-line output to the GitHub Actions output file."""
	delimiter = f"EOF_{uuid.uuid4().hex}"
	with open(output_file, "a", encoding="utf-8") as f:
		f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def _cmd_build(args) -> int:
	repository = Config.repository() or {}
	owner = args.owner or repository.get("owner")
	repo = args.repo or repository.get("repo")
	if not owner or not repo:
		print("Error: --owner/--repo required (or set GITHUB_REPOSITORY=owner/repo)", file=sys.stderr)
		return 1

	options = ChangelogOptions.from_json(args.options if args.options is not None else Config.BUILD_OPTIONS)
	if args.only_first:
		options = options.model_copy(update={"only_first": True})

	agent = ChangelogAgent()
	try:
		changelog = agent.build(
			owner, repo, options,
			desc_header=args.desc_header or Config.DESC_HEADER,
			group_by=args.group_by or Config.GROUP_BY or None,
		)
	finally:
		agent.close()

	out_cfg = Config.get_output_config()
	file = args.file if args.file is not None else out_cfg["file"]
	if file:
		write_changelog(changelog, file, out_cfg["workspace"])
	if out_cfg["github_output"]:
		set_output(out_cfg["output_name"], changelog, out_cfg["github_output"])

	if args.json:
		print(json.dumps({"changelog": changelog}, indent=2))
	elif not file:
		print(changelog)
	return 0


def _cmd_previous_version(args) -> int:
	result = find_previous_version(args.versions, args.target, args.granularity)
	print(result or "")
	return 0


def _cmd_classify(args) -> int:
	for message in args.messages:
		result = classify(message)
		key = f"{result.type}_{result.subtype}" if result.subtype else result.type
		matched = ", ".join(explain(message)) or "none"
		print(f"{key}\t{message}\t(rules: {matched})")
	return 0


def main(argv: Optional[List[str]] = None) -> int:
	"""CLI entry point for the changelog agent."""
	import argparse

	load_dotenv()

	parser = argparse.ArgumentParser(
		description="Changelog Agent - Build a changelog from conventional (and not so conventional) commits",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  python -m agents.changelog_agent build --owner octo --repo app --file CHANGELOG.md
  python -m agents.changelog_agent build --options '{"onlyFirst": true, "notice": {"inFooter": false}}'
  python -m agents.changelog_agent previous-version v1.2.2 1.0.0 1.1.2 2.0.1 --granularity MAJOR
  python -m agents.changelog_agent classify "bump lodash" "Add dark mode"
		"""
	)
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
	sub = parser.add_subparsers(dest="command")

	build = sub.add_parser("build", help="Build the changelog from GitHub and git history")
	build.add_argument("--owner", help="Repository owner (defaults to GITHUB_REPOSITORY)")
	build.add_argument("--repo", help="Repository name (defaults to GITHUB_REPOSITORY)")
	build.add_argument("--file", default=None, help="File to save the changelog to, relative to GITHUB_WORKSPACE")
	build.add_argument("--options", default=None, help="JSON build options (defaults to BUILD_OPTIONS)")
	build.add_argument("--desc-header", action="store_true", help="Use each tag's annotation as the release header")
	build.add_argument("--group-by", choices=["minor", "major"], help="Merge releases per minor or major line")
	build.add_argument("--only-first", action="store_true", help="Render only the newest release")
	build.add_argument("--json", action="store_true", help="Print the changelog wrapped in JSON")

	prev = sub.add_parser("previous-version", help="Find the version to compare a target against")
	prev.add_argument("target")
	prev.add_argument("versions", nargs="*")
	prev.add_argument("--granularity", default="PATCH", help="MAJOR, MINOR or PATCH")

	cls = sub.add_parser("classify", help="Show how commit messages are classified")
	cls.add_argument("messages", nargs="+")

	args = parser.parse_args(argv)

	# Set up logging
	log_level = logging.DEBUG if args.verbose else logging.INFO
	logging.basicConfig(
		level=log_level,
		format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
	)

	# Suppress verbose logs from collaborators unless in debug mode
	if not args.verbose:
		logging.getLogger("clients.github_client").setLevel(logging.WARNING)
		logging.getLogger("utils.git_client").setLevel(logging.WARNING)

	handlers = {
		"build": _cmd_build,
		"previous-version": _cmd_previous_version,
		"classify": _cmd_classify,
	}
	command = args.command or "build"
	if args.command is None:
		args = build.parse_args([])

	try:
		return handlers[command](args)
	except GithubAuthError as e:
		print(f"Error: GitHub authentication failed: {e}", file=sys.stderr)
	except GithubApiError as e:
		print(f"Error: GitHub API failure ({e.code}): {e}", file=sys.stderr)
	except GitCommandError as e:
		print(f"Error: {e}", file=sys.stderr)
	except VersionError as e:
		print(f"Error: {e}", file=sys.stderr)
	except (ValidationError, json.JSONDecodeError) as e:
		print(f"Error: Invalid build options: {e}", file=sys.stderr)
	except ChangelogRenderError as e:
		print(f"Error: {e}", file=sys.stderr)
	except OSError as e:
		print(f"Error: Failed to write output: {e}", file=sys.stderr)
	return 1


if __name__ == "__main__":
	sys.exit(main())
