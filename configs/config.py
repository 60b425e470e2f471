import os
from typing import Dict, Any, Optional

FALSE_INPUTS = ("", "undefined", "null", "none", "false", "0", "no", "off")


def get_boolean_input(value: Optional[Any]) -> bool:
	"""Interpret an action/env input as a boolean; unset and falsy words are False."""
	return str(value).strip().lower() not in FALSE_INPUTS


class Config:
	"""Configuration for the changelog builder."""

	# GitHub REST Configuration
	GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip('/')
	GITHUB_TOKEN = os.getenv("GITHUB_TOKEN") or os.getenv("GITHUB_PAT")
	GITHUB_REPOSITORY = os.getenv("GITHUB_REPOSITORY", "")
	HTTP_TIMEOUT_S = int(os.getenv("HTTP_TIMEOUT_S", "30"))
	GITHUB_PER_PAGE = int(os.getenv("GITHUB_PER_PAGE", "100"))

	# git
	GIT_BIN = os.getenv("GIT_BIN", "git")

	# Action inputs
	DEST_FILE = os.getenv("DEST_FILE", "")
	DESC_HEADER = get_boolean_input(os.getenv("DESC_HEADER"))
	BUILD_OPTIONS = os.getenv("BUILD_OPTIONS", "")
	GROUP_BY = os.getenv("GROUP_BY", "")

	# Action outputs
	GITHUB_WORKSPACE = os.getenv("GITHUB_WORKSPACE", ".")
	GITHUB_OUTPUT = os.getenv("GITHUB_OUTPUT", "")
	OUTPUT_NAME = os.getenv("OUTPUT_NAME", "changelog")

	@classmethod
	def get_github_config(cls) -> Dict[str, Any]:
		"""Get GitHub configuration for the REST client."""
		return {
			"api_url": cls.GITHUB_API_URL,
			"token": cls.GITHUB_TOKEN,
			"timeout_s": cls.HTTP_TIMEOUT_S,
			"per_page": cls.GITHUB_PER_PAGE,
		}

	@classmethod
	def get_output_config(cls) -> Dict[str, Any]:
		"""Where the rendered changelog goes.

		Returns:
			Mapping with workspace root, destination file, and the GitHub output file/name.
		"""
		return {
			"workspace": cls.GITHUB_WORKSPACE,
			"file": cls.DEST_FILE.strip(),
			"github_output": cls.GITHUB_OUTPUT,
			"output_name": cls.OUTPUT_NAME,
		}

	@classmethod
	def repository(cls) -> Optional[Dict[str, str]]:
		"""Split GITHUB_REPOSITORY (``owner/repo``) if it is set."""
		if "/" not in cls.GITHUB_REPOSITORY:
			return None
		owner, repo = cls.GITHUB_REPOSITORY.split("/", 1)
		return {"owner": owner, "repo": repo}
