#!/usr/bin/env python3
"""Thin wrapper over the git binary for commit ranges and tag annotations."""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional

from configs.config import Config
from utils.versions import is_valid_version

logger = logging.getLogger(__name__)


class GitCommandError(Exception):
	def __init__(self, message: str, code: str = "GIT") -> None:
		super().__init__(message)
		self.code = code


class GitClient:
	def __init__(self, git_bin: Optional[str] = None, cwd: Optional[str] = None) -> None:
		self.git_bin = git_bin or Config.GIT_BIN
		self.cwd = cwd

	def _run(self, *args: str) -> str:
		cmd = [self.git_bin, *args]
		logger.debug(f"Running: {' '.join(cmd)}")
		try:
			proc = subprocess.run(cmd, cwd=self.cwd, capture_output=True, text=True, encoding="utf-8", check=True)
		except FileNotFoundError as e:
			raise GitCommandError(f"git executable not found: {self.git_bin}") from e
		except subprocess.CalledProcessError as e:
			raise GitCommandError(f"git {args[0]} failed: {(e.stderr or '').strip()}") from e
		return proc.stdout

	def get_commit_shas(self, base: Optional[str] = None, head: str = "HEAD") -> List[str]:
		"""SHAs reachable from ``head`` but not from ``base`` (all of ``head`` without a base)."""
		rev_range = f"{base}..{head}" if base else head
		output = self._run("rev-list", rev_range)
		return [line for line in output.strip().splitlines() if line]

	def get_tag_message(self, tag: str) -> Optional[str]:
		"""Subject of the tag annotation; None if empty or just the version again."""
		message = self._run("for-each-ref", f"refs/tags/{tag}", "--format=%(contents:subject)").strip()
		if not message or is_valid_version(message.split(" ")[-1]):
			return None
		return message
