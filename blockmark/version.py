"""Build identification: git checkout, embedded build info, or PEP 610."""

from __future__ import annotations

import importlib.metadata
import json
import os
import subprocess
from pathlib import Path
from typing import NamedTuple, Optional

DIST_NAME = "blockmark"


class BuildInfo(NamedTuple):
    commit: Optional[str]
    date: Optional[str]
    dirty: bool


def _run_git(args: list[str], cwd: Optional[str] = None) -> Optional[str]:
    try:
        out = subprocess.check_output(
            ["git", *args], cwd=cwd or os.getcwd(), stderr=subprocess.DEVNULL
        )
        return out.decode().strip() or None
    except (subprocess.CalledProcessError, OSError):
        return None


def _from_git_repo() -> Optional[BuildInfo]:
    here = Path(__file__).resolve().parent
    root = _run_git(["rev-parse", "--show-toplevel"], cwd=str(here))
    if not root or not Path(root).exists():
        return None

    commit = _run_git(["rev-parse", "HEAD"], cwd=root)
    date = _run_git(["show", "-s", "--format=%cI", "HEAD"], cwd=root)
    status = _run_git(["status", "--porcelain"], cwd=root)
    return BuildInfo(commit=commit, date=date, dirty=bool(status))


def _from_embedded_file() -> Optional[BuildInfo]:
    # Generated at build time by the hatch build hook
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return None
    commit = getattr(_build_info, "COMMIT", None)
    date = getattr(_build_info, "DATE", None)
    if commit or date:
        return BuildInfo(commit=commit, date=date, dirty=False)
    return None


def _from_direct_url() -> Optional[BuildInfo]:
    # PEP 610 direct_url.json carries the VCS commit when installed from VCS
    try:
        dist = importlib.metadata.distribution(DIST_NAME)
    except importlib.metadata.PackageNotFoundError:
        return None
    for file in dist.files or []:
        if file.name == "direct_url.json" and file.parent and file.parent.name.endswith(".dist-info"):
            try:
                with Path(dist.locate_file(file)).open("r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError):
                return None
            commit = (data.get("vcs_info") or {}).get("commit_id")
            if commit:
                return BuildInfo(commit=commit, date=None, dirty=False)
    return None


def get_build_info() -> BuildInfo:
    # Priority: live git repo -> embedded file -> direct_url.json -> unknowns
    for getter in (_from_git_repo, _from_embedded_file, _from_direct_url):
        info = getter()
        if info and (info.commit or info.date):
            return info
    return BuildInfo(commit=None, date=None, dirty=False)


def get_version_string() -> str:
    info = get_build_info()
    dirty_suffix = "-dirty" if info.dirty else ""
    # Short (7-character) hashes when available
    commit = info.commit[:7] if info.commit else "unknown"
    date = info.date or "unknown"
    return f"{commit}{dirty_suffix} {date}"
