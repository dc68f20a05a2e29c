"""Custom build hook for Hatchling to generate build info."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

PACKAGE = "blockmark"


class CustomBuildHook(BuildHookInterface):
    """Writes blockmark/_build_info.py with the current git commit."""

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        self._generate_build_info()
        build_data.setdefault("artifacts", []).append(f"{PACKAGE}/_build_info.py")

    def _generate_build_info(self) -> None:
        project_root = Path(self.root)
        target_path = project_root / PACKAGE / "_build_info.py"

        commit = self._run_git(["rev-parse", "HEAD"], cwd=project_root)
        date = self._run_git(["show", "-s", "--format=%cI", "HEAD"], cwd=project_root)

        target_path.write_text(
            "# Auto-generated at build time.\n"
            f"COMMIT = {commit!r}\n"
            f"DATE = {date!r}\n",
            encoding="utf-8",
        )

    def _run_git(self, args: list[str], cwd: Path) -> str | None:
        try:
            out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
            return out.decode().strip() or None
        except (subprocess.CalledProcessError, OSError):
            # Build should not fail just because git is unavailable
            return None
