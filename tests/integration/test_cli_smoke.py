"""
fishbone: CLI subprocess smoke contracts

Purpose
- Run ``python -m fishbone`` as a real process and check exit codes and side effects.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest
import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"

pytestmark = pytest.mark.integration


def _run_cli(cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("FISHBONE_")}
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath if not existing_pythonpath else f"{src_pythonpath}:{existing_pythonpath}"
    )
    env["NO_COLOR"] = "1"
    return subprocess.run(
        [sys.executable, "-m", "fishbone", *args],
        cwd=cwd,
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )


def test_migrate_then_show_as_separate_processes(
    tmp_path: Path, v01_payload: dict[str, Any]
) -> None:
    path = tmp_path / "legacy.fba"
    path.write_text(yaml.safe_dump(v01_payload, sort_keys=False), encoding="utf-8")

    migrated = _run_cli(tmp_path, "migrate", "legacy.fba")
    assert migrated.returncode == 0, migrated.stderr
    assert yaml.safe_load(path.read_text(encoding="utf-8"))["version"] == "0.3"

    shown = _run_cli(tmp_path, "show", "legacy.fba", "--json")
    assert shown.returncode == 0, shown.stderr
    assert json.loads(shown.stdout)["document"]["title"] == "legacy analysis"


def test_usage_errors_and_bad_documents_map_to_exit_codes(tmp_path: Path) -> None:
    (tmp_path / "broken.fba").write_text("- just\n- a list\n", encoding="utf-8")

    assert _run_cli(tmp_path, "frobnicate").returncode == 2
    broken = _run_cli(tmp_path, "show", "broken.fba")
    assert broken.returncode == 3
    assert "not an object" in broken.stderr
