"""Tests for importing isoschema from a clean interpreter."""

import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent


@pytest.mark.parametrize(
    "module",
    [
        "isoschema",
        "isoschema.paths",
        "isoschema.binding",
        "isoschema.validation",
        "isoschema.validation.types",
        "isoschema.validation.engine",
    ],
)
def test_fresh_import(module):
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=ROOT,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr
