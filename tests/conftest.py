import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from tests.infrastructure.file_utils import write

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def tmpproj(tmp_path: Path):
    """Minimal project: a template, a partial, a data file and stache.yaml."""
    root = tmp_path
    write(
        root / "page.mustache",
        "<h1>{{title}}</h1>\n{{#items}}{{> item}}{{/items}}{{^items}}empty{{/items}}\n",
    )
    write(root / "partials" / "item.mustache", "<li>{{name}}</li>")
    write(
        root / "data.yaml",
        textwrap.dedent("""
        title: Fish & Chips
        items:
          - name: cod
          - name: haddock
        """).strip() + "\n",
    )
    write(root / "stache.yaml", "partials_dir: partials\n")
    return root


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH", "")]))
    return subprocess.run(
        [sys.executable, "-m", "stache", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8"
    )
