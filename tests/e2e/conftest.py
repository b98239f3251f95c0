# tests/e2e/conftest.py

import os
import stat
import sys
from pathlib import Path

import pytest

pytestmark = pytest.mark.e2e

@pytest.fixture(scope="session")
def certgen_bin(pytestconfig, tmp_path_factory):
    """
    Run repo code via `python -m certgen` (no PATH reliance).
    Allow override via CERTGEN_BIN.
    """
    override = os.environ.get("CERTGEN_BIN")
    if override:
        p = Path(override)
        if not p.exists():
            pytest.skip(f"CERTGEN_BIN={override} does not exist")
        return str(p.resolve())

    if os.name == "nt":
        pytest.skip("The certgen shim needs a POSIX shell.")

    root = Path(pytestconfig.rootpath)
    src_dir = root / "src"
    pkg_main = src_dir / "certgen" / "__main__.py"
    if not pkg_main.exists():
        pytest.skip(f"Could not find {pkg_main}. Expected package at src/certgen.")

    # shim that sets PYTHONPATH and runs -m certgen
    shim = tmp_path_factory.mktemp("certgen_shim") / "certgen"
    shim.write_text(
        f"#!/usr/bin/env bash\n"
        f"set -euo pipefail\n"
        f'export PYTHONPATH="{src_dir}:${{PYTHONPATH:-}}"\n'
        f'"{sys.executable}" -m certgen "$@"\n'
    )
    shim.chmod(shim.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(shim.resolve())

@pytest.fixture(scope="session")
def workdir(tmp_path_factory):
    """Shared output directory; ordered tests build on each other's artifacts."""
    return tmp_path_factory.mktemp("certgen_e2e")
