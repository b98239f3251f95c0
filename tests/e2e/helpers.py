# tests/e2e/helpers.py

import subprocess, sys, pytest

def run_certgen(certgen_bin, *args):
    cmd = [certgen_bin, "--no-progress", *args]
    if certgen_bin.endswith(".py"):
        cmd = [sys.executable, *cmd]
    return subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)

def assert_ok(res, step_desc):
    if res.returncode != 0:
        pytest.fail(f"{step_desc} FAILED (code {res.returncode})\n--- output ---\n{res.stdout}\n--------------")

def assert_code(res, code, step_desc):
    if res.returncode != code:
        pytest.fail(f"{step_desc}: expected exit {code}, got {res.returncode}\n--- output ---\n{res.stdout}\n--------------")
