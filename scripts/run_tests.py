#!/usr/bin/env python3
# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Run test suite locally with a clean facilitator environment.
"""
import os
import sys
import subprocess
from pathlib import Path

FACILITATOR_ENV_VARS = (
    "EVM_PRIVATE_KEY",
    "SVM_PRIVATE_KEY",
    "SVM_RPC_URL",
    "EVM_RPC_URL",
    "CUSTOM_EVM_RPC_URL",
    "CUSTOM_EVM_CHAIN_ID",
    "CUSTOM_USDC_ADDRESS",
    "CUSTOM_TOKEN_NAME",
    "CUSTOM_TOKEN_VERSION",
)


def setup_test_env():
    """Strip facilitator credentials so tests only see what they configure."""
    env = os.environ.copy()
    for name in FACILITATOR_ENV_VARS:
        env.pop(name, None)
    env["LOG_LEVEL"] = "DEBUG"
    return env


def run_command(cmd: list[str], env: dict) -> int:
    """Run a command with the given environment."""
    print(f"\n🚀 Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, env=env)
    return result.returncode


def main():
    """Run the test suite."""
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    env = setup_test_env()

    if subprocess.run(["python", "-m", "pytest", "--version"],
                      capture_output=True).returncode != 0:
        print("❌ pytest not installed. Installing test dependencies...")
        run_command(["python", "-m", "pip", "install", "-e", ".[test]"], env)

    if len(sys.argv) > 1:
        cmd = ["python", "-m", "pytest"] + sys.argv[1:]
    else:
        cmd = ["python", "-m", "pytest", "tests/", "-v", "--cov=gx402_facilitator", "--cov-report=term"]

    exit_code = run_command(cmd, env)

    if exit_code == 0:
        print("\n✅ All tests passed!")
    else:
        print(f"\n❌ Tests failed with exit code {exit_code}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
