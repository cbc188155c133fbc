from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path


def _run(cmd: list[str], env: dict[str, str]) -> None:
    result = subprocess.run(
        cmd,
        check=False,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        env=env,
    )
    if result.returncode != 0:
        print(result.stdout)
        raise SystemExit(result.returncode)


def main() -> None:
    root = Path(__file__).resolve().parents[1]
    env = os.environ.copy()
    env["PYTHONPATH"] = str(root / "src")

    _run([sys.executable, "-m", "tax_ui_cli.cli", "--help"], env)
    _run([sys.executable, "-m", "tax_ui_cli.cli", "tables"], env)
    _run(
        [sys.executable, "-m", "tax_ui_cli.cli", "run", "--input", "examples/example_case.yaml", "--quiet"],
        env,
    )
    _run(
        [
            sys.executable,
            "-m",
            "tax_ui_cli.cli",
            "export",
            "--input",
            "examples/corporate_case.json",
            "--output",
            "output/smoke/corporate_estimate.xlsx",
            "--csv",
            "--charts",
        ],
        env,
    )


if __name__ == "__main__":
    main()
