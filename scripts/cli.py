"""Command dispatcher for the farm assistant scripts.

Usage::

    python -m scripts weather-lookup "Konya, Meram"
    python -m scripts soil-analysis toprak.jpg --crop corn --size 12
    python -m scripts serve --port 8080

Run ``python -m scripts --list`` to see every command with its summary.
"""

from __future__ import annotations

import argparse
import importlib
import pkgutil
import runpy
import sys
from pathlib import Path

PACKAGE = "scripts"
PACKAGE_DIR = Path(__file__).resolve().parent
_SKIP = {"cli", "__main__"}


def discover_commands() -> dict[str, str]:
    """Map dashed command names to the modules implementing them."""
    return {
        mod.name.replace("_", "-"): f"{PACKAGE}.{mod.name}"
        for mod in pkgutil.iter_modules([str(PACKAGE_DIR)])
        if not mod.ispkg and mod.name not in _SKIP and not mod.name.startswith("_")
    }


def describe(module_name: str) -> str:
    doc = (importlib.import_module(module_name).__doc__ or "").strip()
    return doc.splitlines()[0] if doc else ""


def main(argv: list[str] | None = None) -> int:
    commands = discover_commands()
    parser = argparse.ArgumentParser(prog="python -m scripts", description="Farm assistant command line tools")
    parser.add_argument("--list", action="store_true", help="list the available commands and exit")
    parser.add_argument("command", nargs="?", choices=sorted(commands))
    parser.add_argument("args", nargs=argparse.REMAINDER)
    ns = parser.parse_args(argv)

    if ns.list or ns.command is None:
        for name in sorted(commands):
            print(f"{name:<16} {describe(commands[name])}")
        return 0

    module_name = commands[ns.command]
    sys.argv = [module_name, *ns.args]
    runpy.run_module(module_name, run_name="__main__", alter_sys=True)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
