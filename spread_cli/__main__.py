"""``python -m spread_cli`` and the ``spread`` console script."""

from __future__ import annotations

import sys

from .main import main as cli_main


def main() -> int:
    return cli_main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
