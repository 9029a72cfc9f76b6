#!/usr/bin/env python3
"""Generate Python transaction script builders from compiled script ABIs."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))

from libra_fixtures.abi import read_abis  # noqa: E402
from libra_fixtures.builder_gen import generate  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate script builders from ABI files")
    parser.add_argument("abi_dir", help="Directory holding *.abi files")
    parser.add_argument(
        "--out",
        default=None,
        help="Output .py file (default: stdout)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    abis = read_abis(Path(args.abi_dir))
    if not abis:
        raise SystemExit(f"no .abi files found in {args.abi_dir}")
    source = generate(abis)

    if args.out is None:
        sys.stdout.write(source)
        return
    Path(args.out).write_text(source)
    logger.info("wrote %d builders to %s", len(abis), args.out)


if __name__ == "__main__":
    main()
