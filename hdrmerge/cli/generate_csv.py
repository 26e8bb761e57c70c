"""CLI for generating bracket CSV configuration files."""

import argparse
import logging
from pathlib import Path

from hdrmerge.generators import BracketCSVGenerator


def main():
    parser = argparse.ArgumentParser(description="Generate CSV listing the exposure brackets to merge")
    parser.add_argument("config", type=Path, help="Path to YAML configuration file")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output directory for the CSV file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    gen = BracketCSVGenerator(args.config)
    output_csv, n = gen.generate_default(args.output)
    print(f"Generated {n} brackets -> {output_csv}")


if __name__ == "__main__":
    main()
