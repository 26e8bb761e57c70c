"""CLI for merging exposure brackets listed in a CSV configuration."""

import argparse
import logging
from pathlib import Path

from hdrmerge import MergeConfig, RGBCurve
from hdrmerge.codecs import CurveCodec
from hdrmerge.generators import BracketMerger


def _load_curve(path, default_function):
    if path is None:
        return RGBCurve().set_function(default_function)
    return CurveCodec.read(path)


def main():
    parser = argparse.ArgumentParser(description="Merge exposure brackets into radiance images")
    parser.add_argument("csv", type=Path, help="Path to CSV configuration file")
    parser.add_argument("-i", "--input", type=Path, required=True, help="Input dataset root directory")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output root directory")
    parser.add_argument("-w", "--workers", type=int, default=4, help="Number of parallel workers")
    parser.add_argument("--device", type=str, default="cpu", choices=["cpu", "cuda"], help="Device to use")
    parser.add_argument("--no-skip", action="store_true", help="Don't skip existing outputs")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bar")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    # Merge options default to None: unset options fall back to the CSV columns
    parser.add_argument("--target-time", type=float, default=None, help="Target exposure time (overrides CSV)")
    parser.add_argument("--robust-calibration", action="store_const", const=True, default=None,
                        help="Disable soft clamping (overrides CSV)")
    parser.add_argument("--clamp-correction", type=float, default=None,
                        help="Clamped value correction strength (overrides CSV)")
    parser.add_argument("--weight-curve", type=Path, default=None, help="CSV weighting curve (default: gaussian)")
    parser.add_argument("--weight-function", type=str, default="gaussian",
                        choices=["linear", "gaussian", "triangle", "plateau", "log10"],
                        help="Weighting curve shape when no CSV is given")
    parser.add_argument("--response-curve", type=Path, default=None, help="CSV response curve (default: linear)")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    options = {
        "target_exposure_time": args.target_time,
        "robust_calibration": args.robust_calibration,
        "clamped_value_correction": args.clamp_correction,
    }
    options = {k: v for k, v in options.items() if v is not None}
    cfg = MergeConfig(device=args.device, **options)
    merger = BracketMerger(
        args.csv,
        args.input,
        args.output,
        cfg,
        weight=_load_curve(args.weight_curve, args.weight_function),
        response=_load_curve(args.response_curve, "linear"),
        pinned=options,
    )

    results = merger.generate(
        num_workers=args.workers,
        skip_existing=not args.no_skip,
        progress=not args.no_progress,
    )

    print(f"\nMerge complete:")
    print(f"  Total brackets: {results['total']}")
    print(f"  Processed: {results['processed']}")
    print(f"  Skipped: {results['skipped']}")
    print(f"  Errors: {len(results['errors'])}")

    if results['errors']:
        print("\nErrors:")
        for err in results['errors'][:10]:
            print(f"  {err['bracket_id']}: {err['error']}")
        if len(results['errors']) > 10:
            print(f"  ... and {len(results['errors']) - 10} more")


if __name__ == "__main__":
    main()
