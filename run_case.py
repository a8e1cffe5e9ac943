"""
Run an FTLE case defined by a YAML config file.
"""

import sys
import logging
import argparse
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from core.io import CaseLoader, Case


def main():
    parser = argparse.ArgumentParser(description="Run particle advection and FTLE for a case")
    parser.add_argument("case_file", type=str, help="Path to YAML case file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every integration step")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s'
    )

    case_path = Path(args.case_file).resolve()
    if not case_path.exists():
        print(f"Error: Case file not found: {case_path}")
        sys.exit(1)

    print(f"Loading case: {case_path.name}")
    try:
        flow_field, config = CaseLoader.load(case_path)
    except Exception as e:
        print(f"Error loading case: {e}")
        sys.exit(1)

    case = Case(flow_field=flow_field, config=config, case_dir=case_path.parent)
    print(f"Case '{case.name}' loaded successfully: {case}")

    output_dir = case.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    for direction in case.directions:
        print(f"Running {direction.value} advection...")
        ftle = case.run(direction)
        field = ftle.to_scalar_field()
        print(f"  {field}")

        stem = f"{case.name}_ftle_{direction.value}"
        if config.output.write_text:
            text_file = output_dir / f"{stem}.txt"
            ftle.write_to_file(text_file)
            print(f"  FTLE field written to {text_file}")

        if config.output.plot:
            import matplotlib
            matplotlib.use("Agg")
            from visualization import ContourPlotter

            ContourPlotter().plot_ftle(field,
                                       levels=config.output.levels,
                                       cmap=config.output.cmap,
                                       save_path=str(output_dir / f"{stem}.png"))

    print("Done.")


if __name__ == "__main__":
    main()
