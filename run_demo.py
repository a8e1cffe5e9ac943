#!/usr/bin/env python
"""
Launcher for the FTLE demos.

  python run_demo.py continuous [demo options]
  python run_demo.py discrete [demo options]

Demo options are passed through, e.g.:
  python run_demo.py continuous --nx 100 --ny 50 --cores 4
"""

import sys
from pathlib import Path

DEMO_DIR = Path(__file__).parent / "demos"

DEMOS = {
    "continuous": ("demo_double_gyre.py", "analytic double gyre, forward and backward FTLE"),
    "discrete": ("demo_discrete_double_gyre.py", "double gyre snapshots written to files and read back"),
}


def main():
    if len(sys.argv) < 2 or sys.argv[1].lower() not in DEMOS:
        if len(sys.argv) >= 2:
            print(f"Unknown demo: {sys.argv[1]}")
        print("Available demos:")
        for name, (file_name, summary) in DEMOS.items():
            print(f"  python run_demo.py {name:<12} {summary} ({file_name})")
        sys.exit(1)

    demo_file = DEMO_DIR / DEMOS[sys.argv[1].lower()][0]
    if not demo_file.exists():
        print(f"Demo file not found: {demo_file}")
        sys.exit(1)

    # Execute the demo as a script with the remaining arguments
    sys.argv = [str(demo_file)] + sys.argv[2:]
    with open(demo_file) as f:
        code = f.read()

    exec(code, {"__name__": "__main__", "__file__": str(demo_file)})


if __name__ == "__main__":
    main()
