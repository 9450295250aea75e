"""
Run analytics reports from CLI and print the results as JSON.
"""

from __future__ import annotations

import argparse
import json
import sys

from analytics_reporter.logging_utils import configure_logging
from analytics_reporter.services.report_runner import get_report_runner


def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch and aggregate analytics reports.")
    parser.add_argument(
        "reports",
        nargs="*",
        help="Report names from the catalog. Runs every report when omitted.",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indent for output.")
    args = parser.parse_args()

    configure_logging()
    runner = get_report_runner()
    names = args.reports or list(runner.report_names())

    payload = {}
    for name in names:
        result = runner.query(name)
        if result is None:
            print(f"Unknown report: {name}", file=sys.stderr)
            continue
        payload[name] = result.to_payload()

    print(json.dumps(payload, indent=args.indent))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
