#This file is for development purposes only

import logging
import sys

from issue_fetch_interface.errors import ConfigBootstrapError
from jira_fetch_impl import get_orchestrator

ISSUE_KEY = "KAN-1"  # set the issue key here


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    try:
        orchestrator = get_orchestrator()
    except ConfigBootstrapError as e:
        print(f"Error [{e.kind}]: {e}", file=sys.stderr)
        return 2

    print(f"Fetching {ISSUE_KEY} from {orchestrator.settings.root_url}...")
    outcome = orchestrator.run(ISSUE_KEY)

    for path in outcome.saved:
        print(f"- saved {path}")
    if outcome.error is not None:
        print(f"Error [{outcome.error.kind}]: {outcome.error}", file=sys.stderr)
        if outcome.partial:
            print("Summary was saved, XML export failed.", file=sys.stderr)
        else:
            print("Please check the connection configuration file settings.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
