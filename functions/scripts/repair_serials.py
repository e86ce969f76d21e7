"""
Rewrite the "No" column of every table in a spreadsheet as 1..N.

An insert or delete interrupted between its row change and the renumbering
that follows leaves stale ordinals behind; this puts them back in order.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from notebank.config import get_settings
from notebank.dependencies import get_accessor
from notebank.errors import StoreError
from notebank.mappers.tags import TAGS_SHEET
from notebank.serials import renumber_tables

logger = logging.getLogger(__name__)

# (settings attribute, tables to repair by default; None means every sheet)
SPREADSHEETS = {
    "question-bank": ("question_bank_spreadsheet_id", None),
    "practical-tasks": ("practical_tasks_spreadsheet_id", None),
    "work-summary": ("work_summary_spreadsheet_id", None),
    # The tags table usually shares a spreadsheet with the kanban board,
    # whose column A holds task ids.
    "tags": ("resolved_tags_spreadsheet_id", [TAGS_SHEET]),
}


def main() -> int:
    parser = argparse.ArgumentParser(description="Repair record ordinals")
    parser.add_argument(
        "spreadsheet",
        choices=sorted(SPREADSHEETS),
        help="Which configured spreadsheet to repair",
    )
    parser.add_argument(
        "-t",
        "--table",
        action="append",
        default=None,
        help="Only repair this table (repeatable)",
    )
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    setting, default_tables = SPREADSHEETS[args.spreadsheet]
    spreadsheet_id = getattr(settings, setting)
    accessor = get_accessor(spreadsheet_id, args.spreadsheet)
    try:
        repaired = renumber_tables(accessor, args.table or default_tables)
    except StoreError as exc:
        logger.error("Repair of %s failed: %s", args.spreadsheet, exc.message)
        return 1
    logger.info("Repaired %d tables", len(repaired))
    return 0


if __name__ == "__main__":
    sys.exit(main())
