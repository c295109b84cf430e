"""
Hash map report export.
"""

import csv
import json
import os
from typing import Iterable, List

from .exceptions import OutputPathError
from .models import MatchResult, RunSummary
from .shared_config import REPORT_COLUMNS, remove_partial, report_path


class HashMapReporter:
    """Writes MatchResults to the fixed-name report in the output directory."""

    def __init__(self, output_dir: str, fmt: str = 'csv'):
        self.output_dir = output_dir
        self.fmt = fmt

    @property
    def path(self) -> str:
        return report_path(self.output_dir, self.fmt)

    def write(self, results: Iterable[MatchResult]) -> str:
        """
        Write the report and return its path.

        Raises:
            OutputPathError: the report could not be written
        """
        results = list(results)
        try:
            if self.fmt == 'json':
                self.export_json(results, self.path)
            else:
                self.export_csv(results, self.path)
        except OSError as e:
            raise OutputPathError(f"Cannot write report {self.path}: {e}") from e
        return self.path

    @staticmethod
    def export_csv(results: List[MatchResult], filepath: str) -> None:
        """Export as CSV with a header row, replacing any previous report."""
        part_path = filepath + '.part'
        try:
            with open(part_path, 'w', encoding='utf-8', newline='') as f:
                writer = csv.writer(f)
                writer.writerow(REPORT_COLUMNS)
                for result in results:
                    writer.writerow(result.to_row())
            os.replace(part_path, filepath)
        except OSError:
            remove_partial(part_path)
            raise

    @staticmethod
    def export_json(results: List[MatchResult], filepath: str) -> None:
        """Export as a JSON array of objects keyed by the report columns."""
        part_path = filepath + '.part'
        try:
            with open(part_path, 'w', encoding='utf-8') as f:
                json.dump([r.to_dict() for r in results], f, indent=2, ensure_ascii=False)
            os.replace(part_path, filepath)
        except OSError:
            remove_partial(part_path)
            raise


def format_summary(summary: RunSummary) -> List[str]:
    """Human-readable summary lines for the console."""
    lines = []
    for stats in summary.platforms:
        lines.append(
            f"   {stats.system}: {stats.matched}/{stats.files} matched "
            f"({stats.percentage:.1f}%), {stats.unmatched} unmatched"
            + (f", {stats.hash_failures} hash failures" if stats.hash_failures else "")
        )
    total = summary.total_files
    percent = (summary.total_matched / total * 100) if total > 0 else 0
    lines.append(
        f"   Total: {summary.total_matched}/{total} matched ({percent:.1f}%), "
        f"{summary.total_unmatched} unmatched, {summary.total_hash_failures} hash failures"
    )
    if summary.skipped_folders:
        lines.append(f"   Unrecognized folders skipped: {', '.join(summary.skipped_folders)}")
    return lines
