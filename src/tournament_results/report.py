"""
Builds the tournament results report returned for an uploaded archive.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from tournament_results.archive import ArchiveError, read_archive
from tournament_results.gg_summary_parser import GGTournamentSummaryParser, TournamentRecord
from tournament_results.stats import CategoryBucket, SummaryStatistics, categorize, summarize

logger = logging.getLogger(__name__)


@dataclass
class TournamentReport:
    """Parsed tournaments plus the two views computed over them"""
    tournaments: list[TournamentRecord] = field(default_factory=list)
    summary: SummaryStatistics = field(default_factory=SummaryStatistics)
    categories: dict[str, CategoryBucket] = field(default_factory=dict)

    @property
    def total_tournaments(self) -> int:
        return len(self.tournaments)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "total_tournaments": self.total_tournaments,
            "tournaments": [t.to_dict() for t in self.tournaments],
            "summary": self.summary.to_dict(),
            "buy_in_categories": {key: bucket.to_dict() for key, bucket in self.categories.items()},
        }


def build_report(records: Iterable[TournamentRecord]) -> TournamentReport:
    records = list(records)
    return TournamentReport(
        tournaments=records,
        summary=summarize(records),
        categories=categorize(records),
    )


def analyze_texts(texts: Iterable[str]) -> TournamentReport:
    """Parse several exports and report over all of their tournaments, in order"""
    records = []
    for text in texts:
        records.extend(GGTournamentSummaryParser(text=text).parse())
    return build_report(records)


def error_payload(error: ArchiveError) -> dict:
    return {
        "success": False,
        "error": error.message,
        "status": error.status,
    }


def analyze_archive(data: Optional[bytes], filename: Optional[str]) -> dict:
    """
    Report for an uploaded .zip of tournament summaries.

    Returns the report as a dict, or an error payload when the archive
    itself can't be read. Blocks that fail to parse are left out silently.
    """
    try:
        members = read_archive(data, filename)
    except ArchiveError as e:
        return error_payload(e)

    report = analyze_texts(member.text for member in members)
    logger.info(
        f"Parsed {report.total_tournaments} tournaments from {len(members)} files in {filename}"
    )
    return report.to_dict()
