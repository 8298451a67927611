"""
GGPoker Tournament Summary Parser

Turns the text of a tournament summary export into TournamentRecord objects.
An export holds one or more summaries separated by a "----" line:

    Tournament #257942312, Mystery Battle Royale $10, Hold'em No Limit
    Buy-in: $5+$0.8+$4.2
    18 Players
    Total Prize Pool: $165.6
    Tournament started 2026/01/15 00:22:55
    2nd : Hero, $30
    You finished the tournament in 2nd place.
    You received a total of $30.

The header and buy-in lines are required; a block without them is skipped.
Everything else is optional and defaults to zero (or None).
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Union

from tournament_results.blocks import TournamentBlocks
from tournament_results.money import ZERO, parse_amount, round2

logger = logging.getLogger(__name__)

GAME_TYPES = ("Hold'em No Limit",)

AMOUNT = r"\$(\d[\d,]*(?:\.\d+)?)"


@dataclass(frozen=True)
class TournamentRecord:
    """Hero's result in a single tournament"""
    tournament_id: str
    tournament_name: str
    game_type: str
    entry_fee: Decimal
    re_entry_count: int
    total_entry_cost: Decimal
    finish_position: int
    field_size: int
    finish_percentile: float
    payout: Decimal
    prize_pool: Optional[Decimal] = None
    started_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        tournament_id: str,
        tournament_name: str,
        entry_fee: Decimal,
        game_type: str = GAME_TYPES[0],
        re_entry_count: int = 0,
        finish_position: int = 0,
        field_size: int = 0,
        payout: Decimal = ZERO,
        prize_pool: Optional[Decimal] = None,
        started_at: Optional[datetime] = None,
    ) -> "TournamentRecord":
        """Build a record, computing total entry cost and finish percentile"""
        entry_fee = round2(entry_fee)
        total_entry_cost = round2(entry_fee * (1 + re_entry_count))
        if field_size > 0:
            finish_percentile = finish_position / field_size * 100
        else:
            finish_percentile = 0.0

        return cls(
            tournament_id=tournament_id,
            tournament_name=tournament_name,
            game_type=game_type,
            entry_fee=entry_fee,
            re_entry_count=re_entry_count,
            total_entry_cost=total_entry_cost,
            finish_position=finish_position,
            field_size=field_size,
            finish_percentile=finish_percentile,
            payout=round2(payout),
            prize_pool=round2(prize_pool) if prize_pool is not None else None,
            started_at=started_at,
        )

    @property
    def net_profit(self) -> Decimal:
        return self.payout - self.total_entry_cost

    @property
    def roi(self) -> Decimal:
        """Return on investment as percentage"""
        if self.total_entry_cost == 0:
            return Decimal(0)
        return (self.net_profit / self.total_entry_cost) * 100

    @property
    def is_itm(self) -> bool:
        """In the money?"""
        return self.payout > 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization / Spark DataFrame"""
        return {
            "tournament_id": self.tournament_id,
            "tournament_name": self.tournament_name,
            "game_type": self.game_type,
            "entry_fee": float(self.entry_fee),
            "re_entry_count": self.re_entry_count,
            "total_entry_cost": float(self.total_entry_cost),
            "finish_position": self.finish_position,
            "field_size": self.field_size,
            "finish_percentile": self.finish_percentile,
            "payout": float(self.payout),
            "prize_pool": float(self.prize_pool) if self.prize_pool is not None else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "net_profit": float(self.net_profit),
            "is_itm": self.is_itm,
        }

    def __repr__(self):
        return f"Tournament(#{self.tournament_id}, {self.tournament_name}, {self.finish_position}/{self.field_size}, ${self.payout})"


class SkipReason(Enum):
    EMPTY_BLOCK = "empty_block"
    MISSING_HEADER = "missing_header"
    MISSING_BUY_IN = "missing_buy_in"
    NO_BUY_IN_AMOUNT = "no_buy_in_amount"
    MALFORMED_FIELD = "malformed_field"


@dataclass(frozen=True)
class Parsed:
    record: TournamentRecord


@dataclass(frozen=True)
class Skipped:
    reason: SkipReason
    detail: str = ""


ParseResult = Union[Parsed, Skipped]


@dataclass(frozen=True)
class LineMatcher:
    """Extracts one optional field from any line of a block"""
    field: str
    pattern: re.Pattern
    convert: Callable[[re.Match], Any]

    def match(self, line: str) -> Optional[Any]:
        m = self.pattern.search(line)
        if not m:
            return None
        return self.convert(m)


OPTIONAL_FIELD_MATCHERS = (
    LineMatcher(
        "finish_position",
        re.compile(r"(\d+)(?:st|nd|rd|th)\s*:\s*Hero"),
        lambda m: int(m.group(1)),
    ),
    LineMatcher(
        "payout",
        re.compile(r"received a total of " + AMOUNT),
        lambda m: parse_amount(m.group(1)),
    ),
    LineMatcher(
        "re_entry_count",
        re.compile(r"made (\d+) re-entries"),
        lambda m: int(m.group(1)),
    ),
    LineMatcher(
        "prize_pool",
        re.compile(r"Total Prize Pool: " + AMOUNT),
        lambda m: parse_amount(m.group(1)),
    ),
    LineMatcher(
        "started_at",
        re.compile(r"Tournament started (\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2})"),
        lambda m: datetime.strptime(m.group(1), "%Y/%m/%d %H:%M:%S"),
    ),
)


class GGTournamentSummaryParser:
    """Parser for GGPoker tournament summary exports"""

    BUYIN_PATTERN = re.compile(r"Buy-in: (.+)")
    AMOUNT_PATTERN = re.compile(AMOUNT)
    PLAYERS_PATTERN = re.compile(r"(\d+) Players")

    def __init__(
        self,
        file_path: Optional[str] = None,
        text: Optional[str] = None,
        game_types: tuple[str, ...] = GAME_TYPES,
        matchers: tuple[LineMatcher, ...] = OPTIONAL_FIELD_MATCHERS,
    ):
        self.file_path = file_path
        self.raw_text = text
        self.matchers = matchers
        self.header_pattern = re.compile(
            r"Tournament #(\d+), (.+), ({})".format("|".join(re.escape(g) for g in game_types))
        )

        if file_path and not text:
            self.raw_text = Path(file_path).read_text(encoding='utf-8')

    def parse(self) -> list[TournamentRecord]:
        """Parse every block of the text, dropping the ones that don't match"""
        records = []
        if not self.raw_text:
            return records

        for index, block in enumerate(TournamentBlocks(self.raw_text)):
            result = self.parse_block(block)
            if isinstance(result, Parsed):
                records.append(result.record)
            else:
                logger.debug(
                    "Skipped block %d of %s: %s %s",
                    index, self.file_path or "<text>", result.reason.value, result.detail,
                )

        return records

    def parse_record(self, block: str) -> Optional[TournamentRecord]:
        """Parse a single block, None if it is not a tournament summary"""
        result = self.parse_block(block)
        return result.record if isinstance(result, Parsed) else None

    def parse_block(self, block: str) -> ParseResult:
        """Parse a single block into Parsed(record) or Skipped(reason)"""
        lines = [line for line in block.splitlines() if line.strip()]
        if not lines:
            return Skipped(SkipReason.EMPTY_BLOCK)

        header_match = self.header_pattern.search(lines[0])
        if not header_match:
            return Skipped(SkipReason.MISSING_HEADER, lines[0][:80])

        buyin_match = self.BUYIN_PATTERN.search(lines[1]) if len(lines) > 1 else None
        if not buyin_match:
            return Skipped(SkipReason.MISSING_BUY_IN, f"tournament #{header_match.group(1)}")

        amounts = self.AMOUNT_PATTERN.findall(buyin_match.group(1))
        if not amounts:
            return Skipped(SkipReason.NO_BUY_IN_AMOUNT, buyin_match.group(0))

        try:
            # Fee, rake and bounty are all part of what Hero paid
            entry_fee = round2(sum((parse_amount(a) for a in amounts), Decimal(0)))

            field_size = 0
            players_match = self.PLAYERS_PATTERN.search(lines[2]) if len(lines) > 2 else None
            if players_match:
                field_size = int(players_match.group(1))

            fields = self._scan_optional_fields(lines)

            record = TournamentRecord.create(
                tournament_id=header_match.group(1),
                tournament_name=header_match.group(2),
                game_type=header_match.group(3),
                entry_fee=entry_fee,
                field_size=field_size,
                **fields,
            )
        except (ValueError, ArithmeticError) as e:
            return Skipped(SkipReason.MALFORMED_FIELD, str(e))

        return Parsed(record)

    def _scan_optional_fields(self, lines: list[str]) -> dict:
        """First usable match wins for each field; unconvertible values count as not found"""
        found = {}
        for line in lines:
            for matcher in self.matchers:
                if matcher.field in found:
                    continue
                try:
                    value = matcher.match(line)
                except (ValueError, ArithmeticError) as e:
                    logger.debug("Ignored %s in %r: %s", matcher.field, line, e)
                    continue
                if value is not None:
                    found[matcher.field] = value
        return found


def parse_tournament_summary_text(text: str) -> list[TournamentRecord]:
    """Convenience function to parse tournament summary text"""
    parser = GGTournamentSummaryParser(text=text)
    return parser.parse()


def parse_tournament_summary_file(file_path: str) -> list[TournamentRecord]:
    """Convenience function to parse a tournament summary file"""
    parser = GGTournamentSummaryParser(file_path=file_path)
    return parser.parse()
