"""
Aggregation over parsed tournament records.

summarize() reduces records to overall profit statistics, categorize()
groups them into buckets by entry fee. Both need the complete record list
and neither mutates the records.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from tournament_results.gg_summary_parser import TournamentRecord
from tournament_results.money import ZERO, fee_key, round2


@dataclass(frozen=True)
class SummaryStatistics:
    """Profit statistics over a batch of tournaments"""
    total_records: int = 0
    total_payout: Decimal = ZERO
    total_entry_cost: Decimal = ZERO
    net_profit: Decimal = ZERO
    count_with_payout: int = 0
    win_rate: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_records": self.total_records,
            "total_payout": float(self.total_payout),
            "total_entry_cost": float(self.total_entry_cost),
            "net_profit": float(self.net_profit),
            "count_with_payout": self.count_with_payout,
            "win_rate": self.win_rate,
        }


@dataclass
class CategoryBucket:
    """All tournaments played at one entry fee"""
    entry_fee: Decimal
    records: list[TournamentRecord] = field(default_factory=list)
    total_entry_cost: Decimal = ZERO
    total_payout: Decimal = ZERO
    count: int = 0

    @property
    def key(self) -> str:
        return fee_key(self.entry_fee)

    @property
    def net_profit(self) -> Decimal:
        return self.total_payout - self.total_entry_cost

    def add(self, record: TournamentRecord):
        self.records.append(record)
        self.total_entry_cost = round2(self.total_entry_cost + record.total_entry_cost)
        self.total_payout = round2(self.total_payout + record.payout)
        self.count += 1

    def to_dict(self) -> dict:
        return {
            "entry_fee": float(self.entry_fee),
            "count": self.count,
            "total_entry_cost": float(self.total_entry_cost),
            "total_payout": float(self.total_payout),
            "net_profit": float(self.net_profit),
            "tournaments": [r.to_dict() for r in self.records],
        }

    def __repr__(self):
        return f"CategoryBucket({self.key}, {self.count} tournaments, net ${self.net_profit})"


def summarize(records: Iterable[TournamentRecord]) -> SummaryStatistics:
    """Total payout, total entry cost, net profit and win rate"""
    total_records = 0
    total_payout = ZERO
    total_entry_cost = ZERO
    count_with_payout = 0

    for record in records:
        total_records += 1
        total_payout += record.payout
        total_entry_cost += record.total_entry_cost
        if record.payout > 0:
            count_with_payout += 1

    total_payout = round2(total_payout)
    total_entry_cost = round2(total_entry_cost)
    win_rate = count_with_payout / total_records * 100 if total_records else 0.0

    return SummaryStatistics(
        total_records=total_records,
        total_payout=total_payout,
        total_entry_cost=total_entry_cost,
        net_profit=round2(total_payout - total_entry_cost),
        count_with_payout=count_with_payout,
        win_rate=win_rate,
    )


def categorize(records: Iterable[TournamentRecord]) -> dict[str, CategoryBucket]:
    """Group records by entry fee, buckets in first-seen order"""
    buckets: dict[str, CategoryBucket] = {}
    for record in records:
        key = fee_key(record.entry_fee)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = CategoryBucket(entry_fee=round2(record.entry_fee))
        bucket.add(record)
    return buckets
