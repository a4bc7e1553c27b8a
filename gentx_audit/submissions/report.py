"""Aggregate accepted submissions into stake allocations."""

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..transactions.coins import MAJOR_DENOM, MINOR_PER_MAJOR, Coin, convert_denomination
from .models import AcceptedSubmission, ExcludedCandidate

MONIKER_WIDTH = 35


@dataclass(frozen=True)
class Allocation:
    pull_number: int
    moniker: str
    amount: Coin


@dataclass
class GenesisReport:
    """Per-submission allocations in the major unit and their total."""

    allocations: list[Allocation]
    total: Coin
    excluded: list[ExcludedCandidate] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.allocations)


def build_report(
    submissions: Iterable[AcceptedSubmission],
    scale: int = MINOR_PER_MAJOR,
    major_denom: str = MAJOR_DENOM,
    excluded: Iterable[ExcludedCandidate] = (),
) -> GenesisReport:
    """Convert every self-delegation and sum the results.

    Each amount is converted on its own (truncating) before summing, so the
    total equals the sum of the printed lines.
    """
    allocations = []
    total = Coin.zero(major_denom)
    for submission in submissions:
        amount = convert_denomination(submission.message.value, scale, major_denom)
        allocations.append(Allocation(submission.pull_number, submission.moniker, amount))
        total = total + amount
    return GenesisReport(allocations=allocations, total=total, excluded=list(excluded))


def format_coin(coin: Coin) -> str:
    return f"{coin.amount} {coin.denom}"


def render_text(report: GenesisReport) -> list[str]:
    """Human-readable report lines."""
    lines = ["Validator Allocations:"]
    lines.extend(
        f"  {allocation.moniker:<{MONIKER_WIDTH}}:  {format_coin(allocation.amount)}"
        for allocation in report.allocations
    )
    lines.append(f"Number of Submissions {report.count}")
    lines.append(f"Total: {format_coin(report.total)}")
    return lines


def report_as_dict(report: GenesisReport) -> dict[str, Any]:
    return {
        "allocations": [
            {
                "pull_number": allocation.pull_number,
                "moniker": allocation.moniker,
                "amount": str(allocation.amount.amount),
                "denom": allocation.amount.denom,
            }
            for allocation in report.allocations
        ],
        "count": report.count,
        "total": {"amount": str(report.total.amount), "denom": report.total.denom},
        "excluded": [
            {
                "pull_number": candidate.pull_number,
                "reason": candidate.reason.value,
                "detail": candidate.detail,
            }
            for candidate in report.excluded
        ],
    }


def render_json(report: GenesisReport) -> str:
    return json.dumps(report_as_dict(report), indent=2)
