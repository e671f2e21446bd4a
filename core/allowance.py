"""
Shaping of allowance query results into display-ready values.

The GraphQL API owns every monetary figure. Derivations here only fill in
values the API left out and never override the ones it supplied.
"""
from collections import OrderedDict
from typing import Iterable, List, Mapping, Optional, Sequence

from config import TREND_PX_PER_THOUSAND
from core.formatting import format_currency, format_percentage, to_decimal
from models.allowance import (
    AllowanceSummary, OverUsageCase, OverUsageByGroup, TrendPoint, KPICard,
    EmployeeAllowance, GroupAllowanceRow,
)


def _num(value) -> float:
    return float(to_decimal(value))


def usage_percentage(total_issued: float, total_used: float) -> float:
    if total_issued <= 0:
        return 0.0
    return total_used / total_issued * 100


def summarize(raw: Optional[Mapping], month: Optional[int] = None, year: Optional[int] = None) -> AllowanceSummary:
    raw = raw or {}
    issued = _num(raw.get("totalIssued"))
    used = _num(raw.get("totalUsed"))
    remaining = raw.get("remainingBalance")
    remaining = issued - used if remaining is None else _num(remaining)
    percentage = raw.get("usagePercentage")
    percentage = usage_percentage(issued, used) if percentage is None else _num(percentage)
    return AllowanceSummary(
        month=month,
        year=year,
        total_issued=issued,
        total_used=used,
        remaining_balance=remaining,
        usage_percentage=percentage,
        usage_label=format_percentage(percentage),
    )


def detail_path(user_id: str) -> str:
    return f"/finance/reports/{user_id}"


def over_usage_rows(cases: Iterable[Mapping]) -> List[OverUsageCase]:
    rows = []
    for case in cases or []:
        allowed = _num(case.get("allowedAmount"))
        used = _num(case.get("usedAmount"))
        if used <= allowed:
            continue
        over = case.get("overUsage")
        over = max(0.0, used - allowed) if over is None else _num(over)
        user_id = case.get("userId")
        # A case with no employee cannot link to a detail page
        if user_id is None or str(user_id).strip() == "":
            continue
        user_id = str(user_id)
        rows.append(OverUsageCase(
            user_id=user_id,
            user_name=case.get("userName"),
            allowed_amount=allowed,
            used_amount=used,
            over_usage=over,
            detail_path=detail_path(user_id),
        ))
    rows.sort(key=lambda r: (-r.over_usage, (r.user_name or "").lower()))
    return rows


def bar_width(total_over_usage, reference_total) -> float:
    reference = _num(reference_total)
    if reference <= 0:
        return 0.0
    width = _num(total_over_usage) / reference * 100
    return round(min(100.0, max(0.0, width)), 2)


def group_breakdown(groups: Iterable[Mapping], total_issued=None) -> List[OverUsageByGroup]:
    return [
        OverUsageByGroup(
            group_name=g.get("groupName") or "Unassigned",
            total_over_usage=_num(g.get("totalOverUsage")),
            employee_count=int(g.get("employeeCount") or 0),
            bar_width=bar_width(g.get("totalOverUsage"), total_issued),
        )
        for g in groups or []
    ]


def bar_height(usage) -> float:
    return round(_num(usage) / 1000 * TREND_PX_PER_THOUSAND, 2)


def trend_bars(points: Sequence[Mapping], months: Optional[int] = None) -> List[TrendPoint]:
    """Points arrive oldest first; only the trailing window is kept."""
    window = list(points or [])
    if months is not None and months > 0:
        window = window[-months:]
    return [
        TrendPoint(
            month=str(p.get("month") or ""),
            self_usage=_num(p.get("selfUsage")),
            guest_usage=_num(p.get("guestUsage")),
            self_height=bar_height(p.get("selfUsage")),
            guest_height=bar_height(p.get("guestUsage")),
        )
        for p in window
    ]


def trend_direction(points: Sequence[TrendPoint]) -> str:
    if len(points) < 2:
        return "flat"
    previous = points[-2].self_usage + points[-2].guest_usage
    latest = points[-1].self_usage + points[-1].guest_usage
    if latest > previous:
        return "up"
    if latest < previous:
        return "down"
    return "flat"


def kpi_cards(summary: Optional[AllowanceSummary], over_usage_count: Optional[int], direction: str = "flat") -> List[KPICard]:
    cards = []
    if summary is not None:
        cards.extend([
            KPICard(title="Total Issued", value=format_currency(summary.total_issued, 0), sub="This month", trend=direction),
            KPICard(title="Total Used", value=format_currency(summary.total_used, 0), sub="Approved spend", trend=direction),
            KPICard(title="Remaining Balance", value=format_currency(summary.remaining_balance, 0),
                    sub=f"{format_percentage(usage_percentage(summary.total_issued, summary.remaining_balance))} of issued"),
            KPICard(title="Usage", value=summary.usage_label, sub="of issued"),
        ])
    if over_usage_count is not None:
        cards.append(KPICard(title="Over-Usage Cases", value=str(over_usage_count), sub="employees",
                             trend="down" if over_usage_count else "flat"))
    return cards


def usage_from_allowance(record: Mapping) -> float:
    return _num(record.get("initialAmount")) - _num(record.get("currentBalance"))


def employee_allowances(records: Iterable[Mapping]) -> List[EmployeeAllowance]:
    return [
        EmployeeAllowance.model_validate({**record, "usedAmount": usage_from_allowance(record)})
        for record in records or []
    ]


def group_allowances(rows: Iterable[EmployeeAllowance]) -> List[GroupAllowanceRow]:
    groups: "OrderedDict[str, GroupAllowanceRow]" = OrderedDict()
    for row in rows:
        group = row.user.employee_allowance_group if row.user else None
        name = group.name if group and group.name else "No Group"
        entry = groups.get(name)
        if entry is None:
            entry = GroupAllowanceRow(name=name, monthly_allowance=group.monthly_allowance if group else None)
            groups[name] = entry
        entry.employees += 1
        entry.issued += row.initial_amount
        entry.used += row.used_amount
        entry.remaining += row.current_balance
    return list(groups.values())
