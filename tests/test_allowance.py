"""
Allowance aggregation and money formatting.
"""
import pytest

from core.allowance import (
    summarize, over_usage_rows, bar_width, group_breakdown, trend_bars, trend_direction,
    kpi_cards, employee_allowances, group_allowances, usage_from_allowance,
)
from core.formatting import format_currency, format_percentage, round_money


# ═══════════════════════════════════════════════════════════════
# 1. SUMMARY
# ═══════════════════════════════════════════════════════════════
class TestSummarize:

    def test_derives_missing_values(self):
        summary = summarize({"totalIssued": 1000, "totalUsed": 250})
        assert summary.usage_label == "25.0%"
        assert summary.remaining_balance == 750

    def test_prefers_server_values(self):
        summary = summarize({"totalIssued": 1000, "totalUsed": 250, "remainingBalance": 700, "usagePercentage": 30})
        assert summary.remaining_balance == 700
        assert summary.usage_percentage == 30
        assert summary.usage_label == "30.0%"

    def test_zero_issued_has_zero_usage(self):
        summary = summarize({"totalIssued": 0, "totalUsed": 0})
        assert summary.usage_percentage == 0
        assert summary.usage_label == "0.0%"

    def test_missing_payload(self):
        summary = summarize(None, 3, 2025)
        assert summary.total_issued == 0
        assert (summary.month, summary.year) == (3, 2025)


# ═══════════════════════════════════════════════════════════════
# 2. OVER-USAGE
# ═══════════════════════════════════════════════════════════════
class TestOverUsage:

    CASES = [
        {"userId": "1", "userName": "Abebe", "allowedAmount": 1000, "usedAmount": 1200, "overUsage": 200},
        {"userId": "2", "userName": "Selam", "allowedAmount": 1000, "usedAmount": 900, "overUsage": 0},
        {"userId": "3", "userName": "Hana", "allowedAmount": 500, "usedAmount": 1100},
        {"userId": "4", "userName": "Dawit", "allowedAmount": 800, "usedAmount": 800, "overUsage": 0},
    ]

    def test_only_over_usage_rows_are_kept(self):
        rows = over_usage_rows(self.CASES)
        assert all(r.used_amount >= r.allowed_amount for r in rows)
        assert [r.user_id for r in rows] == ["3", "1"]

    def test_over_usage_filled_only_when_missing(self):
        rows = {r.user_id: r for r in over_usage_rows(self.CASES)}
        assert rows["3"].over_usage == 600
        assert rows["1"].over_usage == 200

    def test_detail_path(self):
        rows = over_usage_rows(self.CASES)
        assert rows[0].detail_path == "/finance/reports/3"

    def test_cases_without_employee_are_skipped(self):
        rows = over_usage_rows([
            {"userName": "Ghost", "allowedAmount": 100, "usedAmount": 300},
            {"userId": "", "userName": "Blank", "allowedAmount": 100, "usedAmount": 300},
            {"userId": 5, "userName": "Abebe", "allowedAmount": 100, "usedAmount": 300},
        ])
        assert [r.detail_path for r in rows] == ["/finance/reports/5"]

    def test_ties_sorted_by_name(self):
        rows = over_usage_rows([
            {"userId": "a", "userName": "Zed", "allowedAmount": 0, "usedAmount": 10},
            {"userId": "b", "userName": "Amy", "allowedAmount": 0, "usedAmount": 10},
        ])
        assert [r.user_name for r in rows] == ["Amy", "Zed"]


# ═══════════════════════════════════════════════════════════════
# 3. GROUP BARS
# ═══════════════════════════════════════════════════════════════
class TestBarWidth:

    def test_half_of_issued(self):
        assert bar_width(500, 1000) == 50

    def test_zero_issued_does_not_crash(self):
        assert bar_width(500, 0) == 0

    def test_unknown_reference(self):
        assert bar_width(500, None) == 0

    @pytest.mark.parametrize("over", [-100, 0, 1, 999, 1000, 5000, 10 ** 9])
    @pytest.mark.parametrize("issued", [-5, 0, 1, 1000])
    def test_width_is_bounded(self, over, issued):
        assert 0 <= bar_width(over, issued) <= 100

    def test_group_breakdown(self):
        rows = group_breakdown([{"groupName": "Staff", "totalOverUsage": 250, "employeeCount": 3}, {"totalOverUsage": 0}], 1000)
        assert rows[0].bar_width == 25
        assert rows[0].employee_count == 3
        assert rows[1].group_name == "Unassigned"


# ═══════════════════════════════════════════════════════════════
# 4. TREND
# ═══════════════════════════════════════════════════════════════
class TestTrend:

    POINTS = [
        {"month": "Jan", "selfUsage": 1000, "guestUsage": 500},
        {"month": "Feb", "selfUsage": 2000, "guestUsage": 0},
        {"month": "Mar", "selfUsage": 1500, "guestUsage": 250},
    ]

    def test_heights(self):
        bars = trend_bars(self.POINTS)
        assert bars[0].self_height == 2
        assert bars[0].guest_height == 1
        assert bars[1].self_height == 4

    def test_window_keeps_latest_months_in_order(self):
        bars = trend_bars(self.POINTS, 2)
        assert [b.month for b in bars] == ["Feb", "Mar"]

    def test_direction(self):
        assert trend_direction(trend_bars(self.POINTS)) == "down"
        assert trend_direction(trend_bars(self.POINTS[:2])) == "up"
        assert trend_direction(trend_bars(self.POINTS[:1])) == "flat"


# ═══════════════════════════════════════════════════════════════
# 5. CARDS, ALLOWANCES AND FORMATTING
# ═══════════════════════════════════════════════════════════════
class TestCardsAndAllowances:

    def test_kpi_cards(self):
        cards = {c.title: c for c in kpi_cards(summarize({"totalIssued": 1000, "totalUsed": 250}), 2, "up")}
        assert cards["Total Issued"].value == "ETB 1,000"
        assert cards["Remaining Balance"].value == "ETB 750"
        assert cards["Remaining Balance"].sub == "75.0% of issued"
        assert cards["Usage"].value == "25.0%"
        assert cards["Over-Usage Cases"].value == "2"

    def test_cards_without_summary(self):
        cards = kpi_cards(None, 0)
        assert [c.title for c in cards] == ["Over-Usage Cases"]

    def test_employee_and_group_allowances(self):
        records = [
            {"id": "a1", "month": 3, "year": 2025, "initialAmount": 1000, "currentBalance": 400,
             "user": {"id": "1", "fullName": "Abebe", "employeeAllowanceGroup": {"id": "g1", "name": "Staff", "monthlyAllowance": 1000}}},
            {"id": "a2", "month": 3, "year": 2025, "initialAmount": 1000, "currentBalance": 1000,
             "user": {"id": "2", "fullName": "Selam", "employeeAllowanceGroup": {"id": "g1", "name": "Staff", "monthlyAllowance": 1000}}},
            {"id": "a3", "month": 3, "year": 2025, "initialAmount": 500, "currentBalance": 100,
             "user": {"id": "3", "fullName": "Hana", "employeeAllowanceGroup": None}},
        ]
        assert usage_from_allowance(records[0]) == 600
        rows = employee_allowances(records)
        assert [r.used_amount for r in rows] == [600, 0, 400]
        groups = {g.name: g for g in group_allowances(rows)}
        assert groups["Staff"].employees == 2
        assert groups["Staff"].used == 600
        assert groups["No Group"].remaining == 100

    def test_currency_formatting(self):
        assert format_currency(1234) == "ETB 1,234.00"
        assert format_currency(None) == "ETB 0.00"
        assert format_currency(1234.5, 0) == "ETB 1,235"
        assert format_currency(-20.125) == "-ETB 20.13"

    def test_percentage_formatting(self):
        assert format_percentage(25) == "25.0%"
        assert format_percentage(33.349) == "33.3%"
        assert str(round_money("2.675")) == "2.68"
