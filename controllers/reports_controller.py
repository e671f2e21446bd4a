"""
Finance reports: the tabbed dashboard, its single panels, the finance overview,
per-employee order detail and file exports.

Panels on one page are fetched concurrently and fail independently. A newer
request for the same user and tab supersedes the one still in flight.
"""
from fastapi import HTTPException
from fastapi.responses import FileResponse
from typing import Dict, List, Optional, Tuple
from datetime import date, datetime, timezone, MAXYEAR
import asyncio
import calendar
import csv
import logging
import uuid

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from reportlab.lib.pagesizes import landscape, A4
from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table as RLTable, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle

import gateway
from config import EXPORT_DIR, DEFAULT_TREND_MONTHS, MAX_TREND_MONTHS
from core.allowance import (
    summarize, over_usage_rows, group_breakdown, trend_bars, trend_direction, kpi_cards,
)
from core.auth import SessionContext
from core.coordination import supersession, Superseded
from core.formatting import format_currency
from core.graphql import GraphQLError, to_http_exception
from models.allowance import (
    AllowanceSummary, OverUsageCase, OverUsageByGroup, TrendPoint, KPICard,
    PanelResult, ReportsDashboard, FinanceOverview,
)
from models.orders import EmployeeOrders, EmployeeOrderRow, OrderLine
from queries import allowance as allowance_queries
from queries import orders as order_queries
from queries import users as user_queries

logger = logging.getLogger(__name__)

SUMMARY = "summary"
OVER_USAGE = "overUsage"
GROUPS = "groups"
TREND = "trend"

TAB_PANELS = {
    "all": (SUMMARY, OVER_USAGE, GROUPS, TREND),
    "summary": (SUMMARY, TREND),
    "over-usage": (SUMMARY, OVER_USAGE, GROUPS),
    "trend": (TREND,),
}

PANEL_LABELS = {
    SUMMARY: "allowance summary",
    OVER_USAGE: "over-usage cases",
    GROUPS: "over-usage by group",
    TREND: "usage trend",
}


# ── Period helpers ────────────────────────────────────────

def resolve_period(month: Optional[int] = None, year: Optional[int] = None) -> Tuple[int, int]:
    today = date.today()
    month = today.month if month is None else month
    year = today.year if year is None else year
    if not 1 <= month <= 12:
        raise HTTPException(status_code=422, detail="Month must be between 1 and 12")
    if not 1 <= year <= MAXYEAR:
        raise HTTPException(status_code=422, detail=f"Year must be between 1 and {MAXYEAR}")
    return month, year


def resolve_months(months: Optional[int] = None) -> int:
    if months is None:
        return DEFAULT_TREND_MONTHS
    return max(1, min(MAX_TREND_MONTHS, months))


def month_bounds(month: int, year: int) -> Tuple[str, str]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last_day).isoformat()


# ── Panel fetchers (raise GraphQLError) ───────────────────

async def fetch_summary(ctx: SessionContext, month: int, year: int) -> AllowanceSummary:
    data = await gateway.graphql.execute(
        allowance_queries.ALLOWANCE_SUMMARY, {"month": month, "year": year}, token=ctx.token,
    )
    return summarize(data.get("allowanceSummary"), month, year)


async def fetch_over_usage(ctx: SessionContext, month: int, year: int) -> List[OverUsageCase]:
    data = await gateway.graphql.execute(
        allowance_queries.OVER_USAGE_CASES, {"month": month, "year": year}, token=ctx.token,
    )
    return over_usage_rows(data.get("overUsageCases"))


async def fetch_groups(ctx: SessionContext, month: int, year: int) -> list:
    data = await gateway.graphql.execute(
        allowance_queries.OVER_USAGE_BY_GROUP, {"month": month, "year": year}, token=ctx.token,
    )
    return data.get("overUsageByGroup") or []


async def fetch_trend(ctx: SessionContext, months: int) -> List[TrendPoint]:
    data = await gateway.graphql.execute(
        allowance_queries.ALLOWANCE_USAGE_TREND, {"months": months}, token=ctx.token,
    )
    return trend_bars(data.get("allowanceUsageTrend"), months)


def _panel(name: str, result) -> PanelResult:
    if isinstance(result, GraphQLError):
        logger.warning(f"Panel {name} failed: {result.message}")
        return PanelResult(status="error", error=result.message or f"Failed to load {PANEL_LABELS[name]}")
    if isinstance(result, BaseException):
        raise result
    return PanelResult(status="ready", data=result)


async def _gather_panels(ctx: SessionContext, names, month: int, year: int, months: int) -> Dict[str, PanelResult]:
    jobs = {
        SUMMARY: lambda: fetch_summary(ctx, month, year),
        OVER_USAGE: lambda: fetch_over_usage(ctx, month, year),
        GROUPS: lambda: fetch_groups(ctx, month, year),
        TREND: lambda: fetch_trend(ctx, months),
    }
    results = await asyncio.gather(*(jobs[n]() for n in names), return_exceptions=True)
    outcome = dict(zip(names, results))

    # Group bars are sized against the period's issued total
    if GROUPS in outcome and not isinstance(outcome[GROUPS], BaseException):
        summary = outcome.get(SUMMARY)
        reference = summary.total_issued if isinstance(summary, AllowanceSummary) else None
        outcome[GROUPS] = group_breakdown(outcome[GROUPS], reference)

    return {name: _panel(name, result) for name, result in outcome.items()}


# ── Reports dashboard ─────────────────────────────────────

async def get_reports_dashboard(ctx: SessionContext, month: Optional[int] = None, year: Optional[int] = None,
                                months: Optional[int] = None, tab: str = "all") -> ReportsDashboard:
    if tab not in TAB_PANELS:
        raise HTTPException(status_code=422, detail=f"Unknown tab '{tab}'. Use one of: {', '.join(TAB_PANELS)}")
    month, year = resolve_period(month, year)
    months = resolve_months(months)

    try:
        panels = await supersession.run(
            (ctx.user.id, tab),
            _gather_panels(ctx, TAB_PANELS[tab], month, year, months),
        )
    except Superseded:
        raise HTTPException(status_code=409, detail="Superseded by a newer request")
    return ReportsDashboard(month=month, year=year, tab=tab, months=months, panels=panels)


async def get_summary(ctx: SessionContext, month: Optional[int] = None, year: Optional[int] = None) -> AllowanceSummary:
    month, year = resolve_period(month, year)
    try:
        return await fetch_summary(ctx, month, year)
    except GraphQLError as e:
        raise to_http_exception(e, "Failed to load allowance summary")


async def get_over_usage(ctx: SessionContext, month: Optional[int] = None, year: Optional[int] = None) -> List[OverUsageCase]:
    month, year = resolve_period(month, year)
    try:
        return await fetch_over_usage(ctx, month, year)
    except GraphQLError as e:
        raise to_http_exception(e, "Failed to load over-usage cases")


async def get_over_usage_by_group(ctx: SessionContext, month: Optional[int] = None,
                                  year: Optional[int] = None) -> List[OverUsageByGroup]:
    month, year = resolve_period(month, year)
    groups, summary = await asyncio.gather(
        fetch_groups(ctx, month, year), fetch_summary(ctx, month, year), return_exceptions=True,
    )
    if isinstance(groups, GraphQLError):
        raise to_http_exception(groups, "Failed to load over-usage by group")
    if isinstance(groups, BaseException):
        raise groups
    # Without a summary there is no issued total to size against
    if isinstance(summary, GraphQLError):
        logger.warning(f"Group bars unsized, summary failed: {summary.message}")
        summary = None
    elif isinstance(summary, BaseException):
        raise summary
    return group_breakdown(groups, summary.total_issued if summary is not None else None)


async def get_trend(ctx: SessionContext, months: Optional[int] = None) -> List[TrendPoint]:
    try:
        return await fetch_trend(ctx, resolve_months(months))
    except GraphQLError as e:
        raise to_http_exception(e, "Failed to load usage trend")


# ── Finance overview ──────────────────────────────────────

async def get_overview(ctx: SessionContext, month: Optional[int] = None, year: Optional[int] = None) -> FinanceOverview:
    month, year = resolve_period(month, year)
    panels = await _gather_panels(ctx, (SUMMARY, OVER_USAGE, TREND), month, year, DEFAULT_TREND_MONTHS)

    summary = panels[SUMMARY].data if panels[SUMMARY].status == "ready" else None
    cases = panels[OVER_USAGE].data if panels[OVER_USAGE].status == "ready" else None
    trend = panels[TREND].data if panels[TREND].status == "ready" else []

    cards = kpi_cards(summary, len(cases) if cases is not None else None, trend_direction(trend))
    return FinanceOverview(month=month, year=year, cards=cards, panels=panels)


# ── Employee detail ───────────────────────────────────────

def order_number(order_id: str) -> str:
    return f"#{str(order_id).split('-')[0].upper()}"


def placed_at(created_at) -> Optional[str]:
    """createdAt arrives as epoch milliseconds, sometimes as a string."""
    if created_at in (None, ""):
        return None
    try:
        millis = int(float(created_at))
    except (TypeError, ValueError):
        return str(created_at)
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).isoformat()


def employee_order_row(order: dict) -> EmployeeOrderRow:
    lines = []
    for item in order.get("items") or []:
        quantity = int(item.get("quantity") or 0)
        menu_item = item.get("menuItem") or {}
        lines.append(OrderLine(
            name=menu_item.get("name") or "Unknown Item",
            quantity=quantity,
            line_total=format_currency(quantity * float(item.get("price") or 0)),
        ))
    branch = order.get("branch") or {}
    return EmployeeOrderRow(
        id=str(order.get("id")),
        number=order_number(order.get("id")),
        placed_at=placed_at(order.get("createdAt")),
        order_type=order.get("orderType") or "N/A",
        guest_note=order.get("guestNote"),
        branch_name=branch.get("name"),
        lines=lines,
        item_count=sum(line.quantity for line in lines),
        total=format_currency(order.get("totalAmount")),
    )


async def get_employee_orders(ctx: SessionContext, employee_id: str, month: Optional[int] = None,
                              year: Optional[int] = None) -> EmployeeOrders:
    month, year = resolve_period(month, year)
    start_date, end_date = month_bounds(month, year)
    try:
        employee_data, order_data = await asyncio.gather(
            gateway.graphql.execute(user_queries.GET_USER_BY_ID, {"getUsersByIdId": employee_id}, token=ctx.token),
            gateway.graphql.execute(
                order_queries.GET_ORDERS,
                {"employeeId": employee_id, "startDate": start_date, "endDate": end_date},
                token=ctx.token,
            ),
        )
    except GraphQLError as e:
        raise to_http_exception(e, "Failed to load employee orders")

    employee = employee_data.get("GetUsersById")
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    rows = [employee_order_row(o) for o in order_data.get("orders") or []]
    return EmployeeOrders(
        employee_id=str(employee.get("id") or employee_id),
        employee_name=employee.get("fullName") or "Unknown Employee",
        period_label=f"{calendar.month_name[month]} {year}",
        start_date=start_date,
        end_date=end_date,
        order_count=len(rows),
        orders=rows,
    )


# ── Export ────────────────────────────────────────────────

EXPORT_FORMATS = {
    "csv": ("csv", "text/csv"),
    "excel": ("xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    "pdf": ("pdf", "application/pdf"),
}


def style_excel_header(ws, row=1):
    header_font = Font(bold=True, color="FFFFFF", size=10)
    header_fill = PatternFill(start_color="065f46", end_color="065f46", fill_type="solid")
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")


def auto_column_width(ws):
    for col in ws.columns:
        max_len = max((len(str(cell.value or "")) for cell in col), default=0)
        ws.column_dimensions[col[0].column_letter].width = min(max_len + 3, 40)


def export_filename(month: int, year: int, ext: str) -> str:
    return f"allowance_report_{year}_{month:02d}.{ext}"


def _over_usage_table(cases: List[OverUsageCase]) -> List[list]:
    rows = [["Employee", "Allowed", "Used", "Over-Usage"]]
    for c in cases:
        rows.append([c.user_name or c.user_id, format_currency(c.allowed_amount),
                     format_currency(c.used_amount), format_currency(c.over_usage)])
    return rows


def _write_csv(filepath, title: str, cards: List[KPICard], cases: List[OverUsageCase]):
    with open(filepath, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow([title])
        writer.writerow(["Metric", "Value"])
        for card in cards:
            writer.writerow([card.title, card.value])
        if cases:
            writer.writerow([])
            writer.writerows(_over_usage_table(cases))


def _write_excel(filepath, title: str, cards: List[KPICard], cases: List[OverUsageCase]):
    wb = Workbook()
    ws = wb.active
    ws.title = "Summary"
    ws.append([title])
    ws.append([f"Generated: {datetime.now(timezone.utc).strftime('%d %b %Y %H:%M')}"])
    ws.append([])
    ws.append(["Metric", "Value"])
    style_excel_header(ws, 4)
    for card in cards:
        ws.append([card.title, card.value])
    auto_column_width(ws)

    ws2 = wb.create_sheet("Over-Usage")
    for row in _over_usage_table(cases):
        ws2.append(row)
    style_excel_header(ws2)
    auto_column_width(ws2)
    wb.save(str(filepath))


def _write_pdf(filepath, title: str, cards: List[KPICard], cases: List[OverUsageCase]):
    doc = SimpleDocTemplate(str(filepath), pagesize=landscape(A4), leftMargin=15*mm, rightMargin=15*mm, topMargin=15*mm, bottomMargin=15*mm)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("ReportTitle", parent=styles["Heading1"], fontSize=16, spaceAfter=6)
    subtitle_style = ParagraphStyle("ReportSubtitle", parent=styles["Normal"], fontSize=9, textColor=colors.grey, spaceAfter=12)
    header_style = TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#065f46")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 9),
        ("FONTSIZE", (0, 1), (-1, -1), 8),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f8fafc")]),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ])
    elements = [
        Paragraph(title, title_style),
        Paragraph(f"Generated: {datetime.now(timezone.utc).strftime('%d %b %Y %H:%M UTC')}", subtitle_style),
    ]
    t = RLTable([["Metric", "Value"]] + [[c.title, c.value] for c in cards], colWidths=[120*mm, 120*mm])
    t.setStyle(header_style)
    elements.append(t)
    if cases:
        elements.append(Spacer(1, 8*mm))
        t2 = RLTable(_over_usage_table(cases))
        t2.setStyle(header_style)
        elements.append(t2)
    doc.build(elements)


async def export_report(ctx: SessionContext, format: str, month: Optional[int] = None,
                        year: Optional[int] = None) -> FileResponse:
    if format not in EXPORT_FORMATS:
        raise HTTPException(status_code=400, detail="Format must be 'csv', 'excel' or 'pdf'")
    month, year = resolve_period(month, year)

    try:
        summary, cases = await asyncio.gather(
            fetch_summary(ctx, month, year), fetch_over_usage(ctx, month, year),
        )
    except GraphQLError as e:
        raise to_http_exception(e, "Failed to build report")

    ext, media_type = EXPORT_FORMATS[format]
    cards = kpi_cards(summary, len(cases))
    title = f"Allowance Report - {calendar.month_name[month]} {year}"
    filename = export_filename(month, year, ext)
    filepath = EXPORT_DIR / f"{uuid.uuid4().hex[:8]}_{filename}"

    if format == "csv":
        _write_csv(filepath, title, cards, cases)
    elif format == "excel":
        _write_excel(filepath, title, cards, cases)
    else:
        _write_pdf(filepath, title, cards, cases)
    return FileResponse(str(filepath), filename=filename, media_type=media_type)
