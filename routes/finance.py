from fastapi import APIRouter, Depends, Query, Request
from typing import List, Optional
from models.auth import Role
from models.allowance import (
    AllowanceSummary, OverUsageCase, OverUsageByGroup, TrendPoint,
    ReportsDashboard, FinanceOverview, AssignGroupRequest,
)
from models.orders import EmployeeOrders
from core.auth import SessionContext, require_role
from controllers import reports_controller, allowance_controller, audit_controller
from controllers.audit_controller import log_audit, get_client_ip as _ip, get_user_agent as _ua
from controllers.resources import TRANSACTIONS
from routes.resources import build_resource_router

router = APIRouter(prefix="/finance", tags=["finance"])

finance_only = require_role(Role.FINANCE)


@router.get("", response_model=FinanceOverview)
async def overview(month: Optional[int] = None, year: Optional[int] = None, ctx: SessionContext = Depends(finance_only)):
    return await reports_controller.get_overview(ctx, month, year)


# ── Reports ───────────────────────────────────────────────

@router.get("/reports", response_model=ReportsDashboard)
async def reports(
    month: Optional[int] = None,
    year: Optional[int] = None,
    months: Optional[int] = None,
    tab: str = "all",
    ctx: SessionContext = Depends(finance_only),
):
    return await reports_controller.get_reports_dashboard(ctx, month, year, months, tab)


@router.get("/reports/summary", response_model=AllowanceSummary)
async def report_summary(month: Optional[int] = None, year: Optional[int] = None, ctx: SessionContext = Depends(finance_only)):
    return await reports_controller.get_summary(ctx, month, year)


@router.get("/reports/over-usage", response_model=List[OverUsageCase])
async def report_over_usage(month: Optional[int] = None, year: Optional[int] = None, ctx: SessionContext = Depends(finance_only)):
    return await reports_controller.get_over_usage(ctx, month, year)


@router.get("/reports/over-usage-by-group", response_model=List[OverUsageByGroup])
async def report_over_usage_by_group(month: Optional[int] = None, year: Optional[int] = None, ctx: SessionContext = Depends(finance_only)):
    return await reports_controller.get_over_usage_by_group(ctx, month, year)


@router.get("/reports/trend", response_model=List[TrendPoint])
async def report_trend(months: Optional[int] = None, ctx: SessionContext = Depends(finance_only)):
    return await reports_controller.get_trend(ctx, months)


@router.get("/reports/export")
async def export_report(
    request: Request,
    format: str = Query("excel"),
    month: Optional[int] = None,
    year: Optional[int] = None,
    ctx: SessionContext = Depends(finance_only),
):
    result = await reports_controller.export_report(ctx, format, month, year)
    await log_audit(ctx.user.id, ctx.user.full_name, ctx.user.role, "EXPORT", "finance", "report", f"Exported allowance report as {format}", ip_address=_ip(request), user_agent=_ua(request))
    return result


@router.get("/reports/{employee_id}", response_model=EmployeeOrders)
async def employee_report(employee_id: str, month: Optional[int] = None, year: Optional[int] = None, ctx: SessionContext = Depends(finance_only)):
    return await reports_controller.get_employee_orders(ctx, employee_id, month, year)


# ── Allowances ────────────────────────────────────────────

@router.get("/allowances")
async def allowances(month: Optional[int] = None, year: Optional[int] = None, view: str = "employee", ctx: SessionContext = Depends(finance_only)):
    return await allowance_controller.get_allowances(ctx, month, year, view)


@router.get("/over-usage", response_model=List[OverUsageCase])
async def over_usage(month: Optional[int] = None, year: Optional[int] = None, ctx: SessionContext = Depends(finance_only)):
    return await reports_controller.get_over_usage(ctx, month, year)


@router.get("/allowance-groups/assignments")
async def group_assignments(q: Optional[str] = None, ctx: SessionContext = Depends(finance_only)):
    return await allowance_controller.get_assignments(ctx, q)


@router.post("/allowance-groups/assign")
async def assign_group(data: AssignGroupRequest, request: Request, ctx: SessionContext = Depends(finance_only)):
    result = await allowance_controller.assign_group(ctx, data)
    await log_audit(ctx.user.id, ctx.user.full_name, ctx.user.role, "ASSIGN_ALLOWANCE_GROUP", "finance", "allowance-group", f"Assigned user {result['user_id']} to group {result['group_id']}", result["user_id"], _ip(request), _ua(request))
    return result


# ── Audit ─────────────────────────────────────────────────

@router.get("/audit")
async def audit_trail(
    page: int = Query(1, ge=1),
    limit: int = Query(25, ge=1, le=100),
    module: str = Query(None),
    action: str = Query(None),
    search: str = Query(None),
    ctx: SessionContext = Depends(finance_only),
):
    return await audit_controller.get_audit_logs(page=page, limit=limit, module=module, action=action, search=search)


router.include_router(build_resource_router(TRANSACTIONS, Role.FINANCE, module="finance"))
