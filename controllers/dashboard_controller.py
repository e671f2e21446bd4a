from datetime import date
from typing import List
import asyncio
import logging

import gateway
from core.auth import SessionContext
from core.graphql import GraphQLError
from controllers.audit_controller import get_audit_logs
from controllers.reports_controller import month_bounds
from queries import catalog, orders, users

logger = logging.getLogger(__name__)


async def _count(ctx: SessionContext, query: str, key: str, variables: dict = None) -> int:
    data = await gateway.graphql.execute(query, variables, token=ctx.token)
    return len(data.get(key) or [])


async def get_admin_home(ctx: SessionContext) -> dict:
    today = date.today()
    start_date, end_date = month_bounds(today.month, today.year)

    # (title, sub, fetch)
    cards: List[tuple] = [
        ("Total Employees", "Registered employees", lambda: _count(ctx, users.GET_EMPLOYEE_USERS, "GetEmployeeUsers")),
        ("Active Groups", "Employee groups", lambda: _count(ctx, catalog.EMPLOYEE_GROUPS, "employeeGroups")),
        ("Menu Items", "Across all menus", lambda: _count(ctx, catalog.MENU_ITEMS, "menuItems")),
        ("This Month's Orders", today.strftime("%B %Y"),
         lambda: _count(ctx, orders.GET_ORDERS, "orders", {"startDate": start_date, "endDate": end_date})),
    ]
    results = await asyncio.gather(*(fetch() for _, _, fetch in cards), return_exceptions=True)

    kpis = []
    for (title, sub, _), result in zip(cards, results):
        if isinstance(result, GraphQLError):
            logger.warning(f"Admin KPI '{title}' unavailable: {result.message}")
            kpis.append({"title": title, "value": None, "sub": sub, "status": "error", "error": result.message})
        elif isinstance(result, BaseException):
            raise result
        else:
            kpis.append({"title": title, "value": f"{result:,}", "sub": sub, "status": "ready", "error": None})

    recent = await get_audit_logs(page=1, limit=5)
    return {"kpis": kpis, "recent_activity": recent["data"]}
