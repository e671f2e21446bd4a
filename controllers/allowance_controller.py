from fastapi import HTTPException
from typing import Optional
import asyncio
import logging

import gateway
from core.allowance import employee_allowances, group_allowances
from core.auth import SessionContext
from core.coordination import mutation_gate, MutationInFlight
from core.graphql import GraphQLError, to_http_exception
from core.resources import filter_records, coerce_id
from controllers.reports_controller import resolve_period
from models.allowance import AllowanceGroupRef, AssignGroupRequest
from models.users import EmployeeUser
from queries import allowance as allowance_queries
from queries import users as user_queries

logger = logging.getLogger(__name__)

ASSIGNMENT_SEARCH = ("fullName", "email", "employeeAllowanceGroup.name")


# ── Allowances ────────────────────────────────────────────

async def get_allowances(ctx: SessionContext, month: Optional[int] = None, year: Optional[int] = None,
                         view: str = "employee") -> dict:
    if view not in ("employee", "group"):
        raise HTTPException(status_code=422, detail="View must be 'employee' or 'group'")
    month, year = resolve_period(month, year)
    try:
        data = await gateway.graphql.execute(
            allowance_queries.EMPLOYEE_ALLOWANCES, {"month": month, "year": year}, token=ctx.token,
        )
    except GraphQLError as e:
        raise to_http_exception(e, "Failed to load allowances")

    rows = employee_allowances(data.get("employeeAllowances"))
    items = group_allowances(rows) if view == "group" else rows
    return {"month": month, "year": year, "view": view, "items": items, "total": len(items)}


# ── Group assignment ──────────────────────────────────────

def _employee(record: dict) -> EmployeeUser:
    group = record.get("employeeAllowanceGroup") or {}
    return EmployeeUser.model_validate({**record, "groupName": group.get("name")})


async def get_assignments(ctx: SessionContext, q: Optional[str] = None) -> dict:
    try:
        users_data, groups_data = await asyncio.gather(
            gateway.graphql.execute(user_queries.GET_EMPLOYEE_USERS, token=ctx.token),
            gateway.graphql.execute(allowance_queries.EMPLOYEE_ALLOWANCE_GROUPS, token=ctx.token),
        )
    except GraphQLError as e:
        raise to_http_exception(e, "Failed to load employees")

    employees = filter_records(users_data.get("GetEmployeeUsers") or [], q, ASSIGNMENT_SEARCH)
    return {
        "employees": [_employee(u) for u in employees],
        "groups": [AllowanceGroupRef.model_validate(g) for g in groups_data.get("employeeAllowanceGroups") or []],
        "query": q or "",
    }


async def assign_group(ctx: SessionContext, data: AssignGroupRequest) -> dict:
    user_id = coerce_id(data.user_id)
    group_id = coerce_id(data.group_id)
    if not user_id or not group_id:
        raise HTTPException(status_code=422, detail="Select an employee and a group")
    if group_id == coerce_id(data.current_group_id):
        raise HTTPException(status_code=422, detail="Selected group is the same as the user's current group.")

    try:
        async with mutation_gate.hold((ctx.user.id, "allowance-group-assignment")):
            try:
                await gateway.graphql.execute(
                    allowance_queries.ASSIGN_EMPLOYEE_ALLOWANCE_GROUP,
                    {"userId": user_id, "employeeAllowanceGroupId": group_id},
                    token=ctx.token,
                )
            except GraphQLError as e:
                logger.error(f"Assigning user {user_id} to group {group_id} failed: {e.message}")
                raise to_http_exception(e, "Assignment failed.")
            # The assignment is applied; a failed reload must not read as a failed assignment
            try:
                refreshed = {**await get_assignments(ctx), "refetchError": None}
            except HTTPException as e:
                logger.warning(f"Reloading assignments after assigning user {user_id} failed: {e.detail}")
                refreshed = {"employees": None, "groups": None, "query": "", "refetchError": e.detail}
    except MutationInFlight:
        raise HTTPException(status_code=409, detail="An assignment is already in progress")

    return {"message": "Assignment successful.", "user_id": user_id, "group_id": group_id, **refreshed}
