from fastapi import APIRouter, Depends
from typing import Optional
from models.auth import Role
from core.auth import SessionContext, require_role
from controllers import dashboard_controller, resource_controller
from controllers.resources import ADMIN_RESOURCES, BRANCHES, MENUS
from routes.resources import build_resource_router

router = APIRouter(prefix="/admin", tags=["admin"])

admin_only = require_role(Role.ADMIN)


@router.get("/home")
async def admin_home(ctx: SessionContext = Depends(admin_only)):
    return await dashboard_controller.get_admin_home(ctx)


# ── Lookups for form selects ──────────────────────────────

@router.get("/lookups/branches")
async def branch_options(ctx: SessionContext = Depends(admin_only)):
    result = await resource_controller.list_resource(BRANCHES, ctx)
    return [{"id": b.id, "name": b.name} for b in result["items"]]


@router.get("/lookups/menus")
async def menu_options(branch_id: Optional[str] = None, ctx: SessionContext = Depends(admin_only)):
    result = await resource_controller.list_resource(MENUS, ctx, params={"branch_id": branch_id})
    return [{"id": m.id, "name": m.name, "branchId": m.branch_id} for m in result["items"]]


for _definition in ADMIN_RESOURCES:
    router.include_router(build_resource_router(_definition, Role.ADMIN, module="admin"))
