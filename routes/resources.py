from fastapi import APIRouter, Body, Depends, Request
from typing import Any, Dict, Optional
from core.auth import SessionContext, require_role
from core.resources import ResourceDefinition
from controllers import resource_controller
from controllers.audit_controller import log_audit, get_client_ip as _ip, get_user_agent as _ua


def _record_name(record: Any, draft: Dict[str, Any]) -> str:
    if isinstance(record, dict):
        return record.get("name") or record.get("fullName") or draft.get("name") or draft.get("fullName") or ""
    return draft.get("name") or draft.get("fullName") or ""


def build_resource_router(defn: ResourceDefinition, *roles: str, module: str) -> APIRouter:
    """List (and, unless read-only, create/edit/delete) endpoints for one resource."""
    router = APIRouter(prefix=f"/{defn.name}", tags=[module])
    guard = require_role(*roles)

    @router.get("")
    async def list_items(request: Request, q: Optional[str] = None, ctx: SessionContext = Depends(guard)):
        return await resource_controller.list_resource(defn, ctx, q, dict(request.query_params))

    if defn.read_only:
        return router

    @router.post("")
    async def create_item(request: Request, draft: Dict[str, Any] = Body(...), ctx: SessionContext = Depends(guard)):
        result = await resource_controller.save_resource(defn, ctx, draft)
        record = result["record"]
        record_id = str(record.get("id")) if isinstance(record, dict) and record.get("id") is not None else None
        await log_audit(ctx.user.id, ctx.user.full_name, ctx.user.role, "CREATE", module, defn.name, f"Created {defn.label.lower()} '{_record_name(record, draft)}'", record_id, _ip(request), _ua(request))
        return result

    @router.put("/{item_id}")
    async def update_item(item_id: str, request: Request, draft: Dict[str, Any] = Body(...), ctx: SessionContext = Depends(guard)):
        result = await resource_controller.save_resource(defn, ctx, draft, item_id)
        await log_audit(ctx.user.id, ctx.user.full_name, ctx.user.role, "UPDATE", module, defn.name, f"Updated {defn.label.lower()} '{_record_name(result['record'], draft)}'", item_id, _ip(request), _ua(request))
        return result

    @router.delete("/{item_id}")
    async def delete_item(item_id: str, request: Request, confirm: bool = False, ctx: SessionContext = Depends(guard)):
        result = await resource_controller.delete_resource(defn, ctx, item_id, confirm)
        await log_audit(ctx.user.id, ctx.user.full_name, ctx.user.role, "DELETE", module, defn.name, f"Deleted {defn.label.lower()} {item_id}", item_id, _ip(request), _ua(request))
        return result

    return router
