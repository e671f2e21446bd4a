from fastapi import HTTPException
from typing import Any, Mapping, Optional
import logging

import gateway
from core.auth import SessionContext
from core.coordination import mutation_gate, MutationInFlight
from core.graphql import GraphQLError, to_http_exception
from core.resources import (
    ResourceDefinition, DraftValidationError, validate_draft, filter_records,
    apply_facets, coerce_id,
)

logger = logging.getLogger(__name__)


def _list_variables(defn: ResourceDefinition, params: Mapping[str, Any]) -> dict:
    variables = {}
    for param, (variable, cast) in defn.list_params.items():
        raw = params.get(param)
        if raw is None or raw == "":
            continue
        try:
            value = cast(raw)
        except (TypeError, ValueError):
            raise HTTPException(status_code=422, detail=f"Invalid value for {param}")
        if value is not None:
            variables[variable] = value
    return variables


async def _fetch(defn: ResourceDefinition, ctx: SessionContext, variables: dict) -> list:
    try:
        data = await gateway.graphql.execute(defn.list_query, variables, token=ctx.token)
    except GraphQLError as e:
        raise to_http_exception(e, f"Failed to load {defn.label.lower()} list")
    records = data.get(defn.list_key) or []
    if defn.row is not None:
        records = [defn.row(r) for r in records]
    return records


# ── List ──────────────────────────────────────────────────

async def list_resource(defn: ResourceDefinition, ctx: SessionContext, q: Optional[str] = None,
                        params: Optional[Mapping[str, Any]] = None) -> dict:
    params = params or {}
    records = await _fetch(defn, ctx, _list_variables(defn, params))
    records = filter_records(records, q, defn.searchable)
    records = apply_facets(records, defn.facets, params)
    items = [defn.model.model_validate(r) for r in records]
    return {"items": items, "total": len(items), "query": q or ""}


async def _refetch(defn: ResourceDefinition, ctx: SessionContext) -> dict:
    """Fresh collection after an applied mutation. A failed reload is reported, not raised."""
    try:
        refreshed = await list_resource(defn, ctx)
    except HTTPException as e:
        logger.warning(f"Reloading {defn.name} after a mutation failed: {e.detail}")
        return {"items": None, "total": None, "refetchError": e.detail}
    return {"items": refreshed["items"], "total": refreshed["total"], "refetchError": None}


# ── Create / Edit ─────────────────────────────────────────

async def save_resource(defn: ResourceDefinition, ctx: SessionContext, draft: Mapping[str, Any],
                        item_id: Optional[str] = None) -> dict:
    if defn.read_only:
        raise HTTPException(status_code=405, detail=f"{defn.label} records are read-only")
    try:
        clean = validate_draft(defn, draft, item_id)
    except DraftValidationError as e:
        raise HTTPException(status_code=422, detail={"message": "Please fix the highlighted fields", "errors": e.errors})

    binding = defn.create if clean.is_create else defn.update
    if binding is None:
        raise HTTPException(status_code=405, detail=f"{defn.label} records cannot be {'created' if clean.is_create else 'edited'}")

    try:
        async with mutation_gate.hold((ctx.user.id, defn.name)):
            try:
                data = await gateway.graphql.execute(
                    binding.document, binding.build_variables(clean.id, clean.values), token=ctx.token,
                )
            except GraphQLError as e:
                logger.error(f"Saving {defn.name} {clean.id or '(new)'} failed: {e.message}")
                raise to_http_exception(e, f"Failed to save {defn.label.lower()}")

            record = data.get(binding.result_key)
            if isinstance(record, dict) and defn.row is not None:
                record = defn.row(record)
            refreshed = await _refetch(defn, ctx)
    except MutationInFlight:
        raise HTTPException(status_code=409, detail=f"A {defn.label.lower()} save is already in progress")

    return {"record": record, **refreshed}


# ── Delete ────────────────────────────────────────────────

async def delete_resource(defn: ResourceDefinition, ctx: SessionContext, item_id: Any, confirm: bool) -> dict:
    if defn.delete is None:
        raise HTTPException(status_code=405, detail=f"{defn.label} records cannot be deleted")
    if not confirm:
        raise HTTPException(status_code=400, detail="Deletion must be confirmed")
    ident = coerce_id(item_id)
    if ident is None:
        raise HTTPException(status_code=422, detail=f"{defn.label} id is required")

    try:
        await gateway.graphql.execute(defn.delete.document, defn.delete.build_variables(ident, {}), token=ctx.token)
    except GraphQLError as e:
        logger.error(f"Deleting {defn.name} {ident} failed: {e.message}")
        raise to_http_exception(e, f"Failed to delete {defn.label.lower()}")

    return {"deleted": ident, **await _refetch(defn, ctx)}
