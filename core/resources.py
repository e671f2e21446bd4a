"""
Generic list/create/edit/delete view over one GraphQL resource.

Every admin collection (branches, groups, menus, items, users, orders) is an
instance of ResourceDefinition rather than its own controller. The helpers in
this module are pure so they can be tested without a network.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type
import math

from pydantic import BaseModel
from pydantic.networks import validate_email


TEXT = "text"
NUMBER = "number"
ID = "id"
CHOICE = "choice"
EMAIL = "email"


class DraftValidationError(Exception):
    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


@dataclass(frozen=True)
class ResourceField:
    name: str
    kind: str = TEXT
    required: bool = False
    label: Optional[str] = None
    choices: Tuple[str, ...] = ()
    default: Any = None
    # Optional text fields submit null instead of ""
    blank_as_null: bool = True


@dataclass(frozen=True)
class MutationBinding:
    document: str
    result_key: str
    build_variables: Callable[[Optional[str], Dict[str, Any]], dict]


@dataclass(frozen=True)
class ResourceDefinition:
    name: str
    label: str
    list_query: str
    list_key: str
    model: Type[BaseModel]
    searchable: Sequence[str]
    fields: Sequence[ResourceField] = ()
    create: Optional[MutationBinding] = None
    update: Optional[MutationBinding] = None
    delete: Optional[MutationBinding] = None
    # request query param -> (list query variable, cast)
    list_params: Mapping[str, Tuple[str, Callable[[str], Any]]] = field(default_factory=dict)
    row: Optional[Callable[[dict], dict]] = None
    facets: Mapping[str, str] = field(default_factory=dict)

    @property
    def read_only(self) -> bool:
        return self.create is None and self.update is None and self.delete is None


@dataclass(frozen=True)
class CleanDraft:
    id: Optional[str]
    values: Dict[str, Any]

    @property
    def is_create(self) -> bool:
        return self.id is None


def resolve_path(record: Mapping[str, Any], path: str) -> Any:
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def _searchable_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def matches(record: Mapping[str, Any], query: Optional[str], searchable: Iterable[str]) -> bool:
    q = (query or "").strip().lower()
    if not q:
        return True
    return any(q in _searchable_text(resolve_path(record, path)).lower() for path in searchable)


def filter_records(records: Iterable[Mapping[str, Any]], query: Optional[str], searchable: Iterable[str]) -> List[Mapping[str, Any]]:
    paths = tuple(searchable)
    return [r for r in records if matches(r, query, paths)]


def apply_facets(records: Iterable[Mapping[str, Any]], facets: Mapping[str, str], selected: Mapping[str, Optional[str]]) -> List[Mapping[str, Any]]:
    """Exact-match dropdown filters; "all" or empty means no constraint."""
    out = list(records)
    for param, path in facets.items():
        wanted = selected.get(param)
        if wanted and wanted != "all":
            out = [r for r in out if resolve_path(r, path) == wanted]
    return out


def parse_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def validate_draft(definition: ResourceDefinition, draft: Mapping[str, Any], item_id: Any = None) -> CleanDraft:
    errors: Dict[str, str] = {}
    values: Dict[str, Any] = {}
    for f in definition.fields:
        label = f.label or f.name
        raw = draft.get(f.name)
        if f.kind == NUMBER:
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                if f.required:
                    errors[f.name] = f"{label} is required"
                else:
                    values[f.name] = None
                continue
            number = parse_number(raw)
            if number is None:
                errors[f.name] = f"{label} must be a number"
            else:
                values[f.name] = number
        elif f.kind == ID:
            ident = coerce_id(raw)
            if ident is None and f.required:
                errors[f.name] = f"{label} is required"
            else:
                values[f.name] = ident
        elif f.kind == CHOICE:
            text = str(raw).strip() if raw is not None else ""
            if not text:
                if f.required:
                    errors[f.name] = f"{label} is required"
                else:
                    values[f.name] = f.default if f.default is not None else (f.choices[0] if f.choices else None)
            elif f.choices and text not in f.choices:
                errors[f.name] = f"{label} must be one of {', '.join(f.choices)}"
            else:
                values[f.name] = text
        elif f.kind == EMAIL:
            text = str(raw).strip() if raw is not None else ""
            if not text:
                if f.required:
                    errors[f.name] = f"{label} is required"
                else:
                    values[f.name] = None
                continue
            try:
                values[f.name] = validate_email(text)[1]
            except ValueError:
                errors[f.name] = f"{label} must be a valid email address"
        else:
            text = str(raw).strip() if raw is not None else ""
            if not text and f.required:
                errors[f.name] = f"{label} is required"
            elif not text and f.blank_as_null:
                values[f.name] = None
            else:
                values[f.name] = text
    if errors:
        raise DraftValidationError(errors)
    ident = coerce_id(item_id if item_id is not None else draft.get("id"))
    return CleanDraft(id=ident, values=values)


def id_variables(id_variable: str) -> Callable[[Optional[str], Dict[str, Any]], dict]:
    """Variables builder for mutations that take the id plus the draft fields."""
    def build(item_id: Optional[str], values: Dict[str, Any]) -> dict:
        variables = dict(values)
        if item_id is not None:
            variables[id_variable] = item_id
        return variables
    return build


def plain_variables(item_id: Optional[str], values: Dict[str, Any]) -> dict:
    return dict(values)
