from typing import Any, Dict, Optional

from core.resources import (
    ResourceDefinition, ResourceField, MutationBinding, TEXT, NUMBER, ID, CHOICE, EMAIL,
    id_variables, plain_variables,
)
from models.catalog import Branch, EmployeeGroup, Menu, MenuItem
from models.orders import Order
from models.users import UserRow
from queries import catalog, users, orders


def _optional_scope(value: str) -> Optional[str]:
    return None if value in ("", "all") else value


def _delete_variables(id_variable: str):
    def build(item_id: Optional[str], values: Dict[str, Any]) -> dict:
        return {id_variable: item_id}
    return build


BRANCHES = ResourceDefinition(
    name="branches",
    label="Branch",
    list_query=catalog.BRANCHES,
    list_key="branches",
    model=Branch,
    searchable=("name", "location"),
    fields=(
        ResourceField("name", TEXT, required=True, label="Name"),
        ResourceField("location", TEXT, label="Location"),
    ),
    create=MutationBinding(catalog.CREATE_BRANCH, "createBranch", plain_variables),
    update=MutationBinding(catalog.UPDATE_BRANCH, "updateBranch", id_variables("updateBranchId")),
    delete=MutationBinding(catalog.DELETE_BRANCH, "deleteBranch", _delete_variables("deleteBranchId")),
)

EMPLOYEE_GROUPS = ResourceDefinition(
    name="groups",
    label="Employee group",
    list_query=catalog.EMPLOYEE_GROUPS,
    list_key="employeeGroups",
    model=EmployeeGroup,
    searchable=("name", "monthlyAllowance"),
    fields=(
        ResourceField("name", TEXT, required=True, label="Name"),
        ResourceField("monthlyAllowance", NUMBER, required=True, label="Monthly allowance"),
    ),
    create=MutationBinding(catalog.CREATE_EMPLOYEE_GROUP, "createEmployeeGroup", plain_variables),
    update=MutationBinding(catalog.UPDATE_EMPLOYEE_GROUP, "updateEmployeeGroup", id_variables("updateEmployeeGroupId")),
    delete=MutationBinding(catalog.DELETE_EMPLOYEE_GROUP, "deleteEmployeeGroup", _delete_variables("deleteEmployeeGroupId")),
)

MENUS = ResourceDefinition(
    name="menus",
    label="Menu",
    list_query=catalog.MENUS,
    list_key="menus",
    model=Menu,
    searchable=("name", "branch.name"),
    fields=(
        ResourceField("name", TEXT, required=True, label="Name"),
        ResourceField("branchId", ID, required=True, label="Branch"),
    ),
    create=MutationBinding(catalog.CREATE_MENU, "createMenu", plain_variables),
    update=MutationBinding(catalog.UPDATE_MENU, "updateMenu", id_variables("updateMenuId")),
    delete=MutationBinding(catalog.DELETE_MENU, "deleteMenu", _delete_variables("deleteMenuId")),
    list_params={"branch_id": ("branchId", _optional_scope)},
)

MENU_ITEMS = ResourceDefinition(
    name="menu-items",
    label="Menu item",
    list_query=catalog.MENU_ITEMS,
    list_key="menuItems",
    model=MenuItem,
    searchable=("name", "price", "menu.name", "branch.name"),
    fields=(
        ResourceField("name", TEXT, required=True, label="Name"),
        ResourceField("price", NUMBER, required=True, label="Price"),
        ResourceField("menuId", ID, required=True, label="Menu"),
        ResourceField("description", TEXT, label="Description", blank_as_null=False),
    ),
    create=MutationBinding(catalog.CREATE_MENU_ITEM, "createMenuItem", plain_variables),
    update=MutationBinding(catalog.UPDATE_MENU_ITEM, "updateMenuItem", id_variables("updateMenuItemId")),
    delete=MutationBinding(catalog.DELETE_MENU_ITEM, "deleteMenuItem", _delete_variables("deleteMenuItemId")),
)


# ── Users ─────────────────────────────────────────────────

USER_ROLE_CHOICES = ("Admin", "Finance", "Employee")
ROLE_TO_API = {"Admin": "ADMIN", "Finance": "FINANCE", "Employee": "EMPLOYEE"}
API_TO_ROLE = {v: k for k, v in ROLE_TO_API.items()}


def user_row(record: dict) -> dict:
    role = record.get("role") or "EMPLOYEE"
    return {
        **record,
        "role": role,
        "roleLabel": API_TO_ROLE.get(role, role),
        "status": "inactive" if record.get("verified") is False else "active",
    }


def _user_input(values: Dict[str, Any]) -> dict:
    return {
        "fullName": values["fullName"],
        "email": values["email"],
        "role": ROLE_TO_API.get(values["role"], values["role"]),
    }


def _create_user_variables(item_id: Optional[str], values: Dict[str, Any]) -> dict:
    return {"user": _user_input(values)}


def _edit_user_variables(item_id: Optional[str], values: Dict[str, Any]) -> dict:
    return {"editUserId": item_id, "user": _user_input(values)}


USERS = ResourceDefinition(
    name="users",
    label="User",
    list_query=users.GET_ALL_USERS,
    list_key="GetAllUsers",
    model=UserRow,
    searchable=("fullName", "email"),
    fields=(
        ResourceField("fullName", TEXT, required=True, label="Name"),
        ResourceField("email", EMAIL, required=True, label="Email"),
        ResourceField("role", CHOICE, label="Role", choices=USER_ROLE_CHOICES, default="Employee"),
    ),
    create=MutationBinding(users.CREATE_USER, "CreateUser", _create_user_variables),
    update=MutationBinding(users.EDIT_USER, "EditUser", _edit_user_variables),
    delete=MutationBinding(users.DELETE_USER, "DeleteUser", _delete_variables("deleteUserId")),
    row=user_row,
    facets={"role": "roleLabel", "status": "status"},
)


# ── Transactions (orders) ─────────────────────────────────

TRANSACTIONS = ResourceDefinition(
    name="transactions",
    label="Transaction",
    list_query=orders.GET_ORDERS,
    list_key="orders",
    model=Order,
    searchable=("id", "employee.fullName", "branch.name", "orderType", "guestNote"),
    list_params={
        "employee_id": ("employeeId", _optional_scope),
        "branch_id": ("branchId", _optional_scope),
        "start_date": ("startDate", str),
        "end_date": ("endDate", str),
        "page": ("page", int),
        "limit": ("limit", int),
        "order_type": ("orderType", _optional_scope),
    },
)

ADMIN_RESOURCES = [BRANCHES, EMPLOYEE_GROUPS, MENUS, MENU_ITEMS, USERS, TRANSACTIONS]
