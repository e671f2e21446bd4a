from pydantic import Field
from typing import List, Optional

from models.auth import CamelModel
from models.catalog import NamedRef


class OrderEmployee(CamelModel):
    id: Optional[str] = None
    full_name: Optional[str] = None


class OrderMenuItem(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None


class OrderItem(CamelModel):
    id: Optional[str] = None
    menu_item: Optional[OrderMenuItem] = None
    quantity: int = 0
    price: float = 0.0


class Order(CamelModel):
    id: str
    employee: Optional[OrderEmployee] = None
    branch: Optional[NamedRef] = None
    employee_id: Optional[str] = None
    branch_id: Optional[str] = None
    order_type: Optional[str] = None
    guest_note: Optional[str] = None
    total_amount: float = 0.0
    items: List[OrderItem] = Field(default_factory=list)
    created_at: Optional[str] = None


class OrderLine(CamelModel):
    name: str
    quantity: int
    line_total: str


class EmployeeOrderRow(CamelModel):
    id: str
    number: str
    placed_at: Optional[str] = None
    order_type: str = "N/A"
    guest_note: Optional[str] = None
    branch_name: Optional[str] = None
    lines: List[OrderLine] = Field(default_factory=list)
    item_count: int = 0
    total: str


class EmployeeOrders(CamelModel):
    employee_id: str
    employee_name: str
    period_label: str
    start_date: str
    end_date: str
    order_count: int
    orders: List[EmployeeOrderRow] = Field(default_factory=list)
