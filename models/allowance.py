from pydantic import Field
from typing import Any, Dict, List, Optional

from models.auth import CamelModel


class AllowanceSummary(CamelModel):
    month: Optional[int] = None
    year: Optional[int] = None
    total_issued: float = 0.0
    total_used: float = 0.0
    remaining_balance: float = 0.0
    usage_percentage: float = 0.0
    usage_label: str = "0.0%"


class OverUsageCase(CamelModel):
    user_id: str
    user_name: Optional[str] = None
    allowed_amount: float = 0.0
    used_amount: float = 0.0
    over_usage: float = 0.0
    detail_path: Optional[str] = None


class OverUsageByGroup(CamelModel):
    group_name: str
    total_over_usage: float = 0.0
    employee_count: int = 0
    bar_width: float = 0.0


class TrendPoint(CamelModel):
    month: str
    self_usage: float = 0.0
    guest_usage: float = 0.0
    self_height: float = 0.0
    guest_height: float = 0.0


class KPICard(CamelModel):
    title: str
    value: str
    sub: str
    trend: str = "flat"


class AllowanceGroupRef(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    monthly_allowance: Optional[float] = None


class AllowanceUser(CamelModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    employee_allowance_group: Optional[AllowanceGroupRef] = None


class EmployeeAllowance(CamelModel):
    id: str
    user: Optional[AllowanceUser] = None
    month: int
    year: int
    initial_amount: float = 0.0
    current_balance: float = 0.0
    used_amount: float = 0.0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class GroupAllowanceRow(CamelModel):
    name: str
    monthly_allowance: Optional[float] = None
    employees: int = 0
    issued: float = 0.0
    used: float = 0.0
    remaining: float = 0.0


class PanelResult(CamelModel):
    status: str
    data: Optional[Any] = None
    error: Optional[str] = None


class ReportsDashboard(CamelModel):
    month: int
    year: int
    tab: str
    months: int
    panels: Dict[str, PanelResult] = Field(default_factory=dict)


class FinanceOverview(CamelModel):
    month: int
    year: int
    cards: List[KPICard] = Field(default_factory=list)
    panels: Dict[str, PanelResult] = Field(default_factory=dict)


class AssignGroupRequest(CamelModel):
    user_id: Optional[str] = None
    group_id: Optional[str] = None
    current_group_id: Optional[str] = None
