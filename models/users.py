from typing import Optional

from models.auth import CamelModel


class UserRow(CamelModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: str = "EMPLOYEE"
    role_label: str = "Employee"
    verified: Optional[bool] = None
    status: str = "active"


class EmployeeUser(CamelModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    group_name: Optional[str] = None
    employee_allowance_group_id: Optional[str] = None
