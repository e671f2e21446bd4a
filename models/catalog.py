from typing import Optional

from models.auth import CamelModel


class NamedRef(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None


class Branch(CamelModel):
    id: str
    name: str
    location: Optional[str] = None


class EmployeeGroup(CamelModel):
    id: str
    name: str
    monthly_allowance: Optional[float] = None


class Menu(CamelModel):
    id: str
    name: str
    branch: Optional[NamedRef] = None
    branch_id: Optional[str] = None


class MenuItem(CamelModel):
    id: str
    name: str
    price: Optional[float] = None
    description: Optional[str] = None
    menu: Optional[NamedRef] = None
    menu_id: Optional[str] = None
    branch: Optional[NamedRef] = None
    branch_id: Optional[str] = None
