# ── Branches ──────────────────────────────────────────────

BRANCHES = """
query Branches {
  branches {
    id
    name
    location
  }
}
"""

CREATE_BRANCH = """
mutation CreateBranch($name: String!, $location: String) {
  createBranch(name: $name, location: $location) {
    id
    name
    location
  }
}
"""

UPDATE_BRANCH = """
mutation UpdateBranch($updateBranchId: ID!, $name: String, $location: String) {
  updateBranch(id: $updateBranchId, name: $name, location: $location) {
    id
    name
    location
  }
}
"""

DELETE_BRANCH = """
mutation DeleteBranch($deleteBranchId: ID!) {
  deleteBranch(id: $deleteBranchId)
}
"""

# ── Employee groups ───────────────────────────────────────

EMPLOYEE_GROUPS = """
query EmployeeGroups {
  employeeGroups {
    id
    name
    monthlyAllowance
  }
}
"""

CREATE_EMPLOYEE_GROUP = """
mutation CreateEmployeeGroup($name: String!, $monthlyAllowance: Float!) {
  createEmployeeGroup(name: $name, monthlyAllowance: $monthlyAllowance) {
    id
    name
    monthlyAllowance
  }
}
"""

UPDATE_EMPLOYEE_GROUP = """
mutation UpdateEmployeeGroup($updateEmployeeGroupId: ID!, $name: String, $monthlyAllowance: Float) {
  updateEmployeeGroup(id: $updateEmployeeGroupId, name: $name, monthlyAllowance: $monthlyAllowance) {
    id
    name
    monthlyAllowance
  }
}
"""

DELETE_EMPLOYEE_GROUP = """
mutation DeleteEmployeeGroup($deleteEmployeeGroupId: ID!) {
  deleteEmployeeGroup(id: $deleteEmployeeGroupId)
}
"""

# ── Menus ─────────────────────────────────────────────────

MENUS = """
query Menus($branchId: ID) {
  menus(branchId: $branchId) {
    id
    name
    branch {
      name
    }
    branchId
  }
}
"""

CREATE_MENU = """
mutation CreateMenu($name: String!, $branchId: ID!) {
  createMenu(name: $name, branchId: $branchId) {
    id
    name
    branch {
      name
    }
    branchId
  }
}
"""

UPDATE_MENU = """
mutation UpdateMenu($updateMenuId: ID!, $name: String, $branchId: ID) {
  updateMenu(id: $updateMenuId, name: $name, branchId: $branchId) {
    id
    name
    branch {
      name
    }
    branchId
  }
}
"""

DELETE_MENU = """
mutation DeleteMenu($deleteMenuId: ID!) {
  deleteMenu(id: $deleteMenuId)
}
"""

# ── Menu items ────────────────────────────────────────────

MENU_ITEMS = """
query MenuItems {
  menuItems {
    id
    name
    price
    description
    menu { name }
    menuId
    branch { name }
    branchId
  }
}
"""

CREATE_MENU_ITEM = """
mutation CreateMenuItem($name: String!, $price: Float!, $menuId: ID!, $description: String) {
  createMenuItem(name: $name, price: $price, menuId: $menuId, description: $description) {
    id
    name
    price
    description
    menu { name }
    menuId
    branch { name }
    branchId
  }
}
"""

UPDATE_MENU_ITEM = """
mutation UpdateMenuItem($updateMenuItemId: ID!, $name: String, $description: String, $price: Float, $menuId: ID) {
  updateMenuItem(id: $updateMenuItemId, name: $name, description: $description, price: $price, menuId: $menuId) {
    id
    name
    price
    description
    menu { name }
    menuId
    branch { name }
    branchId
  }
}
"""

DELETE_MENU_ITEM = """
mutation DeleteMenuItem($deleteMenuItemId: ID!) {
  deleteMenuItem(id: $deleteMenuItemId)
}
"""
