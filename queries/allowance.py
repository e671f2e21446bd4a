ALLOWANCE_SUMMARY = """
query AllowanceSummary($month: Int!, $year: Int!) {
  allowanceSummary(month: $month, year: $year) {
    totalIssued
    totalUsed
    remainingBalance
    usagePercentage
  }
}
"""

OVER_USAGE_CASES = """
query OverUsageCases($month: Int!, $year: Int!) {
  overUsageCases(month: $month, year: $year) {
    userId
    userName
    allowedAmount
    usedAmount
    overUsage
  }
}
"""

OVER_USAGE_BY_GROUP = """
query OverUsageByGroup($month: Int!, $year: Int!) {
  overUsageByGroup(month: $month, year: $year) {
    groupName
    totalOverUsage
    employeeCount
  }
}
"""

ALLOWANCE_USAGE_TREND = """
query AllowanceUsageTrend($months: Int) {
  allowanceUsageTrend(months: $months) {
    month
    selfUsage
    guestUsage
  }
}
"""

EMPLOYEE_ALLOWANCES = """
query EmployeeAllowances($month: Int, $year: Int) {
  employeeAllowances(month: $month, year: $year) {
    id
    user {
      id
      fullName
      email
      employeeAllowanceGroup { id name monthlyAllowance }
    }
    month
    year
    initialAmount
    currentBalance
    createdAt
    updatedAt
  }
}
"""

EMPLOYEE_ALLOWANCE_GROUPS = """
query EmployeeAllowanceGroups {
  employeeAllowanceGroups {
    id
    name
    monthlyAllowance
  }
}
"""

ASSIGN_EMPLOYEE_ALLOWANCE_GROUP = """
mutation AssignEmployeeAllowanceGroup($userId: ID!, $employeeAllowanceGroupId: ID!) {
  assignEmployeeAllowanceGroup(userId: $userId, employeeAllowanceGroupId: $employeeAllowanceGroupId)
}
"""
