GET_ALL_USERS = """
query GetAllUsers {
  GetAllUsers {
    id
    fullName
    email
    verified
    role
  }
}
"""

CREATE_USER = """
mutation CreateUser($user: UserInput!) {
  CreateUser(user: $user) {
    id
    fullName
    email
    verified
    role
  }
}
"""

EDIT_USER = """
mutation EditUser($editUserId: ID!, $user: UserEditInput!) {
  EditUser(id: $editUserId, user: $user) {
    id
    fullName
    email
    verified
    role
  }
}
"""

DELETE_USER = """
mutation DeleteUser($deleteUserId: ID!) {
  DeleteUser(id: $deleteUserId)
}
"""

GET_EMPLOYEE_USERS = """
query GetEmployeeUsers {
  GetEmployeeUsers {
    id
    fullName
    email
    verified
    role
    employeeAllowanceGroup { name }
    employeeAllowanceGroupId
  }
}
"""

GET_USER_BY_ID = """
query GetUsersById($getUsersByIdId: ID!) {
  GetUsersById(id: $getUsersByIdId) {
    id
    fullName
  }
}
"""
