USER_LOGIN = """
mutation UserLogin($email: String!, $password: String!) {
  UserLogin(email: $email, password: $password) {
    id
    fullName
    email
    verified
    role
    token
  }
}
"""

FORGOT_PASSWORD = """
mutation ForgotPassword($email: String!) {
  ForgotPassword(email: $email)
}
"""

FORGOT_PASSWORD_VERIFY = """
mutation ForgotPasswordVerify($email: String!, $code: String!) {
  ForgotPasswordVerify(email: $email, code: $code)
}
"""

FORGOT_PASSWORD_NEW = """
mutation ForgotPasswordNewPassword($email: String!, $newPassword: String!, $code: String!) {
  ForgotPasswordNewPassword(email: $email, newPassword: $newPassword, code: $code)
}
"""
