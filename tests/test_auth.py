"""
Login, logout, current user and the forgot-password flow.
"""
from config import TOKEN_COOKIE, USER_COOKIE, RESEND_COOLDOWN_SECONDS

from conftest import graphql_error


LOGIN_PAYLOAD = {"UserLogin": {"id": 7, "fullName": "Selam Tadesse", "email": "selam@example.com",
                               "verified": True, "role": "FINANCE", "token": "upstream-token"}}


# ═══════════════════════════════════════════════════════════════
# 1. LOGIN / LOGOUT
# ═══════════════════════════════════════════════════════════════
class TestLogin:

    def test_empty_fields_never_dispatch(self, client, upstream):
        res = client.post("/auth/login", json={"email": "", "password": "secret"})
        assert res.status_code == 422
        assert res.json()["detail"] == "Please fill in all fields"
        assert upstream.calls == []

    def test_login_persists_session_and_routes_by_role(self, client, upstream):
        upstream.on("UserLogin", LOGIN_PAYLOAD)
        res = client.post("/auth/login", json={"email": "selam@example.com", "password": "secret"})
        assert res.status_code == 200
        body = res.json()
        assert body["redirect"] == "/finance"
        assert body["user"]["id"] == "7"
        assert body["user"]["fullName"] == "Selam Tadesse"
        assert TOKEN_COOKIE in res.cookies
        assert USER_COOKIE in res.cookies
        assert "upstream-token" not in res.headers.get("set-cookie", "")

        me = client.get("/auth/me")
        assert me.status_code == 200
        assert me.json()["roleLabel"] == "Finance"
        assert me.json()["initials"] == "ST"
        assert me.json()["home"] == "/finance"

    def test_session_token_is_forwarded_upstream(self, client, upstream):
        upstream.on("UserLogin", LOGIN_PAYLOAD)
        upstream.on("AllowanceUsageTrend", {"allowanceUsageTrend": []})
        client.post("/auth/login", json={"email": "selam@example.com", "password": "secret"})
        client.get("/finance/reports/trend")
        assert upstream.calls[-1][2] == "Bearer upstream-token"

    def test_missing_token_is_an_invalid_response(self, client, upstream):
        upstream.on("UserLogin", {"UserLogin": {"id": "1", "role": "ADMIN", "token": None}})
        res = client.post("/auth/login", json={"email": "a@example.com", "password": "secret"})
        assert res.status_code == 502
        assert res.json()["detail"] == "Invalid login response."
        assert TOKEN_COOKIE not in res.cookies

    def test_wrong_credentials_surface_server_message(self, client, upstream):
        upstream.on("UserLogin", lambda v: graphql_error("Invalid email or password"))
        res = client.post("/auth/login", json={"email": "a@example.com", "password": "nope"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid email or password"

    def test_unknown_role_goes_to_login_route(self, client, upstream):
        upstream.on("UserLogin", {"UserLogin": {"id": "3", "role": "EMPLOYEE", "token": "x"}})
        res = client.post("/auth/login", json={"email": "e@example.com", "password": "secret"})
        assert res.json()["redirect"] == "/"

    def test_login_is_audited(self, client, upstream):
        upstream.on("UserLogin", LOGIN_PAYLOAD)
        client.post("/auth/login", json={"email": "selam@example.com", "password": "secret"},
                    headers={"X-Forwarded-For": "10.0.0.5, 172.16.0.1", "User-Agent": "Mozilla/5.0 (Windows NT 10.0) Chrome/120 Safari/537"})
        audit = client.get("/finance/audit").json()
        entry = audit["data"][0]
        assert entry["action"] == "LOGIN"
        assert entry["ip_address"] == "10.0.0.5"
        assert entry["device"] == {"os": "Windows", "browser": "Chrome", "device": "Desktop"}

    def test_logout_clears_session(self, client, upstream):
        upstream.on("UserLogin", LOGIN_PAYLOAD)
        client.post("/auth/login", json={"email": "selam@example.com", "password": "secret"})
        res = client.post("/auth/logout")
        assert res.status_code == 303
        assert res.headers["location"] == "/"
        cleared = res.headers.get_list("set-cookie")
        assert any(c.startswith(f"{TOKEN_COOKIE}=") and "Max-Age=0" in c for c in cleared)
        assert any(c.startswith(f"{USER_COOKIE}=") and "Max-Age=0" in c for c in cleared)
        assert client.get("/finance").status_code == 303


# ═══════════════════════════════════════════════════════════════
# 2. FORGOT PASSWORD
# ═══════════════════════════════════════════════════════════════
class TestForgotPassword:

    def test_send_code_then_cooldown(self, client, upstream):
        upstream.on("ForgotPassword", {"ForgotPassword": True})
        first = client.post("/auth/forgot-password", json={"email": "hana@example.com"})
        assert first.status_code == 200
        assert first.json()["resend_in"] == RESEND_COOLDOWN_SECONDS

        again = client.post("/auth/forgot-password", json={"email": "HANA@example.com"})
        assert again.status_code == 429
        assert upstream.operations() == ["ForgotPassword"]

    def test_falsy_send_result(self, client, upstream):
        upstream.on("ForgotPassword", {"ForgotPassword": False})
        res = client.post("/auth/forgot-password", json={"email": "hana@example.com"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Failed to send verification code."

    def test_invalid_email_rejected(self, client, upstream):
        res = client.post("/auth/forgot-password", json={"email": "not-an-email"})
        assert res.status_code == 422
        assert upstream.calls == []

    def test_verify_code(self, client, upstream):
        upstream.on("ForgotPasswordVerify", lambda v: {"ForgotPasswordVerify": v["code"] == "123456"})
        assert client.post("/auth/forgot-password/verify", json={"email": "hana@example.com", "code": ""}).status_code == 422
        bad = client.post("/auth/forgot-password/verify", json={"email": "hana@example.com", "code": "000000"})
        assert bad.status_code == 400
        assert bad.json()["detail"] == "Invalid verification code."
        good = client.post("/auth/forgot-password/verify", json={"email": "hana@example.com", "code": "123456"})
        assert good.status_code == 200

    def test_reset_checks_run_before_dispatch(self, client, upstream):
        base = {"email": "hana@example.com", "code": "123456"}
        cases = [
            ({"newPassword": "", "confirmPassword": ""}, "Please fill out both password fields."),
            ({"newPassword": "secret1", "confirmPassword": "secret2"}, "Passwords do not match."),
            ({"newPassword": "abc", "confirmPassword": "abc"}, "Password must be at least 6 characters."),
        ]
        for fields, message in cases:
            res = client.post("/auth/forgot-password/reset", json={**base, **fields})
            assert res.status_code == 422
            assert res.json()["detail"] == message
        missing_code = client.post("/auth/forgot-password/reset", json={"email": "hana@example.com", "newPassword": "secret1", "confirmPassword": "secret1"})
        assert missing_code.status_code == 422
        assert upstream.calls == []

    def test_reset_password(self, client, upstream):
        upstream.on("ForgotPasswordNewPassword", {"ForgotPasswordNewPassword": True})
        res = client.post("/auth/forgot-password/reset", json={
            "email": "hana@example.com", "code": "123456", "newPassword": "secret1", "confirmPassword": "secret1",
        })
        assert res.status_code == 200
        assert upstream.variables_for("ForgotPasswordNewPassword") == [
            {"email": "hana@example.com", "newPassword": "secret1", "code": "123456"},
        ]
