"""
Shared fixtures: a scripted stand-in for the GraphQL API and signed-in clients.
"""
import json
import re

import httpx
import pytest
from fastapi.testclient import TestClient

import gateway
from config import TOKEN_COOKIE, USER_COOKIE
from core.auth import create_user_token
from core.encryption import seal_token
from models.auth import SessionUser

OPERATION = re.compile(r"(?:query|mutation)\s+(\w+)")


def graphql_error(message):
    return httpx.Response(200, json={"data": None, "errors": [{"message": message}]})


class FakeGraphQL:
    """Answers GraphQL operations by name and records every call."""

    def __init__(self):
        self.responders = {}
        self.calls = []

    def on(self, operation, responder):
        self.responders[operation] = responder
        return self

    def operations(self):
        return [name for name, _, _ in self.calls]

    def variables_for(self, operation):
        return [variables for name, variables, _ in self.calls if name == operation]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        operation = OPERATION.search(body["query"]).group(1)
        variables = body.get("variables") or {}
        self.calls.append((operation, variables, request.headers.get("authorization")))
        responder = self.responders.get(operation)
        if responder is None:
            return graphql_error(f"No responder for {operation}")
        result = responder(variables) if callable(responder) else responder
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json={"data": result})


@pytest.fixture
def upstream(monkeypatch):
    fake = FakeGraphQL()
    monkeypatch.setattr(gateway.graphql, "transport", httpx.MockTransport(fake.handler))
    return fake


@pytest.fixture(autouse=True)
def reset_state():
    from controllers import audit_controller, auth_controller
    audit_controller.clear_audit_logs()
    auth_controller._code_sent_at.clear()
    yield
    audit_controller.clear_audit_logs()
    auth_controller._code_sent_at.clear()


@pytest.fixture
def client():
    from server import app
    with TestClient(app, follow_redirects=False) as c:
        yield c


def sign_in(client, role, user_id="u-1", full_name="Test User", token="t"):
    user = SessionUser(id=user_id, full_name=full_name, email="user@example.com", role=role)
    client.cookies.set(TOKEN_COOKIE, seal_token(token))
    client.cookies.set(USER_COOKIE, create_user_token(user))
    return user


@pytest.fixture
def admin_client(client):
    sign_in(client, "ADMIN", full_name="Abebe Kebede")
    return client


@pytest.fixture
def finance_client(client):
    sign_in(client, "FINANCE", user_id="f-1", full_name="Selam Tadesse")
    return client
