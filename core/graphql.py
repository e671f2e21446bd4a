from fastapi import HTTPException
from typing import Optional
import logging

import httpx

logger = logging.getLogger(__name__)


class GraphQLError(Exception):
    """Raised when the API answers with errors or an unusable payload."""

    def __init__(self, message: str, errors: Optional[list] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.status_code = status_code


class GraphQLUnavailable(GraphQLError):
    """Raised when the API could not be reached at all."""


class GraphQLClient:
    def __init__(self, url: str, timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def execute(self, query: str, variables: Optional[dict] = None, token: Optional[str] = None) -> dict:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client_http:
                response = await client_http.post(
                    self.url,
                    json={"query": query, "variables": variables or {}},
                    headers=headers,
                )
        except httpx.TimeoutException:
            logger.error(f"GraphQL request to {self.url} timed out")
            raise GraphQLUnavailable("The server took too long to respond")
        except httpx.HTTPError as e:
            logger.error(f"GraphQL request to {self.url} failed: {str(e)}")
            raise GraphQLUnavailable("Unable to reach the server")

        try:
            payload = response.json()
        except ValueError:
            raise GraphQLError(f"Server returned status {response.status_code}", status_code=response.status_code)

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            message = errors[0].get("message") or "Request failed"
            raise GraphQLError(message, errors=errors, status_code=response.status_code)
        if response.status_code >= 400:
            raise GraphQLError(f"Server returned status {response.status_code}", status_code=response.status_code)
        if not isinstance(payload, dict):
            raise GraphQLError("Invalid response from server")
        return payload.get("data") or {}


def to_http_exception(exc: GraphQLError, fallback: str = "Request failed", status_code: int = 400) -> HTTPException:
    if isinstance(exc, GraphQLUnavailable):
        return HTTPException(status_code=502, detail=exc.message)
    return HTTPException(status_code=status_code, detail=exc.message or fallback)
