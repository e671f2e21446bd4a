"""
Audit trail: device parsing, bounded storage and newest-first pagination.
"""
import asyncio

import pytest

from config import AUDIT_LOG_LIMIT
from controllers.audit_controller import parse_device, log_audit, get_audit_logs


class TestParseDevice:

    @pytest.mark.parametrize("ua,expected", [
        ("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Version/17.0 Mobile Safari/604.1",
         {"os": "iOS", "browser": "Safari", "device": "Mobile"}),
        ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0 Safari/537.36 Edg/120.0",
         {"os": "Windows", "browser": "Edge", "device": "Desktop"}),
        ("Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0",
         {"os": "Linux", "browser": "Firefox", "device": "Desktop"}),
        ("Mozilla/5.0 (iPad; CPU OS 16_0 like Mac OS X) Safari/604.1",
         {"os": "iPadOS", "browser": "Safari", "device": "Tablet"}),
        ("", {"os": "Unknown", "browser": "Unknown", "device": "Unknown"}),
    ])
    def test_user_agents(self, ua, expected):
        assert parse_device(ua) == expected


class TestAuditTrail:

    def _log(self, n, action="CREATE", module="admin"):
        async def write():
            for i in range(n):
                await log_audit(f"u-{i}", "Tester", "ADMIN", action, module, "branches", f"Created branch {i}")
        asyncio.run(write())

    def test_newest_first_with_pages(self):
        self._log(30)
        page1 = asyncio.run(get_audit_logs(page=1, limit=25))
        page2 = asyncio.run(get_audit_logs(page=2, limit=25))
        assert page1["total"] == 30
        assert page1["pages"] == 2
        assert page1["data"][0]["description"] == "Created branch 29"
        assert len(page2["data"]) == 5

    def test_filters(self):
        self._log(3)
        self._log(2, action="EXPORT", module="finance")
        assert asyncio.run(get_audit_logs(action="EXPORT"))["total"] == 2
        assert asyncio.run(get_audit_logs(module="admin"))["total"] == 3
        assert asyncio.run(get_audit_logs(search="BRANCH 1"))["total"] == 2

    def test_trail_is_bounded(self):
        self._log(AUDIT_LOG_LIMIT + 10)
        result = asyncio.run(get_audit_logs(limit=1))
        assert result["total"] == AUDIT_LOG_LIMIT
