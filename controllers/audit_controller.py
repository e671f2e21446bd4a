import math
import uuid
import logging
from collections import deque
from datetime import datetime, timezone, timedelta
from typing import Deque, Optional

from config import AUDIT_LOG_LIMIT

logger = logging.getLogger(__name__)

EAT = timezone(timedelta(hours=3))

# Newest entries are appended on the right; the oldest fall off past the limit
_trail: Deque[dict] = deque(maxlen=AUDIT_LOG_LIMIT)


def get_client_ip(request) -> Optional[str]:
    """Real client IP: X-Forwarded-For first, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else None


def get_user_agent(request) -> str:
    return request.headers.get("user-agent", "")


# First match wins; order matters (Edge and Opera also claim Chrome)
_OS_MARKERS = (
    (("iphone",), "iOS"),
    (("ipad",), "iPadOS"),
    (("android",), "Android"),
    (("windows",), "Windows"),
    (("macintosh", "mac os"), "macOS"),
    (("cros",), "ChromeOS"),
    (("linux",), "Linux"),
)
_BROWSER_MARKERS = (
    (("edg/", "edge/"), "Edge"),
    (("opr/", "opera"), "Opera"),
    (("firefox", "fxios"), "Firefox"),
    (("chrome", "crios"), "Chrome"),
    (("safari",), "Safari"),
)


def _first_match(ua: str, markers) -> str:
    for needles, name in markers:
        if any(n in ua for n in needles):
            return name
    return "Unknown"


def parse_device(ua: Optional[str]) -> dict:
    """Parse a User-Agent string into OS, browser and device type."""
    if not ua:
        return {"os": "Unknown", "browser": "Unknown", "device": "Unknown"}
    ua = ua.lower()
    if "ipad" in ua or "tablet" in ua:
        device = "Tablet"
    elif "mobile" in ua or "iphone" in ua:
        device = "Mobile"
    else:
        device = "Desktop"
    return {"os": _first_match(ua, _OS_MARKERS), "browser": _first_match(ua, _BROWSER_MARKERS), "device": device}


async def log_audit(
    user_id: str,
    user_name: Optional[str],
    user_role: str,
    action: str,
    module: str,
    resource: str,
    description: str,
    resource_id: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
):
    """Record an audit entry. Never raises into the calling request."""
    try:
        _trail.append({
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "user_name": user_name,
            "user_role": user_role,
            "action": action,
            "module": module,
            "resource": resource,
            "resource_id": resource_id,
            "description": description,
            "ip_address": ip_address,
            "device": parse_device(user_agent),
            "timestamp": datetime.now(EAT).isoformat(),
        })
    except Exception as e:
        logger.warning(f"Audit entry for {action} {resource} dropped: {str(e)}")


async def get_audit_logs(
    page: int = 1,
    limit: int = 25,
    module: str = None,
    action: str = None,
    user_id: str = None,
    search: str = None,
):
    items = list(reversed(_trail))
    if module:
        items = [i for i in items if i["module"] == module]
    if action:
        items = [i for i in items if i["action"] == action]
    if user_id:
        items = [i for i in items if i["user_id"] == user_id]
    if search:
        needle = search.lower()
        items = [i for i in items if needle in (i["description"] or "").lower()]

    total = len(items)
    page = max(1, page)
    skip = (page - 1) * limit
    return {
        "data": items[skip:skip + limit],
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit) if limit else 1,
        "limit": limit,
    }


def clear_audit_logs() -> None:
    _trail.clear()
