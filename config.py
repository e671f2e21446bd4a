from pathlib import Path
from dotenv import load_dotenv
import os

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

# Upstream GraphQL API
GRAPHQL_URL = os.environ.get('GRAPHQL_URL', 'http://localhost:4001')
GRAPHQL_TIMEOUT = float(os.environ.get('GRAPHQL_TIMEOUT', '15'))

# Session Config
JWT_SECRET = os.environ.get('JWT_SECRET', 'allowance_portal_secret_key')
JWT_ALGORITHM = "HS256"
SESSION_EXPIRE_HOURS = 24
COOKIE_SECURE = os.environ.get('COOKIE_SECURE', 'false').lower() in ('1', 'true', 'yes')
TOKEN_COOKIE = "auth_token"
USER_COOKIE = "auth_user"

# Roles and routing
LOGIN_ROUTE = "/"
ROLE_HOME = {
    "ADMIN": "/admin/home",
    "FINANCE": "/finance",
}
ROLE_LABELS = {
    "ADMIN": "Administrator",
    "FINANCE": "Finance",
    "EMPLOYEE": "Employee",
}

# Reports
DEFAULT_TREND_MONTHS = 6
MAX_TREND_MONTHS = 24
CURRENCY = os.environ.get('CURRENCY', 'ETB')
TREND_PX_PER_THOUSAND = 2

# Auth flows
RESEND_COOLDOWN_SECONDS = 120
MIN_PASSWORD_LENGTH = 6

# Audit
AUDIT_LOG_LIMIT = 500

# Exports
EXPORT_DIR = ROOT_DIR / "exports"
EXPORT_DIR.mkdir(parents=True, exist_ok=True)
