import os
from typing import Optional
from cryptography.fernet import Fernet, InvalidToken
from config import ROOT_DIR, SESSION_EXPIRE_HOURS
from dotenv import load_dotenv

load_dotenv(ROOT_DIR / '.env')

FERNET_KEY = os.environ.get('FERNET_KEY', Fernet.generate_key().decode())
fernet = Fernet(FERNET_KEY.encode() if isinstance(FERNET_KEY, str) else FERNET_KEY)


def seal_token(token: str) -> str:
    return fernet.encrypt(token.encode()).decode()


def unseal_token(value: Optional[str]) -> Optional[str]:
    """Return the upstream bearer token, or None when the cookie is unusable."""
    if not value:
        return None
    try:
        token = fernet.decrypt(value.encode(), ttl=SESSION_EXPIRE_HOURS * 3600).decode()
    except (InvalidToken, ValueError):
        return None
    return token or None
