from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
import logging
import os
from datetime import datetime, timezone

# Load config first (triggers dotenv)
from config import GRAPHQL_URL, LOGIN_ROUTE
from core.auth import SessionRedirect, read_session, home_for

from routes.auth import router as auth_router
from routes.admin import router as admin_router
from routes.finance import router as finance_router

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(title="Restaurant Allowance Portal")

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=os.environ.get('CORS_ORIGINS', '*').split(','),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(finance_router)


@app.exception_handler(SessionRedirect)
async def session_redirect_handler(request: Request, exc: SessionRedirect):
    return RedirectResponse(exc.location, status_code=303)


# ── Root / Health ──────────────────────────────────────────

@app.get(LOGIN_ROUTE)
async def root(request: Request):
    session = read_session(request.cookies)
    return {
        "route": "login",
        "login": "/auth/login",
        "forgot_password": "/auth/forgot-password",
        "signed_in_home": home_for(session.user.role) if session else None,
    }


@app.get("/health")
async def health():
    return {"status": "healthy", "graphql_url": GRAPHQL_URL, "timestamp": datetime.now(timezone.utc).isoformat()}


@app.on_event("startup")
async def announce_upstream():
    logger.info(f"Proxying allowance portal requests to {GRAPHQL_URL}")
