from fastapi import FastAPI

from portal.core.config import settings
from portal.core.errors import register_error_handlers
from portal.core.logging import setup_logging
from portal.core.rate_limit import register_rate_limit
from portal.db.init_db import init_db
from portal.db.session import SessionLocal
from portal.services.sessions import build_session_store
from portal.api.routes.auth import router as auth_router
from portal.api.routes.teams import router as teams_router
from portal.api.routes.settings import router as settings_router
from portal.api.routes.admin import router as admin_router
from portal.api.routes.uploads import router as uploads_router

setup_logging(settings.LOG_LEVEL)

app = FastAPI(title="Tournament Registration Portal")
app.state.session_store = build_session_store(
    settings.SESSION_BACKEND, SessionLocal, settings.SESSION_EXPIRE_MIN
)
register_error_handlers(app)
register_rate_limit(app)

app.include_router(auth_router)
app.include_router(teams_router)
app.include_router(settings_router)
app.include_router(admin_router)
app.include_router(uploads_router)


@app.on_event("startup")
def on_startup():
    init_db()


@app.get("/health")
def health():
    return {"ok": True}
