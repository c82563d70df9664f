from portal.db.session import SessionLocal
from portal.core.config import settings
from portal.services.sessions import SqlSessionStore

store = SqlSessionStore(SessionLocal, settings.SESSION_EXPIRE_MIN)
n = store.purge_expired()
print(f"OK: purged {n} expired sessions")
