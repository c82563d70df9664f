from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from portal.core.config import settings

# pbkdf2_sha256 con sal; passlib fija el coste por defecto (~decenas de ms)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def dummy_verify() -> None:
    # Mismo coste que una verificación real cuando la cuenta no existe
    pwd_context.dummy_verify()


def create_session_token(sid: str) -> str:
    expire = datetime.utcnow() + timedelta(minutes=settings.SESSION_EXPIRE_MIN)
    return jwt.encode(
        {"sid": sid, "exp": expire},
        settings.SESSION_SECRET,
        algorithm=settings.SESSION_ALG,
    )


def decode_session_token(token: str) -> Optional[str]:
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALG],
        )
    except JWTError:
        return None
    sid = payload.get("sid")
    if not isinstance(sid, str) or not sid:
        return None
    return sid
