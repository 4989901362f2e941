from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import OAuth2PasswordBearer

from app.core.config import settings
from app.models import user as user_model
from app.schemas import auth_schemas

ALGORITHM = "HS256"
KNOWN_ROLES = (user_model.ROLE_ADMIN, user_model.ROLE_PLAYER)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

def verify_token(token: str, credentials_exception: Exception) -> auth_schemas.TokenData:
    """
    Decode a bearer token into the email and role it was issued for.

    Expired or tampered tokens, and tokens missing the subject or carrying a
    role this club does not know, raise `credentials_exception`.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_exception
    email = payload.get("sub")
    role = payload.get("role")
    if not email or role not in KNOWN_ROLES:
        raise credentials_exception
    return auth_schemas.TokenData(email=email, role=role)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)
