from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core import security
from app.models import user as user_model
from app.api.dependencies import get_db

def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

def _user_from_token(token: str, db: Session) -> user_model.User:
    credentials_exception = _credentials_exception()
    token_data = security.verify_token(token, credentials_exception)
    user = db.query(user_model.User).filter(user_model.User.email == token_data.email).first()
    if user is None:
        raise credentials_exception
    return user

def get_current_user(token: str = Depends(security.oauth2_scheme), db: Session = Depends(get_db)) -> user_model.User:
    return _user_from_token(token, db)

def get_current_admin(current_user: user_model.User = Depends(get_current_user)) -> user_model.User:
    # Role comes from the stored user, not the token claim, so demotions apply immediately
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")
    return current_user

def issue_token(user: user_model.User) -> str:
    return security.create_access_token(data={"sub": user.email, "role": user.role})
