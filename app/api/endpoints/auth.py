from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.services import auth_service, user_service
from app.schemas import auth_schemas
from app.api.dependencies import get_db

router = APIRouter()

@router.post("/login", response_model=auth_schemas.Token)
def login(
    request: auth_schemas.LoginRequest,
    db: Session = Depends(get_db)
):
    user = user_service.authenticate_user(db, email=request.email, password=request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": auth_service.issue_token(user), "token_type": "bearer"}
