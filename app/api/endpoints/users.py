from fastapi import APIRouter, Depends

from app.services import auth_service
from app.models import user as user_model
from app.schemas import user_schemas

router = APIRouter()

@router.get("/me", response_model=user_schemas.UserRead)
async def read_users_me(
    current_user: user_model.User = Depends(auth_service.get_current_user)
):
    return current_user
