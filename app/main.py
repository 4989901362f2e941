import uvicorn
from fastapi import FastAPI

from app.api.endpoints import admin as admin_endpoints
from app.api.endpoints import auth as auth_endpoints
from app.api.endpoints import players as player_endpoints
from app.api.endpoints import statistics as statistics_endpoints
from app.api.endpoints import tournaments as tournament_endpoints
from app.api.endpoints import users as user_endpoints
from app.core.logging import setup_logger
# Importing the models package registers every table and runs create_all
import app.models

logger = setup_logger(__name__)

app = FastAPI(title="Poker Club API")

app.include_router(auth_endpoints.router, prefix="/auth", tags=["Authentication"])
app.include_router(user_endpoints.router, prefix="/users", tags=["Users"])
app.include_router(player_endpoints.router, prefix="/players", tags=["Players"])
app.include_router(tournament_endpoints.router, prefix="/tournaments", tags=["Tournaments"])
app.include_router(statistics_endpoints.router, tags=["Statistics"])
app.include_router(admin_endpoints.router, prefix="/admin", tags=["Admin"])


@app.get("/")
async def read_root():
    return {"message": "Poker Club API"}


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
