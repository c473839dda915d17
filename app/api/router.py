from fastapi import APIRouter
from app.api.v1.auth import router as auth_router
from app.api.v1.workouts import router as workouts_router
from app.api.v1.streaks import router as streaks_router
from app.api.v1.goals import router as goals_router
from app.api.v1.progress import router as progress_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(workouts_router, prefix="/workouts", tags=["workouts"])
api_router.include_router(streaks_router, prefix="/streaks", tags=["streaks"])
api_router.include_router(goals_router, prefix="/goals", tags=["goals"])
api_router.include_router(progress_router, prefix="/progress", tags=["progress"])
