import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.core.config import settings
from app.core.database import init_database
from app.core.exceptions import register_exception_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="FitJourney - серии тренировок и цели")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8080",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    await init_database()
    logger.info("Приложение запущено")


@app.get("/")
async def root():
    base_url = "http://localhost:8000"

    return {
        "app": "FitJourney",
        "message": "FitJourney - серии тренировок и цели",
        "links": {
            "🏋️ Workouts": f"{base_url}/api/v1/workouts",
            "🔥 Streaks": f"{base_url}/api/v1/streaks",
            "🎯 Goals": f"{base_url}/api/v1/goals",
            "📈 Progress": f"{base_url}/api/v1/progress/weight",
            "📚 Docs": f"{base_url}/docs",
        }
    }
