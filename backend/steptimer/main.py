from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .api.websocket import router as ws_router
from .core.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

settings = get_settings()
app = FastAPI(title="steptimer", version="0.1.0", description="Countdown timers for recipe steps")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ws_router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "message": "steptimer API is running", "tick_period": settings.tick_period}
