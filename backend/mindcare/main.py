# mindcare/main.py
import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mindcare.database import Base, engine
from mindcare.endpoints import alerts, appointments, chat, dashboard, doctors, messages, mood, patients, slots
from mindcare.endpoints.ws_updates import ws_updates
from mindcare.errors import Forbidden, MindCareError
from mindcare.models import documents  # noqa: F401  registers the documents table

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="MindCare API", version="1.0.0")


@app.on_event("startup")
def startup_event():
    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database tables ready")


@app.exception_handler(MindCareError)
async def mindcare_error_handler(request: Request, exc: MindCareError):
    if isinstance(exc, Forbidden):
        logger.warning(f"🚫 Forbidden {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include HTTP routers
app.include_router(appointments)
app.include_router(alerts)
app.include_router(slots)
app.include_router(dashboard)
app.include_router(doctors)
app.include_router(patients)
app.include_router(mood)
app.include_router(messages)
app.include_router(chat)

# Mount WebSocket endpoints
app.add_api_websocket_route("/ws/updates", ws_updates)


@app.get("/")
def root():
    return {"message": "API is running"}
