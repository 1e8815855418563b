# LeadDesk CRM backend entrypoint: lead lifecycle and analytics API.

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.core.errors import NotFound, ValidationError
from backend.app.core.settings import get_settings
from backend.app.api import login
from backend.app.api import leads
from backend.app.api import history
from backend.app.api import stages
from backend.app.api import dashboard
from backend.app.api import reports
from backend.app.api import messaging
from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.dependencies.store import build_lead_store

logger = logging.getLogger("leaddesk.main")

app = FastAPI()
settings = get_settings()

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(login.router)
app.include_router(leads.router)
app.include_router(history.router)
app.include_router(stages.router)
app.include_router(dashboard.router)
app.include_router(reports.router)
app.include_router(messaging.router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.detail})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": exc.detail})


@app.get("/")
def read_root():
    return {"app": "LeadDesk CRM backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def load_lead_store():
    Base.metadata.create_all(bind=engine)
    app.state.lead_store = build_lead_store()
    logger.info("%s %s started (%s)", settings.app_name, settings.api_version, settings.environment)
