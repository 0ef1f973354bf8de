from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from insight_hub.agents.orchestrator import ResearchOrchestrator
from insight_hub.api.routes import research
from insight_hub.config import settings
from insight_hub.services import logger as log_service
from insight_hub.services.record_store import build_record_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: the record store lives exactly as long as the app
    store = build_record_store(settings)
    app.state.record_store = store
    app.state.orchestrator = ResearchOrchestrator.from_settings(store, settings)
    app.state.pdf_exporter = None
    log_service.log_event(
        event_type="app_started",
        message="Insight Hub started",
        record_store=settings.record_store_backend,
        content_retriever=settings.content_retriever,
    )
    yield
    # Shutdown
    log_service.log_event(event_type="app_stopped", message="Insight Hub stopped")


app = FastAPI(
    title="Insight Hub",
    description="Company research reports built from web search and LLM structuring",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(research.router)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "insight-hub"}
