# ============================================================
# Critic AI FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - Persona registry (critique/personas.yaml)
#   - Generator layer with OpenAI, Ollama, or Echo clients
#   - Comment-anchoring pipeline via FeedbackOrchestrator
# ============================================================

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

# --- Local imports ---
from critic_ai.errors import FeedbackRequestError, ProviderConfigError
from critic_ai.settings import settings, configure_logging
from critic_ai.critique import AnnotationSet, FeedbackMode, FeedbackOrchestrator, load_personas
from critic_ai.generate import CritiqueGenerator, build_model_client

configure_logging()
logger = logging.getLogger(__name__)

# ------------------------------------------------------------
# 🔧 Model client + orchestrator (one per process)
# ------------------------------------------------------------
@lru_cache(maxsize=1)
def get_generator() -> CritiqueGenerator:
    client = build_model_client(settings)
    logger.info("Using %s model client (%s)", type(client).__name__, getattr(client, "model", "?"))
    return CritiqueGenerator(model_client=client, config=settings)


@lru_cache(maxsize=1)
def get_orchestrator() -> FeedbackOrchestrator:
    return FeedbackOrchestrator(
        generator=get_generator(),
        registry=load_personas(settings.PERSONAS_PATH),
    )

# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
app = FastAPI(title="Critic AI API", version="0.1")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# provider setup can fail while resolving dependencies, before any route code runs
@app.exception_handler(ProviderConfigError)
async def provider_config_error(request: Request, exc: ProviderConfigError):
    logger.error("Provider configuration error: %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})

# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class FeedbackRequest(BaseModel):
    text: Optional[str] = None
    purpose: Optional[str] = ""
    type: Optional[str] = FeedbackMode.COMPLETE.value

class InspireRequest(BaseModel):
    text: Optional[str] = None
    purpose: Optional[str] = ""

class AnnotationOut(BaseModel):
    id: str
    personaId: str
    quotedText: str
    comment: str
    start: int
    end: int
    fallback: bool = False

class FeedbackPayload(BaseModel):
    success: bool
    comments: List[AnnotationOut]

class InspirePayload(BaseModel):
    success: bool
    suggestion: str

class PersonaOut(BaseModel):
    id: str
    displayName: str
    role: str

# ------------------------------------------------------------
# 💬 Feedback routes
# ------------------------------------------------------------
async def _feedback(orch: FeedbackOrchestrator, req: FeedbackRequest, mode: Optional[str]) -> FeedbackPayload:
    try:
        annotations: AnnotationSet = await orch.run(req.text, req.purpose, mode)
    except FeedbackRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProviderConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception:
        logger.exception("Error processing feedback request")
        raise HTTPException(status_code=500, detail="Failed to generate feedback")
    return FeedbackPayload(success=True, comments=[AnnotationOut(**a.to_dict()) for a in annotations])


@app.post("/api/feedback", response_model=FeedbackPayload)
async def feedback(req: FeedbackRequest, orch: FeedbackOrchestrator = Depends(get_orchestrator)):
    return await _feedback(orch, req, req.type)


@app.post("/api/progress", response_model=FeedbackPayload)
async def progress(req: FeedbackRequest, orch: FeedbackOrchestrator = Depends(get_orchestrator)):
    return await _feedback(orch, req, FeedbackMode.PROGRESS.value)

# ------------------------------------------------------------
# ✍️ Next-sentence suggestion (no anchoring)
# ------------------------------------------------------------
@app.post("/api/inspire", response_model=InspirePayload)
def inspire(req: InspireRequest, gen: CritiqueGenerator = Depends(get_generator)):
    if not req.text or not req.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")
    try:
        gen.ensure_ready()
    except ProviderConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return InspirePayload(success=True, suggestion=gen.next_sentence(req.text, req.purpose or ""))

# ------------------------------------------------------------
# 🎭 Personas
# ------------------------------------------------------------
@app.get("/api/personas", response_model=List[PersonaOut])
def list_personas(orch: FeedbackOrchestrator = Depends(get_orchestrator)):
    return [PersonaOut(id=p.id, displayName=p.display_name, role=p.role) for p in orch.registry]

# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/api/health")
def api_health():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}

@app.get("/")
def hello():
    return {"message": f"{settings.app_name} service running."}
