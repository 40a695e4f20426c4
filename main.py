from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.logging_config import configure_logging
from config.settings import settings
from services.database import close_db, init_db

from models.health import Health
from routers import (
    cidades,
    defeitos,
    defeitos_moto,
    estados,
    historicos,
    localizacoes,
    lora,
    manutencoes,
    motos,
    rfid,
    setores,
    unidades,
)

port = int(os.environ.get("FASTAPIPORT", 8000))

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await init_db()
    logger.info("%s started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield
    await close_db()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Fleet management for motorcycles: locations, sectors, trackers, defects and maintenance.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------------------------------------------------------
# Health endpoints
# -----------------------------------------------------------------------------

@app.get("/health", response_model=Health)
def get_health():
    return Health(
        status=200,
        status_message="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

# -----------------------------------------------------------------------------
# Routers to public RESTful resources
# -----------------------------------------------------------------------------

app.include_router(router=estados.router)
app.include_router(router=cidades.router)
app.include_router(router=unidades.router)
app.include_router(router=setores.router)
app.include_router(router=motos.router)
app.include_router(router=defeitos.router)
app.include_router(router=defeitos_moto.router)
app.include_router(router=manutencoes.router)
app.include_router(router=historicos.router)
app.include_router(router=localizacoes.router)
app.include_router(router=lora.router)
app.include_router(router=rfid.router)


# -----------------------------------------------------------------------------
# Root
# -----------------------------------------------------------------------------
@app.get("/")
def root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME}. See /docs for OpenAPI UI."}

# -----------------------------------------------------------------------------
# Entrypoint for `python main.py`
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
