from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backend import config
from backend.routers import biome, build, models

app = FastAPI(
    title="ReefBuilder API",
    description="Backend API for the ReefBuilder coral and kelp generator",
    version="0.1.0",
)

# ---------------------------------------------------------------------------
# CORS -- allow the Vite dev server on localhost:5173
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(build.router)
app.include_router(models.router)
app.include_router(biome.router)

# ---------------------------------------------------------------------------
# Static files -- serve generated GLB/PLY assets
# ---------------------------------------------------------------------------
config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/output", StaticFiles(directory=str(config.OUTPUT_DIR)), name="output")


@app.get("/")
async def root():
    return {"status": "ok", "service": "ReefBuilder API"}
