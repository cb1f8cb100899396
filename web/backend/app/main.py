"""FastAPI application collecting security-policy violation reports.

Deployed pages forward violations to ``/api/security/csp-violation``; this
app stores them for later inspection.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inputdefense import __version__
from web.backend.app.routers import violations

app = FastAPI(
    title="inputdefense collector",
    description="Receives and lists security-policy violation reports.",
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.include_router(violations.router)


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
