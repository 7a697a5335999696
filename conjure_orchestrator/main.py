"""
FastAPI Backend for the Conjure build orchestrator

API Structure:
- /api/health - Liveness
- /api/plans  - Plan the code generation graph for a project manifest

Run with:
    python -m conjure_orchestrator.main
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from conjure_orchestrator import __version__
from conjure_orchestrator.config import HOST, PORT, CORS_ORIGINS
from conjure_orchestrator.routers import plans

# Initialize FastAPI app
app = FastAPI(
    title="Conjure Orchestrator API",
    description="Plans multi-target code generation builds from API definitions",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(plans.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Conjure Orchestrator API",
        "version": __version__,
        "endpoints": {
            "health": "/api/health",
            "plans": "/api/plans"
        },
        "docs": "/docs"
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": __version__
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    print(f"""
    Conjure Orchestrator API
    API:  http://{HOST}:{PORT}
    Docs: http://{HOST}:{PORT}/docs

    Press Ctrl+C to stop
    """)

    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        log_level="info"
    )
