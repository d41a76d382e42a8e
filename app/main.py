"""FastAPI application setup for the lawn season service."""

from fastapi import FastAPI

from .api import router as api_router

app = FastAPI(title="Lawn Season Assistant")


@app.get("/health")
def health():
    """Liveness probe; does not touch the weather provider."""
    return {"status": "ok"}


# API routes
app.include_router(api_router, prefix="/v1")
