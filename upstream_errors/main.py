"""FastAPI application entrypoint for upstream error normalization."""

from fastapi import FastAPI

from upstream_errors.api.errors import router as errors_router
from upstream_errors.api.upstream import router as upstream_router
from upstream_errors.core.errors import register_error_handlers

app = FastAPI(title="upstream-errors")
register_error_handlers(app)
app.include_router(errors_router)
app.include_router(upstream_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check stub endpoint for service readiness."""
    return {"status": "ok"}
