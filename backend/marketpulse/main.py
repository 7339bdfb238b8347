from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import (
    get_cors_origins,
    get_host,
    get_ollama_base_url,
    get_ollama_model,
    get_port,
    get_tavily_key,
    is_debug,
)
from .routes.search import router as search_router


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup
    print("Starting MarketPulse competitor research API")
    print(f"   Tavily Key:  {' Configured' if get_tavily_key() else ' Not set (searches will fail)'}")
    print(f"   Ollama:      {get_ollama_model()} at {get_ollama_base_url()}")
    print("   Ready to analyze competitors!")

    yield

    print("Shutting down MarketPulse competitor research API")


app = FastAPI(
    title="MarketPulse Competitor Research API",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),  # Frontend dev servers by default
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(search_router)

@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": "MarketPulse",
        "version": __version__,
        "description": "AI-powered competitor research",
        "docs": "/docs",
        "endpoints": {
            "search": "GET /search?query=... - Analyze competitors for a query",
            "health": "GET /search/health - Service health check"
        }
    }


@app.get(
    "/health",
    summary="Global Health Check",
    description="Check if the API server is running",
    tags=["General"]
)
async def health():
    """Global health check endpoint."""
    return {
        "status": "healthy",
        "service": "marketpulse",
        "version": __version__
    }

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if is_debug() else "An unexpected error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "marketpulse.main:app",
        host=get_host(),
        port=get_port(),
        reload=is_debug(),
    )
