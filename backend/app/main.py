import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import GatewayError
from .routes.interview import router as interview_router
from .services.model_gateway import ModelGateway


# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def _cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup — one gateway for the whole process
    gateway = ModelGateway.from_env()
    app.state.model_gateway = gateway

    print("Starting NicheRoot Blueprint API")
    print(f"   OpenAI Key:  {' Configured' if gateway.configured else ' Not set (generation will fail)'}")
    print(f"   Model:       {gateway.model}")
    print(f"   Timeout:     {gateway.timeout:.0f}s")

    yield

    await gateway.aclose()
    print("Shutting down NicheRoot Blueprint API")


app = FastAPI(
    title="NicheRoot Blueprint API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(interview_router)

@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": "NicheRoot Blueprint API",
        "version": "0.1.0",
        "description": "Six A/B trade-off questions, then a personalized business blueprint",
        "docs": "/docs",
        "endpoints": {
            "next_question": "POST /api/next-question - Generate the question for a step",
            "generate_blueprint": "POST /api/generate-blueprint - Synthesize the blueprint",
            "health": "GET /health - Service health check"
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
        "service": "nicheroot-blueprint-api",
        "version": "0.1.0"
    }


@app.exception_handler(GatewayError)
async def gateway_exception_handler(request, exc):
    """Gateway failures raised outside a route's own error handling."""
    logger.error("Model gateway error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Model backend unavailable"}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if os.getenv("DEBUG", "false").lower() == "true" else "An unexpected error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("DEBUG", "false").lower() == "true",
    )
