"""FastAPI application setup."""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.response import error_response
from src.api.routes import drafts, health
from src.llm import LLMError
from src.services.draft_errors import GenerationUnavailableError, ParseFailure

app = FastAPI(
    title="SceneForge Drafts API",
    description="AI scene and cut draft generation for film pre-production",
    version="1.0.0",
)

# CORS middleware for frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:5174",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:5174",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(GenerationUnavailableError)
async def generation_unavailable_handler(
    request: Request, exc: GenerationUnavailableError
) -> JSONResponse:
    """Handle completion backend failures and timeouts."""
    return JSONResponse(
        status_code=503,
        content=error_response("AI_SERVICE_ERROR", "AI service is temporarily unavailable. Please try again."),
    )


@app.exception_handler(ParseFailure)
async def parse_failure_handler(request: Request, exc: ParseFailure) -> JSONResponse:
    """Handle responses with no recoverable draft list."""
    return JSONResponse(
        status_code=502,
        content=error_response("DRAFT_PARSE_FAILED", "AI response could not be read as drafts. Please try again."),
    )


@app.exception_handler(LLMError)
async def llm_error_handler(request: Request, exc: LLMError) -> JSONResponse:
    """Handle LLM/AI service errors."""
    return JSONResponse(
        status_code=503,
        content=error_response("AI_SERVICE_ERROR", "AI service is temporarily unavailable. Please try again."),
    )


# Register routes
app.include_router(health.router)
app.include_router(drafts.router, prefix="/api")
