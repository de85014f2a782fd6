"""
Debug server using FastAPI for local development and testing.
Run with: uvicorn proffinder.debug_server:app --reload --host 0.0.0.0 --port 50001
"""
import json
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from .core.config import load_env

load_env()

from .core.error import InvalidInputError, StreamError
from .core.extractor import ChunkSource, iter_records
from .core.logger import get_logger, setup_logger
from .models.schema import ExtractStats, Query

setup_logger()
logger = get_logger(__name__)

app = FastAPI(
    title="ProfFinder Debug Server",
    description="Debug interface for streaming professor lookups",
    version="1.0.0",
)

# Enable CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_chunk_source() -> Optional[ChunkSource]:
    """Chunk source for /search; None means the configured LLM endpoint."""
    return None


class SearchRequest(BaseModel):
    """Search request model."""

    institute: Optional[str] = Field(default=None, description="Institute, e.g. 'IIT Bombay'")
    department: Optional[str] = Field(default=None, description="Department or branch")
    keyword: Optional[str] = Field(default=None, description="Research keyword or topic")
    model: Optional[str] = Field(default=None, description="Override LLM_MODEL for this request")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "ProfFinder Debug Server"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/search")
async def search(
    request: SearchRequest,
    chunk_source: Optional[ChunkSource] = Depends(get_chunk_source),
):
    """
    Stream matching professors as NDJSON, one record per line.

    A failed upstream stream ends with a single {"error": ...} line.
    """
    query = Query(
        institute=request.institute,
        department=request.department,
        keyword=request.keyword,
    )
    stats = ExtractStats()
    try:
        items = iter_records(query, stream=chunk_source, model=request.model, stats=stats)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    async def ndjson() -> AsyncIterator[str]:
        async for item in items:
            if isinstance(item, StreamError):
                body: Dict[str, Any] = {"error": str(item)}
            else:
                body = dict(item)
            yield json.dumps(body, ensure_ascii=False) + "\n"
        logger.info("search done: %s", stats.to_dict())

    logger.info(
        "search start: institute=%r department=%r keyword=%r",
        query.institute,
        query.department,
        query.keyword,
    )
    return StreamingResponse(
        ndjson(),
        media_type="application/x-ndjson",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=50001)
