import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field, ValidationError

from pharmassist.api.dependencies import get_ingestor, get_tool_context
from pharmassist.error_handler import EmbeddingError, ErrorHandler, NotFoundError, StoreError, UpstreamError
from pharmassist.tools import ToolContext, UnknownToolError, execute_tool, list_tools

logger = logging.getLogger(__name__)

router = APIRouter()
error_handler = ErrorHandler()


class IngestRequest(BaseModel):
    max_items: Optional[int] = Field(default=None, ge=0, description="0 means no limit; omitted uses the ingestor default.")


class IngestQueryRequest(BaseModel):
    query: str = Field(min_length=1)


@router.get("/tools", tags=["Tools"])
def get_tools():
    return {"tools": list_tools()}


@router.post("/tools/{name}", tags=["Tools"])
def call_tool(
    name: str,
    arguments: Optional[Dict[str, Any]] = Body(default=None),
    ctx: ToolContext = Depends(get_tool_context),
):
    try:
        content = execute_tool(ctx, name, arguments or {})
    except UnknownToolError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (UpstreamError, StoreError, EmbeddingError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=error_handler.handle_exception(e, {"tool": name}))
    return {"tool": name.upper(), "content": content}


@router.post("/ingest", tags=["Ingestion"])
def ingest(body: Optional[IngestRequest] = None, ingestor=Depends(get_ingestor)):
    body = body or IngestRequest()
    try:
        summary = ingestor.ingest_all() if body.max_items is None else ingestor.ingest_all(max_items=body.max_items)
    except (UpstreamError, StoreError, EmbeddingError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=error_handler.handle_exception(e, {"route": "ingest"}))
    return summary.to_dict()


@router.post("/ingest/query", tags=["Ingestion"])
def ingest_query(body: IngestQueryRequest, ingestor=Depends(get_ingestor)):
    outcome = ingestor.ingest_by_query(body.query)
    return outcome.to_dict()
