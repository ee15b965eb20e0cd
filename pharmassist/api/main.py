"""
FastAPI application - Main entry point

Serves the pharmacy assistant tools and the catalogue ingestion endpoints.
Run with: uvicorn pharmassist.api.main:app
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from datetime import datetime

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pharmassist.api.dependencies import api_key_protection
from pharmassist.api.tools_router import router as tools_router

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="PharmAssist API",
    description="Pharmacy assistant tools backed by semantic search over the product catalogue",
    version="1.0.0",
    dependencies=[Depends(api_key_protection)],  # protect everything by default
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tools_router)


@app.get("/", tags=["Health"])
def root():
    return {"service": "PharmAssist API", "status": "healthy", "version": "1.0.0", "timestamp": datetime.now().isoformat()}


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}
