from pydantic import BaseModel, Field
from typing import Dict


class StoreDocument(BaseModel):
    """On-disk layout of the redirect store (one JSON document)"""
    redirects: Dict[str, str] = Field(default_factory=dict, description="Symbol to destination")
    last_symbol: str = Field(default="", description="Most recently issued symbol")


class HealthResponse(BaseModel):
    status: str
    redirects: int
    strategy: str
