from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class ProxyRequest(BaseModel):
    url: Optional[str] = Field(None, description="Target URL; scheme is optional")

class ProxyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    content: str = Field(description="Rendered content ready for in-page display")
    content_type: str = Field(alias="contentType")
    url: str = Field(description="Final URL after redirects")

class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None

class HistoryEntry(BaseModel):
    url: str
    timestamp: str = Field(description="ISO 8601 UTC time of the visit")
