from typing import List

from fastapi import APIRouter
from webproxy.schemas import HistoryEntry, ProxyRequest, ProxyResponse
from webproxy.services import proxy as proxy_service

router = APIRouter(prefix="/api")

@router.get("")
async def root():
    """Basic service info"""
    return {
        "service": "Web Proxy Viewer",
        "version": "1.0.0",
        "endpoints": {
            "proxy": "POST /api/proxy",
            "history": "GET /api/history",
            "clear_history": "DELETE /api/history",
            "history_stats": "GET /api/history/stats",
            "health": "GET /api/health"
        }
    }

@router.post("/proxy", response_model=ProxyResponse)
async def proxy(request: ProxyRequest):
    """
    Fetch a URL server-side and return it ready for in-page rendering.

    Errors are raised as ProxyError subclasses and mapped to
    {error, details} bodies by the app's exception handlers.
    """
    result = await proxy_service.process_proxy_request(request.url or "")
    return ProxyResponse(**result)

@router.get("/history", response_model=List[HistoryEntry])
async def history():
    """Recently proxied URLs, most recent first"""
    return proxy_service.get_history()

@router.get("/history/stats")
async def history_stats():
    """Number of stored entries and the configured cap"""
    return proxy_service.get_history_stats()

@router.delete("/history")
async def clear_history():
    """Clear all history entries"""
    proxy_service.clear_history()
    return {"message": "History cleared successfully"}

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Web Proxy Viewer"}
