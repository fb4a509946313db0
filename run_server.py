#!/usr/bin/env python3
"""
Convenience script to run the Edge Router.
"""
import uvicorn
from edge_router.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "edge_router.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower()
    )
