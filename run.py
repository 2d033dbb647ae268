#!/usr/bin/env python3
"""Run script for DayDeck."""

import uvicorn

from daydeck.config import configure_logging

if __name__ == "__main__":
    configure_logging()
    uvicorn.run(
        "daydeck.api.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True
    )
