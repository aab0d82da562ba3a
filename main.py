#!/usr/bin/env python3
"""Main entry point for the earn agent API server.

Run with: python main.py
Or with: uvicorn main:app --reload
"""

import logging

import uvicorn

from earn_agent.api import app

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )
