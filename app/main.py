"""
Entrypoint for the Personal Ledger API

Run with:
    python -m app.main
or:
    uvicorn app.main:app
"""

import os

import uvicorn

from ledger.api import create_app


app = create_app()


if __name__ == "__main__":
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
