"""Helper to launch the FastAPI query app with uvicorn."""
from __future__ import annotations
import os

import uvicorn

def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(
        "bedrock_query_api.serve.fastapi_app:app",
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )

if __name__ == "__main__":
    main()
