import logging
import os

import uvicorn
from dotenv import load_dotenv

if __name__ == "__main__":
    load_dotenv()

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    print("Starting Growth Analysis API Server...")
    print(f"Docs available at: http://localhost:{port}/docs")

    uvicorn.run(
        "backend.api.server:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "").lower() in {"1", "true", "yes"}
    )
