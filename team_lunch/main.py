import logging
import os

import uvicorn

from team_lunch.app import app


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "8000"))
    print(f"Team Lunch API running at http://localhost:{port}")
    uvicorn.run(app, host=host, port=port)
