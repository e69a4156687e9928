# path: cyclocoach/main.py

import logging

from fastapi import FastAPI
import uvicorn

from cyclocoach import config
from cyclocoach.api.routes.gpx import router as gpx_router
from cyclocoach.api.routes.route_requests import router as route_requests_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="cyclocoach")

app.include_router(route_requests_router)
app.include_router(gpx_router)


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("cyclocoach.main:app", host=config.HOST, port=config.PORT)
