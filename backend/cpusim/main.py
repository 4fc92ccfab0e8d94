# backend/cpusim/main.py
from __future__ import annotations
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import config, simulate, compare, sessions
from .settings import CORS_ORIGINS, LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="CPU Scheduling Simulator Backend", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(config.router)
app.include_router(simulate.router)
app.include_router(compare.router)
app.include_router(sessions.router)


@app.get("/")
def root():
    return {"message": "CPU Scheduling Simulator Backend is running!"}


# Optional: allow running via `python -m cpusim.main` for local dev
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cpusim.main:app", host="0.0.0.0", port=8000, reload=True)
