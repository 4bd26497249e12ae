import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from branch_connect.core.config import CORS_ORIGINS, LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

from branch_connect.api import analytics, branches, dashboard, me, reports, visits  # noqa: E402

app = FastAPI(title="Branch Connect")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(me.router)
app.include_router(dashboard.router)
app.include_router(analytics.router)
app.include_router(visits.router)
app.include_router(branches.router)
app.include_router(reports.router)


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
