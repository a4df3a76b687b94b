import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import CORS_ORIGINS, LOG_LEVEL
from app.db import engine, Base

from app.models.campaign import Campaign
from app.models.campaign_tier import CampaignTier
from app.models.point_entry import PointEntry
from app.models.point_entry_history import PointEntryHistory

from app.routes.campaigns import router as campaigns_router
from app.routes.points import router as points_router
from app.routes.me import router as me_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Rewards Engine")

# ─── CORS ─────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine)


app.include_router(campaigns_router)
app.include_router(points_router)
app.include_router(me_router)


@app.get("/")
def read_root():
    return {"message": "Rewards Engine is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8001, reload=True)
