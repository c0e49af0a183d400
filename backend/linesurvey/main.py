from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path

from linesurvey.api.routers import client_config, export, maintenance, submissions
from linesurvey.core.config import settings
from linesurvey.core.constants import EXPORTS_URL
from linesurvey.core.logging import configure_logging
from linesurvey.db import init_db

configure_logging()


# 初回起動時にDBスキーマを作成
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Line Survey API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/", include_in_schema=False)
def index():
    return RedirectResponse(url="/survey/")


app.include_router(submissions.router,   prefix="/submissions", tags=["submissions"])
app.include_router(client_config.router, prefix="/config",      tags=["config"])
app.include_router(export.router,        prefix="/export",      tags=["export"])
app.include_router(maintenance.router,   prefix="/maintenance", tags=["maintenance"])

# 回答フォーム（地図ページ）
app.mount("/survey", StaticFiles(directory=str(Path(__file__).parent / "static"), html=True), name="survey")

# エクスポートのみ静的配信（data_dir 直下の DB は公開しない）
_exports_dir = settings.exports_path
_exports_dir.mkdir(parents=True, exist_ok=True)
app.mount(EXPORTS_URL, StaticFiles(directory=str(_exports_dir)), name="exports")
