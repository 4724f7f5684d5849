import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from src.config import get_settings
from src.infra.storage import get_storage
from src.infra.storage.local import LocalStorage
from src.routes.wine import router as wine_router

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Wine Label Cropper")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
    max_age=600,
)

app.include_router(wine_router)

# LocalStorage인 경우에만 StaticFiles 마운트 (S3는 버킷 URL로 직접 서빙)
storage = get_storage()
if isinstance(storage, LocalStorage):
    storage.base_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/static", StaticFiles(directory=storage.base_dir), name="static")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
