import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routers.auth import router as auth_router
from app.api.routers.users import router as users_router
from app.api.routers.docon import router as docon_router
from app.api.routers.it_assets import router as it_assets_router
from app.api.routers.laptops import router as laptops_router
from app.api.routers.radios import router as radios_router
from app.api.routers.vouchers import router as vouchers_router
from app.api.routers.starlink import router as starlink_router
from app.api.routers.files import router as files_router
from app.api.routers.share import router as share_router
from app.api.routers.links import router as links_router
from app.core.config import csv_values, settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="LMA Portal API")

_origins = csv_values(settings.CORS_ALLOW_ORIGINS) or ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    # browsers reject credentialed requests against a wildcard origin
    allow_credentials="*" not in _origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(docon_router)
app.include_router(it_assets_router)
app.include_router(laptops_router)
app.include_router(radios_router)
app.include_router(vouchers_router)
app.include_router(starlink_router)
app.include_router(files_router)
app.include_router(share_router)
app.include_router(links_router)


@app.get("/health")
def health():
    return {"status": "up"}
