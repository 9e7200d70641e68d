from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from og_preview.configurations.config import APP_VERSION
from og_preview.configurations.health_check_config import setup_health_checks
from og_preview.lifespan import lifespan
from og_preview.routes import preview

app = FastAPI(title="OG Preview", version=APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(preview.router)

setup_health_checks(app)
