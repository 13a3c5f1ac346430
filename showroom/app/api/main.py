from fastapi import FastAPI

from showroom.app.core.logging_config import configure_logging
from .routes import uploads, vehicles

configure_logging()

app = FastAPI(title="Showroom Stock API", version="0.1.0")

app.include_router(uploads.router, prefix="/uploads", tags=["uploads"])
app.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
