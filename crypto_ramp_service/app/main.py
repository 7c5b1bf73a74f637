import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crypto_ramp_service.app.api.routes import transactions, webhooks
from crypto_ramp_service.app.core.config import settings
from crypto_ramp_service.app.core.exceptions import AppException
from crypto_ramp_service.app.core.handlers import app_exception_handler
from crypto_ramp_service.app.core.logging_config import configure_logging
from crypto_ramp_service.app.db.base import Base
from crypto_ramp_service.app.db.session import engine
from crypto_ramp_service.app.models import transaction, user  # noqa: F401


configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Crypto Ramp Service",
    version="1.0.0",
    description="Purchase cryptocurrency with fiat (mobile money or card) through MoonPay",
)

Base.metadata.create_all(bind=engine)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(AppException, app_exception_handler)

app.include_router(transactions.router)
app.include_router(webhooks.router)


@app.get("/")
def root():
    return {"message": "Crypto ramp service running"}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
