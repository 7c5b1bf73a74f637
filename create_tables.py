from crypto_ramp_service.app.db.base import Base
from crypto_ramp_service.app.db.session import engine

# force import models so SQLAlchemy knows them
from crypto_ramp_service.app.models.user import User  # noqa
from crypto_ramp_service.app.models.transaction import Transaction  # noqa

print("Creating tables...")
Base.metadata.create_all(bind=engine)
print("Done.")
