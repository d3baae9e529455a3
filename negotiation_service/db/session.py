from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from negotiation_service.core.config import settings

# The engine is the entry point to the database. It's configured with the
# database URL and handles the connection pooling.
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# SessionLocal is a factory for creating new Session objects.
# Every engine operation runs inside one of these and commits exactly once.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# FastAPI dependency: one session per request, always closed afterwards.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
