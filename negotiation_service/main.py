# negotiation_service/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from negotiation_service.api.error_handlers import negotiation_error_handler
from negotiation_service.api.v1.api import api_router
from negotiation_service.core.config import settings
from negotiation_service.core.exceptions import NegotiationError
from negotiation_service.core.kafka_producer import close_kafka_singleton
from negotiation_service.core.limiter import limiter
from negotiation_service.graphql.router import graphql_router
from negotiation_service.scheduler import init_scheduler, shutdown_scheduler

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Negotiation service starting up...")
    if settings.ENABLE_SCHEDULER:
        init_scheduler()
    else:
        logger.info("Background scheduler disabled (ENABLE_SCHEDULER=false)")
    yield
    logger.info("Negotiation service shutting down...")
    shutdown_scheduler()
    close_kafka_singleton()


app = FastAPI(
    title="GlobalConnect Negotiation Microservice",
    version="1.0.0",
    description="""
        **Service-Engagement Negotiation Service**

        Organizers and service providers exchange proposal cards, counter,
        accept, and lock an engagement into an agreement, then track its delivery.

        ## Authentication

        All endpoints except `/api/v1/health` require JWT authentication via the
        `Authorization: Bearer <token>` header.
        """,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(NegotiationError, negotiation_error_handler)

origins = [
    "http://localhost:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,  # Allow specific origins
    allow_credentials=True,  # Allow cookies and authorization headers
    allow_methods=["*"],  # Allow all methods (GET, POST, etc.)
    allow_headers=["*"],  # Allow all headers
)

app.include_router(api_router, prefix="/api/v1")
app.include_router(graphql_router, prefix="/graphql")


@app.get("/")
def read_root():
    return {"status": "Negotiation Service is running"}
