import logging
import os
from contextlib import asynccontextmanager

import firebase_admin
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from firebase_admin import credentials
from starlette.middleware.cors import CORSMiddleware

from context import RequestContextMiddleware, request_id
from routes.posts import router as posts_router
from services.exceptions import PostServiceError
from services.firestore import FirestoreDB
from utils.log import configure_logging
from utils.validation import format_validation_errors

load_dotenv()

configure_logging(os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

FIREBASE_CREDENTIALS = os.environ.get("FIREBASE_CREDENTIALS", "./firebase.json")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize Firebase Admin SDK
    cred = credentials.Certificate(FIREBASE_CREDENTIALS)
    firebase_app = firebase_admin.initialize_app(cred)

    app.state.firestore = FirestoreDB(firebase_app)
    logger.info("Connected to Firestore")

    yield
    # Cleanup resources
    firebase_admin.delete_app(firebase_app)


app = FastAPI(lifespan=lifespan)

# middleware to set request context
app.add_middleware(RequestContextMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"errors": format_validation_errors(exc.errors())})


@app.exception_handler(PostServiceError)
async def post_service_error_handler(request: Request, exc: PostServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.msg)
    return JSONResponse(status_code=exc.status_code, content={"msg": exc.msg})


@app.exception_handler(Exception)
async def server_error_handler(request: Request, exc: Exception):
    # Runs outside RequestContextMiddleware, so the id comes from request.state
    rid = getattr(request.state, "request_id", None)
    request_id.set(rid)
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    headers = {"X-Request-ID": rid} if rid else None
    return JSONResponse(status_code=500, content={"msg": "Server Error"}, headers=headers)


# Include routers
app.include_router(posts_router, prefix="/posts", tags=["posts"])
