from dotenv import load_dotenv
load_dotenv()

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import get_settings
from errors import ErrorKind, ServiceError
from routes import analyze, describe, image, model_list, plan, tts, voice_coach

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="FitPlan API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Error rendering: always {error, details?} ----------

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Covers unparseable JSON bodies as well as schema violations
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{loc or 'body'}: {err.get('msg', 'invalid value')}")
    error = ServiceError(ErrorKind.INVALID_INPUT, "Invalid request", details="; ".join(problems))
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    error = ServiceError(ErrorKind.UNKNOWN, "Internal server error")
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


app.include_router(plan.router)
app.include_router(analyze.router)
app.include_router(describe.router)
app.include_router(image.router)
app.include_router(voice_coach.router)
app.include_router(tts.router)
app.include_router(model_list.router)


@app.get("/")
def health():
    return {"status": "ok", "service": "fitplan"}
