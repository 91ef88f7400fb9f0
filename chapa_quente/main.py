from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from chapa_quente import __version__, config
from chapa_quente.app_logger import get_logger
from chapa_quente.database import auto_migrate, create_db_engine, make_session_factory
from chapa_quente.models import utcnow
from chapa_quente.routers import auth, orders, products, stock, users
from chapa_quente.security import check_jwt_secret

log = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    check_jwt_secret()
    engine = create_db_engine()
    auto_migrate(engine, seed=config.AUTO_SEED)
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    log.info("Chapa Quente API %s ready", __version__)
    yield
    engine.dispose()


app = FastAPI(title="Chapa Quente Ordering API", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ===================== Error handlers =====================
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        where = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        problems.append(f"{where}: {err.get('msg')}" if where else err.get("msg"))
    return JSONResponse(status_code=400, content={"detail": "; ".join(problems) or "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ===================== Public Endpoints =====================
@app.get("/")
def root():
    return {"message": "Chapa Quente Ordering API running"}


@app.get("/health")
def health(request: Request):
    response = {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "service": "Chapa Quente API",
        "database": "not initialized",
    }
    factory = getattr(request.app.state, "session_factory", None)
    if factory is not None:
        try:
            with factory() as db:
                db.execute(text("SELECT 1"))
            response["database"] = "connected"
        except Exception as e:
            log.warning("health check could not reach the database: %s", e)
            response["status"] = "degraded"
            response["database"] = "unreachable"
    return response


app.include_router(auth.router)
app.include_router(products.router)
app.include_router(orders.router)
app.include_router(stock.router)
app.include_router(users.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
