# minimal_api/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authentication.api.routes import router as auth_router
from database.db_connection import criar_tabelas, fechar_conexao, init_database
from fornecedores.api.routes import router as fornecedor_router
from minimal_api.config import settings
from utils.logging_factory import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    if settings.CRIAR_TABELAS:
        await criar_tabelas()
    logger.info(f"🚀 Minimal API iniciada (ambiente={settings.AMBIENTE})")
    yield
    await fechar_conexao()
    logger.info("👋 Minimal API encerrada")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Erros de validação respondem 400 (coleção de erros), não 422
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app() -> FastAPI:
    dev = settings.desenvolvimento

    # Swagger/OpenAPI apenas em desenvolvimento
    app = FastAPI(
        title="Minimal API Example",
        description="API de cadastro de fornecedores com autenticação JWT",
        version="1.0.0",
        docs_url="/swagger" if dev else None,
        redoc_url="/redoc" if dev else None,
        openapi_url="/openapi.json" if dev else None,
        swagger_ui_parameters={"persistAuthorization": True},
        lifespan=lifespan,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(auth_router)
    app.include_router(fornecedor_router)

    @app.get("/health", tags=["Health"])
    async def healthcheck():
        return {"status": "ok", "service": "minimal_api"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("minimal_api.main:app", host="0.0.0.0", port=8000, reload=settings.desenvolvimento)
