"""
FastAPI backend: REST API for persons and interactions.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from neo4j import GraphDatabase
from starlette.exceptions import HTTPException as StarletteHTTPException

from kith.application import (
    InteractionRepository,
    InteractionService,
    Invalid,
    NotFound,
    PersonRepository,
    PersonService,
)
from kith.infrastructure import (
    InMemoryInteractionRepository,
    InMemoryPersonRepository,
    Neo4jInteractionRepository,
    Neo4jPersonRepository,
    ensure_constraints,
)
from kith.schemas import (
    InteractionPayload,
    InteractionRecord,
    PersonPayload,
    PersonRecord,
    to_json,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

# Identity comes from an upstream auth provider that sets this header.
USER_ID_HEADER = "X-User-Id"

STORAGE_MEMORY = "memory"
STORAGE_NEO4J = "neo4j"


def _get_driver():
    uri = os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip()
    user = os.environ.get("NEO4J_USER", "neo4j").strip()
    password = os.environ.get("NEO4J_PASSWORD", "password").strip()
    return GraphDatabase.driver(uri, auth=(user, password))


def _install_services(
    app: FastAPI,
    persons: PersonRepository,
    interactions: InteractionRepository,
) -> None:
    app.state.person_service = PersonService(persons, interactions)
    app.state.interaction_service = InteractionService(persons, interactions)


@asynccontextmanager
async def lifespan(app: FastAPI):
    driver = None
    if getattr(app.state, "person_service", None) is None:
        storage = os.environ.get("KITH_STORAGE", STORAGE_MEMORY).strip().lower()
        if storage == STORAGE_NEO4J:
            driver = _get_driver()
            ensure_constraints(driver)
            _install_services(
                app, Neo4jPersonRepository(driver), Neo4jInteractionRepository(driver)
            )
        else:
            logger.warning("KITH_STORAGE=%s: data is kept in memory only.", storage)
            _install_services(
                app, InMemoryPersonRepository(), InMemoryInteractionRepository()
            )
    try:
        yield
    finally:
        if driver is not None:
            driver.close()


# --- Dependencies ---


def get_user_id(x_user_id: str | None = Header(None, alias=USER_ID_HEADER)) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


def get_person_service(request: Request) -> PersonService:
    return request.app.state.person_service


def get_interaction_service(request: Request) -> InteractionService:
    return request.app.state.interaction_service


def _raise_for_result(result) -> None:
    if isinstance(result, Invalid):
        raise HTTPException(status_code=400, detail=result.reason)
    if isinstance(result, NotFound):
        raise HTTPException(status_code=404, detail=result.reason)


router = APIRouter(prefix="/api")


# --- REST: persons ---


@router.get("/persons")
def list_persons(
    user_id: str = Depends(get_user_id),
    service: PersonService = Depends(get_person_service),
):
    return [to_json(PersonRecord.from_entity(p)) for p in service.list_persons(user_id)]


@router.post("/persons")
def create_person(
    body: PersonPayload,
    user_id: str = Depends(get_user_id),
    service: PersonService = Depends(get_person_service),
):
    result = service.create_person(user_id, body.model_dump(exclude_unset=True))
    _raise_for_result(result)
    return JSONResponse(content=to_json(PersonRecord.from_entity(result)), status_code=201)


@router.get("/persons/{person_id}")
def get_person(
    person_id: str,
    user_id: str = Depends(get_user_id),
    service: PersonService = Depends(get_person_service),
):
    result = service.get_person(user_id, person_id)
    _raise_for_result(result)
    return to_json(PersonRecord.from_entity(result))


@router.patch("/persons/{person_id}")
def update_person(
    person_id: str,
    body: PersonPayload,
    user_id: str = Depends(get_user_id),
    service: PersonService = Depends(get_person_service),
):
    result = service.update_person(
        user_id, person_id, body.model_dump(exclude_unset=True)
    )
    _raise_for_result(result)
    return to_json(PersonRecord.from_entity(result))


@router.delete("/persons/{person_id}")
def delete_person(
    person_id: str,
    user_id: str = Depends(get_user_id),
    service: PersonService = Depends(get_person_service),
):
    if not service.delete_person(user_id, person_id):
        raise HTTPException(status_code=404, detail="Person not found")
    return {"message": "Person deleted successfully"}


# --- REST: interactions ---


@router.get("/interactions")
def list_interactions(
    person_id: str | None = Query(None, alias="personId"),
    user_id: str = Depends(get_user_id),
    service: InteractionService = Depends(get_interaction_service),
):
    result = service.list_interactions(user_id, (person_id or "").strip() or None)
    _raise_for_result(result)
    return [to_json(InteractionRecord.from_view(v)) for v in result]


@router.post("/interactions")
def create_interaction(
    body: InteractionPayload,
    user_id: str = Depends(get_user_id),
    service: InteractionService = Depends(get_interaction_service),
):
    result = service.create_interaction(user_id, body.model_dump(exclude_unset=True))
    _raise_for_result(result)
    return JSONResponse(
        content=to_json(InteractionRecord.from_view(result)), status_code=201
    )


@router.get("/interactions/{interaction_id}")
def get_interaction(
    interaction_id: str,
    user_id: str = Depends(get_user_id),
    service: InteractionService = Depends(get_interaction_service),
):
    result = service.get_interaction(user_id, interaction_id)
    _raise_for_result(result)
    return to_json(InteractionRecord.from_view(result))


@router.patch("/interactions/{interaction_id}")
def update_interaction(
    interaction_id: str,
    body: InteractionPayload,
    user_id: str = Depends(get_user_id),
    service: InteractionService = Depends(get_interaction_service),
):
    result = service.update_interaction(
        user_id, interaction_id, body.model_dump(exclude_unset=True)
    )
    _raise_for_result(result)
    return to_json(InteractionRecord.from_view(result))


@router.delete("/interactions/{interaction_id}")
def delete_interaction(
    interaction_id: str,
    user_id: str = Depends(get_user_id),
    service: InteractionService = Depends(get_interaction_service),
):
    if not service.delete_interaction(user_id, interaction_id):
        raise HTTPException(status_code=404, detail="Interaction not found")
    return {"message": "Interaction deleted successfully"}


# --- Error bodies: always {"error": "<message>"} ---


async def _http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        content={"error": str(exc.detail)},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def _validation_error(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        where = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{where}: {err.get('msg')}" if where else str(err.get("msg")))
    return JSONResponse(
        content={"error": "Invalid request body: " + "; ".join(problems)},
        status_code=400,
    )


async def _unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(content={"error": "Internal Server Error"}, status_code=500)


def create_app(
    persons: PersonRepository | None = None,
    interactions: InteractionRepository | None = None,
) -> FastAPI:
    """Build the API. Repositories given here win over the KITH_STORAGE setting."""
    app = FastAPI(title="Kith API", lifespan=lifespan)
    app.state.person_service = None
    app.state.interaction_service = None
    if persons is not None and interactions is not None:
        _install_services(app, persons, interactions)

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unexpected_error)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(router)
    return app


app = create_app()
