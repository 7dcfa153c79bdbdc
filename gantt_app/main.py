# gantt_app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Dict, List

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import crud, models, schemas, seed
from .database import SessionLocal, engine, get_db
from .exceptions import InvalidInput, NotFound
from .logging_setup import setup_logging
from .settings import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    if settings.create_tables:
        # Crea las tablas en la BD si no existen
        models.Base.metadata.create_all(bind=engine)
    if settings.seed_demo:
        with SessionLocal() as db:
            seed.seed_if_empty(db)
    yield


app = FastAPI(title="Gantt Demo API", lifespan=lifespan)

# Cuerpo de error documentado en OpenAPI: {"error": "..."}
BAD_REQUEST = {400: {"model": schemas.ErrorOut}}
NOT_FOUND = {404: {"model": schemas.ErrorOut}}


# === Errores ===

@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    logger.info("%s %s rechazado: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Agrupado por campo: el resto de "loc" son ramas internas de los Union
    by_field: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if part != "body"]
        by_field.setdefault(str(loc[0]) if loc else "", []).append(error["msg"])

    messages = []
    for field, errors in by_field.items():
        detail = errors[0] if len(errors) == 1 else "invalid value"
        messages.append(f"{field}: {detail}" if field else detail)
    message = "; ".join(messages) or "Invalid request"
    logger.info("%s %s rechazado: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Error inesperado en %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# === Lectura ===

@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/gantt", response_model=schemas.GanttSnapshot)
def get_gantt(db: Session = Depends(get_db)):
    """Todo lo que el diagrama necesita al arrancar: tareas, enlaces y escalas."""
    return schemas.GanttSnapshot(
        tasks=[schemas.TaskOut.from_model(task) for task in crud.list_tasks(db)],
        links=[schemas.LinkOut.from_model(link) for link in crud.list_links(db)],
        scales=[schemas.ScaleOut.from_model(scale) for scale in crud.list_scales(db)],
    )


@app.get("/tasks", response_model=List[schemas.TaskOut])
def get_tasks(db: Session = Depends(get_db)):
    return [schemas.TaskOut.from_model(task) for task in crud.list_tasks(db)]


@app.get("/links", response_model=List[schemas.LinkOut])
def get_links(db: Session = Depends(get_db)):
    return [schemas.LinkOut.from_model(link) for link in crud.list_links(db)]


@app.get("/scales", response_model=List[schemas.ScaleOut])
def get_scales(db: Session = Depends(get_db)):
    return [schemas.ScaleOut.from_model(scale) for scale in crud.list_scales(db)]


@app.get(
    "/tasks/{task_id}",
    response_model=schemas.TaskOut,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
def get_task_by_id(task_id: str, db: Session = Depends(get_db)):
    db_task = crud.require_task(db, crud.parse_task_id(task_id))
    return schemas.TaskOut.from_model(db_task)


# === Escritura ===

@app.post("/tasks", response_model=schemas.TaskOut, status_code=201, responses=BAD_REQUEST)
def create_task(payload: schemas.TaskPayload, db: Session = Depends(get_db)):
    db_task = crud.create_task(db=db, payload=payload)
    return schemas.TaskOut.from_model(db_task)


@app.patch(
    "/tasks/{task_id}",
    response_model=schemas.TaskOut,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
def update_task(task_id: str, payload: schemas.TaskPayload, db: Session = Depends(get_db)):
    db_task = crud.update_task(db=db, task_id=crud.parse_task_id(task_id), payload=payload)
    return schemas.TaskOut.from_model(db_task)


@app.delete(
    "/tasks/{task_id}",
    response_model=schemas.DeletedOut,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
def delete_task(task_id: str, db: Session = Depends(get_db)):
    # Devuelve todos los ids borrados para que el cliente reconcilie su vista
    deleted = crud.cascade_delete(db=db, task_id=crud.parse_task_id(task_id))
    return schemas.DeletedOut(deleted=deleted)
