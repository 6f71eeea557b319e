import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_service.config import Settings
from todo_service.context import ServerContext, get_context
from todo_service.logging_setup import setup_logging
from todo_service.models import CompletionUpdate, TaskCreate, TaskEnvelope, TaskResponse, TaskUpdate
from todo_service.store import SORT_KEYS, StorageError, TaskNotFound

logger = logging.getLogger(__name__)

NOT_FOUND = "Task not found!"

router = APIRouter()


@router.get("/health")
def health():
    return {"status": "healthy"}


@router.get("/api/tasks", response_model=List[TaskResponse])
def list_tasks(sortBy: Optional[str] = Query(default=None),
               ctx: ServerContext = Depends(get_context)):
    if sortBy is not None and sortBy not in SORT_KEYS:
        logger.debug("Ignoring unknown sortBy=%r", sortBy)
        sortBy = None
    try:
        return ctx.store.list_tasks(sortBy)
    except StorageError:
        logger.exception("Listing tasks failed")
        raise HTTPException(status_code=500, detail="Failed to get tasks from server!")


@router.post("/api/tasks/todo", response_model=TaskEnvelope)
def create_task(task: TaskCreate, ctx: ServerContext = Depends(get_context)):
    try:
        created = ctx.store.create_task(task)
    except StorageError:
        logger.exception("Creating task failed")
        raise HTTPException(status_code=500, detail="Failed creating tasks from server!")
    logger.info("Created task %s", created.id)
    return TaskEnvelope(task=created, message="Task created Successfully!")


def _set_completed(ctx: ServerContext, task_id: str, completed: bool,
                   message: str, failure: str) -> TaskEnvelope:
    try:
        task = ctx.store.set_completed(task_id, completed)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    except StorageError:
        logger.exception("Setting completed=%s on task %s failed", completed, task_id)
        raise HTTPException(status_code=500, detail=failure)
    return TaskEnvelope(task=task, message=message)


@router.patch("/api/tasks/complete/{task_id}", response_model=TaskEnvelope)
def complete_task(task_id: str, body: Optional[CompletionUpdate] = None,
                  ctx: ServerContext = Depends(get_context)):
    completed = True if body is None or body.completed is None else body.completed
    return _set_completed(ctx, task_id, completed,
                          "Task set to complete!", "Failed updating task from server!")


@router.patch("/api/tasks/notComplete/{task_id}", response_model=TaskEnvelope)
def not_complete_task(task_id: str, body: Optional[CompletionUpdate] = None,
                      ctx: ServerContext = Depends(get_context)):
    completed = False if body is None or body.completed is None else body.completed
    return _set_completed(ctx, task_id, completed,
                          "Task set 'not complete!'", "Error making the task not complete!")


@router.delete("/api/tasks/delete/{task_id}", response_model=TaskEnvelope)
def delete_task(task_id: str, ctx: ServerContext = Depends(get_context)):
    try:
        deleted = ctx.store.delete_task(task_id)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    except StorageError:
        logger.exception("Deleting task %s failed", task_id)
        raise HTTPException(status_code=500, detail="Error deleting task!")
    logger.info("Deleted task %s", task_id)
    return TaskEnvelope(task=deleted, message="Task deleted successfully!")


@router.put("/api/tasks/update/{task_id}", response_model=TaskEnvelope)
def update_task(task_id: str, updates: TaskUpdate, ctx: ServerContext = Depends(get_context)):
    try:
        updated = ctx.store.update_task(task_id, updates)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    except StorageError:
        logger.exception("Updating task %s failed", task_id)
        raise HTTPException(status_code=500, detail="Error updating the task!")
    return TaskEnvelope(task=updated, message="Task updated successfully!")


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail},
                        headers=getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400,
                        content={"message": "Please fill in all fields.",
                                 "errors": jsonable_encoder(exc.errors())})


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Something went wrong on the server!"})


def create_app(context: Optional[ServerContext] = None) -> FastAPI:
    if context is None:
        context = ServerContext.from_settings(Settings.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # any failure here aborts startup and the server process exits
        try:
            context.store.ping()
            indexed = context.store.sync_indexes()
        except StorageError:
            logger.critical("Startup error: cannot connect to the task store", exc_info=True)
            raise
        logger.info("Connected to task store, %d task(s) indexed", indexed)
        yield
        context.store.close()

    app = FastAPI(title="To Do App", lifespan=lifespan)
    app.state.context = context
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[context.settings.frontend_origin],
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
        allow_headers=["*"],
        allow_credentials=True,
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
    app.include_router(router)
    return app


def run() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    import uvicorn
    uvicorn.run(create_app(ServerContext.from_settings(settings)),
                host=settings.host, port=settings.port, lifespan="on", log_config=None)


if __name__ == "__main__":
    run()
