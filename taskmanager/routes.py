from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Response, status

from .dependencies import current_user, get_auth_service, get_task_service
from .models import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    TaskPriority,
    TaskRequest,
    TaskResponse,
    TaskStatus,
    User,
)
from .services import AuthResult, AuthService, TaskService

# SQLite INTEGER is a signed 64-bit value
TaskId = Annotated[int, Path(ge=1, le=2**63 - 1)]

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])
task_router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    responses={401: {"model": ErrorResponse}},
)


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(token=result.token, email=result.email, full_name=result.full_name)


# Auth


@auth_router.post(
    "/register",
    response_model=AuthResponse,
    responses={409: {"model": ErrorResponse}},
)
def register(body: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    return _auth_response(auth.register(body.email, body.password, body.full_name))


@auth_router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}},
)
def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    return _auth_response(auth.login(body.email, body.password))


# Tasks


@task_router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    body: TaskRequest,
    user: User = Depends(current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return TaskResponse.from_task(tasks.create(body, user))


@task_router.get("", response_model=List[TaskResponse])
def read_tasks(user: User = Depends(current_user), tasks: TaskService = Depends(get_task_service)):
    return [TaskResponse.from_task(t) for t in tasks.list_all(user)]


@task_router.get("/status/{task_status}", response_model=List[TaskResponse])
def read_tasks_by_status(
    task_status: TaskStatus,
    user: User = Depends(current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return [TaskResponse.from_task(t) for t in tasks.list_by_status(user, task_status)]


@task_router.get("/priority/{priority}", response_model=List[TaskResponse])
def read_tasks_by_priority(
    priority: TaskPriority,
    user: User = Depends(current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return [TaskResponse.from_task(t) for t in tasks.list_by_priority(user, priority)]


@task_router.get("/{task_id}", response_model=TaskResponse, responses={404: {"model": ErrorResponse}})
def read_task(
    task_id: TaskId,
    user: User = Depends(current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return TaskResponse.from_task(tasks.get(task_id, user))


@task_router.put("/{task_id}", response_model=TaskResponse, responses={404: {"model": ErrorResponse}})
def update_task(
    task_id: TaskId,
    body: TaskRequest,
    user: User = Depends(current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return TaskResponse.from_task(tasks.update(task_id, user, body))


@task_router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
def delete_task(
    task_id: TaskId,
    user: User = Depends(current_user),
    tasks: TaskService = Depends(get_task_service),
):
    tasks.delete(task_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
