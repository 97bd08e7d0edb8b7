import logging
from dataclasses import dataclass
from typing import List, Optional

from .errors import InvalidCredentials, NotFound, ValidationError
from .models import Task, TaskPriority, TaskRequest, TaskStatus, User
from .security import PasswordHasher, TokenService
from .store import TaskStore, UserStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    token: str
    email: str
    full_name: str


class AuthService:
    def __init__(self, users: UserStore, hasher: PasswordHasher, tokens: TokenService):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    def _result(self, user: User) -> AuthResult:
        return AuthResult(token=self.tokens.issue(user), email=user.email, full_name=user.full_name)

    def register(self, email: str, password: str, full_name: str) -> AuthResult:
        if not email or not password:
            raise ValidationError("Email and password are required")
        # the UNIQUE constraint raises DuplicateUser, not a prior lookup
        user = self.users.create(email, self.hasher.hash(password), full_name)
        logger.info("Registered user id=%s", user.id)
        return self._result(user)

    def login(self, email: str, password: str) -> AuthResult:
        user = self.users.get_by_email(email)
        if user is None:
            self.hasher.dummy_verify(password)
            logger.info("Login rejected")
            raise InvalidCredentials()
        if not self.hasher.verify(password, user.password_hash):
            logger.info("Login rejected")
            raise InvalidCredentials()
        logger.info("Login succeeded for user id=%s", user.id)
        return self._result(user)

    def resolve(self, subject: str) -> Optional[User]:
        return self.users.get_by_email(subject)


class TaskService:
    def __init__(self, tasks: TaskStore):
        self.tasks = tasks

    @staticmethod
    def _check_title(title: Optional[str]) -> str:
        if title is None or not title.strip():
            raise ValidationError("Title is required")
        return title

    def create(self, request: TaskRequest, owner: User) -> Task:
        task = self.tasks.insert(
            owner_id=owner.id,
            title=self._check_title(request.title),
            description=request.description,
            status=request.status or TaskStatus.TODO,
            priority=request.priority or TaskPriority.MEDIUM,
            due_date=request.due_date,
        )
        logger.info("Created task id=%s for user id=%s", task.id, owner.id)
        return task

    def list_all(self, owner: User) -> List[Task]:
        return self.tasks.find(owner.id)

    def list_by_status(self, owner: User, status: TaskStatus) -> List[Task]:
        return self.tasks.find(owner.id, status=status)

    def list_by_priority(self, owner: User, priority: TaskPriority) -> List[Task]:
        return self.tasks.find(owner.id, priority=priority)

    def get(self, task_id: int, owner: User) -> Task:
        task = self.tasks.get(owner.id, task_id)
        if task is None:
            raise NotFound()
        return task

    def update(self, task_id: int, owner: User, request: TaskRequest) -> Task:
        existing = self.get(task_id, owner)
        # title/description/due date are replaced wholesale; status/priority
        # only when the request carries them.
        updated = self.tasks.update(
            owner_id=owner.id,
            task_id=task_id,
            title=self._check_title(request.title),
            description=request.description,
            due_date=request.due_date,
            status=request.status if request.status is not None else existing.status,
            priority=request.priority if request.priority is not None else existing.priority,
        )
        if updated is None:
            # deleted between the read and the write
            raise NotFound()
        logger.info("Updated task id=%s for user id=%s", task_id, owner.id)
        return updated

    def delete(self, task_id: int, owner: User) -> None:
        if not self.tasks.delete(owner.id, task_id):
            raise NotFound()
        logger.info("Deleted task id=%s for user id=%s", task_id, owner.id)
