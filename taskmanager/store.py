import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Tuple

from .database import Database
from .errors import DuplicateUser
from .models import Task, TaskPriority, TaskStatus, User

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_text(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _from_text(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class UserStore:
    """Credential store. Email uniqueness is the table's UNIQUE constraint."""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            full_name=row["full_name"],
        )

    def create(self, email: str, password_hash: str, full_name: str) -> User:
        try:
            with self.db.connect() as conn:
                cursor = conn.execute(
                    "INSERT INTO users (email, password_hash, full_name) VALUES (?, ?, ?)",
                    (email, password_hash, full_name),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            raise DuplicateUser() from exc
        return User(id=user_id, email=email, password_hash=password_hash, full_name=full_name)

    def get_by_email(self, email: str) -> Optional[User]:
        # Default BINARY collation: the match is case-sensitive.
        with self.db.connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        return self._row_to_user(row) if row is not None else None


class TaskStore:
    """Task persistence. Every query is built by ``_owner_scope``.

    Lists are ordered by id, i.e. insertion order.
    """

    def __init__(self, db: Database, clock: Callable[[], datetime] = _utcnow):
        self.db = db
        self._clock = clock

    @staticmethod
    def _owner_scope(owner_id: int, **criteria: Any) -> Tuple[str, List[Any]]:
        where_clauses = ["owner_id = ?"]
        params: List[Any] = [owner_id]
        for column, value in criteria.items():
            if value is None:
                continue
            where_clauses.append(f"{column} = ?")
            params.append(value.value if isinstance(value, (TaskStatus, TaskPriority)) else value)
        return " WHERE " + " AND ".join(where_clauses), params

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            owner_id=row["owner_id"],
            title=row["title"],
            description=row["description"],
            status=TaskStatus(row["status"]),
            priority=TaskPriority(row["priority"]),
            due_date=_from_text(row["due_date"]),
            created_at=_from_text(row["created_at"]),
            updated_at=_from_text(row["updated_at"]),
        )

    def insert(
        self,
        owner_id: int,
        title: str,
        description: Optional[str],
        status: TaskStatus,
        priority: TaskPriority,
        due_date: Optional[datetime],
    ) -> Task:
        now = self._clock()
        with self.db.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO tasks (owner_id, title, description, status, priority, due_date, "
                "created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    owner_id,
                    title,
                    description,
                    status.value,
                    priority.value,
                    _to_text(due_date),
                    _to_text(now),
                    _to_text(now),
                ),
            )
            task_id = cursor.lastrowid
        return Task(
            id=task_id,
            owner_id=owner_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
            created_at=now,
            updated_at=now,
        )

    def find(
        self,
        owner_id: int,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
    ) -> List[Task]:
        where, params = self._owner_scope(owner_id, status=status, priority=priority)
        with self.db.connect() as conn:
            rows = conn.execute("SELECT * FROM tasks" + where + " ORDER BY id ASC", params).fetchall()
        return [self._row_to_task(row) for row in rows]

    def get(self, owner_id: int, task_id: int) -> Optional[Task]:
        where, params = self._owner_scope(owner_id, id=task_id)
        with self.db.connect() as conn:
            row = conn.execute("SELECT * FROM tasks" + where, params).fetchone()
        return self._row_to_task(row) if row is not None else None

    def update(
        self,
        owner_id: int,
        task_id: int,
        title: str,
        description: Optional[str],
        due_date: Optional[datetime],
        status: TaskStatus,
        priority: TaskPriority,
    ) -> Optional[Task]:
        where, params = self._owner_scope(owner_id, id=task_id)
        with self.db.connect() as conn:
            cursor = conn.execute(
                "UPDATE tasks SET title = ?, description = ?, due_date = ?, status = ?, "
                "priority = ?, updated_at = ?" + where,
                [
                    title,
                    description,
                    _to_text(due_date),
                    status.value,
                    priority.value,
                    _to_text(self._clock()),
                ]
                + params,
            )
            if cursor.rowcount == 0:
                return None
            row = conn.execute("SELECT * FROM tasks" + where, params).fetchone()
        return self._row_to_task(row)

    def delete(self, owner_id: int, task_id: int) -> bool:
        where, params = self._owner_scope(owner_id, id=task_id)
        with self.db.connect() as conn:
            cursor = conn.execute("DELETE FROM tasks" + where, params)
            deleted = cursor.rowcount
        return deleted > 0
