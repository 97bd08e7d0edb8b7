import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import InvalidToken, Unauthenticated
from .models import User
from .services import AuthService, TaskService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def resolve_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    user = None
    if credentials is not None:
        try:
            subject = auth.tokens.verify(credentials.credentials)
        except InvalidToken as exc:
            logger.debug("Bearer token rejected on %s: %s", request.url.path, exc.message)
        else:
            user = auth.resolve(subject)
            if user is None:
                logger.debug("Bearer token subject has no account on %s", request.url.path)
    request.state.user = user
    return user


def current_user(user: Optional[User] = Depends(resolve_identity)) -> User:
    if user is None:
        raise Unauthenticated()
    return user
