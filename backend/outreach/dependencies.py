"""
FastAPI dependencies for caller identity and storage.
"""
import logging
import threading
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from .config import get_settings
from .database import get_db
from .repositories import ContactRepository, InMemoryContactRepository, SqlContactRepository
from .services.auth_service import get_auth_service
from .services.csv_import_service import ImportWorkflow

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for JWT tokens
security = HTTPBearer(auto_error=False)

# Guards lazy creation of the shared in-memory repository
_repository_lock = threading.Lock()


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Dependency returning the id of the authenticated caller.

    Raises:
        HTTPException 401: If the token is missing or invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    user_id = get_auth_service().verify_access_token(credentials.credentials)
    if not user_id:
        raise credentials_exception

    return user_id


def get_contact_repository(
    request: Request,
    db: Session = Depends(get_db),
) -> ContactRepository:
    """Repository selected by the storage_backend setting."""
    if get_settings().storage_backend == "memory":
        repository = getattr(request.app.state, "contact_repository", None)
        if repository is None:
            with _repository_lock:
                repository = getattr(request.app.state, "contact_repository", None)
                if repository is None:
                    repository = InMemoryContactRepository()
                    request.app.state.contact_repository = repository
        return repository
    return SqlContactRepository(db)


def get_import_workflow(
    repository: ContactRepository = Depends(get_contact_repository),
) -> ImportWorkflow:
    return ImportWorkflow(repository)
