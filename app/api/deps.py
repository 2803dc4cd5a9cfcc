from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ForbiddenError, UnauthenticatedError
from app.models.user import UserRole
from app.services.accounts import AccountService
from app.services.inventory import InventoryService
from app.services.notifications import PropertyNotifier, build_notifier
from app.utils.auth import TokenClaims, decode_token
from typing import Optional

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    if not credentials or not credentials.credentials:
        return None
    return credentials.credentials


def get_token_claims(token: Optional[str] = Depends(get_bearer_token)) -> TokenClaims:
    """Gate for protected routes: validates the bearer token only, never hits the DB."""
    if not token:
        raise UnauthenticatedError()
    return decode_token(token)


def require_role(required_role: UserRole):
    def role_checker(claims: TokenClaims = Depends(get_token_claims)) -> TokenClaims:
        if claims.role != required_role:
            raise ForbiddenError(f"Only {required_role.value} accounts can do this")
        return claims
    return role_checker


# ─── Services ─────────────────────────────────────────────────────────────────

def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(db)


def get_inventory_service(db: Session = Depends(get_db)) -> InventoryService:
    return InventoryService(db)


def get_notifier() -> PropertyNotifier:
    return build_notifier(settings)
