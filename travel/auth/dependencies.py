from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from travel.config import settings
from travel.database import get_db
from travel.auth.utils import verify_token
from travel.auth.service import UserService
from travel.exceptions import AuthenticationFailed, PermissionDenied

# Missing tokens are reported through AuthenticationFailed like invalid ones
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/token", auto_error=False)

def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    """Get current authenticated user"""
    if not token:
        raise AuthenticationFailed("Not authenticated")

    credentials_exception = AuthenticationFailed("Could not validate credentials")
    
    # Verify token and get payload
    token_data = verify_token(token, credentials_exception)
    
    # Get user from database
    user = UserService.get_user_by_id(db, user_id=token_data["user_id"])
    if user is None:
        raise credentials_exception
    
    return user

def require_admin(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    """Require admin role for access"""
    if not UserService.is_admin(db, current_user.id):
        raise PermissionDenied("Not enough permissions")
    return current_user
