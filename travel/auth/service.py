import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from travel.auth.schemas import UserCreate, UserProfile, UserUpdate
from travel.auth.utils import get_password_hash, verify_password
from travel.database import unit_of_work
from travel.exceptions import AlreadyExists, NotFound
from travel.models import Role, User, UserHasRole
from travel.validation import require_text

logger = logging.getLogger(__name__)

ADMIN_ROLES = {"admin", "super_admin"}

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email).first()
    
    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.get(User, user_id)
    
    @staticmethod
    def create_user(db: Session, user: UserCreate) -> User:
        """Create a new user with the default 'user' role"""
        require_text(user.name, "name")
        require_text(user.password, "password")
        
        db_user = User(
            name=user.name,
            email=user.email,
            password=get_password_hash(user.password)
        )
        
        try:
            with unit_of_work(db):
                db.add(db_user)
                db.flush()
                UserService._add_role(db, db_user.id, "user")
        except IntegrityError:
            raise AlreadyExists("Email already registered", field="email")
        
        logger.info(f"Registered user {db_user.id}")
        return db_user
    
    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password"""
        user = UserService.get_user_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.password):
            return None
        return user
    
    @staticmethod
    def update_user(db: Session, user_id: int, user_update: UserUpdate) -> User:
        """Update user information"""
        db_user = UserService.get_user_by_id(db, user_id)
        if not db_user:
            raise NotFound("User", user_id)
        
        update_data = user_update.model_dump(exclude_unset=True)
        
        # Hash password if it's being updated
        if "password" in update_data:
            update_data["password"] = get_password_hash(update_data["password"])
        
        try:
            with unit_of_work(db):
                for field, value in update_data.items():
                    setattr(db_user, field, value)
                db.flush()
        except IntegrityError:
            raise AlreadyExists("Email already exists", field="email")
        
        return db_user
    
    @staticmethod
    def get_user_roles(db: Session, user_id: int) -> List[str]:
        """Get user's role names"""
        rows = db.query(Role.name).join(UserHasRole, UserHasRole.role_id == Role.id).filter(
            UserHasRole.user_id == user_id
        ).all()
        return [name for (name,) in rows]
    
    @staticmethod
    def is_admin(db: Session, user_id: int) -> bool:
        return bool(ADMIN_ROLES.intersection(UserService.get_user_roles(db, user_id)))
    
    @staticmethod
    def assign_role(db: Session, user_id: int, role_name: str) -> None:
        """Grant a role, creating the role if needed"""
        if UserService.get_user_by_id(db, user_id) is None:
            raise NotFound("User", user_id)
        with unit_of_work(db):
            if role_name not in UserService.get_user_roles(db, user_id):
                UserService._add_role(db, user_id, role_name)
    
    @staticmethod
    def get_profile(db: Session, user: User) -> UserProfile:
        roles = UserService.get_user_roles(db, user.id)
        return UserProfile(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
            roles=roles,
            is_admin=bool(ADMIN_ROLES.intersection(roles))
        )
    
    @staticmethod
    def _add_role(db: Session, user_id: int, role_name: str) -> None:
        role = db.query(Role).filter(Role.name == role_name).first()
        if role is None:
            role = Role(name=role_name)
            db.add(role)
            db.flush()
        db.add(UserHasRole(user_id=user_id, role_id=role.id))
        db.flush()
