import logging
from typing import List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy import func
from sqlmodel import Session, select

from travelblog.core.dates import utcnow
from travelblog.core.security import get_password_hash, verify_password
from travelblog.models.admin_user import ROLE_PERMISSIONS, AdminRole, AdminUser
from travelblog.models.user import User

logger = logging.getLogger(__name__)


def effective_permissions(admin_user: AdminUser) -> List[str]:
    """Role defaults plus any granular grants."""
    perms = list(ROLE_PERMISSIONS.get(admin_user.role, []))
    for p in admin_user.permissions or []:
        if p not in perms:
            perms.append(p)
    return perms


def check_permission(admin_user: AdminUser, permission: str) -> bool:
    """Check if admin user has specific permission"""
    if admin_user.role == AdminRole.SUPER_ADMIN:
        return True
    return permission in effective_permissions(admin_user)


class AuthService:
    def __init__(self, session: Session):
        self.session = session

    def get_user_by_email(self, email: str) -> Optional[User]:
        # Exact match first, then case-insensitive
        return self.session.exec(select(User).where(User.email == email)).first() or \
               self.session.exec(select(User).where(func.lower(User.email) == email.lower())).first()

    def authenticate_user(self, email: str, password: str) -> Tuple[Optional[User], Optional[str]]:
        user = self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            return None, "Incorrect email or password"
        if not user.is_active:
            return None, "Account is disabled"
        return user, None

    def get_admin_for_user(self, user: User) -> Optional[AdminUser]:
        return self.session.exec(select(AdminUser).where(AdminUser.user_id == user.id)).first()

    def create_user(self, email: str, password: str, name: Optional[str] = None) -> User:
        if self.get_user_by_email(email):
            raise HTTPException(status_code=400, detail="Email already registered")
        user = User(email=email, name=name, password_hash=get_password_hash(password))
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    # Admin users

    def list_admins(self) -> List[Tuple[AdminUser, User]]:
        return self.session.exec(
            select(AdminUser, User).join(User, User.id == AdminUser.user_id).order_by(AdminUser.created_at)
        ).all()

    def create_admin(
        self,
        email: str,
        password: Optional[str] = None,
        name: Optional[str] = None,
        role: AdminRole = AdminRole.EDITOR,
        permissions: Optional[List[str]] = None,
    ) -> AdminUser:
        """Grant admin access to a user, creating the user when needed."""
        user = self.get_user_by_email(email)
        if not user:
            if not password:
                raise HTTPException(status_code=400, detail="Password is required for a new user")
            user = self.create_user(email, password, name)

        if self.get_admin_for_user(user):
            raise HTTPException(status_code=400, detail="User is already an admin")

        admin_user = AdminUser(user_id=user.id, role=role, permissions=permissions or [])
        self.session.add(admin_user)
        self.session.commit()
        self.session.refresh(admin_user)
        logger.info("Granted %s role to %s", role.value, user.email)
        return admin_user

    def update_admin(
        self,
        admin_id: int,
        role: Optional[AdminRole] = None,
        permissions: Optional[List[str]] = None,
        is_active: Optional[bool] = None,
    ) -> AdminUser:
        admin_user = self.session.get(AdminUser, admin_id)
        if not admin_user:
            raise HTTPException(status_code=404, detail="Admin user not found")

        if role is not None:
            admin_user.role = role
        if permissions is not None:
            admin_user.permissions = permissions
        if is_active is not None:
            admin_user.is_active = is_active

        admin_user.updated_at = utcnow()
        self.session.add(admin_user)
        self.session.commit()
        self.session.refresh(admin_user)
        return admin_user

    def delete_admin(self, admin_id: int) -> None:
        admin_user = self.session.get(AdminUser, admin_id)
        if not admin_user:
            raise HTTPException(status_code=404, detail="Admin user not found")
        self.session.delete(admin_user)
        self.session.commit()
