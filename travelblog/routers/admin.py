from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import desc, func, not_
from sqlmodel import Session, select

from travelblog.db.session import get_session
from travelblog.models.admin_user import AdminRole, AdminUser
from travelblog.models.blog import BlogCategory, BlogPost, BlogTag, PostStatus
from travelblog.models.directory import DirectoryCategory, DirectoryListing
from travelblog.models.user import User
from travelblog.routers.auth import get_auth_service, get_current_user
from travelblog.services.auth import AuthService, check_permission, effective_permissions
from travelblog.services.blog import visible_condition
from travelblog.services.comments import CommentService
from travelblog.services.integration import IntegrationService
from travelblog.services.media import MediaService

router = APIRouter()


# Pydantic models for requests/responses
class DashboardStats(BaseModel):
    totalPosts: int
    publishedPosts: int
    draftPosts: int
    scheduledPosts: int
    totalCategories: int
    totalTags: int
    totalComments: int
    pendingReports: int
    totalListings: int
    totalDirectoryCategories: int
    totalMedia: int
    totalLinks: int
    recentPosts: List[Dict[str, Any]]


class AdminUserCreate(BaseModel):
    email: EmailStr
    password: Optional[str] = Field(default=None, min_length=8)
    name: Optional[str] = None
    role: AdminRole = AdminRole.EDITOR
    permissions: List[str] = []


class AdminUserUpdate(BaseModel):
    role: Optional[AdminRole] = None
    permissions: Optional[List[str]] = None
    is_active: Optional[bool] = None


def get_admin_user(current_user: User = Depends(get_current_user), session: Session = Depends(get_session)) -> AdminUser:
    """Get admin user with permissions check"""
    admin_user = session.exec(select(AdminUser).where(AdminUser.user_id == current_user.id)).first()
    if not admin_user:
        raise HTTPException(status_code=403, detail="Admin access required")

    if not admin_user.is_active:
        raise HTTPException(status_code=403, detail="Admin account is inactive")

    return admin_user


def require_permission(admin_user: AdminUser, permission: str) -> None:
    if not check_permission(admin_user, permission):
        raise HTTPException(status_code=403, detail="Insufficient permissions")


def dashboard_stats(session: Session) -> Dict[str, Any]:
    """Counts shown on the dashboard overview, shared with the HTML screen."""
    def count(query) -> int:
        return session.exec(query).first() or 0

    recent = session.exec(select(BlogPost).order_by(desc(BlogPost.created_at)).limit(5)).all()

    return {
        "totalPosts": count(select(func.count(BlogPost.id))),
        "publishedPosts": count(select(func.count(BlogPost.id)).where(visible_condition())),
        "draftPosts": count(select(func.count(BlogPost.id)).where(BlogPost.status == PostStatus.DRAFT)),
        "scheduledPosts": count(
            select(func.count(BlogPost.id)).where(BlogPost.status == PostStatus.SCHEDULED, not_(visible_condition()))
        ),
        "totalCategories": count(select(func.count(BlogCategory.id))),
        "totalTags": count(select(func.count(BlogTag.id))),
        "totalComments": CommentService(session).count(),
        "pendingReports": CommentService(session).count_pending_reports(),
        "totalListings": count(select(func.count(DirectoryListing.id))),
        "totalDirectoryCategories": count(select(func.count(DirectoryCategory.id))),
        "totalMedia": MediaService(session).count(),
        "totalLinks": IntegrationService(session).count(),
        "recentPosts": [
            {
                "id": post.id,
                "title": post.title,
                "slug": post.slug,
                "status": post.status,
                "created_at": post.created_at,
            }
            for post in recent
        ],
    }


@router.get("/permissions/check")
def check_user_permission(
    permission: str,
    admin_user: AdminUser = Depends(get_admin_user)
):
    """Check if current user has specific permission"""
    return {"hasPermission": check_permission(admin_user, permission)}


@router.get("/me")
def get_current_admin(
    current_user: User = Depends(get_current_user),
    admin_user: AdminUser = Depends(get_admin_user)
):
    """Get current admin profile"""
    return {
        "id": current_user.id,
        "email": current_user.email,
        "name": current_user.name,
        "role": admin_user.role,
        "permissions": effective_permissions(admin_user),
        "created_at": current_user.created_at,
        "updated_at": current_user.updated_at
    }


@router.get("/dashboard/stats", response_model=DashboardStats)
def get_dashboard_stats(
    admin_user: AdminUser = Depends(get_admin_user),
    session: Session = Depends(get_session)
):
    """Get dashboard statistics"""
    require_permission(admin_user, "dashboard.read")
    return dashboard_stats(session)


# Admin user management
def _admin_dict(admin_user: AdminUser, user: User) -> Dict[str, Any]:
    return {
        "id": admin_user.id,
        "user_id": user.id,
        "email": user.email,
        "name": user.name,
        "role": admin_user.role,
        "permissions": admin_user.permissions,
        "is_active": admin_user.is_active,
        "created_at": admin_user.created_at,
    }


@router.get("/admin-users")
def get_admin_users(
    admin_user: AdminUser = Depends(get_admin_user),
    service: AuthService = Depends(get_auth_service)
):
    """Get all admin users (super admin only)"""
    if admin_user.role != AdminRole.SUPER_ADMIN:
        raise HTTPException(status_code=403, detail="Only super admins can view admin users")

    return [_admin_dict(a, u) for a, u in service.list_admins()]


@router.post("/admin-users", status_code=201)
def create_admin_user(
    admin_data: AdminUserCreate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: AuthService = Depends(get_auth_service),
    session: Session = Depends(get_session)
):
    """Create new admin user (super admin only)"""
    if admin_user.role != AdminRole.SUPER_ADMIN:
        raise HTTPException(status_code=403, detail="Only super admins can create admin users")

    new_admin = service.create_admin(
        email=admin_data.email,
        password=admin_data.password,
        name=admin_data.name,
        role=admin_data.role,
        permissions=admin_data.permissions,
    )
    return _admin_dict(new_admin, session.get(User, new_admin.user_id))


@router.put("/admin-users/{admin_id}")
def update_admin_user(
    admin_id: int,
    admin_update: AdminUserUpdate,
    admin_user: AdminUser = Depends(get_admin_user),
    service: AuthService = Depends(get_auth_service),
    session: Session = Depends(get_session)
):
    """Update admin user (super admin only)"""
    if admin_user.role != AdminRole.SUPER_ADMIN:
        raise HTTPException(status_code=403, detail="Only super admins can update admin users")

    target_admin = service.update_admin(
        admin_id,
        role=admin_update.role,
        permissions=admin_update.permissions,
        is_active=admin_update.is_active,
    )
    return _admin_dict(target_admin, session.get(User, target_admin.user_id))


@router.delete("/admin-users/{admin_id}")
def delete_admin_user(
    admin_id: int,
    admin_user: AdminUser = Depends(get_admin_user),
    service: AuthService = Depends(get_auth_service)
):
    """Revoke admin access (super admin only)"""
    if admin_user.role != AdminRole.SUPER_ADMIN:
        raise HTTPException(status_code=403, detail="Only super admins can delete admin users")
    if admin_id == admin_user.id:
        raise HTTPException(status_code=400, detail="You cannot remove your own admin access")

    service.delete_admin(admin_id)
    return {"message": "Admin user deleted successfully"}
