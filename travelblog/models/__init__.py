# Import all models to register them with SQLModel
from travelblog.models.user import User, UserRead
from travelblog.models.admin_user import AdminUser, AdminRole, ROLE_PERMISSIONS
from travelblog.models.blog import (
    BlogPost,
    BlogPostTag,
    BlogCategory,
    BlogTag,
    PostStatus,
    BlogPostRead,
    BlogPostSummary,
    CategoryRead,
    TagRead,
    TagWithCount,
)
from travelblog.models.comment import Comment, CommentReport, ReportStatus, CommentRead, CommentThread
from travelblog.models.directory import (
    DirectoryCategory,
    DirectoryListing,
    DirectoryReview,
    DirectoryReviewResponse,
    DirectoryReviewReport,
    DirectoryCategoryRead,
    DirectoryListingRead,
    DirectoryReviewRead,
    ReviewResponseRead,
)
from travelblog.models.media import MediaItem, MediaType
from travelblog.models.integration import BlogDirectoryLink, BlogDirectoryLinkRead

__all__ = [
    "User",
    "UserRead",
    "AdminUser",
    "AdminRole",
    "ROLE_PERMISSIONS",
    "BlogPost",
    "BlogPostTag",
    "BlogCategory",
    "BlogTag",
    "PostStatus",
    "BlogPostRead",
    "BlogPostSummary",
    "CategoryRead",
    "TagRead",
    "TagWithCount",
    "Comment",
    "CommentReport",
    "ReportStatus",
    "CommentRead",
    "CommentThread",
    "DirectoryCategory",
    "DirectoryListing",
    "DirectoryReview",
    "DirectoryReviewResponse",
    "DirectoryReviewReport",
    "DirectoryCategoryRead",
    "DirectoryListingRead",
    "DirectoryReviewRead",
    "ReviewResponseRead",
    "MediaItem",
    "MediaType",
    "BlogDirectoryLink",
    "BlogDirectoryLinkRead",
]
