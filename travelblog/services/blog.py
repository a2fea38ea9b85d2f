import logging
from datetime import datetime
from typing import List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy import and_, asc, desc, func, not_, or_
from sqlmodel import Session, delete, select

from travelblog.core.dates import as_utc, utcnow
from travelblog.models.blog import (
    BlogCategory,
    BlogPost,
    BlogPostRead,
    BlogPostSummary,
    BlogPostTag,
    BlogTag,
    CategoryRead,
    PostStatus,
    TagRead,
    TagWithCount,
)
from travelblog.models.comment import Comment, CommentReport
from travelblog.models.integration import BlogDirectoryLink
from travelblog.models.user import User
from travelblog.schemas import PostCreate, PostUpdate, TermCreate
from travelblog.services.pagination import Page
from travelblog.services.slugs import resolve_slug

logger = logging.getLogger(__name__)

POST_SORT_FIELDS = {
    "created_at": BlogPost.created_at,
    "updated_at": BlogPost.updated_at,
    "published_at": BlogPost.published_at,
    "title": BlogPost.title,
    "views_count": BlogPost.views_count,
}


def visible_condition(now: Optional[datetime] = None):
    """Published posts, plus scheduled posts whose publish date has passed."""
    now = now or utcnow()
    return or_(
        BlogPost.published == True,  # noqa: E712
        and_(BlogPost.status == PostStatus.SCHEDULED, BlogPost.published_at <= now),
    )


class BlogService:
    def __init__(self, session: Session):
        self.session = session

    # Posts

    def list_posts(
        self,
        page: int = 1,
        limit: int = 10,
        category_id: Optional[int] = None,
        tag_id: Optional[int] = None,
        search: Optional[str] = None,
        published: Optional[bool] = None,
        status: Optional[PostStatus] = None,
        author_id: Optional[int] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Tuple[List[BlogPostSummary], Page]:
        """Get posts with optional filters, newest first by default."""
        pagination = Page(page=page, limit=limit)

        query = select(BlogPost)

        if tag_id:
            query = query.join(BlogPostTag, BlogPostTag.post_id == BlogPost.id).where(BlogPostTag.tag_id == tag_id)

        if published is True:
            query = query.where(visible_condition())
        elif published is False:
            query = query.where(not_(visible_condition()))

        if status:
            query = query.where(BlogPost.status == status)

        if category_id:
            query = query.where(BlogPost.category_id == category_id)

        if author_id:
            query = query.where(BlogPost.author_id == author_id)

        if search:
            query = query.where(
                or_(
                    BlogPost.title.ilike(f"%{search}%"),
                    BlogPost.content.ilike(f"%{search}%"),
                )
            )

        # Get total count
        total_query = query.with_only_columns(func.count(BlogPost.id))
        pagination.total = self.session.exec(total_query).first() or 0

        column = POST_SORT_FIELDS.get(sort_by, BlogPost.created_at)
        direction = asc if sort_order.lower() == "asc" else desc

        posts = self.session.exec(
            query.order_by(direction(column), desc(BlogPost.id)).offset(pagination.offset).limit(limit)
        ).all()

        return [self.to_summary(post) for post in posts], pagination

    def get_post(self, post_id: int) -> BlogPost:
        post = self.session.get(BlogPost, post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Blog post not found")
        return post

    def get_post_by_slug(
        self,
        slug: str,
        increment_views: bool = False,
        visible_only: bool = False,
    ) -> Optional[BlogPost]:
        query = select(BlogPost).where(BlogPost.slug == slug)
        if visible_only:
            query = query.where(visible_condition())
        post = self.session.exec(query).first()
        if not post:
            return None

        if increment_views:
            post.views_count = (post.views_count or 0) + 1
            self.session.add(post)
            self.session.commit()
            self.session.refresh(post)

        return post

    def create_post(self, data: PostCreate, author_id: Optional[int] = None) -> BlogPost:
        if data.category_id is not None:
            self._require_category(data.category_id)

        post = BlogPost(
            title=data.title.strip(),
            slug=resolve_slug(self.session, BlogPost, data.title, data.slug),
            content=data.content,
            excerpt=data.excerpt,
            featured_image=data.featured_image,
            author_id=author_id,
            category_id=data.category_id,
            meta_title=data.meta_title,
            meta_description=data.meta_description,
        )
        self._apply_status(post, data.status, data.published, data.publish_date)
        post.tags = self._load_tags(data.tags)

        self.session.add(post)
        self.session.commit()
        self.session.refresh(post)
        logger.info("Created blog post %s (%s)", post.id, post.slug)
        return post

    def update_post(self, post_id: int, data: PostUpdate) -> BlogPost:
        post = self.get_post(post_id)
        fields = data.model_dump(exclude_unset=True)

        if data.title:
            post.title = data.title.strip()

        # Slug follows the title unless one is given explicitly
        if data.slug:
            if data.slug != post.slug:
                post.slug = resolve_slug(self.session, BlogPost, post.title, data.slug, exclude_id=post.id)
        elif data.title:
            post.slug = resolve_slug(self.session, BlogPost, post.title, exclude_id=post.id)

        if data.content:
            post.content = data.content

        for field in ("excerpt", "featured_image", "meta_title", "meta_description"):
            if field in fields:
                setattr(post, field, fields[field])

        if "category_id" in fields:
            if data.category_id is not None:
                self._require_category(data.category_id)
            post.category_id = data.category_id

        if data.status is not None or data.published is not None:
            self._apply_status(post, data.status, data.published, data.publish_date)

        if data.tags is not None:
            post.tags = self._load_tags(data.tags)

        post.updated_at = utcnow()
        self.session.add(post)
        self.session.commit()
        self.session.refresh(post)
        return post

    def delete_post(self, post_id: int) -> None:
        post = self.get_post(post_id)

        comment_ids = select(Comment.id).where(Comment.post_id == post_id)
        self.session.exec(delete(CommentReport).where(CommentReport.comment_id.in_(comment_ids)))
        self.session.exec(delete(Comment).where(Comment.post_id == post_id))
        self.session.exec(delete(BlogPostTag).where(BlogPostTag.post_id == post_id))
        self.session.exec(delete(BlogDirectoryLink).where(BlogDirectoryLink.blog_post_id == post_id))

        self.session.delete(post)
        self.session.commit()
        logger.info("Deleted blog post %s", post_id)

    def related_posts(self, post: BlogPost, limit: int = 3) -> List[BlogPostSummary]:
        """Other visible posts from the same category."""
        if not post.category_id:
            return []
        posts = self.session.exec(
            select(BlogPost)
            .where(BlogPost.category_id == post.category_id, BlogPost.id != post.id, visible_condition())
            .order_by(desc(BlogPost.published_at))
            .limit(limit)
        ).all()
        return [self.to_summary(p) for p in posts]

    def _apply_status(
        self,
        post: BlogPost,
        status: Optional[PostStatus],
        published: Optional[bool],
        publish_date: Optional[datetime],
    ) -> None:
        now = utcnow()
        if status == PostStatus.PUBLISHED or (status is None and published):
            # Keep the original date when an already published post is saved again
            if not post.published or not post.published_at:
                post.published_at = now
            post.published = True
            post.status = PostStatus.PUBLISHED
        elif status == PostStatus.SCHEDULED:
            if not publish_date:
                raise HTTPException(status_code=400, detail="Scheduled posts need a publish_date")
            post.published = False
            post.published_at = as_utc(publish_date)
            post.status = PostStatus.SCHEDULED
        else:
            post.published = False
            post.published_at = None
            post.status = PostStatus.DRAFT

    def _load_tags(self, tag_ids: List[int]) -> List[BlogTag]:
        if not tag_ids:
            return []
        tags = self.session.exec(select(BlogTag).where(BlogTag.id.in_(tag_ids))).all()
        missing = set(tag_ids) - {t.id for t in tags}
        if missing:
            raise HTTPException(status_code=400, detail=f"Unknown tag ids: {sorted(missing)}")
        return list(tags)

    def _require_category(self, category_id: int) -> BlogCategory:
        category = self.session.get(BlogCategory, category_id)
        if not category:
            raise HTTPException(status_code=400, detail=f"Unknown category id: {category_id}")
        return category

    def to_summary(self, post: BlogPost) -> BlogPostSummary:
        data = self.to_read(post).model_dump(exclude={"content", "author_id", "category_id", "meta_title", "meta_description"})
        return BlogPostSummary(**data)

    def to_read(self, post: BlogPost) -> BlogPostRead:
        category = self.session.get(BlogCategory, post.category_id) if post.category_id else None
        author = self.session.get(User, post.author_id) if post.author_id else None
        return BlogPostRead(
            **post.model_dump(),
            author_name=author.name if author else None,
            category_name=category.name if category else None,
            category_slug=category.slug if category else None,
            tags=[TagRead(id=t.id, name=t.name, slug=t.slug) for t in sorted(post.tags, key=lambda t: t.name)],
        )

    # Categories

    def list_categories(self) -> List[CategoryRead]:
        rows = self.session.exec(
            select(BlogCategory, func.count(BlogPost.id))
            .join(BlogPost, BlogPost.category_id == BlogCategory.id, isouter=True)
            .group_by(BlogCategory.id)
            .order_by(asc(BlogCategory.name))
        ).all()
        return [
            CategoryRead(id=c.id, name=c.name, slug=c.slug, description=c.description, post_count=count)
            for c, count in rows
        ]

    def get_category(self, category_id: int) -> BlogCategory:
        category = self.session.get(BlogCategory, category_id)
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        return category

    def get_category_by_slug(self, slug: str) -> Optional[BlogCategory]:
        return self.session.exec(select(BlogCategory).where(BlogCategory.slug == slug)).first()

    def create_category(self, data: TermCreate) -> BlogCategory:
        category = BlogCategory(
            name=data.name.strip(),
            slug=resolve_slug(self.session, BlogCategory, data.name, data.slug),
            description=data.description,
        )
        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)
        return category

    def update_category(self, category_id: int, data: TermCreate) -> BlogCategory:
        category = self.get_category(category_id)
        category.name = data.name.strip()
        if data.slug != category.slug:
            category.slug = resolve_slug(self.session, BlogCategory, data.name, data.slug, exclude_id=category.id)
        category.description = data.description
        category.updated_at = utcnow()
        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)
        return category

    def delete_category(self, category_id: int) -> None:
        category = self.get_category(category_id)
        # Posts keep existing without a category
        for post in self.session.exec(select(BlogPost).where(BlogPost.category_id == category_id)).all():
            post.category_id = None
            self.session.add(post)
        self.session.delete(category)
        self.session.commit()

    # Tags

    def list_tags(self) -> List[TagWithCount]:
        rows = self.session.exec(
            select(BlogTag, func.count(BlogPostTag.post_id))
            .join(BlogPostTag, BlogPostTag.tag_id == BlogTag.id, isouter=True)
            .group_by(BlogTag.id)
            .order_by(asc(BlogTag.name))
        ).all()
        return [TagWithCount(id=t.id, name=t.name, slug=t.slug, post_count=count) for t, count in rows]

    def get_tag(self, tag_id: int) -> BlogTag:
        tag = self.session.get(BlogTag, tag_id)
        if not tag:
            raise HTTPException(status_code=404, detail="Tag not found")
        return tag

    def get_tag_by_slug(self, slug: str) -> Optional[BlogTag]:
        return self.session.exec(select(BlogTag).where(BlogTag.slug == slug)).first()

    def create_tag(self, data: TermCreate) -> BlogTag:
        tag = BlogTag(
            name=data.name.strip(),
            slug=resolve_slug(self.session, BlogTag, data.name, data.slug),
        )
        self.session.add(tag)
        self.session.commit()
        self.session.refresh(tag)
        return tag

    def update_tag(self, tag_id: int, data: TermCreate) -> BlogTag:
        tag = self.get_tag(tag_id)
        tag.name = data.name.strip()
        if data.slug != tag.slug:
            tag.slug = resolve_slug(self.session, BlogTag, data.name, data.slug, exclude_id=tag.id)
        self.session.add(tag)
        self.session.commit()
        self.session.refresh(tag)
        return tag

    def delete_tag(self, tag_id: int) -> None:
        tag = self.get_tag(tag_id)
        self.session.exec(delete(BlogPostTag).where(BlogPostTag.tag_id == tag_id))
        self.session.delete(tag)
        self.session.commit()
