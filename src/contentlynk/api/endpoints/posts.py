"""Post-related endpoints for the ContentLynk API."""

from fastapi import APIRouter, status

from contentlynk.api.dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from contentlynk.models import Post
from contentlynk.schemas.post import PostCreate, PostResponse, PostUpdate
from contentlynk.services.post_service import (
    create_post,
    get_post_or_404,
    get_visible_post_or_404,
    soft_delete_post,
    update_post,
)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_new_post(
    payload: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Post:
    """Create a post; slug, excerpt and reading time are derived from the content."""
    post = create_post(
        db,
        author_id=current_user.id,
        title=payload.title,
        content=payload.content,
        content_type=payload.content_type,
        status=payload.status,
        video_key=payload.video_key,
    )
    db.commit()
    db.refresh(post)
    return post


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, viewer: OptionalUserDep, db: SessionDep) -> Post:
    """Return a live post; drafts are visible to their author only."""
    return get_visible_post_or_404(db, post_id, viewer.id if viewer else None)


@router.patch("/{post_id}", response_model=PostResponse)
async def edit_post(
    post_id: int,
    payload: PostUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Post:
    """Apply a partial update; only the author may edit."""
    post = get_post_or_404(db, post_id)
    changes = payload.model_dump(exclude_unset=True)
    # Only the optional columns may be cleared with an explicit null.
    changes = {k: v for k, v in changes.items() if v is not None or k in ("title", "video_key")}
    update_post(db, post, current_user.id, changes)
    db.commit()
    db.refresh(post)
    return post


@router.delete("/{post_id}")
async def delete_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> dict[str, object]:
    post = get_post_or_404(db, post_id)
    soft_delete_post(db, post, current_user.id)
    db.commit()
    return {"success": True, "message": "Post deleted"}
