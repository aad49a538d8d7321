import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from services.exceptions import (
    AlreadyLiked,
    CommentNotFound,
    NotAuthorized,
    NotLiked,
    PostNotFound,
    ProfileNotFound,
)
from services.firestore import FirestoreDB
from utils.validation import validate_document_id

logger = logging.getLogger(__name__)


def _find_index(items: List[Dict[str, Any]], key: str, value: str) -> Optional[int]:
    """Position of the first entry whose `key` equals `value`"""
    return next((i for i, item in enumerate(items) if item.get(key) == value), None)


class PostService:
    def __init__(self, db: FirestoreDB):
        """
        Posts, likes and comments on top of the Firestore repository

        Every mutation of an existing post goes through a single transactional
        update, so the checks and the write see the same version of the document.
        """
        self.db = db

    def _get_profile(self, user_id: str) -> Dict[str, Any]:
        profile = self.db.get_user_profile(user_id)
        if profile is None:
            raise ProfileNotFound(user_id)
        return profile

    def create_post(self, user_id: str, text: str) -> Dict[str, Any]:
        """
        Create a post owned by `user_id`

        The author's name and avatar are copied onto the post as they are now
        and are not updated on later profile changes.
        """
        profile = self._get_profile(user_id)
        post = self.db.create_post({
            "text": text,
            "name": profile.get("name"),
            "avatar": profile.get("avatar"),
            "user": user_id,
            "date": datetime.now(timezone.utc),
            "likes": [],
            "comments": [],
        })
        logger.info("User %s created post %s", user_id, post["id"])
        return post

    def get_all_posts(self) -> List[Dict[str, Any]]:
        """All posts, most recent first"""
        return self.db.get_all_posts()

    def get_user_posts(self, user_id: str) -> List[Dict[str, Any]]:
        """All posts owned by `user_id`; an empty list when there are none"""
        validate_document_id(user_id)
        return self.db.get_posts_by_user(user_id)

    def get_post(self, post_id: str) -> Dict[str, Any]:
        validate_document_id(post_id)
        post = self.db.get_post(post_id)
        if post is None:
            raise PostNotFound()
        return post

    def delete_post(self, post_id: str, user_id: str) -> None:
        """Delete a post; only its owner may do so"""
        validate_document_id(post_id)

        def check_owner(post: Dict[str, Any]) -> None:
            if post.get("user") != user_id:
                raise NotAuthorized()

        self.db.delete_post(post_id, check_owner)

    def like_post(self, post_id: str, user_id: str) -> List[Dict[str, Any]]:
        """Add the user's like in front of the post's likes"""
        validate_document_id(post_id)

        def add_like(post: Dict[str, Any]) -> Dict[str, Any]:
            likes = post.get("likes", [])
            if _find_index(likes, "user", user_id) is not None:
                raise AlreadyLiked()
            return {"likes": [{"user": user_id}] + likes}

        return self.db.update_post(post_id, add_like)["likes"]

    def unlike_post(self, post_id: str, user_id: str) -> List[Dict[str, Any]]:
        """Remove the user's own like, leaving the other likes in order"""
        validate_document_id(post_id)

        def remove_like(post: Dict[str, Any]) -> Dict[str, Any]:
            likes = post.get("likes", [])
            index = _find_index(likes, "user", user_id)
            if index is None:
                raise NotLiked()
            return {"likes": likes[:index] + likes[index + 1:]}

        return self.db.update_post(post_id, remove_like)["likes"]

    def add_comment(self, post_id: str, user_id: str, text: str) -> List[Dict[str, Any]]:
        """Add a comment in front of the post's comments"""
        validate_document_id(post_id)
        if self.db.get_post(post_id) is None:
            raise PostNotFound()

        profile = self._get_profile(user_id)
        comment = {
            "id": uuid.uuid4().hex,
            "user": user_id,
            "name": profile.get("name"),
            "avatar": profile.get("avatar"),
            "text": text,
            "date": datetime.now(timezone.utc),
        }

        def add(post: Dict[str, Any]) -> Dict[str, Any]:
            return {"comments": [comment] + post.get("comments", [])}

        return self.db.update_post(post_id, add)["comments"]

    def delete_comment(self, post_id: str, comment_id: str, user_id: str) -> List[Dict[str, Any]]:
        """
        Delete a comment by its id

        Allowed for the author of the comment and the owner of the post.
        """
        validate_document_id(post_id)

        def remove(post: Dict[str, Any]) -> Dict[str, Any]:
            comments = post.get("comments", [])
            index = _find_index(comments, "id", comment_id)
            if index is None:
                raise CommentNotFound()

            if user_id not in (post.get("user"), comments[index].get("user")):
                raise NotAuthorized()
            return {"comments": comments[:index] + comments[index + 1:]}

        return self.db.update_post(post_id, remove)["comments"]
