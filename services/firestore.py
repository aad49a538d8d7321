import logging
from typing import Any, Callable, Dict, List, Optional

import firebase_admin
from firebase_admin import firestore as fs
from google.cloud import firestore
from google.cloud.firestore_v1 import FieldFilter

from services.exceptions import PostNotFound

logger = logging.getLogger(__name__)

POSTS = "posts"
USERS = "users"


def _to_post(doc) -> Dict[str, Any]:
    post_data = doc.to_dict()
    post_data["id"] = doc.id
    return post_data


class FirestoreDB:
    def __init__(self, app: firebase_admin.App):
        self.db = fs.client(app)

    def collection(self, name: str):
        return self.db.collection(name)

    def get_user_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get the stored profile (name, avatar) of a user, None if there is none"""
        snapshot = self.collection(USERS).document(user_id).get()
        if not snapshot.exists:
            return None
        data = snapshot.to_dict()
        return {"name": data.get("name"), "avatar": data.get("avatar")}

    def create_post(self, post_data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new post document and return it with its generated id"""
        new_post_ref = self.collection(POSTS).document()
        new_post_ref.set(post_data)
        return {"id": new_post_ref.id, **post_data}

    def get_all_posts(self) -> List[Dict[str, Any]]:
        """Get all posts sorted by date descending"""
        posts_ref = self.collection(POSTS).order_by("date", direction=firestore.Query.DESCENDING).stream()
        return [_to_post(doc) for doc in posts_ref]

    def get_posts_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        """Get all posts owned by a user, in the store's default order"""
        posts_ref = self.collection(POSTS).where(
            filter=FieldFilter("user", "==", user_id)
        ).stream()
        return [_to_post(doc) for doc in posts_ref]

    def get_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        """Get a post by ID"""
        snapshot = self.collection(POSTS).document(post_id).get()
        if not snapshot.exists:
            return None
        return _to_post(snapshot)

    def update_post(
            self,
            post_id: str,
            mutate: Callable[[Dict[str, Any]], Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Read a post, compute changed fields and write them in one transaction

        Args:
            post_id: The ID of the post to update
            mutate: Called with the current post data, returns the fields to write.
                May raise to abort the update. Firestore re-runs it on contention,
                so it must not have side effects.

        Returns:
            The post data after the update

        Raises:
            PostNotFound: If the post does not exist
        """
        post_ref = self.collection(POSTS).document(post_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def update_in_transaction(transaction, post_ref):
            snapshot = post_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise PostNotFound()

            post_data = snapshot.to_dict()
            changes = mutate(post_data)
            transaction.update(post_ref, changes)
            return {**post_data, **changes, "id": snapshot.id}

        return update_in_transaction(transaction, post_ref)

    def delete_post(self, post_id: str, check: Callable[[Dict[str, Any]], None]) -> None:
        """
        Delete a post, with its embedded likes and comments, in one transaction

        Args:
            post_id: The ID of the post to delete
            check: Called with the current post data before deleting; raises to abort

        Raises:
            PostNotFound: If the post does not exist
        """
        post_ref = self.collection(POSTS).document(post_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def delete_in_transaction(transaction, post_ref):
            snapshot = post_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise PostNotFound()

            check(snapshot.to_dict())
            transaction.delete(post_ref)

        delete_in_transaction(transaction, post_ref)
        logger.info("Deleted post %s", post_id)
