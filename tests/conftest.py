import copy
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException, Request
from fastapi.testclient import TestClient

from dependencies import get_current_user, get_firestore
from main import app
from models.user import User
from services.exceptions import PostNotFound
from services.posts import PostService


class InMemoryFirestore:
    """Stand-in for FirestoreDB that keeps posts and profiles in dicts"""

    def __init__(self, profiles=None):
        self.profiles = profiles or {}
        self.posts = {}

    def get_user_profile(self, user_id):
        profile = self.profiles.get(user_id)
        return dict(profile) if profile is not None else None

    def create_post(self, post_data):
        post_id = uuid.uuid4().hex[:20]
        self.posts[post_id] = copy.deepcopy(post_data)
        return {"id": post_id, **copy.deepcopy(post_data)}

    def get_all_posts(self):
        posts = [{"id": pid, **copy.deepcopy(p)} for pid, p in self.posts.items()]
        return sorted(posts, key=lambda p: p["date"], reverse=True)

    def get_posts_by_user(self, user_id):
        return [{"id": pid, **copy.deepcopy(p)} for pid, p in self.posts.items() if p["user"] == user_id]

    def get_post(self, post_id):
        if post_id not in self.posts:
            return None
        return {"id": post_id, **copy.deepcopy(self.posts[post_id])}

    def update_post(self, post_id, mutate):
        if post_id not in self.posts:
            raise PostNotFound()
        current = copy.deepcopy(self.posts[post_id])
        changes = mutate(current)
        self.posts[post_id] = {**self.posts[post_id], **copy.deepcopy(changes)}
        return {"id": post_id, **copy.deepcopy(self.posts[post_id])}

    def delete_post(self, post_id, check):
        if post_id not in self.posts:
            raise PostNotFound()
        check(copy.deepcopy(self.posts[post_id]))
        del self.posts[post_id]

    def seed_post(self, user, text="seeded", days_ago=0, likes=None, comments=None):
        post_id = uuid.uuid4().hex[:20]
        self.posts[post_id] = {
            "text": text,
            "name": self.profiles.get(user, {}).get("name"),
            "avatar": self.profiles.get(user, {}).get("avatar"),
            "user": user,
            "date": datetime.now(timezone.utc) - timedelta(days=days_ago),
            "likes": likes or [],
            "comments": comments or [],
        }
        return post_id


PROFILES = {
    "alice": {"name": "Alice", "avatar": "https://img.example.com/alice.png"},
    "bob": {"name": "Bob", "avatar": "https://img.example.com/bob.png"},
    "carol": {"name": "Carol", "avatar": "https://img.example.com/carol.png"},
}


async def header_user(request: Request) -> User:
    user_id = request.headers.get("X-Test-User")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    return User(user_id=user_id, email=f"{user_id}@example.com")


@pytest.fixture
def db():
    return InMemoryFirestore(profiles=copy.deepcopy(PROFILES))


@pytest.fixture
def service(db):
    return PostService(db)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_firestore] = lambda: db
    app.dependency_overrides[get_current_user] = header_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    """Headers that authenticate a request as the given user"""
    def _headers(user_id):
        return {"X-Test-User": user_id}
    return _headers
