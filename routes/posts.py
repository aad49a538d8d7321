from typing import List

from fastapi import APIRouter

from dependencies import CurrentUser, Posts
from models.post import Comment, CommentRequest, Like, MessageResponse, Post, PostRequest

router = APIRouter()


@router.post("", response_model=Post)
def create_post(post_data: PostRequest, posts: Posts, current_user: CurrentUser):
    """Create a new post as the current user"""
    return posts.create_post(current_user.user_id, post_data.text)


@router.get("", response_model=List[Post])
def get_posts(posts: Posts, current_user: CurrentUser):
    """Get all posts, most recent first"""
    return posts.get_all_posts()


@router.get("/myposts/{user_id}", response_model=List[Post])
def get_user_posts(user_id: str, posts: Posts, current_user: CurrentUser):
    """Get all posts of a user"""
    return posts.get_user_posts(user_id)


@router.delete("/myposts/{post_id}", response_model=MessageResponse)
def delete_post(post_id: str, posts: Posts, current_user: CurrentUser):
    """
    Delete a post owned by the current user

    Args:
        post_id: The ID of the post to delete
    """
    posts.delete_post(post_id, current_user.user_id)
    return {"msg": "Post removed"}


@router.put("/like/{post_id}", response_model=List[Like])
def like_post(post_id: str, posts: Posts, current_user: CurrentUser):
    """Like a post; a user can like a post once"""
    return posts.like_post(post_id, current_user.user_id)


@router.put("/unlike/{post_id}", response_model=List[Like])
def unlike_post(post_id: str, posts: Posts, current_user: CurrentUser):
    """Remove the current user's like from a post"""
    return posts.unlike_post(post_id, current_user.user_id)


@router.post("/comment/{post_id}", response_model=List[Comment])
def add_comment(post_id: str, comment: CommentRequest, posts: Posts, current_user: CurrentUser):
    """Add a comment to a post"""
    return posts.add_comment(post_id, current_user.user_id, comment.text)


@router.delete("/delete_comment/{post_id}/{comment_id}", response_model=List[Comment])
def delete_comment(post_id: str, comment_id: str, posts: Posts, current_user: CurrentUser):
    """
    Delete a comment from a post

    Args:
        post_id: The ID of the post holding the comment
        comment_id: The ID of the comment to delete
    """
    return posts.delete_comment(post_id, comment_id, current_user.user_id)


@router.get("/{post_id}", response_model=Post)
def get_post(post_id: str, posts: Posts, current_user: CurrentUser):
    """Get a single post"""
    return posts.get_post(post_id)
