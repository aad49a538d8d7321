class PostServiceError(Exception):
    """Base class for errors raised by the posts service"""

    status_code = 500
    msg = "Server Error"

    def __init__(self, msg: str | None = None):
        if msg is not None:
            self.msg = msg
        super().__init__(self.msg)


class PostNotFound(PostServiceError):
    """No post matches the given id"""

    status_code = 404
    msg = "Post not found"


class InvalidDocumentId(PostNotFound):
    """Id cannot name a Firestore document, reported the same as a missing post"""


class NotAuthorized(PostServiceError):
    """Acting user does not own the resource"""

    status_code = 401
    msg = "User not authorized"


class AlreadyLiked(PostServiceError):
    status_code = 400
    msg = "Post already liked"


class NotLiked(PostServiceError):
    status_code = 400
    msg = "You must, first, like the post before you can remove it"


class CommentNotFound(PostServiceError):
    status_code = 404
    msg = "Comment does not exist"


class ProfileNotFound(PostServiceError):
    """Acting user has no profile document; surfaced as a server error"""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__()

    def __str__(self):
        return f"Profile not found for user {self.user_id}"
