"""
Blog List Backend — Custom Exception Hierarchy
================================================

What:  The errors a blog, user or login operation can end in.
Why:   Services stay HTTP-agnostic: they raise one of these, and main.py
       decides the status code and renders the shared error body
       `{error, message, details, request_id}`.
How:   Every error has a client-safe `message` plus a `context` dict that
       becomes `details` (client errors) or goes to the log (server errors).
Who:   Raised by services and route dependencies; caught by global handlers.

Exception Hierarchy:
    BlogListError (base)
    ├── ValidationError          → 400 (bad body, malformed id, duplicate username)
    ├── AuthenticationError      → 401 Unauthorized (no valid token / credentials)
    ├── AuthorizationError       → 403 Forbidden (valid token, not the owner)
    ├── NotFoundError            → 404 (well-formed id, no such blog)
    ├── RateLimitExceededError   → 429 (per-IP window exhausted)
    └── DatabaseError            → 500 (generic message, details only logged)

401 vs 403:
    AuthenticationError means "we don't know who you are" (token missing,
    malformed, badly signed, expired, or naming a user that no longer exists).
    AuthorizationError means "we know who you are and you may not do this".
    Clients react differently (re-login vs. give up), so the two never share
    a status code.
"""

from typing import Any, Dict, Optional


class BlogListError(Exception):
    """
    Base exception for all Blog List application errors.

    Attributes:
        message:  Text the client sees verbatim
        context:  Additional info; returned as `details` for client errors,
                  logged only for server errors
    """

    def __init__(
        self,
        message: str = "something went wrong",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogListError):
    """
    The request cannot be processed as sent.

    When:    Missing title/author, short username or password, malformed id,
             duplicate username (database unique constraint).
    HTTP:    400

    Example response:
        {
            "error": "validation_error",
            "message": "username must be unique",
            "details": {"field": "username"}
        }
    """

    def __init__(
        self,
        message: str = "invalid request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.field = field
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)


class AuthenticationError(BlogListError):
    """
    Raised when the caller cannot be identified.

    When:    Authorization header absent or not `bearer <token>`, token fails
             signature verification or has expired, token names an unknown
             user, or login credentials are wrong.
    HTTP:    401 Unauthorized (with `WWW-Authenticate: Bearer`)
    """

    def __init__(
        self,
        message: str = "token missing or invalid",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(BlogListError):
    """
    Raised when an identified caller acts on a resource they do not own.

    When:    DELETE /api/blogs/{id} by a user other than the blog's creator.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "only the creator can perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BlogListError):
    """
    A well-formed id that matches no row.

    When:    GET/PUT/DELETE /api/blogs/{id}, including the second of two
             concurrent deletes of the same blog.
    HTTP:    404
    """

    def __init__(
        self,
        resource: str = "blog",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {}, resource=resource)
        message = f"{resource} not found"
        if resource_id:
            ctx["resource_id"] = resource_id
            message = f"{resource} {resource_id} not found"
        super().__init__(message=message, context=ctx)


class DatabaseError(BlogListError):
    """
    Persistence failed for a reason the client cannot fix.

    HTTP:    500, always with a generic message; `context` is only logged.
             Unique-username violations never get here: UserService turns
             them into ValidationError first.
    """

    def __init__(
        self,
        message: str = "database operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(BlogListError):
    """Too many requests from one IP inside the window (429 + Retry-After)."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {}, retry_after=retry_after)
        super().__init__(
            message=f"too many requests, retry in {retry_after} seconds",
            context=ctx,
        )
        self.retry_after = retry_after
