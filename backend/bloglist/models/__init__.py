# Importing both models here registers them with Base.metadata and lets
# the string-based relationship() targets resolve.
from bloglist.models.blog import Blog
from bloglist.models.user import User

__all__ = ["Blog", "User"]
