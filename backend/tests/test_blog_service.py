"""
Blog List Backend — Blog Service Unit Tests
=============================================

What:  Tests for BlogService business logic (list, create, update, delete).
How:   Uses a mock DB session (no real database).

What we test:
    ✅ Owners are populated and ids exposed as strings
    ✅ Create stores the caller as owner and defaults likes to 0
    ✅ Update/delete of unknown ids raise NotFoundError; malformed ids ValidationError
    ✅ Delete refuses non-owners and survives losing a delete race
"""

import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from bloglist.exceptions import AuthorizationError, DatabaseError, NotFoundError, ValidationError
from bloglist.models.blog import Blog
from bloglist.schemas.blog import BlogCreate, BlogUpdate
from bloglist.services.blog_service import BlogService, parse_blog_id


def _scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _rows_result(rows):
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result


class TestParseBlogId:

    def test_valid_uuid(self):
        key = uuid.uuid4()
        assert parse_blog_id(str(key)) == key

    def test_malformed_id_is_validation_error(self):
        with pytest.raises(ValidationError, match="malformatted id"):
            parse_blog_id("5a3d5da59070081a82a3445")


class TestBlogServiceList:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_list_blogs_empty(self, mock_db_session):
        mock_db_session.execute.return_value = _rows_result([])

        result = await self.service.list_blogs(mock_db_session)

        assert result == []

    @pytest.mark.asyncio
    async def test_list_blogs_populates_owner(self, mock_db_session, sample_user):
        owned = Blog(id=uuid.uuid4(), title="Owned", author="A", url="", likes=3, user=sample_user)
        orphan = Blog(id=uuid.uuid4(), title="Orphan", author="B", url="", likes=0)
        mock_db_session.execute.return_value = _rows_result([owned, orphan])

        result = await self.service.list_blogs(mock_db_session)

        assert [b.title for b in result] == ["Owned", "Orphan"]
        assert result[0].id == str(owned.id)
        assert result[0].user.username == "mluukkai"
        assert result[0].user.id == str(sample_user.id)
        assert result[1].user is None

    @pytest.mark.asyncio
    async def test_list_blogs_wraps_database_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))

        with pytest.raises(DatabaseError):
            await self.service.list_blogs(mock_db_session)


class TestBlogServiceCreate:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_create_blog_defaults_likes_and_sets_owner(self, mock_db_session, sample_user):
        payload = BlogCreate(title="test title", author="testman", url="http://example.com")

        result = await self.service.create_blog(mock_db_session, sample_user, payload)

        assert result.likes == 0
        assert result.title == "test title"
        assert result.user.username == sample_user.username
        uuid.UUID(result.id)

        stored = mock_db_session.add.call_args.args[0]
        assert stored.user is sample_user
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_blog_keeps_given_likes(self, mock_db_session, sample_user):
        payload = BlogCreate(title="t", author="a", url="u", likes=12)

        result = await self.service.create_blog(mock_db_session, sample_user, payload)

        assert result.likes == 12


class TestBlogServiceUpdate:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, mock_db_session, sample_user):
        blog = Blog(id=uuid.uuid4(), title="old", author="old", url="old", likes=1, user=sample_user)
        mock_db_session.execute.return_value = _scalar_result(blog)
        payload = BlogUpdate(
            title="test title update",
            author="testman update",
            url="http://exampleupdate.com",
            likes=15,
        )

        result = await self.service.update_blog(mock_db_session, str(blog.id), payload)

        assert result.title == "test title update"
        assert result.author == "testman update"
        assert result.url == "http://exampleupdate.com"
        assert result.likes == 15
        assert blog.likes == 15
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_unknown_id_raises_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = _scalar_result(None)
        payload = BlogUpdate(title="t", author="a")

        with pytest.raises(NotFoundError):
            await self.service.update_blog(mock_db_session, str(uuid.uuid4()), payload)

    @pytest.mark.asyncio
    async def test_update_malformed_id_never_queries(self, mock_db_session):
        payload = BlogUpdate(title="t", author="a")

        with pytest.raises(ValidationError):
            await self.service.update_blog(mock_db_session, "not-an-id", payload)

        mock_db_session.execute.assert_not_awaited()


class TestBlogServiceDelete:

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_delete_by_owner(self, mock_db_session, sample_user):
        blog = Blog(id=uuid.uuid4(), title="t", author="a", url="", likes=0, user_id=sample_user.id)
        mock_db_session.execute.side_effect = [_scalar_result(blog), MagicMock(rowcount=1)]

        await self.service.delete_blog(mock_db_session, sample_user, str(blog.id))

        assert mock_db_session.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_delete_by_other_user_is_forbidden(self, mock_db_session, sample_user):
        blog = Blog(id=uuid.uuid4(), title="t", author="a", url="", likes=0, user_id=uuid.uuid4())
        mock_db_session.execute.return_value = _scalar_result(blog)

        with pytest.raises(AuthorizationError):
            await self.service.delete_blog(mock_db_session, sample_user, str(blog.id))

        # Only the lookup ran; no DELETE was issued
        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_delete_ownerless_blog_is_forbidden(self, mock_db_session, sample_user):
        blog = Blog(id=uuid.uuid4(), title="t", author="a", url="", likes=0, user_id=None)
        mock_db_session.execute.return_value = _scalar_result(blog)

        with pytest.raises(AuthorizationError):
            await self.service.delete_blog(mock_db_session, sample_user, str(blog.id))

    @pytest.mark.asyncio
    async def test_delete_unknown_id_raises_not_found(self, mock_db_session, sample_user):
        mock_db_session.execute.return_value = _scalar_result(None)

        with pytest.raises(NotFoundError):
            await self.service.delete_blog(mock_db_session, sample_user, str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_delete_losing_race_raises_not_found(self, mock_db_session, sample_user):
        """Another request removed the row between our lookup and our DELETE."""
        blog = Blog(id=uuid.uuid4(), title="t", author="a", url="", likes=0, user_id=sample_user.id)
        mock_db_session.execute.side_effect = [_scalar_result(blog), MagicMock(rowcount=0)]

        with pytest.raises(NotFoundError):
            await self.service.delete_blog(mock_db_session, sample_user, str(blog.id))
