"""
Unit tests for PasteService.

All tests are fully mocked - no database or external dependencies.
"""

import uuid
from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from pasteit.core.security import hash_password, verify_password
from pasteit.exceptions import (
    EmptyContentError,
    InvalidInputError,
    InvalidPasswordError,
    LoginRequiredError,
    LoginRequiredForPrivateError,
    NotAuthorizedError,
    NotFoundError,
    PasteNotFoundOrExpiredError,
    ShortIdCollisionError,
)
from pasteit.models.enums import Visibility
from pasteit.models.paste import Paste
from pasteit.schemas.common import PaginationParams
from pasteit.schemas.paste import PasteCreate
from pasteit.services.paste_service import (
    PASTE_UPDATABLE_FIELDS,
    PasteService,
    as_utc,
    sanitize_paste_updates,
)

OWNER_ID = uuid.uuid4()


def _persist(paste: Paste) -> Paste:
    paste.id = uuid.uuid4()
    return paste


def make_paste(**overrides) -> Paste:
    """Build a paste as loaded from the store."""
    values = {
        "id": uuid.uuid4(),
        "short_id": "AbCd1234",
        "title": "Example",
        "content": "print('hello')",
        "syntax": "python",
        "visibility": Visibility.public,
        "created_at": datetime.now(UTC),
        "updated_at": None,
        "expires_at": None,
        "owner_id": OWNER_ID,
        "views": 0,
        "password_hash": None,
        "tags": ["demo"],
        "deleted": False,
    }
    values.update(overrides)
    return Paste(**values)


@pytest.fixture
def mock_paste_repo():
    """Create a mock PasteRepository."""
    repo = AsyncMock()
    repo.add.side_effect = _persist
    return repo


@pytest.fixture
def paste_service(mock_paste_repo):
    """Create PasteService with mocked dependencies."""
    with patch(
        "pasteit.services.paste_service.PasteRepository",
        return_value=mock_paste_repo,
    ):
        service = PasteService(AsyncMock())
    return service


class TestHelpers:
    """Test module-level helpers."""

    def test_sanitize_drops_disallowed_keys_silently(self):
        updates = {
            "id": uuid.uuid4(),
            "short_id": "hijacked",
            "created_at": datetime.now(UTC),
            "owner_id": uuid.uuid4(),
            "views": 1000,
            "title": "New title",
        }

        assert sanitize_paste_updates(updates) == {"title": "New title"}

    def test_allow_list_is_single_constant(self):
        assert PASTE_UPDATABLE_FIELDS == {
            "title", "content", "syntax", "visibility", "expires_at", "tags", "password",
        }

    def test_as_utc_treats_naive_as_utc(self):
        naive = datetime(2030, 1, 1, 12, 0)

        assert as_utc(naive) == datetime(2030, 1, 1, 12, 0, tzinfo=UTC)

    def test_as_utc_converts_offsets(self):
        aware = datetime(2030, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))

        assert as_utc(aware) == datetime(2030, 1, 1, 12, 0, tzinfo=UTC)
        assert as_utc(None) is None


class TestCreate:
    """Test the create method."""

    @pytest.mark.asyncio
    async def test_create_public_anonymous(self, paste_service, mock_paste_repo):
        result = await paste_service.create(PasteCreate(content="hello"))

        stored = mock_paste_repo.add.call_args.args[0]
        assert stored.views == 0
        assert stored.deleted is False
        assert stored.owner_id is None
        assert stored.syntax == "plaintext"
        assert stored.visibility == Visibility.public
        assert stored.created_at is not None
        assert len(stored.short_id) == 8

        assert result.short_id == stored.short_id
        assert result.content == "hello"
        assert result.is_protected is False
        mock_paste_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_empty_content(self, paste_service, mock_paste_repo):
        with pytest.raises(EmptyContentError):
            await paste_service.create(PasteCreate(content=""))

        mock_paste_repo.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_content_checked_before_private_owner(self, paste_service):
        with pytest.raises(EmptyContentError):
            await paste_service.create(PasteCreate(content="", visibility=Visibility.private))

    @pytest.mark.asyncio
    async def test_create_private_requires_owner(self, paste_service, mock_paste_repo):
        with pytest.raises(LoginRequiredForPrivateError) as exc_info:
            await paste_service.create(PasteCreate(content="secret", visibility=Visibility.private))

        assert isinstance(exc_info.value, LoginRequiredError)
        assert exc_info.value.message == "User must be logged in to create private pastes"
        mock_paste_repo.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_private_with_owner(self, paste_service):
        result = await paste_service.create(
            PasteCreate(content="secret", visibility=Visibility.private),
            owner_id=OWNER_ID,
        )

        assert result.visibility == Visibility.private
        assert result.owner_id == OWNER_ID

    @pytest.mark.asyncio
    async def test_create_protected_hashes_password(self, paste_service, mock_paste_repo):
        result = await paste_service.create(PasteCreate(content="hidden", password="hunter22"))

        stored = mock_paste_repo.add.call_args.args[0]
        assert stored.password_hash != "hunter22"
        assert verify_password("hunter22", stored.password_hash)
        assert result.is_protected is True
        assert "password_hash" not in result.model_dump()

    @pytest.mark.asyncio
    async def test_create_normalizes_expiry_to_utc(self, paste_service, mock_paste_repo):
        expires = datetime(2030, 6, 1, 10, 0, tzinfo=timezone(timedelta(hours=-5)))

        await paste_service.create(PasteCreate(content="x", expires_at=expires))

        stored = mock_paste_repo.add.call_args.args[0]
        assert stored.expires_at == datetime(2030, 6, 1, 15, 0, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_collision_is_not_retried(self, paste_service, mock_paste_repo):
        mock_paste_repo.add.side_effect = ShortIdCollisionError()

        with pytest.raises(ShortIdCollisionError):
            await paste_service.create(PasteCreate(content="x"))

        assert mock_paste_repo.add.await_count == 1


class TestGetByShortId:
    """Test the get_by_short_id method."""

    @pytest.mark.asyncio
    async def test_counted_read_uses_atomic_increment(self, paste_service, mock_paste_repo):
        mock_paste_repo.increment_views.return_value = make_paste(views=1)

        result = await paste_service.get_by_short_id("AbCd1234")

        assert result.views == 1
        mock_paste_repo.increment_views.assert_awaited_once_with("AbCd1234")
        mock_paste_repo.get_reachable.assert_not_called()
        mock_paste_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_uncounted_read(self, paste_service, mock_paste_repo):
        mock_paste_repo.get_reachable.return_value = make_paste(views=3)

        result = await paste_service.get_by_short_id("AbCd1234", increment_views=False)

        assert result.views == 3
        mock_paste_repo.increment_views.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("increment_views", [True, False])
    async def test_unreachable_paste(self, paste_service, mock_paste_repo, increment_views):
        mock_paste_repo.increment_views.return_value = None
        mock_paste_repo.get_reachable.return_value = None

        with pytest.raises(PasteNotFoundOrExpiredError):
            await paste_service.get_by_short_id("missing", increment_views=increment_views)

    @pytest.mark.asyncio
    async def test_protected_without_password_hides_content(self, paste_service, mock_paste_repo):
        mock_paste_repo.increment_views.return_value = make_paste(
            password_hash=hash_password("pw"), views=1
        )

        result = await paste_service.get_by_short_id("AbCd1234")

        assert result.content == ""
        assert result.is_protected is True
        assert result.title == "Example"
        mock_paste_repo.increment_views.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_protected_wrong_password_still_counts_view(self, paste_service, mock_paste_repo):
        mock_paste_repo.increment_views.return_value = make_paste(
            password_hash=hash_password("pw"), views=1
        )

        with pytest.raises(InvalidPasswordError):
            await paste_service.get_by_short_id("AbCd1234", password="wrong")

        mock_paste_repo.increment_views.assert_awaited_once()
        mock_paste_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_protected_correct_password(self, paste_service, mock_paste_repo):
        mock_paste_repo.increment_views.return_value = make_paste(
            password_hash=hash_password("pw"), views=1
        )

        result = await paste_service.get_by_short_id("AbCd1234", password="pw")

        assert result.content == "print('hello')"
        assert result.is_protected is True


class TestEnsureReadable:
    """Test the private paste access check."""

    @pytest.mark.asyncio
    async def test_private_paste_denied_to_others(self, paste_service, mock_paste_repo):
        mock_paste_repo.get_reachable.return_value = make_paste(visibility=Visibility.private)

        with pytest.raises(NotAuthorizedError):
            await paste_service.ensure_readable("AbCd1234", requester_id=uuid.uuid4())

        with pytest.raises(NotAuthorizedError):
            await paste_service.ensure_readable("AbCd1234")

    @pytest.mark.asyncio
    async def test_private_paste_allowed_to_owner_and_admin(self, paste_service, mock_paste_repo):
        mock_paste_repo.get_reachable.return_value = make_paste(visibility=Visibility.private)

        await paste_service.ensure_readable("AbCd1234", requester_id=OWNER_ID)
        await paste_service.ensure_readable("AbCd1234", requester_id=uuid.uuid4(), is_admin=True)

    @pytest.mark.asyncio
    async def test_unlisted_paste_readable_by_anyone(self, paste_service, mock_paste_repo):
        mock_paste_repo.get_reachable.return_value = make_paste(visibility=Visibility.unlisted)

        await paste_service.ensure_readable("AbCd1234")

    @pytest.mark.asyncio
    async def test_missing_paste(self, paste_service, mock_paste_repo):
        mock_paste_repo.get_reachable.return_value = None

        with pytest.raises(PasteNotFoundOrExpiredError):
            await paste_service.ensure_readable("missing")


class TestUpdate:
    """Test the update method."""

    @pytest.mark.asyncio
    async def test_update_not_found(self, paste_service, mock_paste_repo):
        mock_paste_repo.get_by_short_id.return_value = None

        with pytest.raises(NotFoundError):
            await paste_service.update("missing", OWNER_ID, {"title": "x"})

    @pytest.mark.asyncio
    async def test_update_by_non_owner(self, paste_service, mock_paste_repo):
        paste = make_paste()
        mock_paste_repo.get_by_short_id.return_value = paste

        with pytest.raises(NotAuthorizedError):
            await paste_service.update("AbCd1234", uuid.uuid4(), {"title": "x"})

        assert paste.title == "Example"

    @pytest.mark.asyncio
    async def test_update_by_owner(self, paste_service, mock_paste_repo):
        paste = make_paste()
        mock_paste_repo.get_by_short_id.return_value = paste

        changed = await paste_service.update(
            "AbCd1234", OWNER_ID, {"title": "Renamed", "tags": ["a", "b"]}
        )

        assert changed is True
        assert paste.title == "Renamed"
        assert paste.tags == ["a", "b"]
        assert paste.updated_at is not None
        mock_paste_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_strips_protected_fields(self, paste_service, mock_paste_repo):
        paste = make_paste()
        original_id = paste.id
        mock_paste_repo.get_by_short_id.return_value = paste

        changed = await paste_service.update(
            "AbCd1234",
            OWNER_ID,
            {"short_id": "other", "owner_id": uuid.uuid4(), "id": uuid.uuid4(), "views": 99},
        )

        assert changed is False
        assert paste.short_id == "AbCd1234"
        assert paste.owner_id == OWNER_ID
        assert paste.id == original_id
        assert paste.views == 0
        assert paste.updated_at is None

    @pytest.mark.asyncio
    async def test_update_ownerless_paste_by_anyone(self, paste_service, mock_paste_repo):
        paste = make_paste(owner_id=None)
        mock_paste_repo.get_by_short_id.return_value = paste

        assert await paste_service.update("AbCd1234", uuid.uuid4(), {"syntax": "rust"}) is True
        assert paste.syntax == "rust"

    @pytest.mark.asyncio
    async def test_update_empty_content(self, paste_service, mock_paste_repo):
        mock_paste_repo.get_by_short_id.return_value = make_paste()

        with pytest.raises(EmptyContentError):
            await paste_service.update("AbCd1234", OWNER_ID, {"content": ""})

    @pytest.mark.asyncio
    async def test_ownerless_paste_cannot_become_private(self, paste_service, mock_paste_repo):
        mock_paste_repo.get_by_short_id.return_value = make_paste(owner_id=None)

        with pytest.raises(LoginRequiredForPrivateError):
            await paste_service.update("AbCd1234", uuid.uuid4(), {"visibility": "private"})

    @pytest.mark.asyncio
    async def test_unknown_visibility_is_invalid_input(self, paste_service, mock_paste_repo):
        paste = make_paste()
        mock_paste_repo.get_by_short_id.return_value = paste

        with pytest.raises(InvalidInputError) as exc_info:
            await paste_service.update("AbCd1234", OWNER_ID, {"visibility": "secret"})

        assert exc_info.value.status_code == 400
        assert paste.visibility == Visibility.public
        mock_paste_repo.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_password_is_hashed(self, paste_service, mock_paste_repo):
        paste = make_paste()
        mock_paste_repo.get_by_short_id.return_value = paste

        await paste_service.update("AbCd1234", OWNER_ID, {"password": "newpass"})

        assert paste.password_hash != "newpass"
        assert verify_password("newpass", paste.password_hash)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [None, ""])
    async def test_empty_password_removes_protection(self, paste_service, mock_paste_repo, value):
        paste = make_paste(password_hash=hash_password("pw"))
        mock_paste_repo.get_by_short_id.return_value = paste

        changed = await paste_service.update("AbCd1234", OWNER_ID, {"password": value})

        assert changed is True
        assert paste.password_hash is None

    @pytest.mark.asyncio
    async def test_update_expired_paste_is_allowed(self, paste_service, mock_paste_repo):
        paste = make_paste(expires_at=datetime.now(UTC) - timedelta(days=1))
        mock_paste_repo.get_by_short_id.return_value = paste

        assert await paste_service.update("AbCd1234", OWNER_ID, {"expires_at": None}) is True
        assert paste.expires_at is None

    @pytest.mark.asyncio
    async def test_same_values_report_no_change(self, paste_service, mock_paste_repo):
        paste = make_paste()
        mock_paste_repo.get_by_short_id.return_value = paste

        changed = await paste_service.update(
            "AbCd1234", OWNER_ID, {"title": "Example", "visibility": "public"}
        )

        assert changed is False
        mock_paste_repo.commit.assert_not_called()


class TestDelete:
    """Test the delete method."""

    @pytest.mark.asyncio
    async def test_delete_by_owner(self, paste_service, mock_paste_repo):
        paste = make_paste()
        mock_paste_repo.get_by_short_id.return_value = paste

        assert await paste_service.delete("AbCd1234", OWNER_ID) is True
        assert paste.deleted is True
        mock_paste_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_by_non_owner(self, paste_service, mock_paste_repo):
        paste = make_paste()
        mock_paste_repo.get_by_short_id.return_value = paste

        with pytest.raises(NotAuthorizedError):
            await paste_service.delete("AbCd1234", uuid.uuid4())

        assert paste.deleted is False

    @pytest.mark.asyncio
    async def test_delete_already_deleted(self, paste_service, mock_paste_repo):
        mock_paste_repo.get_by_short_id.return_value = make_paste(deleted=True)

        assert await paste_service.delete("AbCd1234", OWNER_ID) is False
        mock_paste_repo.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_not_found(self, paste_service, mock_paste_repo):
        mock_paste_repo.get_by_short_id.return_value = None

        with pytest.raises(NotFoundError):
            await paste_service.delete("missing", OWNER_ID)


class TestListings:
    """Test listing, search and sweep."""

    @pytest.mark.asyncio
    async def test_listing_hides_protected_content(self, paste_service, mock_paste_repo):
        mock_paste_repo.list_recent_public.return_value = (
            [
                make_paste(short_id="open0001"),
                make_paste(short_id="lock0001", password_hash=hash_password("pw")),
            ],
            2,
        )

        page = await paste_service.list_recent_public(PaginationParams())

        open_item, locked_item = page.items
        assert open_item.content == "print('hello')"
        assert locked_item.content == ""
        assert locked_item.is_protected is True
        assert "password_hash" not in page.model_dump()["items"][1]

    @pytest.mark.asyncio
    async def test_pagination_block(self, paste_service, mock_paste_repo):
        mock_paste_repo.search_public.return_value = ([make_paste()], 45)

        page = await paste_service.search("hello", PaginationParams(page=3, limit=20))

        assert page.pagination.model_dump() == {"total": 45, "page": 3, "limit": 20, "pages": 3}
        mock_paste_repo.search_public.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_by_owner_passes_visibility(self, paste_service, mock_paste_repo):
        mock_paste_repo.list_by_owner.return_value = ([], 0)
        pagination = PaginationParams()

        page = await paste_service.list_by_owner(OWNER_ID, pagination, visibility=Visibility.public)

        mock_paste_repo.list_by_owner.assert_awaited_once_with(
            OWNER_ID, pagination, Visibility.public
        )
        assert page.items == []
        assert page.pagination.pages == 0

    @pytest.mark.asyncio
    async def test_sweep_returns_count(self, paste_service, mock_paste_repo):
        mock_paste_repo.sweep_expired.return_value = 4

        assert await paste_service.sweep_expired() == 4
        mock_paste_repo.commit.assert_awaited_once()
