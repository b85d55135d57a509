"""
LeafNotes Backend — Share Service Tests
=========================================

What:  Tests for share-token issue, revoke and resolve, including the
       collision retry path.
How:   Real SQLite database per test. Collisions are forced by patching
       generate_share_token() to hand out a token already in use.

What we test:
    ✅ issuing is idempotent while shared
    ✅ tokens are URL-safe and carry at least 128 bits
    ✅ revoke is idempotent and makes the old token unresolvable
    ✅ share/unshare leave updated_at untouched
    ✅ a collision is retried; exhausting every attempt raises DatabaseError
"""

import re
from unittest.mock import patch
from uuid import uuid4

import pytest

from leafnotes.config import settings
from leafnotes.exceptions import DatabaseError, NotFoundError
from leafnotes.services.note_service import NoteService
from leafnotes.services.share_service import ShareService, generate_share_token

URL_SAFE = re.compile(r"^[A-Za-z0-9_-]+$")


class TestGenerateShareToken:

    def test_token_is_url_safe_and_long_enough(self):
        token = generate_share_token()

        assert URL_SAFE.match(token)
        # 16 random bytes encode to 22 base64 characters
        assert len(token) >= 22

    def test_tokens_differ(self):
        assert len({generate_share_token() for _ in range(50)}) == 50


class TestShareServiceIssue:

    def setup_method(self):
        self.service = ShareService()
        self.notes = NoteService()

    @pytest.mark.asyncio
    async def test_issue_is_idempotent(self, db_session):
        note = await self.notes.create_note(db_session, title="Draft")

        first = await self.service.issue_share_token(db_session, note.id)
        second = await self.service.issue_share_token(db_session, note.id)

        assert first.share_token == second.share_token
        fetched = await self.notes.get_note(db_session, note.id)
        assert fetched.share_token == first.share_token

    @pytest.mark.asyncio
    async def test_issue_leaves_updated_at(self, db_session):
        note = await self.notes.create_note(db_session)

        await self.service.issue_share_token(db_session, note.id)
        fetched = await self.notes.get_note(db_session, note.id)

        assert fetched.updated_at == note.updated_at

    @pytest.mark.asyncio
    async def test_issue_for_missing_note(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.issue_share_token(db_session, uuid4())

    @pytest.mark.asyncio
    async def test_collision_is_retried_with_fresh_token(self, db_session):
        taken = await self.notes.create_note(db_session, title="Already shared")
        existing = await self.service.issue_share_token(db_session, taken.id)
        note = await self.notes.create_note(db_session, title="New")

        tokens = iter([existing.share_token, "fresh-token-value-0123456789"])
        with patch(
            "leafnotes.services.share_service.generate_share_token",
            side_effect=lambda: next(tokens),
        ):
            issued = await self.service.issue_share_token(db_session, note.id)
        await db_session.commit()

        assert issued.share_token == "fresh-token-value-0123456789"
        resolved = await self.service.resolve_shared_note(db_session, existing.share_token)
        assert resolved.id == taken.id

    @pytest.mark.asyncio
    async def test_exhausted_attempts_raise_database_error(self, db_session):
        taken = await self.notes.create_note(db_session)
        existing = await self.service.issue_share_token(db_session, taken.id)
        note = await self.notes.create_note(db_session)

        with patch(
            "leafnotes.services.share_service.generate_share_token",
            return_value=existing.share_token,
        ) as generator:
            with pytest.raises(DatabaseError):
                await self.service.issue_share_token(db_session, note.id)

        assert generator.call_count == settings.share_token_max_attempts
        fetched = await self.notes.get_note(db_session, note.id)
        assert fetched.share_token is None


class TestShareServiceRevokeAndResolve:

    def setup_method(self):
        self.service = ShareService()
        self.notes = NoteService()

    @pytest.mark.asyncio
    async def test_share_resolve_revoke_cycle(self, db_session):
        note = await self.notes.create_note(db_session, title="Draft")
        token = (await self.service.issue_share_token(db_session, note.id)).share_token

        shared = await self.service.resolve_shared_note(db_session, token)
        assert shared.id == note.id
        assert shared.title == "Draft"
        assert shared.content == ""

        result = await self.service.revoke_share_token(db_session, note.id)
        assert result.success is True
        with pytest.raises(NotFoundError):
            await self.service.resolve_shared_note(db_session, token)

    @pytest.mark.asyncio
    async def test_projection_has_only_public_fields(self, db_session):
        note = await self.notes.create_note(db_session, title="Draft")
        token = (await self.service.issue_share_token(db_session, note.id)).share_token

        shared = await self.service.resolve_shared_note(db_session, token)

        assert set(shared.model_dump(by_alias=True)) == {
            "id", "title", "content", "createdAt", "updatedAt",
        }

    @pytest.mark.asyncio
    async def test_revoke_is_idempotent(self, db_session):
        note = await self.notes.create_note(db_session)

        first = await self.service.revoke_share_token(db_session, note.id)
        second = await self.service.revoke_share_token(db_session, note.id)

        assert first.success and second.success

    @pytest.mark.asyncio
    async def test_revoke_leaves_updated_at(self, db_session):
        note = await self.notes.create_note(db_session)
        await self.service.issue_share_token(db_session, note.id)

        await self.service.revoke_share_token(db_session, note.id)
        fetched = await self.notes.get_note(db_session, note.id)

        assert fetched.updated_at == note.updated_at

    @pytest.mark.asyncio
    async def test_revoke_missing_note(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.revoke_share_token(db_session, uuid4())

    @pytest.mark.asyncio
    async def test_resolve_unknown_token(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.resolve_shared_note(db_session, "no-such-token")

    @pytest.mark.asyncio
    async def test_resolve_requires_exact_match(self, db_session):
        note = await self.notes.create_note(db_session)
        token = (await self.service.issue_share_token(db_session, note.id)).share_token

        with pytest.raises(NotFoundError):
            await self.service.resolve_shared_note(db_session, token.upper() + "x")
