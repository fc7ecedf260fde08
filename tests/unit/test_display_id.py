"""Tests for display ID generation."""

import re

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.config import settings
from reviewbox.core.errors import InternalError
from reviewbox.services import display_id as display_id_service
from reviewbox.services.display_id import (
    display_id_exists,
    generate_display_id,
    generate_unique_display_id,
)


@pytest.mark.unit
class TestGenerateDisplayId:
    def test_six_digits_without_leading_zero(self) -> None:
        for _ in range(200):
            value = generate_display_id()
            assert re.fullmatch(r"[1-9]\d{5}", value)
            assert 100000 <= int(value) <= 999999

    def test_custom_length(self) -> None:
        assert len(generate_display_id(8)) == 8


@pytest.mark.unit
class TestGenerateUniqueDisplayId:
    async def test_existing_ids_detected(self, db_session: AsyncSession) -> None:
        assert await display_id_exists(db_session, "100001") is True
        assert await display_id_exists(db_session, "654321") is False

    async def test_skips_taken_ids(self, db_session: AsyncSession, monkeypatch) -> None:
        candidates = iter(["100001", "100002", "424242"])
        monkeypatch.setattr(
            display_id_service, "generate_display_id", lambda length=6: next(candidates)
        )
        assert await generate_unique_display_id(db_session) == "424242"

    async def test_widens_after_repeated_collisions(
        self, db_session: AsyncSession, monkeypatch
    ) -> None:
        lengths: list[int] = []

        def fake_generate(length: int = 6) -> str:
            lengths.append(length)
            return "100001" if length == settings.DISPLAY_ID_LENGTH else "12345678"

        monkeypatch.setattr(display_id_service, "generate_display_id", fake_generate)
        assert await generate_unique_display_id(db_session) == "12345678"
        assert lengths.count(settings.DISPLAY_ID_LENGTH) == settings.DISPLAY_ID_MAX_ATTEMPTS

    async def test_gives_up_when_every_id_is_taken(
        self, db_session: AsyncSession, monkeypatch
    ) -> None:
        async def always_taken(db, display_id: str) -> bool:
            return True

        monkeypatch.setattr(display_id_service, "display_id_exists", always_taken)
        with pytest.raises(InternalError):
            await generate_unique_display_id(db_session)
