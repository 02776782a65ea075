"""
Contract tests for GuestMessageStore and GuestClassifier implementations.
"""

from abc import ABC, abstractmethod

import pytest

from src.domain.guest import GuestClassifier, GuestMessageStore


class GuestMessageStoreContract(ABC):

    @abstractmethod
    def create_store(self) -> GuestMessageStore:
        ...

    @pytest.mark.asyncio
    async def test_search_empty_store(self):
        store = self.create_store()
        assert await store.search("John") == []

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_substring(self):
        store = self.create_store()
        await store.add_message("Hello, this is John Doe, arriving Friday.")
        await store.add_message("Message from Jane.")
        matches = await store.search("john doe")
        assert len(matches) == 1
        assert "John Doe" in matches[0].body

    @pytest.mark.asyncio
    async def test_newest_first(self):
        store = self.create_store()
        first = await store.add_message("John: first")
        second = await store.add_message("John: second")
        matches = await store.search("John")
        assert [m.message_id for m in matches] == [second, first]

    @pytest.mark.asyncio
    async def test_limit(self):
        store = self.create_store()
        for i in range(5):
            await store.add_message(f"John message {i}")
        assert len(await store.search("John", limit=3)) == 3

    @pytest.mark.asyncio
    async def test_wildcards_are_literal(self):
        store = self.create_store()
        await store.add_message("100% sure")
        await store.add_message("100 percent")
        matches = await store.search("100%")
        assert [m.body for m in matches] == ["100% sure"]


class GuestClassifierContract(ABC):

    @abstractmethod
    def create_classifier(self) -> GuestClassifier:
        ...

    @pytest.mark.asyncio
    async def test_friendly_guest_is_good(self):
        result = await self.create_classifier().classify(
            "Thank you so much for the lovely flat, everything was clean and great!\n---\n"
            "Thanks again, we will leave the keys in the box as asked."
        )
        assert result.label == "good"
        assert result.is_good is True

    @pytest.mark.asyncio
    async def test_troublesome_guest_is_bad(self):
        result = await self.create_classifier().classify(
            "We will have a party on Saturday with extra guests, around 30 people.\n---\n"
            "The place was dirty and the TV is broken, I want a refund.\n---\n"
            "Also I will complain about the noise rules."
        )
        assert result.label == "bad"
        assert result.is_good is False

    @pytest.mark.asyncio
    async def test_result_has_required_fields(self):
        result = await self.create_classifier().classify("Arriving at 3pm.")
        assert result.label in ("good", "bad", "uncertain")
        assert 0.0 <= result.score <= 1.0
        assert isinstance(result.is_good, bool)
        assert isinstance(result.reason, str)
