"""
Tests for DerivationLinker with a real SQLite store.

Tests cover:
1. Link creation rule (public always, private iff secrets)
2. Visibility root assignment along derivations
3. Atomicity when the parent is missing
4. Lineage and root lookups
"""

from unittest.mock import AsyncMock

import pytest

from alloyshare.core.secrets import SecretExtractor
from alloyshare.services.derivation_linker import DerivationLinker
from alloyshare.utils.exceptions import DanglingParent, NotFoundError, StoreError
from tests.conftest import RUN_MODEL, SECRET_MODEL


@pytest.fixture
def linker(sqlite_store):
    return DerivationLinker(sqlite_store)


@pytest.mark.integration
@pytest.mark.sqlite
@pytest.mark.asyncio
class TestShare:
    """Sharing models."""

    async def test_share_with_secret_creates_private_link(self, linker, sqlite_store):
        """A model with secrets gets two links and is its own root."""
        result = await linker.share("sig A {}\n//START_SECRET\nsecret\n//END_SECRET\n")

        assert result.public_link_id
        assert result.private_link_id is not None
        assert result.has_private_link
        assert result.original == result.model_id

        model = await sqlite_store.get_model(result.model_id)
        assert model.original == model.id
        assert model.is_root()

        public = await sqlite_store.get_link(result.public_link_id)
        private = await sqlite_store.get_link(result.private_link_id)
        assert public.is_private is False
        assert private.is_private is True
        assert public.model_id == private.model_id == result.model_id

    async def test_share_without_secret_has_only_public_link(self, linker, sqlite_store):
        result = await linker.share(RUN_MODEL)

        assert result.private_link_id is None
        links = await sqlite_store.get_links_for_model(result.model_id)
        assert len(links) == 1
        assert links[0].is_private is False

    async def test_first_model_is_its_own_root(self, linker, sqlite_store):
        result = await linker.share(RUN_MODEL)

        model = await sqlite_store.get_model(result.model_id)
        assert model.derivation_of is None
        assert model.original == model.id

    async def test_derived_model_inherits_parent_root(self, linker, sqlite_store):
        root = await linker.share(SECRET_MODEL)
        child = await linker.share(RUN_MODEL, parent_model_id=root.model_id)
        grandchild = await linker.share(RUN_MODEL + "\n", parent_model_id=child.model_id)

        assert child.original == root.model_id
        assert grandchild.original == root.model_id

        stored = await sqlite_store.get_model(grandchild.model_id)
        assert stored.derivation_of == child.model_id
        assert stored.original == root.model_id

    async def test_secret_in_derived_model_starts_new_root(self, linker):
        parent = await linker.share(RUN_MODEL)

        child = await linker.share(SECRET_MODEL, parent_model_id=parent.model_id)

        assert child.original == child.model_id
        assert child.private_link_id is not None

    async def test_dangling_parent_writes_nothing(self, linker, sqlite_store):
        with pytest.raises(DanglingParent):
            await linker.share(RUN_MODEL, parent_model_id="model_missing")

        assert await sqlite_store.count_models() == 0
        assert await sqlite_store.count_links() == 0

    async def test_store_failure_rolls_back_model(self, sqlite_store):
        """A failing link insert leaves no orphan model behind."""
        linker = DerivationLinker(sqlite_store)
        sqlite_store.insert_link = AsyncMock(side_effect=StoreError("disk full"))

        with pytest.raises(StoreError):
            await linker.share(RUN_MODEL)

        assert await sqlite_store.count_models() == 0

    async def test_link_creation_rule(self, linker, sqlite_store):
        texts = [RUN_MODEL, SECRET_MODEL, "//START_SECRET\nunterminated", "sig B {}"]

        results = [await linker.share(text) for text in texts]

        for text, result in zip(texts, results):
            links = await sqlite_store.get_links_for_model(result.model_id)
            public = [link for link in links if not link.is_private]
            private = [link for link in links if link.is_private]
            assert len(public) == 1
            assert len(private) == (1 if "//START_SECRET" in text else 0)

        assert await sqlite_store.count_links(is_private=True) == 2

    async def test_custom_markers(self, sqlite_store):
        linker = DerivationLinker(sqlite_store, SecretExtractor("--BEGIN_HIDDEN", "--END_HIDDEN"))

        result = await linker.share("sig A {}\n--BEGIN_HIDDEN\nfact {}\n--END_HIDDEN\n")
        plain = await linker.share(SECRET_MODEL)

        assert result.private_link_id is not None
        assert plain.private_link_id is None


@pytest.mark.integration
@pytest.mark.sqlite
@pytest.mark.asyncio
class TestLineage:
    """Lineage and visibility root lookups."""

    async def test_lineage_walks_back_to_first_model(self, linker):
        first = await linker.share(RUN_MODEL)
        second = await linker.share(SECRET_MODEL, parent_model_id=first.model_id)
        third = await linker.share(RUN_MODEL, parent_model_id=second.model_id)

        chain = await linker.lineage(third.model_id)

        assert [model.id for model in chain] == [
            third.model_id,
            second.model_id,
            first.model_id,
        ]

    async def test_lineage_unknown_model(self, linker):
        with pytest.raises(NotFoundError):
            await linker.lineage("model_missing")

    async def test_root_of(self, linker):
        first = await linker.share(RUN_MODEL)
        secret = await linker.share(SECRET_MODEL, parent_model_id=first.model_id)
        child = await linker.share(RUN_MODEL, parent_model_id=secret.model_id)

        assert (await linker.root_of(first.model_id)).id == first.model_id
        assert (await linker.root_of(child.model_id)).id == secret.model_id

    async def test_root_of_unknown_model(self, linker):
        with pytest.raises(NotFoundError):
            await linker.root_of("model_missing")
