"""Tests for ProductRepository against a mocked Motor collection"""
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument

from nutrition_service.repositories.product import ProductRepository


class AsyncCursor:
    """Minimal stand-in for a Motor cursor"""

    def __init__(self, docs):
        self._docs = list(docs)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._docs:
            raise StopAsyncIteration
        return self._docs.pop(0)


@pytest.fixture
def mock_collection():
    """Mock MongoDB collection for testing"""
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.database.command = AsyncMock(return_value={"ok": 1})
    return collection


@pytest.fixture
def repository(mock_collection):
    return ProductRepository(mock_collection)


class TestProductRepository:

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, repository, mock_collection, mock_product_doc):
        new_id = ObjectId()
        mock_collection.insert_one.return_value = Mock(inserted_id=new_id)
        document = {k: v for k, v in mock_product_doc.items() if k != "_id"}

        product = await repository.create(document)

        assert product.id == str(new_id)
        assert product.image_url == mock_product_doc["imageUrl"]
        assert "_id" not in document

    @pytest.mark.asyncio
    async def test_find_all(self, repository, mock_collection, mock_product_doc):
        mock_collection.find.return_value = AsyncCursor([mock_product_doc])

        products = await repository.find_all()

        assert len(products) == 1
        assert products[0].id == str(mock_product_doc["_id"])
        mock_collection.find.assert_called_once_with({})

    @pytest.mark.asyncio
    async def test_find_by_id(self, repository, mock_collection, mock_product_doc):
        mock_collection.find_one.return_value = mock_product_doc

        product = await repository.find_by_id(str(mock_product_doc["_id"]))

        assert product.name == "Greek Yogurt"
        mock_collection.find_one.assert_awaited_once_with({"_id": mock_product_doc["_id"]})

    @pytest.mark.asyncio
    async def test_find_by_malformed_id(self, repository, mock_collection):
        assert await repository.find_by_id("not-an-object-id") is None
        mock_collection.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_find_by_name_exact_match(self, repository, mock_collection, mock_product_doc):
        mock_collection.find_one.return_value = mock_product_doc

        product = await repository.find_by_name("Greek Yogurt")

        assert product.id == str(mock_product_doc["_id"])
        mock_collection.find_one.assert_awaited_once_with({"name": "Greek Yogurt"})

    @pytest.mark.asyncio
    async def test_update_sets_only_changes(self, repository, mock_collection, mock_product_doc):
        mock_collection.find_one_and_update.return_value = dict(mock_product_doc, fat=1.0)

        product = await repository.update(str(mock_product_doc["_id"]), {"fat": 1.0})

        assert product.fat == 1.0
        mock_collection.find_one_and_update.assert_awaited_once_with(
            {"_id": mock_product_doc["_id"]},
            {"$set": {"fat": 1.0}},
            return_document=ReturnDocument.AFTER,
        )

    @pytest.mark.asyncio
    async def test_update_missing(self, repository, mock_collection):
        mock_collection.find_one_and_update.return_value = None

        assert await repository.update("507f1f77bcf86cd799439011", {"fat": 1.0}) is None

    @pytest.mark.asyncio
    async def test_delete(self, repository, mock_collection):
        mock_collection.delete_one.return_value = Mock(deleted_count=1)

        assert await repository.delete("507f1f77bcf86cd799439011") is True

    @pytest.mark.asyncio
    async def test_delete_missing(self, repository, mock_collection):
        mock_collection.delete_one.return_value = Mock(deleted_count=0)

        assert await repository.delete("507f1f77bcf86cd799439011") is False
        assert await repository.delete("bad-id") is False

    @pytest.mark.asyncio
    async def test_ping(self, repository, mock_collection):
        assert await repository.ping() is True
        mock_collection.database.command.assert_awaited_once_with("ping")
