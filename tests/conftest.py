"""Shared test fixtures"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import jwt
import pytest
from fastapi.testclient import TestClient

from nutrition_service.clients.nutrient_lookup import NutrientLookupClient
from nutrition_service.clients.object_store import ObjectStoreGateway
from nutrition_service.core.config import Config
from nutrition_service.dependencies.context import ServiceContext
from nutrition_service.main import create_app
from nutrition_service.models.product import Product
from nutrition_service.services.product import ProductService
from nutrition_service.services.uploads import UploadStager

TEST_SECRET = "test-secret"
PRODUCT_ID = "507f1f77bcf86cd799439011"
IMAGE_URL = "https://test-bucket.s3.us-east-1.amazonaws.com/1700000000000-yogurt.png"


def make_token(claims=None, secret=TEST_SECRET, expires_in=timedelta(hours=1)):
    """Sign a token the way the auth service would"""
    payload = {"sub": "user-123"}
    payload.update(claims or {})
    payload["exp"] = datetime.now(timezone.utc) + expires_in
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def test_config(tmp_path):
    """Configuration pointing uploads at a temporary directory"""
    return Config(
        environment="test",
        jwt_secret=TEST_SECRET,
        jwt_algorithm="HS256",
        upload_dir=str(tmp_path / "uploads"),
        max_upload_bytes=1024,
        s3_bucket="test-bucket",
        nutrient_api_url="http://nutrients.test/api/score",
    )


@pytest.fixture
def mock_product_service():
    return AsyncMock(spec=ProductService)


@pytest.fixture
def mock_object_store():
    return AsyncMock(spec=ObjectStoreGateway)


@pytest.fixture
def mock_nutrient_client():
    return AsyncMock(spec=NutrientLookupClient)


@pytest.fixture
def service_context(test_config, mock_product_service, mock_object_store, mock_nutrient_client):
    """Context built from fakes; the real stager writes under tmp_path"""
    return ServiceContext(
        config=test_config,
        product_service=mock_product_service,
        object_store=mock_object_store,
        nutrient_client=mock_nutrient_client,
        upload_stager=UploadStager(test_config.upload_dir, test_config.max_upload_bytes),
    )


@pytest.fixture
def client(service_context, test_config):
    app = create_app(context=service_context, config=test_config)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def auth_headers():
    return {"Authorization": make_token()}


@pytest.fixture
def sample_product():
    """Product as returned by the service layer"""
    return Product(
        id=PRODUCT_ID,
        name="Greek Yogurt",
        weight=150.0,
        calories=146.0,
        fat=3.8,
        proteins=15.0,
        carbohydrate=11.6,
        sugar=11.6,
        sodium=0.07,
        potassium=0.21,
        image_url=IMAGE_URL,
    )


@pytest.fixture
def product_form():
    """Complete create form as the client sends it"""
    return {
        "name": "Greek Yogurt",
        "weight": "150",
        "calories": "146",
        "fat": "3.8",
        "proteins": "15",
        "carbohydrate": "11.6",
        "sugar": "11.6",
        "sodium": "0.07",
        "potassium": "0.21",
    }


@pytest.fixture
def image_file():
    return {"images": ("yogurt.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 64, "image/png")}


@pytest.fixture
def mock_product_doc():
    """Product document as stored in MongoDB"""
    from bson import ObjectId

    return {
        "_id": ObjectId(PRODUCT_ID),
        "name": "Greek Yogurt",
        "weight": 150.0,
        "calories": 146.0,
        "fat": 3.8,
        "proteins": 15.0,
        "carbohydrate": 11.6,
        "sugar": 11.6,
        "sodium": 0.07,
        "potassium": 0.21,
        "imageUrl": IMAGE_URL,
    }
