import pytest

from app.core.config import Settings, validate_settings
from app.db.file_store import JsonFileUserStore
from app.db.mongo import MongoUserStore
from app.db.store import build_user_store


def make_settings(**overrides):
    return Settings(_env_file=None, **overrides)


def test_allowed_origins_include_frontend_and_local_defaults():
    config = make_settings(
        FRONTEND_ORIGIN="https://users.example.com",
        CORS_ORIGINS=["http://localhost:3000", "https://admin.example.com"],
    )

    assert config.allowed_origins == [
        "https://users.example.com",
        "http://localhost:5173",
        "http://localhost:3000",
        "https://admin.example.com",
    ]


def test_storage_timeout_must_be_positive():
    with pytest.raises(ValueError):
        make_settings(STORAGE_TIMEOUT_SECONDS=0)


def test_validate_settings_requires_frontend_origin_in_production():
    config = make_settings(ENVIRONMENT="production")

    with pytest.raises(ValueError, match="FRONTEND_ORIGIN"):
        validate_settings(config)

    assert validate_settings(make_settings(ENVIRONMENT="production", FRONTEND_ORIGIN="https://users.example.com"))


def test_validate_settings_requires_data_file_for_file_backend():
    with pytest.raises(ValueError, match="DATA_FILE"):
        validate_settings(make_settings(STORAGE_BACKEND="file", DATA_FILE=""))


def test_build_user_store_follows_backend_setting(tmp_path):
    file_store = build_user_store(make_settings(STORAGE_BACKEND="file", DATA_FILE=str(tmp_path / "u.json"), STORAGE_TIMEOUT_SECONDS=3))
    assert isinstance(file_store, JsonFileUserStore)
    assert file_store.timeout == 3

    mongo_store = build_user_store(make_settings(STORAGE_BACKEND="mongo", MONGODB_COLLECTION="people"))
    assert isinstance(mongo_store, MongoUserStore)
    assert mongo_store.collection_name == "people"
