import pytest
from pydantic import ValidationError

from tomato.core.config import EnvironmentMode, Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ["DATABASE_URL", "JWT_SECRET", "RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET", "ENV_MODE"]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_missing_jwt_secret_is_fatal(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///x.db")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_blank_jwt_secret_is_fatal(clean_env):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url="sqlite+aiosqlite:///x.db", jwt_secret="   ")


def test_missing_database_url_is_fatal(clean_env):
    clean_env.setenv("JWT_SECRET", "s3cret")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_from_environment(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///x.db")
    clean_env.setenv("JWT_SECRET", "s3cret")
    clean_env.setenv("ENV_MODE", "Production")
    clean_env.setenv("FRONTEND_ORIGIN", "https://a.example, https://b.example")
    clean_env.setenv("RAZORPAY_KEY_ID", "")

    settings = Settings(_env_file=None)

    assert settings.env_mode == EnvironmentMode.PRODUCTION
    assert settings.jwt_expire_days == 7
    assert settings.frontend_origins_list == ["https://a.example", "https://b.example"]
    assert settings.payments_enabled is False
    assert settings.missing_payment_config() == ["RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET"]


def test_root_and_health(client):
    assert client.get("/").text == "API WORKING"

    health = client.get("/health").json()
    assert health["status"] == "operational"
    assert health["database"] == "healthy"
    assert health["payment_service"] == "razorpay"


@pytest.mark.parametrize(
    "origin",
    [
        "http://localhost:5173",
        "http://localhost:5174",
        "https://tomato-frontend-git-main-ayushnegi369s-projects.vercel.app",
        "https://tomato-frontend-pr-12-ayushnegi369s-projects.vercel.app",
    ],
)
def test_cors_allows_frontends(client, origin):
    response = client.options(
        "/api/user/login",
        headers={"Origin": origin, "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == origin


def test_cors_rejects_unknown_origin(client):
    response = client.options(
        "/api/user/login",
        headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "POST"},
    )

    assert "access-control-allow-origin" not in response.headers


def test_static_images_are_served(client, settings):
    from pathlib import Path

    (Path(settings.uploads_dir) / "pizza.txt").write_text("slice")

    response = client.get("/images/pizza.txt")

    assert response.status_code == 200
    assert response.text == "slice"


def test_unknown_route_uses_json_error_shape(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json()["success"] is False
