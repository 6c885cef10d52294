import pytest

from app.settings import Settings


@pytest.mark.unit
def test_settings_defaults_for_testing(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.log_level == "DEBUG"
    assert settings.default_users_per_page == 20
    assert settings.multisite is False
    config = settings.to_flask_config()
    assert config["MULTISITE"] is False
    assert config["DEFAULT_SITE_ID"] == 1
    assert config["PENDING_USERS_ENABLED"] is True


@pytest.mark.unit
def test_settings_reads_multisite_flags(monkeypatch) -> None:
    monkeypatch.setenv("MULTISITE", "true")
    monkeypatch.setenv("PROTECTED_ACCOUNT_LOGIN", "keeper")

    config = Settings().to_flask_config()

    assert config["MULTISITE"] is True
    assert config["PROTECTED_ACCOUNT_LOGIN"] == "keeper"


@pytest.mark.unit
@pytest.mark.parametrize("value", ["0", "1000"])
def test_settings_rejects_out_of_range_page_size(monkeypatch, value) -> None:
    monkeypatch.setenv("DEFAULT_USERS_PER_PAGE", value)

    with pytest.raises(ValueError, match="配置校验失败"):
        Settings()


@pytest.mark.unit
def test_production_requires_secret_key(monkeypatch) -> None:
    monkeypatch.setenv("FLASK_ENV", "production")
    monkeypatch.delenv("SECRET_KEY", raising=False)

    with pytest.raises(ValueError, match="SECRET_KEY"):
        Settings()
