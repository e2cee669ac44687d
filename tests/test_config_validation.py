from app_services import AppServiceConfig, AppServices


def test_runtime_config_validation_flags_risky_settings(fetcher):
    services = AppServices(
        AppServiceConfig(
            environment="production",
            quote_api_key="",
            upstream_timeout_seconds=0,
            quote_pairing="sideways",
            debug_dump_enabled=True,
        ),
        fetcher=fetcher,
    )

    warnings = services.validate_runtime_config()
    assert len(warnings) == 4
    assert any("QUOTE_API_KEY" in warning for warning in warnings)
    assert any("QUOTE_PAIRING" in warning for warning in warnings)
    assert any("UPSTREAM_TIMEOUT_SECONDS" in warning for warning in warnings)
    assert any("DEBUG_DUMP_ENABLED" in warning for warning in warnings)
    assert services.game_service.quote_pairing == "split"


def test_clean_config_has_no_warnings(services):
    assert services.validate_runtime_config() == []


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "Development")
    monkeypatch.setenv("QUOTE_API_KEY", " secret ")
    monkeypatch.setenv("GENERATION_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("QUOTE_PAIRING", "single")
    monkeypatch.setenv("DEBUG_DUMP_ENABLED", "yes")
    monkeypatch.delenv("CORS_ORIGIN", raising=False)

    config = AppServiceConfig.from_env()

    assert config.is_development
    assert config.quote_api_key == "secret"
    assert config.generation_timeout_seconds == 12.5
    assert config.quote_pairing == "single"
    assert config.debug_dump_enabled is True
    assert config.effective_cors_origin == "http://localhost:3000"


def test_services_build_fetcher_from_config():
    services = AppServices(
        AppServiceConfig(
            quote_api_key="abc",
            quote_api_url="http://quotes.example.com",
            upstream_timeout_seconds=4,
            upstream_retries=2,
        )
    )
    assert services.fetcher.quote_api_key == "abc"
    assert services.fetcher.quote_api_url == "http://quotes.example.com"
    assert services.fetcher.timeout == 4
    assert services.fetcher.retries == 2
