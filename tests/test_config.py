"""Tests for relay configuration."""

from __future__ import annotations

import pydantic
import pytest

from relay.config import Settings


class TestSettingsFromEnvironment:
    def test_reads_original_variable_names(self, monkeypatch):
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_live_abc")
        monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_abc")
        monkeypatch.setenv("RETELL_API_KEY", "key_abc")
        monkeypatch.setenv("RETELL_AGENT_ID", "agent_abc")
        monkeypatch.setenv("RETELL_LLM_ID", "llm_abc")
        monkeypatch.setenv("RETELL_PHONE_NUMBER", "+15550000000")
        monkeypatch.setenv("PORT", "8080")

        s = Settings(_env_file=None)
        assert s.stripe_secret_key.get_secret_value() == "sk_live_abc"
        assert s.stripe_webhook_secret.get_secret_value() == "whsec_abc"
        assert s.retell_api_key.get_secret_value() == "key_abc"
        assert s.retell_agent_id == "agent_abc"
        assert s.retell_llm_id == "llm_abc"
        assert s.retell_phone_number == "+15550000000"
        assert s.port == 8080

    def test_cors_origins_from_json(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["https://app.example.com"]')
        assert Settings(_env_file=None).cors_origins == ["https://app.example.com"]

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "HOST", "WEBHOOK_TOLERANCE", "HTTP_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)
        s = Settings(_env_file=None)
        assert s.port == 3001
        assert s.host == "0.0.0.0"
        assert s.webhook_tolerance == 300
        assert s.http_timeout == 30.0

    def test_reads_dotenv_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RETELL_AGENT_ID", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("RETELL_AGENT_ID=agent_from_file\n")
        assert Settings(_env_file=env_file).retell_agent_id == "agent_from_file"


class TestSettingsImmutability:
    def test_frozen(self, settings):
        with pytest.raises(pydantic.ValidationError):
            settings.port = 9999

    def test_secrets_hidden_in_repr(self, settings):
        rendered = repr(settings) + str(settings)
        assert "whsec_test_secret" not in rendered
        assert "sk_test_123" not in rendered
        assert "retell-test-key" not in rendered
