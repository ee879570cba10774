import pytest

from src.platform.config.core_setting import Settings
from src.platform.constant.path import ENV_EXAMPLE_FILE


class TestSettings:
    def test_shipped_env_example_loads(self, monkeypatch):
        monkeypatch.delenv('BACKEND_CORS_ORIGINS', raising=False)

        settings = Settings(_env_file=ENV_EXAMPLE_FILE)  # type: ignore[call-arg]

        assert settings.BACKEND_CORS_ORIGINS == ['http://localhost:3000']
        assert settings.NOTIFICATION_BUFFER_SIZE == 1000

    @pytest.mark.parametrize(
        'raw',
        [
            'http://localhost:3000, https://booking.example.com',
            '["http://localhost:3000", "https://booking.example.com"]',
        ],
    )
    def test_cors_origins_from_environment(self, monkeypatch, raw):
        monkeypatch.setenv('BACKEND_CORS_ORIGINS', raw)

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.BACKEND_CORS_ORIGINS == [
            'http://localhost:3000',
            'https://booking.example.com',
        ]
