"""Tests for environment-driven configuration."""

import pytest

from utils.fusion_config import FusionConfig


def test_defaults_from_empty_env():
    config = FusionConfig.from_env({})
    assert config == FusionConfig()
    assert config.agreement_threshold == 0.20
    assert config.api_port == 5004


def test_values_from_env():
    config = FusionConfig.from_env({
        'FUSION_AGREEMENT_THRESHOLD': '0.15',
        'FUSION_API_HOST': '0.0.0.0',
        'FUSION_API_PORT': '8080',
        'FUSION_LOG_LEVEL': 'debug',
    })
    assert config.agreement_threshold == 0.15
    assert config.api_host == '0.0.0.0'
    assert config.api_port == 8080
    assert config.log_level == 'DEBUG'


@pytest.mark.parametrize("env", [
    {'FUSION_AGREEMENT_THRESHOLD': 'abc'},
    {'FUSION_AGREEMENT_THRESHOLD': '-0.1'},
    {'FUSION_AGREEMENT_THRESHOLD': 'nan'},
    {'FUSION_API_PORT': 'eighty'},
    {'FUSION_LOG_LEVEL': 'LOUD'},
    {'FUSION_API_PORT': '   '},
])
def test_invalid_values_fall_back(env):
    assert FusionConfig.from_env(env) == FusionConfig()


def test_invalid_value_logs_warning(caplog):
    FusionConfig.from_env({'FUSION_API_PORT': 'eighty'})
    assert "FUSION_API_PORT" in caplog.text
