"""
Tests for the configuration module.
"""

import json
import logging
import pytest
import numpy as np
import sys
import os
import yaml

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from eigenstats.components.config import Config, ConfigManager, to_bool
from eigenstats.math.pca import fit_pca, project_to_component_scores
from eigenstats.utils.general import setup_logging


@pytest.fixture
def fresh_config():
    """Reset the shared configuration before and after a test."""
    ConfigManager.reset()
    yield
    ConfigManager.reset()


class TestToBool:
    """Tests for boolean conversion of configuration values."""

    def test_to_bool(self):
        assert to_bool('yes') is True
        assert to_bool(' False ') is False
        assert to_bool(1) is True
        assert to_bool(None) is None
        assert to_bool('maybe') is None


class TestConfig:
    """Tests for the Config class."""

    def test_defaults(self, monkeypatch):
        """Test the default values."""
        for name in ['EIGENSTATS_PCA_WARN', 'EIGENSTATS_LOG_LEVEL',
                     'EIGENSTATS_PCA_LABEL_PREFIX', 'EIGENSTATS_CCA_DV_PREFIX',
                     'EIGENSTATS_CCA_IV_PREFIX']:
            monkeypatch.delenv(name, raising=False)
        config = Config()

        assert config.get('pca.warn-few-observations') is True
        assert config.get('pca.component-label-prefix') == 'pc'
        assert config.get('cca.dependent-label-prefix') == 'dv'
        assert config.get('cca.independent-label-prefix') == 'iv'
        assert config.get('logging.level') == 'warn'
        assert config.get('missing.key', 'fallback') == 'fallback'

    def test_env_vars(self, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv('EIGENSTATS_PCA_WARN', 'no')
        monkeypatch.setenv('EIGENSTATS_LOG_LEVEL', 'WARNING')
        monkeypatch.setenv('EIGENSTATS_CCA_IV_PREFIX', 'x')
        config = Config()

        assert config.get('pca.warn-few-observations') is False
        assert config.get('logging.level') == 'warn'
        assert config.get('cca.independent-label-prefix') == 'x'

    def test_overrides_merge(self):
        """Overrides are merged into nested sections."""
        config = Config({'pca': {'component-label-prefix': 'comp'}})
        assert config.get('pca.component-label-prefix') == 'comp'
        assert config.get('pca.warn-few-observations') is not None

    def test_set_and_to_dict(self):
        """Values can be set by path; to_dict returns a copy."""
        config = Config()
        config.set('custom.nested.value', 3)
        assert config.get('custom.nested.value') == 3

        snapshot = config.to_dict()
        snapshot['custom']['nested']['value'] = 4
        assert config.get('custom.nested.value') == 3

    def test_save_and_load(self, tmp_path):
        """Configuration round-trips through JSON and YAML files."""
        config = Config({'pca': {'component-label-prefix': 'comp'}})

        json_path = str(tmp_path / 'config.json')
        config.save_to_file(json_path)
        with open(json_path) as f:
            assert json.load(f)['pca']['component-label-prefix'] == 'comp'

        yaml_path = str(tmp_path / 'config.yaml')
        with open(yaml_path, 'w') as f:
            yaml.dump({'cca': {'dependent-label-prefix': 'dep'}}, f)
        config.load_from_file(yaml_path)
        assert config.get('cca.dependent-label-prefix') == 'dep'

    def test_unsupported_format(self, tmp_path):
        """Unknown file extensions are rejected."""
        config = Config()
        with pytest.raises(ValueError):
            config.save_to_file(str(tmp_path / 'config.txt'))
        with pytest.raises(ValueError):
            config.load_from_file(str(tmp_path / 'config.ini'))


class TestConfigManager:
    """Tests for the shared configuration."""

    def test_singleton(self, fresh_config):
        """The same instance is returned until reset."""
        first = ConfigManager.get_config()
        assert ConfigManager.get_config() is first
        ConfigManager.reset()
        assert ConfigManager.get_config() is not first

    def test_component_labels_follow_config(self, fresh_config):
        """Projection column labels use the configured prefix."""
        ConfigManager.get_config({'pca': {'component-label-prefix': 'comp'}})
        data = np.array([[1.0, 2.0], [2.0, 1.0], [3.0, 5.0]])
        model = fit_pca(data)
        assert project_to_component_scores(model, data).colnames() == ['comp1', 'comp2']


class TestSetupLogging:
    """Tests for the logging helper."""

    def test_accepts_short_names(self, monkeypatch):
        """'warn' is accepted as well as 'WARNING'."""
        calls = []
        monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.append(kwargs))
        setup_logging('warn')
        setup_logging('DEBUG')
        assert calls[0]['level'] == logging.WARNING
        assert calls[1]['level'] == logging.DEBUG

    def test_defaults_to_configured_level(self, monkeypatch, fresh_config):
        """Without an explicit level the configured logging.level is used."""
        calls = []
        monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.append(kwargs))
        ConfigManager.get_config({'logging': {'level': 'debug'}})
        setup_logging()
        assert calls[0]['level'] == logging.DEBUG

        ConfigManager.reset()
        ConfigManager.get_config({'logging': {'level': 'error'}})
        setup_logging()
        assert calls[1]['level'] == logging.ERROR
