"""
Unit tests for configuration loading and the application factory.
"""

import pytest

from framestudio import create_app
from framestudio.compositor import CompositorSettings
from framestudio.config import AppConfig, load_config, load_yaml_config
from framestudio.errors import ConfigurationError


@pytest.fixture
def config_dir(temp_work_dir, monkeypatch):
    """Run from a scratch directory with its own config/ folder."""
    for name in ('FLASK_ENV', 'LOG_LEVEL', 'SECRET_KEY', 'TEXTURE_DIR', 'CATALOG_FILE'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(temp_work_dir)
    config = temp_work_dir / 'config'
    config.mkdir()
    return config


class TestLoadConfig:

    def test_defaults_without_files(self, config_dir):
        config = load_config()

        assert config.PREVIEW_CANVAS_WIDTH == 400
        assert config.PX_PER_INCH_DISPLAY == 20.0
        assert config.FRAME_FILL_RATIO == 0.8
        assert config.DEBUG is True

    def test_environment_file_overrides_base(self, config_dir):
        (config_dir / 'settings.yaml').write_text("LOG_LEVEL: INFO\nTEXTURE_SEED: 1\n")
        (config_dir / 'settings_production.yaml').write_text("LOG_LEVEL: WARNING\n")

        config = load_config('production')

        assert config.LOG_LEVEL == 'WARNING'
        assert config.TEXTURE_SEED == 1
        assert config.FLASK_ENV == 'production'
        assert config.DEBUG is False

    def test_environment_variables_win(self, config_dir, monkeypatch):
        (config_dir / 'settings.yaml').write_text("TEXTURE_DIR: from/yaml\n")
        monkeypatch.setenv('TEXTURE_DIR', '/srv/textures')

        assert load_config().TEXTURE_DIR == '/srv/textures'

    def test_invalid_values_fall_back_to_defaults(self, config_dir):
        (config_dir / 'settings.yaml').write_text("FRAME_FILL_RATIO: 3\nTEXTURE_SEED: 9\n")

        config = load_config()

        assert config.FRAME_FILL_RATIO == 0.8
        assert config.TEXTURE_SEED == AppConfig().TEXTURE_SEED

    def test_unreadable_yaml_is_empty(self, config_dir):
        path = config_dir / 'broken.yaml'
        path.write_text("sizes: [unclosed\n")

        assert load_yaml_config(str(path)) == {}


class TestApplicationFactory:

    def test_services_registered(self, app):
        assert 'frame_catalog' in app.extensions
        assert 'preview_compositor' in app.extensions
        assert app.config['TESTING'] is True

    def test_compositor_settings_follow_config(self):
        config = AppConfig(PX_PER_INCH_DISPLAY=40, FRAME_FILL_RATIO=0.5, TEXTURE_SEED=7,
                           TEXTURE_DIR='/tmp/textures')

        settings = CompositorSettings.from_config(config)

        assert settings.px_per_inch == 40
        assert settings.fill_ratio == 0.5
        assert settings.texture_seed == 7
        assert settings.texture_dir == '/tmp/textures'

    @pytest.mark.parametrize("catalog_text", [None, "sizes: []\nmaterials: []\n"])
    def test_unusable_catalog_stops_startup(self, temp_work_dir, catalog_text):
        catalog_file = temp_work_dir / 'catalog.yaml'
        if catalog_text is not None:
            catalog_file.write_text(catalog_text)

        with pytest.raises(ConfigurationError) as excinfo:
            create_app({
                'TESTING': True,
                'TEMP_FOLDER': str(temp_work_dir / 'tmp'),
                'LOG_FILE': str(temp_work_dir / 'logs' / 'app.log'),
                'TEXTURE_DIR': str(temp_work_dir / 'textures'),
                'CATALOG_FILE': str(catalog_file),
            })

        assert excinfo.value.details['catalog_file'] == str(catalog_file)
        assert excinfo.value.suggestions
