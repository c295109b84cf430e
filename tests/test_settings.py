import json
import os
import tempfile

import pytest

from rahashmapper.exceptions import ConfigError
from rahashmapper.settings import (
    DEFAULT_SETTINGS, build_config, load_settings, parse_platforms, save_settings,
)
from rahashmapper.shared_config import RAHASHER_DOWNLOAD_URL, default_hash_tool_url


def _write(tmp, data):
    path = os.path.join(tmp, 'config.json')
    with open(path, 'w', encoding='utf-8') as fh:
        if isinstance(data, str):
            fh.write(data)
        else:
            json.dump(data, fh)
    return path


def _required():
    return {
        'library_path': '/roms',
        'output_path': '/reports',
        'api_key': 'secret',
        'hash_tool_path': '/tools/RAHasher',
    }


def test_missing_config_file_is_an_error():
    with tempfile.TemporaryDirectory() as tmp:
        with pytest.raises(ConfigError):
            load_settings(os.path.join(tmp, 'nope.json'))


def test_invalid_json_is_an_error():
    with tempfile.TemporaryDirectory() as tmp:
        with pytest.raises(ConfigError):
            load_settings(_write(tmp, '{not json'))
        with pytest.raises(ConfigError):
            load_settings(_write(tmp, '[1, 2]'))


def test_file_values_merge_over_defaults():
    with tempfile.TemporaryDirectory() as tmp:
        settings = load_settings(_write(tmp, dict(_required(), missing_only=True)))
    assert settings['missing_only'] is True
    assert settings['report_format'] == 'csv'
    assert settings['platforms'] == DEFAULT_SETTINGS['platforms']


def test_platform_list_in_file_replaces_default_table():
    platforms = [{'name': 'SNES/Super Famicom', 'aliases': ['snes']}]
    with tempfile.TemporaryDirectory() as tmp:
        config = build_config(load_settings(_write(tmp, dict(_required(), platforms=platforms))))
    assert [p.name for p in config.platforms] == ['SNES/Super Famicom']
    assert config.platforms[0].aliases == ('snes',)
    assert config.platforms[0].override is None


def test_build_config_requires_core_values():
    for key in _required():
        settings = dict(DEFAULT_SETTINGS, **_required())
        settings[key] = ''
        with pytest.raises(ConfigError):
            build_config(settings)


def test_overrides_win_and_none_is_ignored():
    settings = dict(DEFAULT_SETTINGS, **_required())
    config = build_config(settings, {'api_key': 'other', 'output_path': None, 'missing_only': True})
    assert config.api_key == 'other'
    assert config.output_path == os.path.abspath('/reports')
    assert config.missing_only is True


def test_duplicate_platform_names_rejected():
    with pytest.raises(ConfigError):
        parse_platforms([{'name': 'NES/Famicom'}, {'name': 'NES/Famicom', 'aliases': ['nes']}])


def test_malformed_platform_rows_rejected():
    with pytest.raises(ConfigError):
        parse_platforms([{'aliases': ['x']}])
    with pytest.raises(ConfigError):
        parse_platforms([{'name': 'X', 'aliases': 'x'}])
    with pytest.raises(ConfigError):
        parse_platforms({'name': 'X'})


def test_unknown_report_format_rejected():
    settings = dict(DEFAULT_SETTINGS, **_required(), report_format='xlsx')
    with pytest.raises(ConfigError):
        build_config(settings)


def test_default_table_has_unique_names():
    names = [p.name for p in parse_platforms(DEFAULT_SETTINGS['platforms'])]
    assert len(names) == len(set(names))
    assert 'SNES/Super Famicom' in names


def test_save_then_load_round_trip():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, 'nested', 'config.json')
        save_settings(dict(DEFAULT_SETTINGS, **_required()), path)
        config = build_config(load_settings(path))
    assert config.api_key == 'secret'
    assert config.hash_tool_url == DEFAULT_SETTINGS['hash_tool_url']


def test_hash_tool_url_defaults_to_windows_build_only_on_windows():
    assert default_hash_tool_url('nt') == RAHASHER_DOWNLOAD_URL
    assert default_hash_tool_url('posix') is None
    assert DEFAULT_SETTINGS['hash_tool_url'] == default_hash_tool_url()
