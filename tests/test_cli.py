import json
import os
import subprocess
import tempfile

from rahashmapper import hasher as hasher_module
from rahashmapper import pipeline as pipeline_module
from rahashmapper.cli import run_cli
from rahashmapper.models import CatalogEntry, RemotePlatform

HASH_GAME = '0123456789abcdef0123456789abcdef'


class _FakeClient:
    valid = True

    def __init__(self, base_url=None, timeout=None):
        self.session = None

    def validate_credential(self, api_key):
        return self.valid and api_key == 'secret'

    def list_active_platforms(self, api_key):
        return [RemotePlatform(3, 'SNES/Super Famicom')]

    def list_catalog(self, api_key, platform_id):
        return [CatalogEntry(123, 'Example Game', 3, 'SNES/Super Famicom', 40, (HASH_GAME,))]


def _setup(tmp, monkeypatch):
    library = os.path.join(tmp, 'roms')
    os.makedirs(os.path.join(library, 'snes'))
    with open(os.path.join(library, 'snes', 'game.sfc'), 'wb') as fh:
        fh.write(b'rom')
    tool = os.path.join(tmp, 'RAHasher')
    with open(tool, 'w') as fh:
        fh.write('')

    config_path = os.path.join(tmp, 'config.json')
    with open(config_path, 'w', encoding='utf-8') as fh:
        json.dump({
            'library_path': library,
            'output_path': os.path.join(tmp, 'out'),
            'api_key': 'secret',
            'hash_tool_path': tool,
        }, fh)

    monkeypatch.setattr(pipeline_module, 'RetroAchievementsClient', _FakeClient)
    monkeypatch.setattr(
        hasher_module.subprocess, 'run',
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 0, stdout=HASH_GAME.encode(), stderr=b''),
    )
    return config_path


def _args(tmp, config_path, *extra):
    return ['--config', config_path, '--log-file', os.path.join(tmp, 'run.log'), '--quiet', *extra]


def test_cli_run_writes_report_and_exits_zero(monkeypatch):
    with tempfile.TemporaryDirectory() as tmp:
        config_path = _setup(tmp, monkeypatch)

        assert run_cli(_args(tmp, config_path)) == 0

        report = os.path.join(tmp, 'out', 'RA_HashMapReport.csv')
        with open(report, encoding='utf-8') as fh:
            lines = fh.read().splitlines()
        assert lines[0] == 'MatchFound,System,RomName,Hash,Path,RATitle,RAID,CheevoCount'
        assert lines[1].startswith('True,SNES/Super Famicom,game.sfc,' + HASH_GAME)
        assert lines[1].endswith(',Example Game,123,40')


def test_cli_missing_only_with_all_matched_still_exits_zero(monkeypatch):
    with tempfile.TemporaryDirectory() as tmp:
        config_path = _setup(tmp, monkeypatch)

        assert run_cli(_args(tmp, config_path, '--missing-only')) == 0

        with open(os.path.join(tmp, 'out', 'RA_HashMapReport.csv'), encoding='utf-8') as fh:
            assert fh.read().splitlines() == [
                'MatchFound,System,RomName,Hash,Path,RATitle,RAID,CheevoCount',
            ]


def test_cli_missing_config_exits_non_zero(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        code = run_cli(_args(tmp, os.path.join(tmp, 'missing.json')))
    assert code == 1
    assert 'Configuration file not found' in capsys.readouterr().err


def test_cli_bad_api_key_exits_non_zero(monkeypatch, capsys):
    with tempfile.TemporaryDirectory() as tmp:
        config_path = _setup(tmp, monkeypatch)

        assert run_cli(_args(tmp, config_path, '--api-key', 'wrong')) == 1
        assert not os.path.exists(os.path.join(tmp, 'out', 'RA_HashMapReport.csv'))
    assert 'API key' in capsys.readouterr().err



def test_cli_unwritable_report_exits_non_zero_naming_the_path(monkeypatch, capsys):
    with tempfile.TemporaryDirectory() as tmp:
        config_path = _setup(tmp, monkeypatch)
        report = os.path.join(tmp, 'out', 'RA_HashMapReport.csv')
        os.makedirs(report)

        assert run_cli(_args(tmp, config_path)) == 1
        assert not os.path.exists(report + '.part')
    err = capsys.readouterr().err
    assert 'Error: Cannot write report' in err
    assert report in err

def test_cli_write_config_template():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, 'ra.json')
        assert run_cli(['--write-config', path]) == 0
        with open(path, encoding='utf-8') as fh:
            data = json.load(fh)
    assert data['report_format'] == 'csv'
    assert any(p['name'] == 'SNES/Super Famicom' for p in data['platforms'])
