# Path: tests/test_cli.py
"""
Tests for the fetch CLI.

Tests:
- Exit codes for success, failures and configuration errors
- Version resolution from the environment
- Summary output
"""

import asyncio
import logging

import pytest

from artifact_fetcher.cli.fetch_cli import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_FAILURES,
    EXIT_SUCCESS,
    FetchCLI,
    build_parser,
    main,
)
from artifact_fetcher.constants import LOGGER_ROOT
from artifact_fetcher.core.config_loader import ConfigLoader
from artifact_fetcher.sources import registry
from artifact_fetcher.sources.base import ArtifactSource

from tests.helpers import ArchiveServer, build_tar_gz

ARCHIVE = build_tar_gz([('lib/local.node', b'local binary', 0o755)])


def local_source(base_url: str) -> ArtifactSource:
    return ArtifactSource(
        name='local',
        platforms=(('linux-x64', 'linux-x64'), ('darwin-arm64', 'darwin-arm64')),
        artifact_template='local-v{version}-{platform}',
        url_template=base_url + '/{artifact}.tar.gz',
        filename_template='{artifact}.node',
        destination_parts=('example.com', 'local'),
        expected_entry_name='local.node',
    )


@pytest.fixture
def register_local():
    """Register a source served by a local server; unregister afterwards."""
    def register(server: ArchiveServer) -> None:
        registry.register_source(local_source(server.url('/').rstrip('/')))

    yield register
    registry._SOURCE_REGISTRY.pop('local', None)


def test_all_targets_succeed(tmp_path, register_local, capsys):
    """Test exit code 0 and the summary table."""
    async def run():
        routes = {
            '/local-v2.0.0-linux-x64.tar.gz': ARCHIVE,
            '/local-v2.0.0-darwin-arm64.tar.gz': ARCHIVE,
        }
        async with ArchiveServer(routes) as server:
            register_local(server)
            return await FetchCLI().run(['local'], version='2.0.0', base_dir=tmp_path)

    assert asyncio.run(run()) == EXIT_SUCCESS

    output = capsys.readouterr().out
    assert 'FETCH SUMMARY' in output
    assert 'Completed: 2' in output

    destination = tmp_path / 'example.com' / 'local' / 'local-v2.0.0-linux-x64.node'
    assert destination.read_bytes() == b'local binary'


def test_any_failure_exits_one(tmp_path, register_local, capsys):
    """Test exit code 1 when one platform fails."""
    async def run():
        routes = {'/local-v2.0.0-linux-x64.tar.gz': ARCHIVE}
        async with ArchiveServer(routes) as server:
            register_local(server)
            return await FetchCLI().run(['local'], version='2.0.0', base_dir=tmp_path)

    assert asyncio.run(run()) == EXIT_FAILURES

    output = capsys.readouterr().out
    assert 'Failed:    1' in output
    assert 'network: HTTP 404' in output


def test_missing_version_exits_two(tmp_path, monkeypatch, capsys):
    """Test a source without a version is a configuration error."""
    monkeypatch.delenv('FETCHER_DUCKDB_VERSION', raising=False)

    exit_code = asyncio.run(FetchCLI().run(['duckdb'], base_dir=tmp_path))

    assert exit_code == EXIT_CONFIGURATION_ERROR
    assert 'FETCHER_DUCKDB_VERSION' in capsys.readouterr().out
    assert not (tmp_path / 'github.com').exists()


def test_version_from_environment(tmp_path, register_local, monkeypatch):
    """Test FETCHER_<SOURCE>_VERSION is used when --version is absent."""
    monkeypatch.setenv('FETCHER_LOCAL_VERSION', '3.1.4')

    async def run():
        routes = {
            '/local-v3.1.4-linux-x64.tar.gz': ARCHIVE,
            '/local-v3.1.4-darwin-arm64.tar.gz': ARCHIVE,
        }
        async with ArchiveServer(routes) as server:
            register_local(server)
            return await FetchCLI().run(['local'], base_dir=tmp_path)

    assert asyncio.run(run()) == EXIT_SUCCESS


def test_parser_accepts_all():
    """Test the parser knows the registered sources and 'all'."""
    args = build_parser().parse_args(['all', '--version', '1.0.0'])

    assert args.sources == ['all']
    assert args.artifact_version == '1.0.0'
    assert args.base_dir is None


def test_parser_rejects_unknown_source():
    """Test argparse exits on an unknown source."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(['sqlite'])


def test_main_configuration_error(tmp_path, monkeypatch):
    """Test main() returns 2 without touching the network."""
    monkeypatch.delenv('FETCHER_KEYTAR_VERSION', raising=False)

    try:
        assert main(['keytar', '--base-dir', str(tmp_path)]) == EXIT_CONFIGURATION_ERROR
    finally:
        # main() installs handlers bound to this test's captured streams
        logging.getLogger(LOGGER_ROOT).handlers.clear()


def test_main_invalid_setting_exits_two(tmp_path, monkeypatch):
    """Test an out-of-range setting is reported as a configuration error."""
    monkeypatch.setenv('FETCHER_CHUNK_SIZE', '0')
    monkeypatch.setattr(ConfigLoader, '_initialized', False)

    try:
        assert main(['duckdb', '--version', '1.0.0', '--base-dir', str(tmp_path)]) == EXIT_CONFIGURATION_ERROR
    finally:
        logging.getLogger(LOGGER_ROOT).handlers.clear()

    assert not (tmp_path / 'github.com').exists()
