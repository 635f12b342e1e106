"""Unit tests for the command line entry point

Test coverage includes:

1. Argument parsing.
2. Configuration errors (bad settings file, unimportable geo lookup) exit
   with status 2 without serving.
3. A valid configuration builds the container and serves it.
"""

from unittest.mock import patch

from shortlinks import __main__ as cli
from shortlinks.app import ShortLinks


def test_parse_args():
    args = cli.parse_args(['--host', '0.0.0.0', '--port', '8080', '--config', 'settings.yaml'])
    assert (args.host, args.port, args.config) == ('0.0.0.0', 8080, 'settings.yaml')

    args = cli.parse_args([])
    assert (args.host, args.port, args.config) == (None, None, None)


def test_main_with_missing_config_file(tmp_path):
    with patch.object(cli, 'initialize_logging'), patch.object(cli, 'serve') as serve:
        assert cli.main(['--config', str(tmp_path / 'nope.yaml')]) == 2
    serve.assert_not_called()


def test_main_with_unimportable_geo_lookup(monkeypatch):
    monkeypatch.setenv('GEO_LOOKUP', 'shortlinks_missing_module:lookup')
    with patch.object(cli, 'initialize_logging'), patch.object(cli, 'serve') as serve:
        assert cli.main([]) == 2
    serve.assert_not_called()


def test_main_serves_container():
    with patch.object(cli, 'initialize_logging') as init_logging, patch.object(cli, 'serve') as serve:
        assert cli.main(['--port', '0']) == 0

    init_logging.assert_called_once_with('INFO')
    shortlinks = serve.call_args.args[0]
    assert isinstance(shortlinks, ShortLinks)
    assert shortlinks.started is False
    assert serve.call_args.kwargs == {'host': None, 'port': 0}
