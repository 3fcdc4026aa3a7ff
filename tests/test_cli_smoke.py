"""Smoke tests for CLI commands.

Tests that CLI commands parse correctly and don't crash. Uses Click's
CliRunner for testing without opening real serial ports or sockets.
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from fakes import FakeOpener
from ledbridge.cli.main import cli
from ledbridge.device import SerialPortInfo
from ledbridge.exceptions import TransportUnavailableError


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(temp_dir):
    """Path of a config file that does not exist yet."""
    return temp_dir / "config.json"


@pytest.fixture
def fake_opener():
    opener = FakeOpener()
    with patch("ledbridge.cli.commands.send.open_serial_transport", opener):
        yield opener


@pytest.mark.integration
class TestCLIHelp:
    """Test that all commands have working help text."""

    def test_main_help(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'Arduino LED strip controller' in result.output

    def test_version_flag(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert '0.1.0' in result.output

    def test_serve_options(self, runner):
        result = runner.invoke(cli, ['serve', '--help'])
        assert result.exit_code == 0
        for option in ('--serial-port', '--host', '--http-port', '--verbose', '--debug', '--log-file'):
            assert option in result.output

    @pytest.mark.parametrize("command", [['ports'], ['send'], ['send', 'color'], ['config']])
    def test_subcommand_help(self, runner, command):
        result = runner.invoke(cli, command + ['--help'])
        assert result.exit_code == 0


@pytest.mark.integration
class TestServeCommand:
    """Test the serve command without starting a server."""

    def test_overrides_reach_app(self, runner, config_file):
        with patch("ledbridge.cli.main.setup_logging"), \
             patch("ledbridge.gateway.build_app") as mock_build, \
             patch("uvicorn.run") as mock_run:
            result = runner.invoke(cli, [
                '--config', str(config_file),
                'serve', '--serial-port', '/dev/ttyACM0', '--http-port', '8080',
            ])

        assert result.exit_code == 0, result.output
        app_config = mock_build.call_args.args[0]
        assert app_config.serial_port == '/dev/ttyACM0'
        assert app_config.http_port == 8080
        assert app_config.http_host == '0.0.0.0'
        mock_run.assert_called_once_with(
            mock_build.return_value, host='0.0.0.0', port=8080, log_config=None
        )

    def test_invalid_port_override(self, runner, config_file):
        with patch("ledbridge.cli.main.setup_logging"), patch("uvicorn.run") as mock_run:
            result = runner.invoke(cli, ['--config', str(config_file), 'serve', '--http-port', '0'])

        assert result.exit_code == 1
        assert 'ERROR' in result.output
        mock_run.assert_not_called()

    def test_invalid_config_file(self, runner, config_file):
        config_file.write_text('{"http_port": 3001,}')

        with patch("ledbridge.cli.main.setup_logging"), patch("uvicorn.run") as mock_run:
            result = runner.invoke(cli, ['--config', str(config_file), 'serve'])

        assert result.exit_code == 1
        assert 'Configuration file' in result.output
        mock_run.assert_not_called()


@pytest.mark.integration
class TestPortsCommand:
    """Test serial port listing."""

    def test_lists_ports(self, runner):
        found = [SerialPortInfo("/dev/ttyUSB0", "USB2.0-Serial", "USB VID:PID=1A86:7523")]

        with patch("ledbridge.cli.commands.ports.list_serial_ports", return_value=found):
            result = runner.invoke(cli, ['ports'])

        assert result.exit_code == 0
        assert '/dev/ttyUSB0' in result.output
        assert 'USB2.0-Serial' in result.output

    def test_no_ports(self, runner):
        with patch("ledbridge.cli.commands.ports.list_serial_ports", return_value=[]):
            result = runner.invoke(cli, ['ports'])

        assert result.exit_code == 0
        assert 'No serial ports found.' in result.output


@pytest.mark.integration
class TestSendCommand:
    """Test one-shot device commands."""

    def invoke(self, runner, config_file, *args):
        return runner.invoke(cli, [
            '--config', str(config_file),
            'send', '--serial-port', '/dev/fake', '--settle', '0', *args,
        ])

    def test_color(self, runner, config_file, fake_opener):
        result = self.invoke(runner, config_file, 'color', '255', '0', '0')

        assert result.exit_code == 0, result.output
        assert 'Sent to /dev/fake: <255, 0, 0, 255>' in result.output
        assert fake_opener.latest.writes == [b"<255, 0, 0, 255>\n"]
        assert fake_opener.latest.close_calls == 1

    def test_effect_with_brightness(self, runner, config_file, fake_opener):
        result = self.invoke(runner, config_file, 'effect', '2', '--brightness', '64')

        assert result.exit_code == 0, result.output
        assert fake_opener.latest.writes == [b"<effect=2, 64>\n"]

    def test_save_and_reset(self, runner, config_file, fake_opener):
        assert self.invoke(runner, config_file, 'save').exit_code == 0
        assert self.invoke(runner, config_file, 'reset').exit_code == 0

        assert [t.writes for t in fake_opener.transports] == [[b"<save>\n"], [b"<reset>\n"]]

    def test_status_prints_device_reply(self, runner, config_file, fake_opener):
        fake_opener.preload = b"Efeito: Rainbow\n"

        result = self.invoke(runner, config_file, 'status', '--listen', '0.5')

        assert result.exit_code == 0, result.output
        assert 'Device: Efeito: Rainbow' in result.output
        assert fake_opener.latest.writes == [b"<status>\n"]

    def test_invalid_color_is_not_sent(self, runner, config_file, fake_opener):
        result = self.invoke(runner, config_file, 'color', '300', '0', '0')

        assert result.exit_code == 1
        assert 'Valores RGB devem estar entre 0 e 255' in result.output
        assert fake_opener.calls == []

    def test_invalid_effect(self, runner, config_file, fake_opener):
        result = self.invoke(runner, config_file, 'effect', '4')

        assert result.exit_code == 1
        assert 'Efeito deve estar entre 0 e 3' in result.output

    def test_port_unavailable(self, runner, config_file, fake_opener):
        fake_opener.fail_with = TransportUnavailableError("/dev/fake", "not_found")

        result = self.invoke(runner, config_file, 'save')

        assert result.exit_code == 1
        assert 'Serial device /dev/fake not found.' in result.output
        assert 'ledbridge ports' in result.output

    def test_port_from_config(self, runner, config_file, fake_opener):
        config_file.write_text('{"serial_port": "/dev/ttyACM1"}')

        result = runner.invoke(cli, ['--config', str(config_file), 'send', '--settle', '0', 'save'])

        assert result.exit_code == 0, result.output
        assert fake_opener.calls[0][0] == '/dev/ttyACM1'


@pytest.mark.integration
class TestConfigCommand:
    """Test configuration commands."""

    def test_show_defaults(self, runner, config_file):
        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'show'])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['serial_port'] == '/dev/ttyUSB0'
        assert data['http_port'] == 3001
        assert data['api_prefix'] == '/api'

    def test_path(self, runner, config_file):
        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'path'])

        assert result.exit_code == 0
        assert str(config_file) in result.output
        assert 'not created yet' in result.output

    def test_init_then_show(self, runner, config_file):
        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'init'])
        assert result.exit_code == 0
        assert config_file.exists()

        config_file.write_text('{"serial_port": "COM3"}')
        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'show'])
        assert json.loads(result.output)['serial_port'] == 'COM3'

    def test_init_refuses_to_overwrite(self, runner, config_file):
        config_file.write_text('{}')

        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'init'])

        assert result.exit_code == 1
        assert 'already exists' in result.output

    def test_init_force_keeps_backup(self, runner, config_file):
        config_file.write_text('{"serial_port": "COM3"}')

        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'init', '--force'])

        assert result.exit_code == 0
        assert config_file.with_suffix('.json.bak').exists()
        assert json.loads(config_file.read_text())['serial_port'] == '/dev/ttyUSB0'

    def test_show_invalid_file(self, runner, config_file):
        config_file.write_text('{"http_port": "not a number"}')

        result = runner.invoke(cli, ['--config', str(config_file), 'config', 'show'])

        assert result.exit_code == 1
        assert 'Error:' in result.output
