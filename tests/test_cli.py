"""
Tests for the command-line interface.
"""

import argparse
from unittest.mock import AsyncMock, patch

import pytest

from weatherme import cli
from weatherme.ui.location import FixedLocationProvider, GeopyLocationProvider
from weatherme.ui.relay import RelayClient
from weatherme.weather.errors import ConfigurationError
from weatherme.weather.models import Observation

from conftest import observation_payload


class TestCreateParser:
    """Tests for create_parser."""

    def test_creates_parser(self):
        parser = cli.create_parser()
        assert isinstance(parser, argparse.ArgumentParser)
        assert parser.prog == "weatherme"

    def test_version(self):
        with pytest.raises(SystemExit):
            cli.create_parser().parse_args(["--version"])

    def test_city_joins_words(self):
        args = cli.create_parser().parse_args(["city", "New", "York"])
        assert args.command == "city"
        assert args.name == ["New", "York"]

    def test_relay_url_option(self):
        args = cli.create_parser().parse_args(["--relay-url", "http://relay:5000", "city", "Oslo"])
        assert args.relay_url == "http://relay:5000"

    def test_here_coordinates(self):
        args = cli.create_parser().parse_args(["here", "--lat", "48.85", "--lon", "2.35"])
        assert args.lat == 48.85
        assert args.lon == 2.35


class TestBuildLocator:
    """Tests for build_locator."""

    def test_coordinates_win(self):
        args = argparse.Namespace(lat=1.0, lon=2.0, place="Paris")
        assert isinstance(cli.build_locator(args), FixedLocationProvider)

    def test_place(self):
        args = argparse.Namespace(lat=None, lon=None, place="Paris")
        assert isinstance(cli.build_locator(args), GeopyLocationProvider)

    def test_nothing_configured(self):
        args = argparse.Namespace(lat=None, lon=None, place=None)
        assert cli.build_locator(args) is None


@pytest.fixture
def fake_relay():
    relay = AsyncMock(spec=RelayClient)
    relay.weather_by_city.return_value = Observation.model_validate(observation_payload())
    relay.forecast.return_value = []
    with patch.object(cli, "RelayClient") as relay_class:
        relay_class.return_value.__aenter__.return_value = relay
        yield relay


def test_city_command_prints_weather(fake_relay, capsys):
    with patch("sys.argv", ["weatherme", "city", "London"]), patch.object(cli, "configure_logging"):
        code = cli.main()

    assert code == 0
    assert "London, GB" in capsys.readouterr().out
    fake_relay.weather_by_city.assert_awaited_once_with("London")


def test_here_without_location_reports_unsupported(fake_relay, capsys):
    with patch("sys.argv", ["weatherme", "here", "--place", ""]), patch.object(cli, "configure_logging"):
        code = cli.main()

    assert code == 1
    assert "Geolocation is not supported" in capsys.readouterr().out
    fake_relay.weather_by_coordinates.assert_not_awaited()


def test_serve_without_api_key_exits_with_error(capsys):
    with patch.object(cli, "run_relay", side_effect=ConfigurationError("OPENWEATHER_API_KEY is not configured")):
        code = cli.cmd_serve(argparse.Namespace())

    assert code == 1
    assert "OPENWEATHER_API_KEY" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    with patch("sys.argv", ["weatherme"]):
        assert cli.main() == 0
    assert "usage" in capsys.readouterr().out


@pytest.mark.parametrize("coordinates", [["--lat", "10"], ["--lon", "20"]])
def test_here_rejects_half_a_coordinate_pair(fake_relay, capsys, coordinates):
    with patch("sys.argv", ["weatherme", "here", *coordinates]):
        with pytest.raises(SystemExit) as exc_info:
            cli.main()

    assert exc_info.value.code == 2
    assert "--lat and --lon must be given together" in capsys.readouterr().err
    fake_relay.weather_by_coordinates.assert_not_awaited()
