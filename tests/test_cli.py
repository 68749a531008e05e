import pytest

from cityweather import cli
from cityweather.config import Settings
from cityweather.registry import InstanceRegistry


@pytest.fixture
def offline(monkeypatch, fake_client):
    monkeypatch.setattr(cli.Settings, "from_env", staticmethod(lambda: Settings(api_key="K1")))
    monkeypatch.setattr(
        cli, "InstanceRegistry",
        lambda settings: InstanceRegistry(settings=settings, client_factory=lambda key: fake_client),
    )


def test_prints_cities_in_argument_order(offline, capsys):
    assert cli.main(["Paris", "London"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "Paris: Rain (light rain), temp 11.0, feels like 10.1",
        "London: Clear (clear sky), temp 15.0, feels like 14.2",
    ]


def test_geo_flag(offline, capsys):
    assert cli.main(["--geo", "London"]) == 0
    assert capsys.readouterr().out.strip() == "London: lat 51.5, lon -0.12"


def test_unknown_city_exits_1(offline, capsys):
    assert cli.main(["Nowhere"]) == 1
    assert "Nowhere" in capsys.readouterr().err


def test_missing_key_exits_2(monkeypatch, capsys):
    monkeypatch.setattr(cli.Settings, "from_env", staticmethod(lambda: Settings()))

    assert cli.main(["London"]) == 2
    assert "OPENWEATHER_API_KEY" in capsys.readouterr().err


def test_format_weather_skips_missing_fields():
    assert cli.format_weather("Oslo", {"weather": {"main": "Snow"}}) == "Oslo: Snow"
