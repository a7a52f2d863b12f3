# presentation glue: command parsing, rendering and the interactive loop with scripted input

import pytest
from weatherwidget import cli
from weatherwidget.client import NotFoundError
from weatherwidget.models import TemperatureUnit, WeatherRecord
from weatherwidget.session import WeatherSession
from weatherwidget.settings import Settings

RECORD = WeatherRecord("London", 20.0, 64, 4.12, "broken clouds", "04d")


def _settings():
    return Settings(backend="openweather", api_key=None)


def fake_fetcher(client, city):
    if city == "Atlantis":
        raise NotFoundError(city)
    return RECORD


@pytest.fixture
def session():
    return WeatherSession(client=None, fetcher=fake_fetcher)


@pytest.mark.parametrize("line, expected", [
    ("", ("noop", None)),
    ("  ", ("noop", None)),
    ("London", ("search", "London")),
    (" New York ", ("search", "New York")),
    (":q", ("quit", None)),
    (":F", ("unit", "f")),
    (":c", ("unit", "c")),
    (":Fahrenheit", ("unit", "fahrenheit")),
    (":u", ("toggle", None)),
    (":r", ("refresh", None)),
    (":h", ("help", None)),
])
def test_parse_command(line, expected):
    assert cli.parse_command(line) == expected


def test_render_idle(session):
    assert "Enter a city name" in cli.render(session)


def test_render_success_card(session):
    session.search("London")
    text = cli.render(session)

    assert text.splitlines()[0] == "London"
    assert "Icon: https://openweathermap.org/img/wn/04d@2x.png" in text
    assert "Temperature: 20.0°C" in text
    assert "Humidity: 64%" in text
    assert "Wind: 4.12 m/s" in text
    assert "Condition: broken clouds" in text

    session.set_unit(TemperatureUnit.FAHRENHEIT)
    assert "Temperature: 68.0°F" in cli.render(session)


def test_render_failure(session):
    session.search("Atlantis")
    assert cli.render(session) == "City not found"


def test_run_scripted_session(session):
    lines = iter(["London", ":f", "   ", ":r", "Atlantis", ":q", "never read"])
    output = []

    cli.run(session, read_line=lambda prompt: next(lines), write=output.append)

    # initial hint, London, unit change, refresh, not found (blank line prints nothing)
    assert len(output) == 5
    assert "Temperature: 68.0°F" in output[2]
    assert output[-1] == "City not found"


def test_run_stops_at_end_of_input(session):
    def read_line(prompt):
        raise EOFError

    output = []
    cli.run(session, read_line=read_line, write=output.append)
    assert len(output) == 1


def test_main_reports_missing_key(monkeypatch, capsys):
    monkeypatch.setattr(cli, "load_settings", _settings)

    assert cli.main(["--once", "London"]) == 2
    assert "API key" in capsys.readouterr().err


def test_main_once_with_local_backend(monkeypatch, requests_mock, load_payload, capsys):
    monkeypatch.setattr(cli, "load_settings", _settings)
    requests_mock.get("http://localhost:8000/api/weather", json=load_payload("local_paris.json"))

    assert cli.main(["--backend", "local", "--unit", "fahrenheit", "--once", "Paris"]) == 0
    out = capsys.readouterr().out
    assert "Paris" in out
    assert "Temperature: 63.5°F" in out


def test_main_once_failure_exit_code(monkeypatch, requests_mock, capsys):
    monkeypatch.setattr(cli, "load_settings", _settings)
    requests_mock.get("http://localhost:8000/api/weather", status_code=500, text="boom")

    assert cli.main(["--backend", "local", "--once", "Paris"]) == 1
    assert "Server Error" in capsys.readouterr().out


def test_unknown_unit_is_rejected_by_the_parser():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--unit", "kelvin"])


def test_unit_command_accepts_long_names(session):
    lines = iter(["London", ":fahrenheit", ":q"])
    output = []

    cli.run(session, read_line=lambda prompt: next(lines), write=output.append)

    assert session.unit is TemperatureUnit.FAHRENHEIT
    assert "Temperature: 68.0°F" in output[-1]
