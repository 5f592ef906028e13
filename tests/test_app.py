import threading
import urllib.error
import urllib.request
from datetime import datetime, timedelta
from http.server import ThreadingHTTPServer

import pytest

from awaken.app import Awaken, main, make_handler
from awaken.config import Config
from awaken.state import Action

NOW = datetime(2024, 5, 1, 9, 0)
SOON = NOW + timedelta(minutes=2)


class FakePlayer:
    def __init__(self):
        self.notifications = 0
        self.alarm_updates = []

    def play_notification(self):
        self.notifications += 1

    def update_alarm(self, active):
        self.alarm_updates.append(active)


def make_app(dates=(), fetch=None):
    player = FakePlayer()
    app = Awaken(
        Config(),
        player,
        fetch=fetch or (lambda link: list(dates)),
        clock=lambda: NOW,
    )
    return app, player


def test_refresh_calendar_loads_dates():
    seen_links = []

    def fetch(link):
        seen_links.append(link)
        return [SOON]

    app, _ = make_app(fetch=fetch)
    assert app.refresh_calendar() == [SOON]
    assert app.state.upcoming(NOW) == [SOON]
    assert seen_links == ["foo.com/basic.ical"]


def test_failed_fetch_clears_dates():
    def fetch(link):
        raise ConnectionError("down")

    app, _ = make_app(fetch=fetch)
    app.state.set_dates([SOON])
    with pytest.raises(ConnectionError):
        app.refresh_calendar()
    assert app.state.upcoming(NOW) == []


def test_alarm_then_check_in_silences():
    app, player = make_app(dates=[SOON])
    app.refresh_calendar()
    assert app.check_alarms() is Action.ALARM
    assert app.silence_tick() is True
    app.check_in()
    assert app.silence_tick() is False
    assert player.alarm_updates == [True, False]
    assert player.notifications == 0


def test_recent_activity_notifies():
    app, player = make_app(dates=[SOON])
    app.refresh_calendar()
    app.check_in()
    assert app.check_alarms() is Action.NOTIFY
    assert app.check_alarms() is Action.NONE
    assert player.notifications == 1


def test_alarm_expires_after_timeout():
    app, _ = make_app(dates=[SOON])
    app.alarm_timeout = timedelta(0)
    app.refresh_calendar()
    assert app.check_alarms() is Action.ALARM
    for _ in range(200):
        if not app.state.alarm_active():
            break
        threading.Event().wait(0.01)
    assert app.state.alarm_active() is False


@pytest.fixture
def served_app():
    app, _ = make_app()
    server = ThreadingHTTPServer(("127.0.0.1", 0), make_handler(app, "/checkin"))
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield app, server.server_address[1]
    finally:
        server.shutdown()
        server.server_close()


def test_check_in_endpoint(served_app):
    app, port = served_app
    with urllib.request.urlopen(f"http://127.0.0.1:{port}/checkin") as response:
        assert response.status == 200
    assert app.state.last_seen == NOW


def test_unknown_route_is_404(served_app):
    app, port = served_app
    with pytest.raises(urllib.error.HTTPError) as excinfo:
        urllib.request.urlopen(f"http://127.0.0.1:{port}/other")
    assert excinfo.value.code == 404
    assert app.state.last_seen is None


def test_main_requires_sound_files(tmp_path):
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f"""
route = "/checkin"
email = "me@example.com"
notification_sound_path = "{(tmp_path / 'n.mp3').as_posix()}"
alarm_sound_path = "{(tmp_path / 'a.mp3').as_posix()}"
alarm_check_interval_seconds = 15
alarm_silence_interval_seconds = 1
last_activity_check_minutes = 15

[smtp_config]
endpoint = "mail.example.com"
port = 587
username = "me"
password = "password"

[calendar_config]
link = "https://example.com/c.ics"
notify_before_seconds = 300
calendar_check_interval_minutes = 30
""",
        encoding="utf-8",
    )
    with pytest.raises(FileNotFoundError):
        main(["--config", str(config_path)])