"""The alarm daemon: periodic checks plus an HTTP check-in endpoint."""

from __future__ import annotations

import argparse
import logging
import os
import threading
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from awaken.audio import SoundPlayer
from awaken.config import Config, default_config_path, load_config
from awaken.events import fetch_calendar
from awaken.state import Action, AlarmState

log = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Awaken:
    """Ties the calendar, the alarm state and the sound player together."""

    def __init__(
        self,
        config: Config,
        player: Any,
        *,
        state: AlarmState | None = None,
        fetch: Callable[[str], Iterable[datetime]] = fetch_calendar,
        clock: Callable[[], datetime] = _utc_now,
        config_path: str | Path | None = None,
        alarm_timeout: timedelta = timedelta(minutes=10),
    ) -> None:
        self.config = config
        self.player = player
        self.state = state if state is not None else AlarmState()
        self.config_path = config_path
        self.alarm_timeout = alarm_timeout
        self._fetch = fetch
        self._clock = clock
        self._stop = threading.Event()

    def refresh_calendar(self) -> list[datetime]:
        """Re-read the configuration if it has a file, then reload meeting times."""
        log.info("Fetching calendar.")
        self.state.set_dates([])
        if self.config_path is not None:
            self.config = load_config(self.config_path)
        dates = list(self._fetch(self.config.calendar_config.link))
        self.state.set_dates(dates)
        return dates

    def check_alarms(self) -> Action:
        """Notify or alarm if the next meeting is close enough."""
        action, date = self.state.next_meeting(
            self._clock(),
            timedelta(seconds=self.config.calendar_config.notify_before_seconds),
            timedelta(minutes=self.config.last_activity_check_minutes),
        )
        if action is Action.NOTIFY:
            log.info("Firing notification")
            self.player.play_notification()
        elif action is Action.ALARM:
            log.info("Firing alarm")
            timer = threading.Timer(
                self.alarm_timeout.total_seconds(), self.state.expire, args=(date,)
            )
            timer.daemon = True
            timer.start()
        return action

    def silence_tick(self) -> bool:
        """Drop passed alarms and sound the alarm only while one is active."""
        self.state.remove_passed(self._clock())
        active = self.state.alarm_active()
        self.player.update_alarm(active)
        return active

    def check_in(self) -> datetime:
        """Record user activity, silencing active alarms."""
        now = self._clock()
        self.state.record_activity(now)
        log.info("Activity seen %s", now)
        return now

    def _every(self, seconds: float, task: Callable[[], Any]) -> None:
        while not self._stop.is_set():
            try:
                task()
            except Exception:
                log.exception("periodic task failed")
            self._stop.wait(seconds)

    def run(self, host: str, port: int) -> None:
        """Start the periodic checks and serve check-ins until interrupted."""
        server = ThreadingHTTPServer((host, port), make_handler(self, self.config.route))
        config = self.config
        for seconds, task in (
            (config.calendar_config.calendar_check_interval_minutes * 60, self.refresh_calendar),
            (config.alarm_check_interval_seconds, self.check_alarms),
            (config.alarm_silence_interval_seconds, self.silence_tick),
        ):
            threading.Thread(target=self._every, args=(seconds, task), daemon=True).start()
        try:
            server.serve_forever()
        finally:
            self._stop.set()
            server.server_close()


def make_handler(app: Awaken, route: str) -> type[BaseHTTPRequestHandler]:
    """Build a request handler that records a check-in on GET of the route."""

    class CheckInHandler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:
            if urlsplit(self.path).path != route:
                self.send_error(HTTPStatus.NOT_FOUND)
                return
            app.check_in()
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Length", "0")
            self.end_headers()

        def log_message(self, fmt: str, *args: Any) -> None:
            log.debug(fmt, *args)

    return CheckInHandler


def main(argv: list[str] | None = None) -> int:
    """Run the alarm daemon."""
    parser = argparse.ArgumentParser(prog="awaken")
    parser.add_argument("--config", type=Path, default=default_config_path("awaken"))
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    config = load_config(args.config)
    player = SoundPlayer(
        os.path.expanduser(config.notification_sound_path),
        os.path.expanduser(config.alarm_sound_path),
    )
    try:
        Awaken(config, player, config_path=args.config).run(args.host, args.port)
    except KeyboardInterrupt:
        pass
    return 0