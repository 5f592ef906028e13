"""Sound output: a one-shot notification and a looping alarm."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

_ALARM_CHANNEL = 0
_NOTIFICATION_CHANNEL = 1


def _existing(path: str | Path) -> Path:
    resolved = Path(path).expanduser()
    if not resolved.is_file():
        raise FileNotFoundError(f"sound file not found: {resolved}")
    return resolved


class SoundPlayer:
    """Plays sounds through a pygame-style mixer.

    The alarm loops forever on its own channel and is paused or resumed;
    notifications are queued on a second channel.
    """

    def __init__(
        self, notification_path: str | Path, alarm_path: str | Path, mixer: Any = None
    ) -> None:
        notification_file = _existing(notification_path)
        alarm_file = _existing(alarm_path)
        if mixer is None:
            import pygame

            pygame.mixer.init()
            mixer = pygame.mixer
        mixer.set_reserved(2)
        self._lock = threading.Lock()
        self._notification = mixer.Sound(str(notification_file))
        self._notification_channel = mixer.Channel(_NOTIFICATION_CHANNEL)
        self._alarm_channel = mixer.Channel(_ALARM_CHANNEL)
        self._alarm_channel.play(mixer.Sound(str(alarm_file)), loops=-1)
        self._alarm_channel.pause()
        self.alarm_playing = False

    def play_notification(self) -> None:
        """Queue the notification sound behind anything already playing."""
        with self._lock:
            self._notification_channel.queue(self._notification)

    def start_alarm(self) -> None:
        """Resume the looping alarm."""
        with self._lock:
            self._alarm_channel.unpause()
            self.alarm_playing = True

    def stop_alarm(self) -> None:
        """Pause the looping alarm."""
        with self._lock:
            self._alarm_channel.pause()
            self.alarm_playing = False

    def update_alarm(self, active: bool) -> None:
        """Make the alarm sound exactly when an alarm is active."""
        if active:
            self.start_alarm()
        else:
            self.stop_alarm()