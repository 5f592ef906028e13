# awaken

awaken watches an iCalendar feed so that you do not miss a meeting.

It fetches the feed at regular intervals and keeps the start time of every
event. When the next event is close, it does one of two things:

- If you have checked in recently, it plays a short notification sound, once
  per event.
- If you have not, it starts a looping alarm. The alarm keeps sounding until
  you check in, the event starts, or ten minutes have passed.

You check in with an HTTP GET on a local endpoint. A browser bookmark, a
keyboard shortcut that runs `curl`, or a phone automation will all do.

## Installation

```
pip install .
```

Sound is played through `pygame`'s mixer, so a working audio output is
needed.

## Running

```
awaken
```

Options:

- `--config PATH`: the configuration file. Defaults to
  `~/.config/awaken/config.toml`.
- `--host HOST`: the address to listen on. Defaults to `127.0.0.1`.
- `--port PORT`: the port to listen on. Defaults to `8080`.

This starts the background checks and an HTTP server. To check in, request
the configured route:

```
curl http://127.0.0.1:8080/checkin
```

The server answers `200` with an empty body on that route and `404` on any
other path. A check-in silences every alarm that is ringing. It also counts
as recent activity for the next alarm checks. Stop the program with Ctrl-C.

Both sound files named in the configuration must exist when the program
starts; otherwise it stops with `FileNotFoundError`.

## Configuration

The configuration is a TOML file. If it does not exist, it is created with
the built-in defaults. Replace those defaults before use, in particular the
calendar link, which must be a full URL. Every key must be present. The
integer settings must be non-negative and are range-checked. An example:

```toml
route = "/checkin"
email = "someone@example.com"
notification_sound_path = "~/.config/awaken/notification.mp3"
alarm_sound_path = "~/.config/awaken/alarm.mp3"
alarm_check_interval_seconds = 15
alarm_silence_interval_seconds = 1
last_activity_check_minutes = 15

[smtp_config]
endpoint = "smtp.gmail.com"
port = 587
username = "username"
password = "password"

[calendar_config]
link = "https://calendar.example.com/basic.ical"
notify_before_seconds = 300
calendar_check_interval_minutes = 30
```

What the keys do:

- `route`: the path that records a check-in.
- `calendar_config.link`: the iCalendar feed to read. It is fetched again
  every `calendar_check_interval_minutes`, and the configuration file is
  re-read at the same time.
- `calendar_config.notify_before_seconds`: how long before an event it
  starts to sound.
- `last_activity_check_minutes`: how long a check-in counts as recent. If you
  checked in within this time, you get a notification instead of an alarm.
- `alarm_check_interval_seconds`: how often the next event is checked.
- `alarm_silence_interval_seconds`: how often past events are cleared and the
  alarm is started or stopped.
- `notification_sound_path`, `alarm_sound_path`: the sounds to play. A
  leading `~` is expanded.

Only the `DTSTART` of top-level `VEVENT`s is used. Events with a date but no
time are treated as starting at 15:30. UTC times are used as they are, and
times with a `TZID` are taken as written. All times are compared with the
current UTC time.

## What it does not do

The `email` and `smtp_config` settings are read and checked, but nothing uses
them. awaken sends no e-mail. Alarms and notifications are sound only.

## Using it as a library

- `awaken.events.parse_event_starts(text)` returns the event start times from
  calendar text, and `fetch_calendar(link)` downloads a feed and parses it.
- `awaken.state.AlarmState` holds meeting times, active and silenced alarms
  and the last check-in. Its `next_meeting(now, notify_before, since_last_seen)`
  returns an `Action` (`NONE`, `NOTIFY` or `ALARM`) and the event's date.
- `awaken.config.load_config(path)` and `Config.from_dict(data)` read and
  validate the configuration.
- `awaken.app.Awaken` ties these together with a `SoundPlayer`. It offers
  `refresh_calendar()`, `check_alarms()`, `silence_tick()`, `check_in()` and
  `run(host, port)`.

## Development

```
pip install -e ".[test]"
pytest
```