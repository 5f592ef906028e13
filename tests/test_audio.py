import pytest

from awaken.audio import SoundPlayer


class FakeSound:
    def __init__(self, file):
        self.file = file


class FakeChannel:
    def __init__(self):
        self.calls = []

    def play(self, sound, loops=0):
        self.calls.append(("play", sound.file, loops))

    def pause(self):
        self.calls.append(("pause",))

    def unpause(self):
        self.calls.append(("unpause",))

    def queue(self, sound):
        self.calls.append(("queue", sound.file))


class FakeMixer:
    Sound = FakeSound

    def __init__(self):
        self.channels = {}
        self.reserved = None

    def set_reserved(self, count):
        self.reserved = count

    def Channel(self, index):
        return self.channels.setdefault(index, FakeChannel())


@pytest.fixture
def sounds(tmp_path):
    notification = tmp_path / "notification.mp3"
    alarm = tmp_path / "alarm.mp3"
    notification.write_bytes(b"n")
    alarm.write_bytes(b"a")
    return notification, alarm


def test_missing_file_raises(tmp_path, sounds):
    notification, _ = sounds
    with pytest.raises(FileNotFoundError):
        SoundPlayer(notification, tmp_path / "missing.mp3", mixer=FakeMixer())


def test_alarm_starts_looping_but_paused(sounds):
    mixer = FakeMixer()
    player = SoundPlayer(*sounds, mixer=mixer)
    alarm_calls = mixer.channels[0].calls
    assert alarm_calls == [("play", str(sounds[1]), -1), ("pause",)]
    assert player.alarm_playing is False
    assert mixer.reserved == 2


def test_update_alarm_toggles(sounds):
    mixer = FakeMixer()
    player = SoundPlayer(*sounds, mixer=mixer)
    player.update_alarm(True)
    assert player.alarm_playing is True
    assert mixer.channels[0].calls[-1] == ("unpause",)
    player.update_alarm(False)
    assert player.alarm_playing is False
    assert mixer.channels[0].calls[-1] == ("pause",)


def test_notifications_are_queued(sounds):
    mixer = FakeMixer()
    player = SoundPlayer(*sounds, mixer=mixer)
    player.play_notification()
    player.play_notification()
    assert mixer.channels[1].calls == [("queue", str(sounds[0]))] * 2