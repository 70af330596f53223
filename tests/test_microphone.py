import threading
import time
import types
import unittest
from unittest import mock

from rambl.core.state_machine import ListeningState
from rambl.modules.microphone import (
    SpeechRecognitionSource, Transcriber, TranscriptionFragment, TranscriptionSource,
    format_elapsed,
)


class FakeSource(TranscriptionSource):
    """Captures the callbacks so tests can push fragments by hand."""

    def __init__(self, fail_on_start=False):
        self.fail_on_start = fail_on_start
        self.started = 0
        self.stopped = 0
        self.on_fragment = self.on_error = self.on_end = None

    def start(self, on_fragment, on_error, on_end):
        self.started += 1
        if self.fail_on_start:
            raise OSError("no microphone")
        self.on_fragment, self.on_error, self.on_end = on_fragment, on_error, on_end

    def stop(self):
        self.stopped += 1

    def say(self, text, final=True):
        self.on_fragment(TranscriptionFragment(text=text, is_final=final))


class TestTranscriber(unittest.TestCase):
    def setUp(self):
        self.source = FakeSource()
        self.transcriber = Transcriber(self.source)

    def test_interim_shown_on_top_of_finals(self):
        self.transcriber.start()
        self.source.say("I had a long day")
        self.source.say("at wo", final=False)
        self.assertEqual(self.transcriber.transcript, "I had a long day at wo")
        self.source.say("at work", final=False)
        self.assertEqual(self.transcriber.transcript, "I had a long day at work")
        self.source.say("at work today")
        self.assertEqual(self.transcriber.transcript, "I had a long day at work today")
        self.assertEqual(self.transcriber.interim_text, "")

    def test_stop_discards_interim(self):
        self.transcriber.start()
        self.source.say("hello")
        self.source.say("there", final=False)
        self.transcriber.stop()
        self.assertEqual(self.transcriber.state, ListeningState.IDLE)
        self.assertEqual(self.transcriber.transcript, "hello")
        self.assertEqual(self.source.stopped, 1)

    def test_fragments_after_stop_ignored(self):
        self.transcriber.start()
        self.transcriber.stop()
        self.source.say("late")
        self.assertEqual(self.transcriber.transcript, "")

    def test_error_and_end_return_to_idle(self):
        self.transcriber.start()
        self.source.on_error(RuntimeError("network"))
        self.assertFalse(self.transcriber.is_listening())

        self.transcriber.start()
        self.source.on_end()
        self.assertFalse(self.transcriber.is_listening())

    def test_start_clears_previous_text(self):
        self.transcriber.start()
        self.source.say("old words")
        self.transcriber.stop()
        self.transcriber.start()
        self.assertEqual(self.transcriber.transcript, "")

    def test_take_transcript_resets(self):
        self.transcriber.start()
        self.source.say("  feeling better  ")
        self.transcriber.stop()
        self.assertEqual(self.transcriber.take_transcript(), "feeling better")
        self.assertEqual(self.transcriber.transcript, "")

    def test_source_failure_on_start(self):
        transcriber = Transcriber(FakeSource(fail_on_start=True))
        self.assertFalse(transcriber.start())
        self.assertEqual(transcriber.state, ListeningState.IDLE)

    def test_unsupported_never_starts(self):
        source = FakeSource()
        transcriber = Transcriber(source, supported=False)
        self.assertFalse(transcriber.supported)
        self.assertFalse(transcriber.start())
        self.assertEqual(source.started, 0)
        self.assertFalse(Transcriber(None).start())


class SlowRecognizer:
    """Recognizer whose listen() outlasts the stop() join."""

    def __init__(self, delay):
        self.delay = delay

    def adjust_for_ambient_noise(self, source, duration=0.5):
        pass

    def listen(self, source, timeout=None, phrase_time_limit=None):
        time.sleep(self.delay)
        return b"audio"

    def recognize_google(self, audio, language=None):
        return "hello"


class FakeMicrophone:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def fake_sr(delay):
    return types.SimpleNamespace(
        Recognizer=lambda: SlowRecognizer(delay),
        Microphone=FakeMicrophone,
        WaitTimeoutError=type("WaitTimeoutError", (Exception,), {}),
        UnknownValueError=type("UnknownValueError", (Exception,), {}),
    )


class TestSpeechRecognitionSource(unittest.TestCase):
    def test_restart_does_not_revive_previous_listener(self):
        with mock.patch("rambl.modules.microphone.sr", fake_sr(0.3)):
            source = SpeechRecognitionSource()
            source.join_timeout = 0.01
            senders, ends, errors = [], [], []

            def on_fragment(fragment):
                senders.append(threading.current_thread())

            source.start(on_fragment, errors.append, lambda: ends.append(True))
            first = source._thread
            source.stop()
            self.assertTrue(first.is_alive())

            source.start(on_fragment, errors.append, lambda: ends.append(True))
            second = source._thread
            first.join(timeout=2.0)
            self.assertFalse(first.is_alive())

            time.sleep(0.5)
            source.join_timeout = 2.0
            source.stop()
            self.assertFalse(second.is_alive())

        self.assertTrue(senders)
        self.assertTrue(all(t is second for t in senders))
        self.assertEqual(ends, [])
        self.assertEqual(errors, [])


class TestFormatElapsed(unittest.TestCase):
    def test_labels(self):
        self.assertEqual(format_elapsed(0), "0:00")
        self.assertEqual(format_elapsed(65), "1:05")
        self.assertEqual(format_elapsed(-3), "0:00")


if __name__ == '__main__':
    unittest.main()
