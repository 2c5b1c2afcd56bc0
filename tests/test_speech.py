import asyncio

import pytest

from interview_coach.client.speech import ListeningState, SpeechCapture, TypedRecognizer


def test_final_segments_joined_with_single_space():
    capture = SpeechCapture(TypedRecognizer)
    assert capture.start_listening() is True
    capture.recognizer.submit("hello ")
    capture.recognizer.submit("world ")
    assert capture.transcript == "hello world "


def test_interim_results_ignored():
    capture = SpeechCapture(TypedRecognizer)
    capture.start_listening()
    capture.recognizer.submit("hel", is_final=False)
    capture.recognizer.submit("hello")
    assert capture.transcript == "hello "


def test_stop_appends_paragraph_break():
    capture = SpeechCapture(TypedRecognizer)
    capture.start_listening()
    capture.recognizer.submit("hello")
    capture.stop_listening()
    assert capture.transcript == "hello \n\n"
    assert capture.state == ListeningState.IDLE


def test_start_while_listening_is_noop():
    capture = SpeechCapture(TypedRecognizer)
    assert capture.start_listening() is True
    recognizer = capture.recognizer
    assert capture.start_listening() is False
    assert capture.recognizer is recognizer


def test_each_start_builds_fresh_recognizer():
    capture = SpeechCapture(TypedRecognizer)
    capture.start_listening()
    first = capture.recognizer
    capture.stop_listening()
    capture.start_listening()
    assert capture.recognizer is not first
    assert capture.transcript == ""


def test_without_recognizer_start_fails():
    capture = SpeechCapture(None)
    assert capture.error == "Speech recognition is not supported on this platform."
    assert capture.start_listening() is False
    assert capture.error == "Speech recognition not initialized"


def test_recognizer_start_failure():
    def broken():
        raise OSError("no microphone")

    capture = SpeechCapture(broken)
    assert capture.start_listening() is False
    assert capture.error == "Error starting speech recognition. Please try again."
    assert capture.is_listening is False


def test_recognizer_error_sets_message():
    capture = SpeechCapture(TypedRecognizer)
    capture.start_listening()
    capture.recognizer.fail("network")
    assert capture.error == "Speech recognition error: network"
    assert capture.is_listening is False


def test_no_speech_error_is_silent():
    capture = SpeechCapture(TypedRecognizer)
    capture.start_listening()
    capture.recognizer.fail("no-speech")
    assert capture.error is None
    assert capture.is_listening is False


def test_reset_transcript_restarts_active_recording():
    capture = SpeechCapture(TypedRecognizer)
    capture.start_listening()
    capture.recognizer.submit("first try")
    capture.reset_transcript()
    assert capture.transcript == ""
    assert capture.is_listening is True
    capture.recognizer.submit("second try")
    assert capture.transcript == "second try "


def test_reset_transcript_when_idle():
    capture = SpeechCapture(TypedRecognizer)
    capture.start_listening()
    capture.recognizer.submit("words")
    capture.stop_listening()
    capture.reset_transcript()
    assert capture.transcript == ""
    assert capture.is_listening is False


@pytest.mark.asyncio
async def test_watchdog_reports_silence():
    capture = SpeechCapture(TypedRecognizer, no_speech_timeout=0.01)
    capture.start_listening()
    await asyncio.sleep(0.05)
    assert capture.error == "No speech detected. Please speak clearly."
    assert capture.is_listening is False
    capture.close()


@pytest.mark.asyncio
async def test_watchdog_disarmed_by_speech():
    capture = SpeechCapture(TypedRecognizer, no_speech_timeout=0.01)
    capture.start_listening()
    capture.recognizer.submit("I am speaking")
    await asyncio.sleep(0.05)
    assert capture.error is None
    assert capture.is_listening is True
    capture.close()


@pytest.mark.asyncio
async def test_close_cancels_watchdog():
    capture = SpeechCapture(TypedRecognizer, no_speech_timeout=0.01)
    capture.start_listening()
    capture.close()
    await asyncio.sleep(0.05)
    assert capture.error is None
    assert capture.recognizer is None
