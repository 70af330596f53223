"""Microphone test: lists devices, then transcribes for a few seconds.

Usage:
  python scripts/mic_test.py [seconds]

Uses the same Transcriber the terminal chat uses, so what is printed here
is what a voice turn would send.
"""
import sys
import time

import speech_recognition as sr

from rambl.modules.microphone import SpeechRecognitionSource, Transcriber, format_elapsed


def list_devices():
    try:
        names = sr.Microphone.list_microphone_names()
        print("Available microphone devices:")
        for i, n in enumerate(names):
            print(f"  [{i}] {n}")
    except Exception as e:
        print("Could not list microphone devices:", e)


def main():
    list_devices()
    print("")

    duration = int(sys.argv[1]) if len(sys.argv) > 1 else 8
    transcriber = Transcriber(SpeechRecognitionSource(), supported=SpeechRecognitionSource.is_supported())
    if not transcriber.start():
        print("Speech recognition unavailable")
        return

    print(f"Listening for {duration} seconds... speak now")
    while transcriber.is_listening() and transcriber.elapsed_seconds() < duration:
        print(f"\r[{format_elapsed(transcriber.elapsed_seconds())}] {transcriber.transcript}", end="")
        time.sleep(0.5)
    transcriber.stop()
    print("")
    print("Transcription:", transcriber.take_transcript() or "(nothing recognized)")


if __name__ == '__main__':
    main()
