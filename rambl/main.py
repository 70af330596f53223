"""Entry point: web server by default, terminal chat with --cli.

  rambl                    # serve the API on $PORT (default 5000)
  rambl --cli              # chat in the terminal
  rambl --cli --voice      # speak instead of type, replies read aloud
  rambl --cli --preset Rational
"""

import os
import sys
import traceback

from .config import ThemeConfig
from .core.session import ChatMode, ChatSession
from .modules.analytics import SessionAnalyzer
from .modules.capabilities import detect_capabilities
from .modules.llm_client import CompletionGateway
from .modules.microphone import SpeechRecognitionSource, Transcriber
from .modules.presets import list_presets
from .modules.record_store import SupabaseRecordStore
from .modules.speaker import SpeakerModule
from .modules.theme import ThemeStore

DONE_COMMANDS = ("/done", "/quit", "/exit")


def _arg_value(flag: str, default=None):
    if flag in sys.argv:
        idx = sys.argv.index(flag)
        if idx + 1 < len(sys.argv):
            return sys.argv[idx + 1]
    return default


def _print_diagnostics(caps):
    print("")
    print("  Checking services...")
    print(f"    Gemini LLM:      {'OK' if caps.completion else 'NOT CONFIGURED'}")
    print(f"    ElevenLabs TTS:  {'OK' if caps.synthesis else 'NOT CONFIGURED'}")
    print(f"    Audio output:    {'OK' if caps.audio_output else 'NOT AVAILABLE'}")
    print(f"    Speech input:    {'OK' if caps.speech_recognition else 'NOT AVAILABLE (typed input only)'}")
    print(f"    Record store:    {'OK' if os.getenv('SUPABASE_URL') else 'NOT CONFIGURED'}")
    print("")


def run_server(caps):
    from .website.server import create_app

    app = create_app(store=SupabaseRecordStore.from_env(), capabilities=caps)
    port = int(os.getenv("PORT", 5000))
    print(f"  Rambl API on http://localhost:{port}\n")
    app.run(host="0.0.0.0", port=port, debug=False)


def run_terminal_chat(caps):
    gateway = CompletionGateway()
    speaker = SpeakerModule()
    session = ChatSession(
        gateway,
        speaker=speaker,
        preset_id=_arg_value("--preset"),
        capabilities=caps,
    )
    transcriber = Transcriber(SpeechRecognitionSource(), supported=caps.speech_recognition)
    if "--voice" in sys.argv and not session.set_mode(ChatMode.VOICE):
        print("[SYSTEM] Speech input unavailable; falling back to typing.")

    user_id = os.getenv("RAMBL_USER_ID")
    store = SupabaseRecordStore.from_env()
    themes = ThemeStore(remote=store, user_id=user_id, config=ThemeConfig())
    themes.load()

    names = ", ".join(p.id for p in list_presets())
    print(f"[SYSTEM] Mode: {session.preset.name} (available: {names})")
    print("[SYSTEM] What's on your mind? Type /done to finish.\n")

    while True:
        if session.mode == ChatMode.VOICE:
            input("[MIC] Press Enter to start talking...")
            transcriber.start()
            command = input("[MIC] Listening. Press Enter to send (or type /done): ").strip()
            if command in DONE_COMMANDS:
                transcriber.stop()
                break
            reply = session.submit_transcript(transcriber)
        else:
            try:
                text = input("[YOU] ").strip()
            except EOFError:
                break
            if text in DONE_COMMANDS:
                break
            reply = session.submit(text)
        if reply is not None:
            print(f"[RAMBL] {reply.content}\n")

    if not len(session.thread):
        return

    print("\n[SYSTEM] Reflecting on your session...")
    analysis = session.finish(SessionAnalyzer(gateway), themes.colors.accent, store=store, user_id=user_id)
    print(f"\n{'=' * 50}")
    print("SESSION COMPLETE")
    print(f"{'=' * 50}")
    print(f"Mood map: {', '.join(analysis.words) or 'Share more to see your mood patterns'}")
    print(f"Mood score: {analysis.intensity_score}")
    print(f"\n{analysis.summary}")
    print(f"\nSession duration: {analysis.exchange_count} exchanges")
    print(f"{'=' * 50}\n")


def main():
    caps = detect_capabilities()
    _print_diagnostics(caps)
    try:
        if "--cli" in sys.argv:
            run_terminal_chat(caps)
        else:
            run_server(caps)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Fatal error: {e}")
        traceback.print_exc()


if __name__ == "__main__":
    main()
