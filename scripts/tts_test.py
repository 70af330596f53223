"""Speaker smoke-test: synthesizes one line per preset voice and plays it.

Run with: `python scripts/tts_test.py [preset]` with ELEVENLABS_API_KEY set.
Prints `TTS_OK` on success or `TTS_ERROR` + details on failure.
"""
import sys
import time

from rambl.modules.presets import list_presets, get_preset_by_id
from rambl.modules.speaker import AudioPlayer, SpeakerModule


def main():
    player = AudioPlayer()
    if not player.is_available():
        print('TTS_ERROR no audio output (pygame mixer failed to start)')
        return

    speaker = SpeakerModule(player=player)
    if not speaker.is_output_available():
        print('TTS_ERROR ELEVENLABS_API_KEY is not set')
        return

    wanted = get_preset_by_id(sys.argv[1]) if len(sys.argv) > 1 else None
    presets = [wanted] if wanted else list_presets()
    for preset in presets:
        print(f'Speaking as {preset.name}...')
        if not speaker.speak(f'Hi, this is the {preset.name} voice. How are you feeling today?', preset.voice_id):
            print('TTS_ERROR', preset.id)
            return
        while player.is_playing():
            time.sleep(0.1)
    print('TTS_OK')


if __name__ == '__main__':
    main()
