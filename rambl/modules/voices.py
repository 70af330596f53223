"""ElevenLabs voice catalog, one voice per personality preset."""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class VoiceConfig:
    id: str
    name: str
    voice_id: str
    description: str


VOICE_CONFIGS: Dict[str, VoiceConfig] = {
    "soothing": VoiceConfig(
        id="soothing",
        name="Lily",
        voice_id="pFZP5JQG7iQjIQuC4Bku",
        description="Warm, gentle voice for calming conversations",
    ),
    "Rational": VoiceConfig(
        id="Rational",
        name="Charlie",
        voice_id="IKne3meq5aSn9XLyUdCD",
        description="Clear, professional voice for logical discussions",
    ),
    "Bubbly": VoiceConfig(
        id="Bubbly",
        name="Gigi",
        voice_id="jBpfuIE2acCO8z3wKNLl",
        description="Energetic, upbeat voice for motivational chats",
    ),
    "Ragebait": VoiceConfig(
        id="Ragebait",
        name="Callum",
        voice_id="N2lVS1w4EtoT3dr4eOWO",
        description="Dramatic, intense voice for provocative exchanges",
    ),
}

DEFAULT_VOICE_KEY = "soothing"


def get_voice_config(preset_id: Optional[str] = None) -> VoiceConfig:
    return VOICE_CONFIGS.get(preset_id or "", VOICE_CONFIGS[DEFAULT_VOICE_KEY])


def get_voice_id(preset_id: Optional[str] = None) -> str:
    return get_voice_config(preset_id).voice_id
