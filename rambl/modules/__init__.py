# modules/__init__.py
from .voices import VoiceConfig, get_voice_config, get_voice_id
from .presets import Preset, resolve_preset, get_default_preset, list_presets
from .llm_client import CompletionGateway, CompletionService, GeminiCompletionService, LLMResponse
from .speaker import SpeakerModule, SynthesisService, ElevenLabsSynthesizer, AudioPlayer
from .microphone import Transcriber, TranscriptionSource, TranscriptionFragment, SpeechRecognitionSource
from .mood import MoodEstimator, MoodReading
from .analytics import SessionAnalyzer, SessionAnalysis, Keyword, extract_keywords
from .record_store import RecordStore, SupabaseRecordStore, ConversationRecord
from .dashboard import DashboardService, MoodSample, aggregate_mood
from .theme import ThemeStore, ThemeColors, THEME_COLORS
from .capabilities import Capabilities, detect_capabilities
