"""Flask server for the Rambl journaling app.

Serves the JSON API the frontend talks to:
  - Chat completion   (POST /api/chat)
  - Speech synthesis  (POST /api/elevenlabs)
  - Session overview  (POST /api/analyze)
  - Dashboard         (GET  /api/dashboard)
  - Catalogs          (GET  /api/presets, /api/voices, /api/themes)

Run:
  rambl                  # or: python -m rambl.main
"""

import time

from flask import Flask, request, jsonify, Response

from ..core.conversation import Turn, ROLES
from ..modules.analytics import SessionAnalyzer
from ..modules.capabilities import Capabilities
from ..modules.dashboard import DashboardService
from ..modules.llm_client import CompletionGateway
from ..modules.presets import list_presets
from ..modules.speaker import ElevenLabsSynthesizer, clean_for_speech
from ..modules.theme import THEME_COLORS
from ..modules.voices import VOICE_CONFIGS, get_voice_id


def create_app(
    gateway: CompletionGateway = None,
    synthesizer=None,
    analyzer: SessionAnalyzer = None,
    store=None,
    capabilities: Capabilities = None,
) -> Flask:
    app = Flask(__name__)

    gateway = gateway or CompletionGateway()
    if synthesizer is None:
        synthesizer = ElevenLabsSynthesizer.from_env()
    analyzer = analyzer or SessionAnalyzer(gateway)
    capabilities = capabilities or Capabilities(
        completion=gateway.available, synthesis=synthesizer is not None,
    )

    # ── Health / catalogs ─────────────────────────────────────
    @app.route("/health")
    def health():
        return jsonify(status="ok")

    @app.route("/api/presets")
    def api_presets():
        return jsonify([p.to_dict() for p in list_presets()])

    @app.route("/api/voices")
    def api_voices():
        return jsonify({
            key: {"id": v.id, "name": v.name, "voiceId": v.voice_id, "description": v.description}
            for key, v in VOICE_CONFIGS.items()
        })

    @app.route("/api/themes")
    def api_themes():
        return jsonify({name: colors.to_dict() for name, colors in THEME_COLORS.items()})

    @app.route("/api/capabilities")
    def api_capabilities():
        return jsonify(capabilities.to_dict())

    # ── Chat ──────────────────────────────────────────────────
    @app.route("/api/chat", methods=["POST"])
    def api_chat():
        t_start = time.time()
        d = request.get_json(force=True, silent=True) or {}
        msg = (d.get("userMessage") or "").strip()
        hist = d.get("history") or []
        if not msg:
            return jsonify(error="No message"), 400

        result = gateway.request(msg, hist, d.get("presetId"))
        elapsed = int((time.time() - t_start) * 1000)
        if not result.success:
            app.logger.warning(f"[CHAT] Failed ({elapsed}ms): {result.error_message}")
            return jsonify(error=f"Failed to Generate {result.error_message}"), 500
        return jsonify(text=result.text)

    # ── Speech synthesis ──────────────────────────────────────
    @app.route("/api/elevenlabs", methods=["POST"])
    def api_elevenlabs():
        d = request.get_json(force=True, silent=True) or {}
        text = clean_for_speech(d.get("text") or "")
        voice_id = d.get("voiceId") or get_voice_id(d.get("presetId"))
        if not text:
            return jsonify(error="No text provided"), 400
        if synthesizer is None:
            return jsonify(error="Speech synthesis not configured"), 503

        try:
            audio = synthesizer.synthesize(text, voice_id)
        except Exception as e:
            app.logger.warning(f"[TTS] {synthesizer.name} error: {e}")
            return jsonify(error="Speech synthesis failed"), 502
        return Response(audio, mimetype="audio/mpeg")

    # ── Session overview ──────────────────────────────────────
    @app.route("/api/analyze", methods=["POST"])
    def api_analyze():
        d = request.get_json(force=True, silent=True) or {}
        theme = d.get("theme") or "classic"
        colors = THEME_COLORS.get(theme, THEME_COLORS["classic"])
        turns = [
            Turn(role=m["role"], content=m.get("content") or "")
            for m in d.get("messages") or []
            if isinstance(m, dict) and m.get("role") in ROLES
        ]
        analysis = analyzer.analyze(turns, colors.accent)
        return jsonify(analysis.to_dict())

    # ── Dashboard ─────────────────────────────────────────────
    @app.route("/api/dashboard")
    def api_dashboard():
        if store is None:
            return jsonify(error="Record store not configured"), 503
        user_id = request.args.get("user_id", "").strip()
        if not user_id:
            return jsonify(error="user_id is required"), 400
        try:
            view = DashboardService(store).build(user_id)
        except Exception as e:
            app.logger.warning(f"[DASHBOARD] Load failed: {e}")
            return jsonify(error="Could not load dashboard"), 502
        return jsonify(view)

    return app
