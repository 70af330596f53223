"""UI color theme with a local cache and a remote preference record.

``ThemeStore`` is the one place the active theme lives; pass it to whatever
renders colors. Load order: the local JSON cache is read synchronously, then
the remote ``background_colour`` is fetched on a background thread and, if
present, overwrites the local choice when it arrives.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional
import json
import logging
import threading

from ..config import ThemeConfig

logger = logging.getLogger("rambl.theme")


@dataclass(frozen=True)
class ThemeColors:
    bg: str
    accent: str
    accent_dark: str
    accent_light: str

    def to_dict(self) -> Dict:
        return {
            "bg": self.bg,
            "accent": self.accent,
            "accentDark": self.accent_dark,
            "accentLight": self.accent_light,
        }


THEME_COLORS: Dict[str, ThemeColors] = {
    "classic": ThemeColors(bg="#FFF9F5", accent="#FF8FA3", accent_dark="#E85D75", accent_light="#FFAEBC"),
    "soft-blue": ThemeColors(bg="#F0F7FF", accent="#5BB5D5", accent_dark="#3A9BC5", accent_light="#7EC8E3"),
    "lemon": ThemeColors(bg="#FFFEF0", accent="#F5C842", accent_dark="#D4A82E", accent_light="#FBE7C6"),
    "mint": ThemeColors(bg="#F0FFF4", accent="#4FD18B", accent_dark="#2FB36E", accent_light="#B4F8C8"),
}


class ThemeStore:
    def __init__(
        self,
        cache_path: Optional[Path] = None,
        remote=None,
        user_id: Optional[str] = None,
        config: ThemeConfig = None,
    ):
        self.config = config or ThemeConfig()
        self.cache_path = Path(cache_path) if cache_path else Path(self.config.cache_path)
        self.remote = remote
        self.user_id = user_id
        self._theme = self.config.default_theme
        self._lock = threading.Lock()
        self._listeners: List[Callable[[str, ThemeColors], None]] = []
        self._remote_thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def _read_cache(self) -> Optional[str]:
        try:
            with open(self.cache_path, "r", encoding="utf-8") as f:
                return json.load(f).get("theme")
        except (OSError, ValueError, AttributeError):
            return None

    def _write_cache(self, theme: str) -> None:
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_path, "w", encoding="utf-8") as f:
                json.dump({"theme": theme}, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not write theme cache: {e}")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def theme(self) -> str:
        return self._theme

    @property
    def colors(self) -> ThemeColors:
        return THEME_COLORS[self._theme]

    def css_variables(self) -> Dict[str, str]:
        c = self.colors
        return {
            "--theme-bg": c.bg,
            "--theme-accent": c.accent,
            "--theme-accent-dark": c.accent_dark,
            "--theme-accent-light": c.accent_light,
        }

    def subscribe(self, callback: Callable[[str, ThemeColors], None]) -> None:
        self._listeners.append(callback)

    def _apply(self, theme: str) -> None:
        with self._lock:
            changed = theme != self._theme
            self._theme = theme
        if changed:
            for callback in list(self._listeners):
                try:
                    callback(theme, THEME_COLORS[theme])
                except Exception as e:
                    logger.warning(f"Theme listener failed: {e}")

    def set_theme(self, theme: str) -> None:
        if theme not in THEME_COLORS:
            raise ValueError(f"Unknown theme: {theme!r}")
        self._apply(theme)
        self._write_cache(theme)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> str:
        """Apply the cached theme now and start the remote fetch if possible."""
        cached = self._read_cache()
        if cached in THEME_COLORS:
            self._apply(cached)

        if self.remote is not None and self.user_id:
            self._remote_thread = threading.Thread(target=self._load_remote, daemon=True)
            self._remote_thread.start()
        return self._theme

    def wait_for_remote(self, timeout: Optional[float] = None) -> None:
        if self._remote_thread:
            self._remote_thread.join(timeout=timeout if timeout is not None else self.config.remote_timeout)

    def _load_remote(self) -> None:
        try:
            remote_theme = self.remote.theme_preference(self.user_id)
        except Exception as e:
            logger.warning(f"Remote theme lookup failed: {e}")
            return
        if remote_theme in THEME_COLORS:
            self._apply(remote_theme)
            self._write_cache(remote_theme)
        elif remote_theme:
            logger.warning(f"Ignoring unknown remote theme: {remote_theme!r}")
