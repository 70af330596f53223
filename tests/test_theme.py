import json
import os
import shutil
import tempfile
import threading
import unittest
from pathlib import Path

from rambl.modules.theme import THEME_COLORS, ThemeStore


class FakeRemote:
    def __init__(self, theme=None, error=None, gate=None):
        self.theme = theme
        self.error = error
        self.gate = gate

    def theme_preference(self, user_id):
        if self.gate:
            self.gate.wait(timeout=2)
        if self.error:
            raise self.error
        return self.theme


class TestThemeStore(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.cache = Path(self.tmpdir) / "theme.json"

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def _write_cache(self, theme):
        with open(self.cache, "w") as f:
            json.dump({"theme": theme}, f)

    def test_default_without_cache(self):
        store = ThemeStore(cache_path=self.cache)
        self.assertEqual(store.load(), "classic")
        self.assertEqual(store.colors, THEME_COLORS["classic"])

    def test_cache_applied_synchronously(self):
        self._write_cache("lemon")
        gate = threading.Event()
        store = ThemeStore(cache_path=self.cache, remote=FakeRemote("mint", gate=gate), user_id="u1")
        self.assertEqual(store.load(), "lemon")
        gate.set()
        store.wait_for_remote()
        self.assertEqual(store.theme, "mint")

    def test_remote_overwrite_updates_cache(self):
        store = ThemeStore(cache_path=self.cache, remote=FakeRemote("soft-blue"), user_id="u1")
        store.load()
        store.wait_for_remote()
        with open(self.cache) as f:
            self.assertEqual(json.load(f), {"theme": "soft-blue"})

    def test_remote_failure_keeps_local(self):
        self._write_cache("mint")
        store = ThemeStore(cache_path=self.cache, remote=FakeRemote(error=ConnectionError("x")), user_id="u1")
        store.load()
        store.wait_for_remote()
        self.assertEqual(store.theme, "mint")

    def test_unknown_remote_theme_ignored(self):
        store = ThemeStore(cache_path=self.cache, remote=FakeRemote("neon"), user_id="u1")
        store.load()
        store.wait_for_remote()
        self.assertEqual(store.theme, "classic")

    def test_corrupt_cache_ignored(self):
        with open(self.cache, "w") as f:
            f.write("{not json")
        self.assertEqual(ThemeStore(cache_path=self.cache).load(), "classic")

    def test_set_theme(self):
        store = ThemeStore(cache_path=self.cache)
        changes = []
        store.subscribe(lambda name, colors: changes.append(name))
        store.set_theme("mint")
        store.set_theme("mint")
        self.assertEqual(changes, ["mint"])
        self.assertTrue(os.path.exists(self.cache))
        self.assertEqual(store.css_variables()["--theme-accent"], "#4FD18B")

    def test_set_unknown_theme(self):
        with self.assertRaises(ValueError):
            ThemeStore(cache_path=self.cache).set_theme("neon")


if __name__ == '__main__':
    unittest.main()
