"""
Unit tests for the library registry.
"""

from noggin.storage.registry import LibraryRegistry
from noggin.storage.settings_store import SettingsStore


class TestRegister:
    """Tests for registering library roots."""

    def test_register_records_path_and_slug(self, registry):
        assert registry.register("/home/me/Rust Notes", "rust") is True

        assert registry.library_paths() == ["/home/me/Rust Notes"]
        assert registry.resolve_slug("rust") == "/home/me/Rust Notes"
        assert registry.exists("/home/me/Rust Notes/")

    def test_register_twice_is_noop(self, registry):
        registry.register("/libs/rust", "rust")
        assert registry.register("/libs/rust/", "other") is False

        assert registry.library_paths() == ["/libs/rust"]
        assert registry.resolve_slug("other") is None

    def test_default_slug_from_directory_name(self, registry):
        registry.register("/libs/Rust Notes")
        assert registry.resolve_slug("rust-notes") == "/libs/Rust Notes"

    def test_keeps_registration_order(self, registry):
        for name in ["b", "a", "c"]:
            registry.register(f"/libs/{name}", name)
        assert registry.library_paths() == ["/libs/b", "/libs/a", "/libs/c"]

    def test_state_is_persisted(self, settings_store):
        LibraryRegistry(settings_store).register("/libs/go", "go")

        reloaded = LibraryRegistry(SettingsStore(settings_store.path).load())
        assert reloaded.resolve_slug("go") == "/libs/go"


class TestUnregister:
    """Tests for unregistering library roots."""

    def test_windows_separators_match(self, registry):
        registry.register("C:\\Study\\Rust", "rust")

        assert registry.unregister("c:/study/rust") is True

        assert registry.library_paths() == []
        assert registry.slug_index() == {}

    def test_removes_every_slug_for_path(self, registry, settings_store):
        registry.register("/libs/rust", "rust")
        index = registry.slug_index()
        index["rust-old"] = "/libs/rust"
        settings_store.set("libraryIndex", index)

        registry.unregister("/libs/rust")

        assert registry.slug_index() == {}

    def test_unknown_path(self, registry):
        registry.register("/libs/rust", "rust")

        assert registry.unregister("/libs/go") is False
        assert registry.library_paths() == ["/libs/rust"]
