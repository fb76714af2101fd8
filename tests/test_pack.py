"""Tests for pack.py and registry.py - the pack aggregate and its registries."""

import pytest

from respack.base import Writable
from respack.errors import DuplicateResourceError, InvalidPathError
from respack.key import Key
from respack.metadata import (
    FilterMeta, FilterPattern, LanguageEntry, LanguageMeta, PackMeta, RawMetaPart, SodiumMeta,
)
from respack.pack import ResourcePack
from respack.registry import ResourceRegistry
from respack.resources import (
    Font, Language, Model, SoundEntry, SoundEvent, SoundRegistry, Text, Texture,
)


def ruby_model(**kwargs):
    return Model(Key.of("mypack:item/ruby"), **kwargs)


class TestResourceRegistry:
    """Test the keyed per-kind collection."""

    def test_put_get_remove(self):
        """Test basic keyed access."""
        models = ResourceRegistry("model")
        model = ruby_model()
        assert models.put(model) is model
        assert models.get(Key.of("mypack:item/ruby")) is model
        assert Key.of("mypack:item/ruby") in models
        assert models.remove(Key.of("mypack:item/ruby")) is model
        assert len(models) == 0
        assert models.remove(Key.of("mypack:item/ruby")) is None

    def test_replace_by_default(self):
        """Test a second put with the same key replaces the first."""
        models = ResourceRegistry("model")
        models.put(ruby_model())
        models.put(ruby_model(parent=Key.of("item/generated")))
        assert len(models) == 1
        assert models.get(Key.of("mypack:item/ruby")).parent == Key.of("item/generated")

    def test_insert_or_fail(self):
        """Test replace=False rejects an existing key."""
        models = ResourceRegistry("model")
        models.put(ruby_model())
        with pytest.raises(DuplicateResourceError) as exc_info:
            models.put(ruby_model(), replace=False)
        assert exc_info.value.kind == "model"
        assert exc_info.value.key == Key.of("mypack:item/ruby")

    def test_sorted_iteration(self):
        """Test all(), keys() and iteration are ordered by key."""
        models = ResourceRegistry("model")
        for name in ["b:x", "a:z", "a:b"]:
            models.put(Model(Key.of(name)))
        expected = [Key.of("a:b"), Key.of("a:z"), Key.of("b:x")]
        assert models.keys() == expected
        assert [m.key for m in models.all()] == expected
        assert [m.key for m in models] == expected

    def test_custom_key_function(self):
        """Test registries keyed by something other than .key."""
        registries = ResourceRegistry("sound registry", key_of=lambda r: r.namespace)
        registries.put(SoundRegistry("ns"))
        assert "ns" in registries


class TestPackMetadata:
    """Test pack-level metadata accessors."""

    def test_format_unset(self):
        """Test format is -1 and description None without pack metadata."""
        pack = ResourcePack()
        assert pack.format == -1
        assert pack.description is None
        assert pack.meta is None
        assert pack.metadata.is_empty()

    def test_set_meta(self):
        """Test both set_meta spellings."""
        pack = ResourcePack().set_meta(15, "Ruby pack")
        assert pack.format == 15
        assert pack.description == "Ruby pack"
        pack.set_meta(PackMeta(18, "New", (15, 18)))
        assert pack.meta == PackMeta(18, "New", (15, 18))
        assert len(pack.metadata) == 1

    def test_language_entries(self):
        """Test language registry entries accumulate."""
        pack = ResourcePack()
        pack.add_language_entry("xx_yy", LanguageEntry("Lang", "Region"))
        pack.add_language_entry("zz_zz", LanguageEntry("Other", "Place", bidirectional=True))
        assert pack.language_entry("xx_yy") == LanguageEntry("Lang", "Region")
        assert len(pack.language_entries()) == 2
        assert set(pack.language_registry.languages) == {"xx_yy", "zz_zz"}
        pack.set_language_registry(LanguageMeta({}))
        assert pack.language_entry("xx_yy") is None

    def test_filter_and_sodium(self):
        """Test the filter and sodium extension parts."""
        pack = ResourcePack()
        pack.set_filter([FilterPattern(namespace="minecraft", path="textures/.*")])
        pack.set_sodium(SodiumMeta(("rendertype_solid",)))
        assert pack.filter == FilterMeta((FilterPattern("minecraft", "textures/.*"),))
        assert pack.sodium.ignored_shaders == ("rendertype_solid",)

    def test_custom_meta_parts(self):
        """Test arbitrary parts are stored by tag."""
        pack = ResourcePack().set_meta(15, "x")
        pack.add_meta_part(RawMetaPart("overlays", {"entries": []}))
        assert pack.meta_part(("raw", "overlays")).value == {"entries": []}
        assert len(pack.meta_parts()) == 2


class TestPackResources:
    """Test typed resource registration through the pack."""

    def test_chaining(self):
        """Test every add_* returns the pack."""
        pack = (
            ResourcePack()
            .set_icon(b"\x89PNG")
            .set_meta(15, "x")
            .add_model(ruby_model())
            .add_language(Language(Key.of("mypack:en_us"), {"item.ruby": "Ruby"}))
            .add_texture(Texture(Key.of("mypack:item/ruby"), Writable.from_bytes(b"png")))
            .add_text(Text(Key.of("splashes"), "hello"))
            .add_file("credits.txt", "thanks")
        )
        assert isinstance(pack, ResourcePack)
        assert pack.icon.to_bytes() == b"\x89PNG"
        assert pack.model(Key.of("mypack:item/ruby")) == ruby_model()
        assert pack.text(Key.of("splashes")).content == "hello"
        assert pack.file("credits.txt").to_string() == "thanks"

    def test_same_key_replaces(self):
        """Test adding an equal resource twice is idempotent."""
        pack = ResourcePack().add_model(ruby_model()).add_model(ruby_model())
        assert pack.models() == [ruby_model()]

    def test_different_keys_coexist(self):
        """Test distinct keys are both kept, sorted."""
        pack = ResourcePack()
        pack.add_model(Model(Key.of("mypack:item/sapphire"))).add_model(ruby_model())
        assert [m.key.value for m in pack.models()] == ["item/ruby", "item/sapphire"]

    def test_insert_or_fail(self):
        """Test replace=False through the pack."""
        pack = ResourcePack().add_model(ruby_model())
        with pytest.raises(DuplicateResourceError):
            pack.add_model(ruby_model(), replace=False)

    def test_font_providers_merge(self):
        """Test individually added providers are appended to the font."""
        key = Key.of("mypack:icons")
        pack = ResourcePack().add_font(Font(key, [{"type": "space"}]))
        pack.add_font_provider(key, {"type": "bitmap", "file": "mypack:font/a.png"})
        pack.add_font_provider(Key.of("mypack:other"), {"type": "space"})
        assert [p["type"] for p in pack.font(key).providers] == ["space", "bitmap"]
        assert [f.key for f in pack.fonts()] == [key, Key.of("mypack:other")]
        with pytest.raises(TypeError):
            pack.add_font_provider(key, "bitmap")

    def test_sound_events_merge(self):
        """Test sound events join their namespace's registry."""
        pack = ResourcePack()
        pack.add_sound_registry(SoundRegistry("ns", (SoundEvent(Key.of("ns:a")),)))
        pack.add_sound_event(SoundEvent(Key.of("ns:b"), (SoundEntry(Key.of("ns:b")),)))
        pack.add_sound_event(SoundEvent(Key.of("other:c")))
        assert [e.key.value for e in pack.sound_registry("ns").events] == ["a", "b"]
        assert [r.namespace for r in pack.sound_registries()] == ["ns", "other"]
        assert pack.sound_event(Key.of("ns:a")) == SoundEvent(Key.of("ns:a"))
        assert pack.sound_event(Key.of("ns:b")).sounds[0].key == Key.of("ns:b")
        assert pack.sound_event(Key.of("ns:missing")) is None

    def test_invalid_extra_file_path(self):
        """Test add_file rejects escaping paths."""
        with pytest.raises(InvalidPathError):
            ResourcePack().add_file("../outside.txt", b"")

    def test_extra_files_copy(self):
        """Test extra_files() does not expose internal state."""
        pack = ResourcePack().add_file("a.txt", "a")
        pack.extra_files().clear()
        assert pack.file("a.txt") is not None


class TestPackEquality:
    """Test structural pack equality."""

    def build(self, order):
        pack = ResourcePack().set_meta(15, "x")
        models = {
            "ruby": ruby_model(),
            "sapphire": Model(Key.of("mypack:item/sapphire")),
        }
        for name in order:
            pack.add_model(models[name])
        return pack

    def test_insertion_order_irrelevant(self):
        """Test packs with the same content compare equal."""
        assert self.build(["ruby", "sapphire"]) == self.build(["sapphire", "ruby"])

    def test_difference_detected(self):
        """Test a changed resource breaks equality."""
        assert self.build(["ruby"]) != self.build(["ruby", "sapphire"])
        assert self.build(["ruby"]) != self.build(["ruby"]).set_meta(16, "x")

    def test_reconciled_views_compared(self):
        """Test a provider added separately equals one inside the font."""
        key = Key.of("mypack:icons")
        a = ResourcePack().add_font(Font(key, [{"type": "space"}]))
        b = ResourcePack().add_font_provider(key, {"type": "space"})
        assert a == b

    def test_unhashable(self):
        """Test packs are mutable and so not hashable."""
        with pytest.raises(TypeError):
            hash(ResourcePack())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
