"""Tests for metadata.py - metadata parts, collections and the part registry."""

from dataclasses import dataclass
from typing import Any, Tuple

import pytest

from respack.errors import MalformedDataError, MetadataConflictError, TypeMismatchError
from respack.metadata import (
    AnimationFrame, AnimationMeta, FilterMeta, FilterPattern, LanguageEntry, LanguageMeta,
    Metadata, MetadataPart, PackMeta, RawMetaPart, SodiumMeta, TextureMeta, VillagerMeta,
    default_registry, read_metadata, write_metadata,
)


@dataclass(frozen=True)
class OverlayMeta(MetadataPart):
    """A third-party part the core knows nothing about."""
    PROPERTY = "overlays"

    directories: Tuple[str, ...] = ()

    def to_json(self) -> Any:
        return {"entries": [{"directory": d} for d in self.directories]}

    @classmethod
    def from_json(cls, node: Any) -> "OverlayMeta":
        return cls(tuple(entry["directory"] for entry in node["entries"]))


class TestPackMeta:
    """Test the pack format/description part."""

    def test_to_json(self):
        """Test the written property layout."""
        assert PackMeta(15, "My pack").to_json() == {"pack_format": 15, "description": "My pack"}

    def test_supported_formats(self):
        """Test the optional format range in all accepted spellings."""
        meta = PackMeta(15, "x", (10, 20))
        assert meta.to_json()["supported_formats"] == [10, 20]
        assert PackMeta.from_json(meta.to_json()) == meta
        assert PackMeta.from_json({"pack_format": 1, "supported_formats": 5}).supported_formats == (5, 5)
        node = {"pack_format": 1, "supported_formats": {"min_inclusive": 2, "max_inclusive": 4}}
        assert PackMeta.from_json(node).supported_formats == (2, 4)

    def test_text_component_description(self):
        """Test a JSON text description is kept intact and can be flattened."""
        component = {"text": "Hello ", "color": "gold", "extra": [{"text": "world", "bold": True}]}
        meta = PackMeta.from_json({"pack_format": 15, "description": component})
        assert meta.description == component
        assert meta.plain_description() == "Hello world"
        assert meta.to_json()["description"] == component
        assert PackMeta.from_json(meta.to_json()) == meta
        assert hash(PackMeta.from_json(meta.to_json())) == hash(meta)

    def test_description_not_shared(self):
        """Test the stored component is a copy of the decoded node."""
        component = ["a", {"text": "b"}]
        meta = PackMeta.from_json({"pack_format": 15, "description": component})
        component.append("c")
        meta.to_json()["description"].append("d")
        assert meta.description == ["a", {"text": "b"}]
        assert meta.plain_description() == "ab"

    def test_bad_description(self):
        """Test a description that is no text component is rejected."""
        with pytest.raises(TypeMismatchError):
            PackMeta.from_json({"pack_format": 15, "description": 42})

    def test_missing_or_wrong_format(self):
        """Test pack_format must be present and numeric."""
        with pytest.raises(MalformedDataError):
            PackMeta.from_json({"description": "x"})
        with pytest.raises(TypeMismatchError):
            PackMeta.from_json({"pack_format": "15"})

    def test_properties(self):
        """Test the ordered named property list."""
        assert PackMeta(15, "x").properties() == [
            ("format", 15), ("description", "x"), ("supported_formats", None),
        ]


class TestExtensionParts:
    """Test filter, language, sodium and texture-level parts."""

    def test_filter_roundtrip(self):
        """Test filter patterns under the 'block' array."""
        meta = FilterMeta((FilterPattern(namespace="minecraft"), FilterPattern(path="block/.*")))
        assert meta.to_json() == {"block": [{"namespace": "minecraft"}, {"path": "block/.*"}]}
        assert FilterMeta.from_json(meta.to_json()) == meta

    def test_filter_pattern_needs_a_field(self):
        """Test an empty pattern is rejected."""
        with pytest.raises(ValueError):
            FilterPattern()
        with pytest.raises(MalformedDataError):
            FilterMeta.from_json({"block": [{}]})

    def test_language_roundtrip(self):
        """Test language entries keyed by code."""
        meta = LanguageMeta({"xx_yy": LanguageEntry("Lang", "Region", bidirectional=True)})
        assert meta.to_json() == {"xx_yy": {"name": "Lang", "region": "Region", "bidirectional": True}}
        assert LanguageMeta.from_json(meta.to_json()) == meta
        assert hash(LanguageMeta.from_json(meta.to_json())) == hash(meta)

    def test_sodium_roundtrip(self):
        """Test the ignored shader list."""
        meta = SodiumMeta(["rendertype_solid", "position_tex"])
        assert meta.ignored_shaders == ("rendertype_solid", "position_tex")
        assert meta.to_json() == {"ignored_shaders": ["rendertype_solid", "position_tex"]}
        assert SodiumMeta.from_json(meta.to_json()) == meta
        with pytest.raises(TypeMismatchError):
            SodiumMeta.from_json({"ignored_shaders": [1]})

    def test_animation_roundtrip(self):
        """Test frames with and without explicit times."""
        meta = AnimationMeta(frame_time=2, frames=(AnimationFrame(0), AnimationFrame(1, time=5)))
        assert meta.to_json() == {"frametime": 2, "frames": [0, {"index": 1, "time": 5}]}
        assert AnimationMeta.from_json(meta.to_json()) == meta

    def test_animation_defaults_omitted(self):
        """Test a default animation writes an empty object."""
        assert AnimationMeta().to_json() == {}
        assert AnimationMeta.from_json({}) == AnimationMeta()

    def test_texture_and_villager(self):
        """Test small texture-level parts."""
        assert TextureMeta.from_json({"blur": "true"}) == TextureMeta(blur=True)
        assert VillagerMeta.from_json({"hat": "full"}).hat == "full"
        with pytest.raises(MalformedDataError):
            VillagerMeta.from_json({"hat": "tall"})


class TestMetadataCollection:
    """Test the one-part-per-tag collection."""

    def test_replace_by_tag(self):
        """Test that putting a part with the same tag replaces it."""
        meta = Metadata.of(PackMeta(1, "old"))
        meta.put(PackMeta(2, "new"))
        assert len(meta) == 1
        assert meta.get(PackMeta).format == 2

    def test_distinct_tags(self):
        """Test parts of different types coexist."""
        meta = Metadata.of(PackMeta(1, "x"), SodiumMeta(), OverlayMeta(("a",)))
        assert len(meta) == 3
        assert OverlayMeta in meta
        assert meta.get(FilterMeta) is None

    def test_equality_and_hash(self):
        """Test structural, order-independent equality."""
        a = Metadata.of(PackMeta(1, "x"), SodiumMeta(("s",)))
        b = Metadata.of(SodiumMeta(("s",)), PackMeta(1, "x"))
        assert a == b
        assert hash(a) == hash(b)
        assert a != Metadata.of(PackMeta(1, "y"), SodiumMeta(("s",)))

    def test_raw_parts_by_name(self):
        """Test raw parts are tagged by their property name."""
        meta = Metadata.of(RawMetaPart("a", {"x": 1}), RawMetaPart("b", [1]))
        assert len(meta) == 2
        assert meta.get(("raw", "a")).value == {"x": 1}

    def test_rejects_non_parts(self):
        """Test only MetadataPart instances are accepted."""
        with pytest.raises(TypeError):
            Metadata().put({"pack": {}})


class TestReadWriteMetadata:
    """Test the metadata document codec."""

    def test_write_order(self):
        """Test 'pack' first, then properties by name."""
        meta = Metadata.of(SodiumMeta(), FilterMeta((FilterPattern("x"),)), PackMeta(1, "d"))
        assert list(write_metadata(meta)) == ["pack", "filter", "sodium"]

    def test_custom_part_with_registered_decoder(self):
        """Test a registered third-party part round-trips."""
        registry = default_registry().register(OverlayMeta)
        meta = Metadata.of(PackMeta(1, "d"), OverlayMeta(("a", "b")))
        assert read_metadata(write_metadata(meta), registry) == meta

    def test_unknown_part_preserved(self):
        """Test an unknown property is kept as a raw part by default."""
        node = write_metadata(Metadata.of(PackMeta(1, "d"), OverlayMeta(("a",))))
        meta = read_metadata(node)
        assert meta.get(PackMeta) == PackMeta(1, "d")
        assert meta.get(OverlayMeta) is None
        raw = meta.get(("raw", "overlays"))
        assert raw.value == {"entries": [{"directory": "a"}]}
        assert write_metadata(meta) == node

    def test_unknown_part_dropped(self):
        """Test the drop policy discards unknown properties."""
        node = {"pack": {"pack_format": 1, "description": ""}, "mystery": {"a": 1}}
        meta = read_metadata(node, unknown="drop")
        assert len(meta) == 1
        assert meta.get(PackMeta).format == 1

    def test_non_object_root(self):
        """Test the document root must be an object."""
        with pytest.raises(MalformedDataError):
            read_metadata([1, 2])

    def test_known_part_failure_propagates(self):
        """Test a malformed known part is not silently skipped."""
        with pytest.raises(TypeMismatchError):
            read_metadata({"pack": {"pack_format": True}})

    def test_shared_property_name_conflicts(self):
        """Test two parts written under one property name are refused."""
        meta = Metadata.of(PackMeta(15, "x"), RawMetaPart("pack", {"pack_format": 1}))
        with pytest.raises(MetadataConflictError) as exc_info:
            write_metadata(meta)
        assert exc_info.value.name == "pack"
        assert exc_info.value.to_dict()["code"] == "E_METADATA_CONFLICT"

    def test_conflicting_part_types(self):
        """Test distinct part types claiming the same property conflict."""

        @dataclass(frozen=True)
        class OtherOverlayMeta(OverlayMeta):
            pass

        meta = Metadata.of(OverlayMeta(("a",)), OtherOverlayMeta(("b",)))
        assert len(meta) == 2
        with pytest.raises(MetadataConflictError):
            write_metadata(meta)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
