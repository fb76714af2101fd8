"""
The mutable resource pack aggregate and its fluent builder methods.

Example:
    >>> pack = ResourcePack()
    >>> pack.set_meta(15, "Ruby pack").add_model(Model(Key.of("mypack:item/ruby")))
    >>> pack.format
    15

Every ``add_*``/``set_*`` method returns the pack so calls can be chained;
getters never modify it. A pack is not thread-safe: guard it externally if
several threads touch it.
"""

from typing import Dict, Hashable, List, Optional, Sequence, Union

from respack.base import Writable
from respack.key import Key
from respack.metadata import (
    FilterMeta, FilterPattern, LanguageEntry, LanguageMeta, Metadata, MetadataPart,
    PackMeta, SodiumMeta,
)
from respack.paths import validate_path
from respack.registry import ResourceRegistry
from respack.resources import (
    BlockState, Font, Language, Model, SoundEvent, SoundFile, SoundRegistry, Text, Texture,
)
from respack.tree import FileContent


class ResourcePack:
    """In-memory resource pack: icon, metadata, typed resources and extra files."""

    def __init__(self):
        self._icon: Optional[Writable] = None
        self._metadata = Metadata()
        self._block_states: ResourceRegistry[BlockState] = ResourceRegistry("block state")
        self._fonts: ResourceRegistry[Font] = ResourceRegistry("font")
        self._font_providers: Dict[Key, List[dict]] = {}
        self._languages: ResourceRegistry[Language] = ResourceRegistry("language")
        self._models: ResourceRegistry[Model] = ResourceRegistry("model")
        self._sound_registries: ResourceRegistry[SoundRegistry] = ResourceRegistry(
            "sound registry", key_of=lambda registry: registry.namespace
        )
        self._sound_events: ResourceRegistry[SoundEvent] = ResourceRegistry("sound event")
        self._sounds: ResourceRegistry[SoundFile] = ResourceRegistry("sound")
        self._textures: ResourceRegistry[Texture] = ResourceRegistry("texture")
        self._texts: ResourceRegistry[Text] = ResourceRegistry("text")
        self._files: Dict[str, Writable] = {}

    # ----- Icon -----

    def set_icon(self, icon: Optional[FileContent]) -> "ResourcePack":
        """Set the pack icon (PNG data), or clear it with None."""
        self._icon = None if icon is None else Writable.coerce(icon)
        return self

    @property
    def icon(self) -> Optional[Writable]:
        return self._icon

    # ----- Pack metadata -----

    def set_meta(self, meta: Union[PackMeta, int], description: Optional[Union[str, dict, list]] = None) -> "ResourcePack":
        """
        Set the pack format and description.

        Accepts either a PackMeta or ``(format, description)``.
        """
        if not isinstance(meta, PackMeta):
            meta = PackMeta(meta, description or "")
        self._metadata.put(meta)
        return self

    @property
    def meta(self) -> Optional[PackMeta]:
        return self._metadata.get(PackMeta)

    @property
    def format(self) -> int:
        """Pack format, or -1 when no pack metadata is set."""
        meta = self.meta
        return -1 if meta is None else meta.format

    @property
    def description(self) -> Optional[Union[str, dict, list]]:
        """Pack description as stored: plain text or a JSON text component."""
        meta = self.meta
        return None if meta is None else meta.description

    @property
    def metadata(self) -> Metadata:
        """Every pack-level metadata part, including the pack meta itself."""
        return self._metadata

    # ----- Language registry -----

    def set_language_registry(self, meta: LanguageMeta) -> "ResourcePack":
        self._metadata.put(meta)
        return self

    @property
    def language_registry(self) -> Optional[LanguageMeta]:
        return self._metadata.get(LanguageMeta)

    def add_language_entry(self, code: str, entry: LanguageEntry) -> "ResourcePack":
        current = self.language_registry
        languages = dict(current.languages) if current is not None else {}
        languages[code] = entry
        return self.set_language_registry(LanguageMeta(languages))

    def language_entry(self, code: str) -> Optional[LanguageEntry]:
        registry = self.language_registry
        return None if registry is None else registry.languages.get(code)

    def language_entries(self) -> List[LanguageEntry]:
        registry = self.language_registry
        return [] if registry is None else list(registry.languages.values())

    # ----- Filter -----

    def set_filter(self, filter_meta: Union[FilterMeta, Sequence[FilterPattern]]) -> "ResourcePack":
        if not isinstance(filter_meta, FilterMeta):
            filter_meta = FilterMeta(tuple(filter_meta))
        self._metadata.put(filter_meta)
        return self

    @property
    def filter(self) -> Optional[FilterMeta]:
        return self._metadata.get(FilterMeta)

    # ----- Sodium -----

    def set_sodium(self, meta: SodiumMeta) -> "ResourcePack":
        self._metadata.put(meta)
        return self

    @property
    def sodium(self) -> Optional[SodiumMeta]:
        return self._metadata.get(SodiumMeta)

    # ----- Custom metadata parts -----

    def add_meta_part(self, part: MetadataPart) -> "ResourcePack":
        """Attach any metadata part; replaces a part with the same tag."""
        self._metadata.put(part)
        return self

    def meta_part(self, tag: Hashable) -> Optional[MetadataPart]:
        return self._metadata.get(tag)

    def meta_parts(self) -> List[MetadataPart]:
        return self._metadata.all()

    # ----- Block states -----

    def add_block_state(self, state: BlockState, replace: bool = True) -> "ResourcePack":
        self._block_states.put(state, replace)
        return self

    def block_state(self, key: Key) -> Optional[BlockState]:
        return self._block_states.get(key)

    def block_states(self) -> List[BlockState]:
        return self._block_states.all()

    # ----- Fonts -----

    def add_font(self, font: Font, replace: bool = True) -> "ResourcePack":
        self._fonts.put(font, replace)
        return self

    def add_font_provider(self, key: Key, provider: dict) -> "ResourcePack":
        """Append a provider to the font ``key``, creating the font if needed."""
        if not isinstance(provider, dict):
            raise TypeError(f"Font provider must be a dict, got {type(provider).__name__}")
        self._font_providers.setdefault(key, []).append(provider)
        return self

    def font(self, key: Key) -> Optional[Font]:
        font = self._fonts.get(key)
        extra = self._font_providers.get(key)
        if not extra:
            return font
        font = font or Font(key)
        return Font(key, font.providers + tuple(extra))

    def fonts(self) -> List[Font]:
        """Every font, with individually added providers merged in."""
        keys = sorted(set(self._fonts.keys()) | set(self._font_providers))
        return [self.font(key) for key in keys]

    # ----- Languages -----

    def add_language(self, language: Language, replace: bool = True) -> "ResourcePack":
        self._languages.put(language, replace)
        return self

    def language(self, key: Key) -> Optional[Language]:
        return self._languages.get(key)

    def languages(self) -> List[Language]:
        return self._languages.all()

    # ----- Models -----

    def add_model(self, model: Model, replace: bool = True) -> "ResourcePack":
        self._models.put(model, replace)
        return self

    def model(self, key: Key) -> Optional[Model]:
        return self._models.get(key)

    def models(self) -> List[Model]:
        return self._models.all()

    # ----- Sounds -----

    def add_sound_registry(self, registry: SoundRegistry, replace: bool = True) -> "ResourcePack":
        self._sound_registries.put(registry, replace)
        return self

    def add_sound_event(self, event: SoundEvent, replace: bool = True) -> "ResourcePack":
        """Add one sound event; it is merged into its namespace's sounds.json."""
        self._sound_events.put(event, replace)
        return self

    def sound_registry(self, namespace: str) -> Optional[SoundRegistry]:
        """The namespace's registry, with individually added events merged in."""
        registry = self._sound_registries.get(namespace)
        events = [event for event in self._sound_events if event.key.namespace == namespace]
        if not events:
            return registry
        return (registry or SoundRegistry(namespace)).merged(events)

    def sound_registries(self) -> List[SoundRegistry]:
        namespaces = set(self._sound_registries.keys())
        namespaces.update(event.key.namespace for event in self._sound_events)
        return [self.sound_registry(namespace) for namespace in sorted(namespaces)]

    def sound_event(self, key: Key) -> Optional[SoundEvent]:
        event = self._sound_events.get(key)
        if event is not None:
            return event
        registry = self._sound_registries.get(key.namespace)
        return None if registry is None else registry.event(key.value)

    def add_sound(self, sound: SoundFile, replace: bool = True) -> "ResourcePack":
        self._sounds.put(sound, replace)
        return self

    def sound(self, key: Key) -> Optional[SoundFile]:
        return self._sounds.get(key)

    def sounds(self) -> List[SoundFile]:
        return self._sounds.all()

    # ----- Textures -----

    def add_texture(self, texture: Texture, replace: bool = True) -> "ResourcePack":
        self._textures.put(texture, replace)
        return self

    def texture(self, key: Key) -> Optional[Texture]:
        return self._textures.get(key)

    def textures(self) -> List[Texture]:
        return self._textures.all()

    # ----- Texts -----

    def add_text(self, text: Text, replace: bool = True) -> "ResourcePack":
        self._texts.put(text, replace)
        return self

    def text(self, key: Key) -> Optional[Text]:
        return self._texts.get(key)

    def texts(self) -> List[Text]:
        return self._texts.all()

    # ----- Extra files -----

    def add_file(self, path: str, data: FileContent) -> "ResourcePack":
        """
        Add a file that no typed resource covers.

        Raises:
            InvalidPathError: If the path is not a well-formed relative path
        """
        self._files[validate_path(path)] = Writable.coerce(data)
        return self

    def file(self, path: str) -> Optional[Writable]:
        return self._files.get(path)

    def extra_files(self) -> Dict[str, Writable]:
        return dict(self._files)

    # ----- Equality -----

    def _state(self):
        return (
            self._icon,
            self._metadata,
            self.block_states(),
            self.fonts(),
            self.languages(),
            self.models(),
            self.sound_registries(),
            self.sounds(),
            self.textures(),
            self.texts(),
            self._files,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourcePack):
            return NotImplemented
        return self._state() == other._state()

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"ResourcePack(format={self.format}, block_states={len(self._block_states)}, "
            f"fonts={len(self.fonts())}, languages={len(self._languages)}, "
            f"models={len(self._models)}, sounds={len(self._sounds)}, "
            f"textures={len(self._textures)}, texts={len(self._texts)}, "
            f"files={len(self._files)})"
        )
