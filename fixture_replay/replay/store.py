"""Fixture Store

Keeps recorded (key, parm) -> value correspondences in memory, writes new
recordings as fixture blobs and plays them back.

Playback is not side-effect free: each hit advances the matched slot's
cursor, so the order of calls in a test matters.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from ..utils.equality import deep_equal
from ..utils.logging import get_logger
from .config import ReplayConfig
from .descriptors import (
    NO_RESULT,
    Call,
    CallContext,
    Computed,
    ExternalReference,
    Inline,
)
from .entry import KeyEntry, ValueSlot
from .errors import PersistenceError, ReplayError, ResolutionError, ValidationError
from .naming import build_base_name, key_blob_name, parse_ordinals, value_blob_name
from .validators import BlobValidator

if TYPE_CHECKING:
    from ..storage.fixture_files import FixtureDirectory

logger = get_logger(__name__)


@dataclass
class LoadReport:
    """Outcome of a load: blobs ingested and blobs rejected"""

    loaded: int = 0
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def merge(self, other: "LoadReport") -> "LoadReport":
        self.loaded += other.loaded
        self.errors.extend(other.errors)
        return self


class FixtureStore:
    """Record/replay fixture store"""

    def __init__(
        self,
        config: Optional[ReplayConfig] = None,
        files: Optional["FixtureDirectory"] = None,
        equals: Callable[[Any, Any], bool] = deep_equal,
        validator: Optional[BlobValidator] = None,
    ):
        """Initialize the store.

        Args:
            config: Replay settings
            files: Fixture directory used for value blobs and live writes
            equals: Structural equality used for literal patterns
            validator: Key blob validator
        """
        self.config = config or ReplayConfig()
        self.files = files
        self.equals = equals
        self.validator = validator or BlobValidator()

        self.index: dict[str, KeyEntry] = {}
        self.key_count = 0
        self.fixture_file_count = 0
        self._ordinal_owners: dict[int, str] = {}

        self.stats = {
            "loaded": 0,
            "rejected": 0,
            "recorded": 0,
            "playback_hits": 0,
            "playback_misses": 0,
            "resolution_errors": 0,
        }

    # Index
    def next_key_ordinal(self) -> int:
        self.key_count += 1
        return self.key_count

    def get_entry(self, key: str) -> Optional[KeyEntry]:
        return self.index.get(key)

    def _claim_key_ordinal(
        self, origin_name: Optional[str], preferred: Optional[int] = None
    ) -> int:
        """Reuse the key ordinal embedded in a generated blob name if free.

        ``preferred`` is tried first; it is the ordinal of the key's first
        generated blob when the entry is created from a hand-written one.
        """
        ordinals = parse_ordinals(self.config, origin_name)
        for candidate in (preferred, ordinals[0] if ordinals else None):
            if candidate and candidate > 0 and candidate not in self._ordinal_owners:
                self.key_count = max(self.key_count, candidate)
                return candidate
        return self.next_key_ordinal()

    def _ensure_entry(
        self,
        key: str,
        origin_name: Optional[str] = None,
        preferred_ordinal: Optional[int] = None,
    ) -> KeyEntry:
        entry = self.index.get(key)
        if entry is None:
            ordinal = self._claim_key_ordinal(origin_name, preferred_ordinal)
            entry = KeyEntry(key=key, ordinal=ordinal, origin_name=origin_name)
            self.index[key] = entry
            self._ordinal_owners[ordinal] = key
            logger.debug(f"New key entry {key!r} -> {ordinal}")
        return entry

    def register_correspondence(
        self,
        key: str,
        pattern: Any,
        raw_value: Any,
        origin_name: Optional[str] = None,
        preferred_ordinal: Optional[int] = None,
    ) -> tuple[KeyEntry, ValueSlot]:
        """Add one (key, pattern) -> value correspondence to the index.

        Shared by load and record; this is the only place the index grows.

        Args:
            key: Correspondence key
            pattern: Literal parm or Predicate
            raw_value: Descriptor or plain value to append
            origin_name: Blob name the correspondence came from
            preferred_ordinal: Key ordinal to claim if the key is new

        Returns:
            (entry, slot) the value was appended to
        """
        entry = self._ensure_entry(key, origin_name, preferred_ordinal)
        slot = entry.slot_for_pattern(pattern, self.equals)
        slot.push_raw_value(raw_value)
        return entry, slot

    # Load
    def _reserve_key_ordinals(self, blobs: list) -> dict[str, int]:
        """Raise key_count past the batch's ordinals.

        Returns the first generated key ordinal seen for each key, so a key
        whose hand-written blob sorts first still keeps its recorded ordinal.
        """
        highest = 0
        first_generated: dict[str, int] = {}
        for blob in blobs:
            if not isinstance(blob, dict):
                continue
            ordinals = parse_ordinals(self.config, blob.get("originName"))
            if not ordinals:
                continue
            highest = max(highest, ordinals[0])
            key = blob.get("key")
            if ordinals[0] > 0 and isinstance(key, str):
                first_generated.setdefault(key, ordinals[0])
        if highest > self.key_count:
            self.key_count = highest
        return first_generated

    def _reserve_value_ordinal(self, entry: KeyEntry, origin_name: Optional[str]) -> None:
        # Hand-written blobs (ordinal 0) never move the counters
        ordinals = parse_ordinals(self.config, origin_name)
        if not ordinals:
            return
        key_ordinal, value_ordinal = ordinals
        if key_ordinal > 0 and value_ordinal > 0 and key_ordinal == entry.ordinal:
            entry.reserve_value_ordinal(value_ordinal)

    def load(self, blobs: Iterable[Any]) -> LoadReport:
        """Ingest previously recorded key blobs.

        Blobs must arrive in file name order. Invalid blobs are skipped and
        reported; the rest still load.

        Args:
            blobs: Parsed key blobs ``{key, parm, value, originName?}``

        Returns:
            LoadReport with the count loaded and one error per bad blob
        """
        blobs = list(blobs)
        report = LoadReport()
        preferred = self._reserve_key_ordinals(blobs)

        for blob in blobs:
            origin_name = blob.get("originName") if isinstance(blob, dict) else None
            try:
                self.validator.validate(blob, origin_name)
            except ValidationError as e:
                logger.warning(f"Skipping fixture blob: {e}")
                report.errors.append(e)
                self.stats["rejected"] += 1
                continue

            entry, _ = self.register_correspondence(
                blob["key"], blob["parm"], blob["value"], origin_name,
                preferred.get(blob["key"]),
            )
            self._reserve_value_ordinal(entry, origin_name)
            self.fixture_file_count += 1
            self.stats["loaded"] += 1
            report.loaded += 1

        logger.info(
            f"Loaded {report.loaded} fixture blobs for {len(self.index)} keys"
            + (f" ({len(report.errors)} rejected)" if report.errors else "")
        )
        return report

    def load_directory(self, directory: Optional["FixtureDirectory"] = None) -> LoadReport:
        """Load every key blob from a fixture directory.

        Args:
            directory: Fixture directory (default: the store's own)

        Returns:
            LoadReport, including blobs that could not be read or parsed
        """
        directory = directory or self.files
        if directory is None:
            raise ValueError("No fixture directory to load from")

        report = LoadReport()
        blobs = []
        for name in directory.list_key_blobs():
            try:
                blob = directory.read_key_blob(name)
            except ReplayError as e:
                error = ValidationError(str(e), name)
                logger.warning(f"Skipping fixture blob: {error}")
                report.errors.append(error)
                self.stats["rejected"] += 1
                continue

            if isinstance(blob, dict):
                blob["originName"] = name
            else:
                error = ValidationError(f"incorrect data: {blob!r} is not an object", name)
                logger.warning(f"Skipping fixture blob: {error}")
                report.errors.append(error)
                self.stats["rejected"] += 1
                continue

            blobs.append(blob)

        return report.merge(self.load(blobs))

    # Playback
    def resolve_value(self, raw_value: Any, context: CallContext) -> Any:
        """Materialize a stored value.

        Computed values are called, inline values unwrapped and external
        references read from their value blob. Anything else is already a
        plain value and is returned unchanged. An unreadable reference is
        logged and returned as-is.
        """
        if isinstance(raw_value, Computed):
            return raw_value(context)

        if isinstance(raw_value, Inline):
            return raw_value.data

        if isinstance(raw_value, ExternalReference):
            if not self.config.use_external_value_storage:
                return raw_value
            try:
                if self.files is None:
                    raise ResolutionError(f"No fixture directory to read {raw_value.file}")
                return self.files.read_blob(raw_value.file)
            except ResolutionError as e:
                self.stats["resolution_errors"] += 1
                logger.warning(f"Unresolved value for {context.call.key!r}: {e}")
                return raw_value

        return raw_value

    def playback(self, key: str, parm: Any) -> Any:
        """Play back the next recorded value for a call.

        Args:
            key: Correspondence key
            parm: Call parameter

        Returns:
            Resolved value, or NO_RESULT when nothing is recorded for it
        """
        entry = self.index.get(key)
        if entry is None:
            self.stats["playback_misses"] += 1
            return NO_RESULT

        context = CallContext(store=self, entry=entry, call=Call(key=key, parm=parm))
        slot = entry.find_match(context)
        raw_value = slot.next_raw_value() if slot is not None else NO_RESULT
        if raw_value is NO_RESULT:
            self.stats["playback_misses"] += 1
            return NO_RESULT

        self.stats["playback_hits"] += 1
        logger.debug(f"Playback hit: {key!r}")
        return self.resolve_value(raw_value, context)

    def rewind(self) -> None:
        """Reset every slot cursor to the first value"""
        for entry in self.index.values():
            for slot in entry.value_slots:
                slot.rewind()

    # Record
    def record(self, key: str, parm: Any, value: Any) -> Optional[str]:
        """Record a value for a call.

        With ``write_live`` off the value is only kept in memory. Otherwise
        it gets the entry's next value ordinal and is written as a key blob
        (plus a value blob when external value storage is on). A named
        Computed value is written as its resolver name and never gets a
        value blob.

        Both blob texts are rendered before anything touches the disk.

        Args:
            key: Correspondence key
            parm: Call parameter (literal or Predicate)
            value: Value returned by the real dependency, or a Computed

        Returns:
            Name of the key blob written, or None when not writing live

        Raises:
            ValidationError: Key is not a non-empty string, or parm is None
                when writing live
            PersistenceError: A blob could not be rendered or written
        """
        if not isinstance(key, str) or not key:
            raise ValidationError(f"Key must be a non-empty string, got {key!r}")

        config = self.config
        if not config.write_live:
            self.register_correspondence(key, parm, value)
            self.stats["recorded"] += 1
            return None

        if self.files is None:
            raise PersistenceError("No fixture directory configured for live recording")

        # A null parm would be written but rejected on the next load
        if parm is None:
            raise ValidationError(f"Cannot record {key!r} live with a None parm")

        entry = self._ensure_entry(key)
        base_name = build_base_name(config, entry.ordinal, entry.next_value_ordinal())
        key_name = key_blob_name(config, base_name)
        codec = self.files.codec

        value_name = value_text = None
        if isinstance(value, Computed):
            descriptor = value
        elif config.use_external_value_storage:
            value_name = value_blob_name(config, base_name)
            value_text = codec.render(value)
            descriptor = ExternalReference(value_name)
        else:
            descriptor = Inline(value)

        key_text = codec.render_key_blob({
            "key": key,
            "parm": parm,
            "value": descriptor,
            "originName": key_name,
        })

        if value_name is not None:
            self.files.write_text(value_name, value_text)
        self.files.write_text(key_name, key_text)

        self.register_correspondence(key, parm, descriptor, key_name)
        self.fixture_file_count += 1
        self.stats["recorded"] += 1
        logger.debug(f"Recorded {key!r} -> {key_name}")
        return key_name

    # Reporting
    def get_stats(self) -> dict:
        """Get store statistics"""
        return {
            **self.stats,
            "keys": len(self.index),
            "key_count": self.key_count,
            "fixture_file_count": self.fixture_file_count,
            "values": sum(entry.value_count for entry in self.index.values()),
        }
