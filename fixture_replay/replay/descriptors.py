"""Value descriptors, pattern matchers and the capability registry

A recorded value is stored as one of three descriptors:

- ``Inline``: the literal value
- ``ExternalReference``: the name of a separately stored value blob
- ``Computed``: a callable producing the value at playback time

A slot pattern is either a literal value (compared structurally) or a
``Predicate`` wrapping a callable.

Callables never come from fixture text. Blobs refer to them by name and
the names are resolved through a ``CapabilityRegistry`` filled in by test
code.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from .errors import ValidationError

if TYPE_CHECKING:
    from .entry import KeyEntry
    from .store import FixtureStore


class _NoResult:
    """Marker for "nothing recorded", distinct from a recorded ``None``"""

    _instance: Optional["_NoResult"] = None

    def __new__(cls) -> "_NoResult":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_RESULT"


NO_RESULT = _NoResult()


@dataclass
class Call:
    """One call made against the recorded dependency"""

    key: str
    parm: Any
    value: Any = NO_RESULT
    origin_name: Optional[str] = None


@dataclass
class CallContext:
    """Everything a predicate or computed value gets to look at"""

    store: "FixtureStore"
    entry: Optional["KeyEntry"]
    call: Call


@dataclass(frozen=True)
class Inline:
    data: Any


@dataclass(frozen=True)
class ExternalReference:
    file: str


@dataclass(frozen=True)
class Computed:
    fn: Callable[[CallContext], Any]
    name: Optional[str] = None

    def __call__(self, context: CallContext) -> Any:
        return self.fn(context)


@dataclass(frozen=True)
class Predicate:
    fn: Callable[[CallContext], Any]
    name: Optional[str] = None

    def __call__(self, context: CallContext) -> Any:
        return self.fn(context)


class CapabilityRegistry:
    """Named matchers and resolvers that fixture text may refer to"""

    def __init__(self):
        self._matchers: dict[str, Predicate] = {}
        self._resolvers: dict[str, Computed] = {}

    def matcher(self, name: str) -> Callable:
        """Decorator registering a predicate pattern under ``name``.

        Example:
            @registry.matcher("any-echo")
            def any_echo(context):
                return context.call.parm.get("echo")
        """

        def decorator(fn: Callable[[CallContext], Any]) -> Callable:
            self._matchers[name] = Predicate(fn, name=name)
            return fn

        return decorator

    def resolver(self, name: str) -> Callable:
        """Decorator registering a computed value under ``name``"""

        def decorator(fn: Callable[[CallContext], Any]) -> Callable:
            self._resolvers[name] = Computed(fn, name=name)
            return fn

        return decorator

    def get_matcher(self, name: str) -> Predicate:
        try:
            return self._matchers[name]
        except KeyError:
            raise ValidationError(f"Unknown matcher: {name}") from None

    def get_resolver(self, name: str) -> Computed:
        try:
            return self._resolvers[name]
        except KeyError:
            raise ValidationError(f"Unknown resolver: {name}") from None

    def names(self) -> dict[str, list[str]]:
        return {
            "matchers": sorted(self._matchers),
            "resolvers": sorted(self._resolvers),
        }
