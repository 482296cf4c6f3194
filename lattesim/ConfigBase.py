"""Base class for simulation configs with change notification and GUI metadata.

Configs are plain dataclasses; range hints and labels live in field metadata so
an external panel can build sliders without knowing the config class.
"""

from __future__ import annotations

import threading
import warnings
from dataclasses import dataclass, fields, field, Field, MISSING
from typing import Any, Callable, overload, TypeVar

T = TypeVar('T')


METADATA_KEYS = frozenset({
    "description",  # tooltip text
    "fixed",        # settable in __init__ only
    "label",        # display label, generated from the name when omitted
    "min",          # GUI hint, warned about at construction, not enforced
    "max",          # GUI hint, warned about at construction, not enforced
})

# listeners registered without an attribute
_ANY: str = '*'


def config_field(
    default: T = MISSING,
    *,
    default_factory: Any = MISSING,
    description: str = "",
    label: str | None = None,
    min: float | int | None = None,
    max: float | int | None = None,
    fixed: bool = False,
    init: bool = True,
    repr: bool = True,
    compare: bool = True,
) -> T:
    """Dataclass field with config metadata attached.

    Examples:
        >>> viscosity: float = config_field(0.0005, min=0.0, max=0.01, description="Velocity diffusion")
        >>> resolution: int = config_field(256, min=16, max=2048)
    """
    hints: dict[str, Any] = {"description": description, "label": label, "min": min, "max": max}
    metadata: dict[str, Any] = {key: value for key, value in hints.items() if value not in (None, "")}
    if fixed:
        metadata["fixed"] = True

    return field(  # type: ignore[return-value]
        default=default, default_factory=default_factory,
        init=init, repr=repr, compare=compare, metadata=metadata
    )


def _generate_label(name: str) -> str:
    """"prs_iterations" -> "Prs Iterations", all-caps parts are kept as is."""
    return ' '.join(part if part.isupper() and len(part) > 1 else part.capitalize() for part in name.split('_'))


def _default_of(f: Field) -> Any:
    if f.default is not MISSING:
        return f.default
    if f.default_factory is not MISSING:
        return f.default_factory()
    return None


@dataclass
class ConfigBase:
    """Dataclass base with thread-safe change notification.

    Example:
        @dataclass
        class BrushConfig(ConfigBase):
            radius: float = config_field(0.06, min=0.0005, max=0.5, description="Brush radius in UV")
            seed: int = config_field(0, fixed=True)

    Only declared fields can be assigned and fixed fields are locked after
    __init__. Listeners run after a successful assignment, outside the lock.
    """

    _field_cache = {}

    @classmethod
    def _field_names(cls) -> frozenset[str]:
        names: frozenset[str] | None = ConfigBase._field_cache.get(cls)
        if names is None:
            names = frozenset(f.name for f in fields(cls))
            ConfigBase._field_cache[cls] = names
        return names

    def __post_init__(self) -> None:
        object.__setattr__(self, '_listeners', {})
        object.__setattr__(self, '_lock', threading.Lock())
        object.__setattr__(self, '_fixed_fields', frozenset(f.name for f in fields(self) if f.metadata.get('fixed')))

        for f in fields(self):
            self._validate(f)

        object.__setattr__(self, '_initialized', True)

    def _validate(self, f: Field) -> None:
        name: str = f"{self.__class__.__name__}.{f.name}"
        unknown: set[str] = set(f.metadata) - METADATA_KEYS
        if unknown:
            warnings.warn(f"{name}: unknown metadata {sorted(unknown)}, valid keys are {sorted(METADATA_KEYS)}",
                          UserWarning, stacklevel=3)

        low, high = f.metadata.get('min'), f.metadata.get('max')
        value = getattr(self, f.name)
        if (low is not None and value < low) or (high is not None and value > high):
            warnings.warn(f"{name}: value {value} is outside [{low}, {high}]", UserWarning, stacklevel=3)

    def __setattr__(self, name: str, value: Any) -> None:
        """Assign a declared field and notify its listeners.

        Raises:
            AttributeError: If the field is undeclared, or fixed.
        """
        if name.startswith('_'):
            object.__setattr__(self, name, value)
            return
        if name not in self._field_names():
            raise AttributeError(f"{self.__class__.__name__} has no config field '{name}'")

        # dataclass __init__ assigns before listeners exist
        if '_initialized' not in self.__dict__:
            object.__setattr__(self, name, value)
            return
        if name in self._fixed_fields:  # type: ignore[attr-defined]
            raise AttributeError(f"{self.__class__.__name__}.{name} is fixed after construction")

        with self._lock:  # type: ignore[attr-defined]
            object.__setattr__(self, name, value)
            listeners: list[Callable[[], None]] = [*self._listeners.get(name, ()), *self._listeners.get(_ANY, ())]  # type: ignore[attr-defined]

        # outside the lock, a listener may assign other fields
        for listener in listeners:
            listener()

    @overload
    def watch(self, callback: Callable[[], None], attribute: None = None) -> Callable[[], None]:
        ...

    @overload
    def watch(self, callback: Callable[[Any], None], attribute: str) -> Callable[[], None]:
        ...

    def watch(self, callback: Callable, attribute: str | None = None) -> Callable[[], None]:
        """Register a change listener.

        Args:
            callback: callback() after any assignment, or callback(value) after
                      an assignment to the given attribute. Assigning the same
                      value again still notifies.
            attribute: Optional field name.

        Returns:
            Function that removes the listener.

        Raises:
            AttributeError: If the attribute is not a declared field.
        """
        if attribute is None:
            key: str = _ANY
            listener: Callable[[], None] = callback
        else:
            if attribute not in self._field_names():
                raise AttributeError(f"{self.__class__.__name__} has no config field '{attribute}', "
                                     f"available: {', '.join(sorted(self._field_names()))}")
            key = attribute

            def listener() -> None:
                callback(getattr(self, attribute))

        with self._lock:  # type: ignore[attr-defined]
            self._listeners.setdefault(key, []).append(listener)  # type: ignore[attr-defined]

        def unwatch() -> None:
            with self._lock:  # type: ignore[attr-defined]
                registered: list = self._listeners.get(key, [])  # type: ignore[attr-defined]
                if listener in registered:
                    registered.remove(listener)
        return unwatch

    def info(self, attribute: str | None = None) -> dict[str, Any]:
        """Field metadata for GUI generation.

        Every entry carries type, default, value, label, description, min, max
        and fixed. Returns {name: entry}, or one entry when an attribute is given.

        Raises:
            AttributeError: If the attribute is not a declared field.
        """
        if attribute is not None and attribute not in self._field_names():
            raise AttributeError(f"{self.__class__.__name__} has no config field '{attribute}'")

        result: dict[str, dict[str, Any]] = {}
        for f in fields(self):
            if attribute is not None and f.name != attribute:
                continue
            result[f.name] = {
                "type": f.type,
                "default": _default_of(f),
                "value": getattr(self, f.name),
                "label": f.metadata.get("label", _generate_label(f.name)),
                "description": f.metadata.get("description", ""),
                "min": f.metadata.get("min"),
                "max": f.metadata.get("max"),
                "fixed": f.metadata.get("fixed", False),
            }

        if attribute is not None:
            return result[attribute]
        return result
