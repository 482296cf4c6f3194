import dataclasses
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar, cast
from typing_extensions import get_args, get_origin, get_type_hints

from lattesim.flow.fluid import FluidFlowConfig
from lattesim.pour import PourConfig

T = TypeVar("T")


@dataclass
class Settings():
    """Everything a run needs, stored as one JSON document."""

    # FLUID SIMULATION
    fluid: FluidFlowConfig = field(default_factory=FluidFlowConfig)

    # POUR INPUT
    pour: PourConfig = field(default_factory=PourConfig)

    def save(self, path: str) -> None:
        with open(path, "w") as f:
            json.dump(Settings.serialize(self), f, indent=2)

    @classmethod
    def load(cls, path: str) -> 'Settings':
        with open(path, "r") as f:
            return Settings.deserialize(json.load(f), cls)

    @staticmethod
    def serialize(obj: Any) -> Any:
        """Plain JSON value for a (nested) settings object. Enums are stored by name."""
        if isinstance(obj, Enum):
            return obj.name
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return {f.name: Settings.serialize(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
        if isinstance(obj, dict):
            return {key: Settings.serialize(value) for key, value in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [Settings.serialize(value) for value in obj]
        return obj

    @staticmethod
    def deserialize(data: Any, target_type: type[T]) -> T:
        """Rebuild a value of target_type. Keys without a matching init field are ignored,
        missing keys keep their defaults."""
        if dataclasses.is_dataclass(target_type):
            # resolves string annotations from modules using postponed evaluation
            hints: dict[str, Any] = get_type_hints(target_type)
            kwargs: dict[str, Any] = {
                f.name: Settings.deserialize(data[f.name], hints.get(f.name, Any))
                for f in dataclasses.fields(target_type)
                if f.init and f.name in data
            }
            return cast(T, target_type(**kwargs))

        origin: Any = get_origin(target_type)
        args: tuple[Any, ...] = get_args(target_type)
        if origin in (list, tuple) and args:
            items: list[Any] = [Settings.deserialize(item, args[0]) for item in data]
            return cast(T, items if origin is list else tuple(items))

        if isinstance(target_type, type) and issubclass(target_type, Enum):
            return target_type[data]

        return cast(T, data)
