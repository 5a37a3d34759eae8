"""Remote and local protocol values.

Remote values arrive as a tagged union (``{"type": ..., "value": ...}``) that
nests arbitrarily: arrays of nodes, maps keyed by other remote values, and so
on. ``RemoteValue.from_dict`` walks that tree once and produces immutable
Python objects. ``handle`` and ``sharedId`` are carried through untouched;
this module never interprets them.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..errors import DeserializationError

SEQUENCE_TYPES = {"array", "set", "nodelist", "htmlcollection"}
MAPPING_TYPES = {"object", "map"}

_SPECIAL_NUMBERS = {
    "NaN": math.nan,
    "-0": -0.0,
    "Infinity": math.inf,
    "-Infinity": -math.inf,
}


@dataclass(frozen=True)
class RegExpValue:
    pattern: str
    flags: Optional[str] = None


@dataclass(frozen=True)
class NodeProperties:
    """Description of a DOM node as serialized by the remote end."""

    node_type: int
    child_node_count: int = 0
    local_name: Optional[str] = None
    namespace_uri: Optional[str] = None
    node_value: Optional[str] = None
    mode: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    children: Optional[Tuple["RemoteValue", ...]] = None
    shadow_root: Optional["RemoteValue"] = None

    def __hash__(self) -> int:
        return hash(
            (
                self.node_type,
                self.child_node_count,
                self.local_name,
                self.namespace_uri,
                self.node_value,
                self.mode,
                frozenset(self.attributes.items()),
                self.children,
                self.shadow_root,
            )
        )

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "NodeProperties":
        children = raw.get("children")
        shadow_root = raw.get("shadowRoot")
        return cls(
            node_type=raw.get("nodeType", 0),
            child_node_count=raw.get("childNodeCount", 0),
            local_name=raw.get("localName"),
            namespace_uri=raw.get("namespaceURI"),
            node_value=raw.get("nodeValue"),
            mode=raw.get("mode"),
            attributes=dict(raw.get("attributes") or {}),
            children=(
                tuple(RemoteValue.from_dict(child) for child in children)
                if children is not None
                else None
            ),
            shadow_root=(
                RemoteValue.from_dict(shadow_root) if shadow_root is not None else None
            ),
        )


@dataclass(frozen=True)
class ReferenceValue:
    """Reference to an existing remote object, used for startNodes and arguments."""

    shared_id: Optional[str] = None
    handle: Optional[str] = None

    def __post_init__(self):
        if self.shared_id is None and self.handle is None:
            raise ValueError("ReferenceValue needs a shared_id or a handle")

    def to_dict(self) -> Dict[str, str]:
        reference = {}
        if self.shared_id is not None:
            reference["sharedId"] = self.shared_id
        if self.handle is not None:
            reference["handle"] = self.handle
        return reference


@dataclass(frozen=True)
class RemoteValue:
    """A deserialized remote value.

    ``value`` depends on ``type``:

    - primitives: the Python equivalent (``undefined`` and ``null`` are None)
    - array, set, nodelist, htmlcollection: tuple of RemoteValue
    - object, map: dict keyed by str, or by RemoteValue for non-string keys
      (RemoteValue hashes by content, so nodes and objects work as keys)
    - node: NodeProperties
    - regexp: RegExpValue
    - window: the window's browsing context id
    - anything else (function, promise, error...): None
    """

    type: str
    value: Any = None
    handle: Optional[str] = None
    shared_id: Optional[str] = None
    internal_id: Optional[str] = None

    def __hash__(self) -> int:
        value = self.value
        if isinstance(value, dict):
            # Equal dicts hash equal regardless of entry order
            value = frozenset(value.items())
        return hash((self.type, value, self.handle, self.shared_id, self.internal_id))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "RemoteValue":
        """Deserialize a raw protocol value.

        Raises:
            DeserializationError: If the payload is not a tagged value
        """
        if not isinstance(raw, Mapping) or "type" not in raw:
            raise DeserializationError(f"Not a remote value: {raw!r}")

        value_type = raw["type"]
        try:
            value = _deserialize_value(value_type, raw.get("value"))
        except (KeyError, TypeError, ValueError) as e:
            raise DeserializationError(f"Malformed {value_type} value: {e}") from e

        return cls(
            type=value_type,
            value=value,
            handle=raw.get("handle"),
            shared_id=raw.get("sharedId"),
            internal_id=raw.get("internalId"),
        )

    @property
    def is_node(self) -> bool:
        return self.type == "node"

    def to_reference(self) -> ReferenceValue:
        """Reference this value in later commands (startNodes, arguments)."""
        if self.shared_id is None and self.handle is None:
            raise ValueError(f"Remote {self.type} value has no sharedId or handle")
        return ReferenceValue(shared_id=self.shared_id, handle=self.handle)


def _deserialize_number(value: Any) -> Union[int, float]:
    if isinstance(value, str):
        try:
            return _SPECIAL_NUMBERS[value]
        except KeyError:
            raise DeserializationError(f"Unknown special number {value!r}") from None
    return value


def _deserialize_mapping(entries: Any) -> Dict[Any, "RemoteValue"]:
    result = {}
    for entry in entries or ():
        try:
            key, item = entry
        except (TypeError, ValueError):
            raise DeserializationError(f"Malformed mapping entry: {entry!r}") from None
        if not isinstance(key, str):
            key = RemoteValue.from_dict(key)
        result[key] = RemoteValue.from_dict(item)
    return result


def _deserialize_value(value_type: str, value: Any) -> Any:
    if value_type in ("undefined", "null"):
        return None
    if value_type == "number":
        return _deserialize_number(value)
    if value_type == "bigint":
        return int(value)
    if value_type in ("string", "boolean", "date"):
        return value
    if value_type == "window":
        return value["context"]
    if value_type in SEQUENCE_TYPES:
        return tuple(RemoteValue.from_dict(item) for item in value or ())
    if value_type in MAPPING_TYPES:
        return _deserialize_mapping(value)
    if value_type == "node":
        return NodeProperties.from_dict(value) if value is not None else None
    if value_type == "regexp":
        return RegExpValue(pattern=value["pattern"], flags=value.get("flags"))
    # Opaque kinds only carry handle/internalId
    return None


def serialize_local_value(value: Any) -> Dict[str, Any]:
    """Serialize a Python value as a protocol local value.

    References (ReferenceValue, or a RemoteValue with ids) are sent as remote
    references so the remote end resolves them to the original object.

    Raises:
        TypeError: If the value has no protocol representation
    """
    if isinstance(value, ReferenceValue):
        return value.to_dict()
    if isinstance(value, RemoteValue):
        return value.to_reference().to_dict()
    if value is None:
        return {"type": "null"}
    if isinstance(value, bool):
        return {"type": "boolean", "value": value}
    if isinstance(value, int):
        return {"type": "number", "value": value}
    if isinstance(value, float):
        if math.isnan(value):
            return {"type": "number", "value": "NaN"}
        if math.isinf(value):
            return {"type": "number", "value": "Infinity" if value > 0 else "-Infinity"}
        if value == 0 and math.copysign(1.0, value) < 0:
            return {"type": "number", "value": "-0"}
        return {"type": "number", "value": value}
    if isinstance(value, str):
        return {"type": "string", "value": value}
    if isinstance(value, (list, tuple)):
        return {"type": "array", "value": [serialize_local_value(v) for v in value]}
    if isinstance(value, (set, frozenset)):
        return {"type": "set", "value": [serialize_local_value(v) for v in value]}
    if isinstance(value, dict):
        if all(isinstance(k, str) for k in value):
            return {
                "type": "object",
                "value": [[k, serialize_local_value(v)] for k, v in value.items()],
            }
        return {
            "type": "map",
            "value": [
                [k if isinstance(k, str) else serialize_local_value(k), serialize_local_value(v)]
                for k, v in value.items()
            ],
        }
    raise TypeError(f"Cannot serialize {type(value).__name__} as a local value")
