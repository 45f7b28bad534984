"""
Dictionary-like object with attribute access and dot-notation paths.

Used as the base of Config so values can be read as ``config.pairs.span`` or
``config.get("pairs.span")``.
"""

import builtins
from collections.abc import ItemsView, KeysView, ValuesView
from typing import Any


class DotDict:
    """
    Dictionary-like object with attribute-style access and nested structure support.

    Nested dictionaries are converted to DotDict instances on assignment.
    """

    # Keys that would shadow methods and are not allowed
    _RESERVED_KEYS = frozenset({"set", "clear", "dict", "to_dict", "get", "has"})

    def __init__(self, **kwargs: Any) -> None:
        """
        Initialize DotDict with initial key-value pairs.

        Args:
            **kwargs: Initial key-value pairs to set
        """
        self.set(**kwargs)

    def set(self, **kwargs: Any) -> "DotDict":
        """
        Set multiple key-value pairs, with automatic nested object creation.

        Returns:
            self: For method chaining
        """
        for key, val in kwargs.items():
            self._set_item(key, val)
        return self

    def _set_item(self, key: Any, val: Any) -> None:
        """
        Set a single key-value pair with automatic nested object creation.

        Raises:
            ValueError: If key would shadow a method name
        """
        if not isinstance(key, str):
            key = str(key)

        if key in self._RESERVED_KEYS:
            raise ValueError(
                f"Key '{key}' is reserved and cannot be used (would shadow method)"
            )

        if isinstance(val, dict):
            setattr(self, key, DotDict(**val))
        elif isinstance(val, list):
            setattr(self, key, [DotDict(**v) if isinstance(v, dict) else v for v in val])
        else:
            setattr(self, key, val)

    def clear(self) -> None:
        """Clear all public attributes from the object."""
        for k in [k for k in self.__dict__ if not k.startswith("_")]:
            delattr(self, k)

    def _public_items(self) -> list[tuple[str, Any]]:
        return [(k, v) for k, v in self.__dict__.items() if not k.startswith("_")]

    def dict(self) -> builtins.dict[str, Any]:
        """Shallow conversion: nested DotDicts become dicts, lists are kept."""
        return {
            key: val.dict() if isinstance(val, DotDict) else val
            for key, val in self._public_items()
        }

    def to_dict(self) -> builtins.dict[str, Any]:
        """
        Recursively convert DotDict and all nested structures to plain dicts.
        """
        result: builtins.dict[str, Any] = {}
        for key, val in self._public_items():
            if isinstance(val, DotDict):
                result[key] = val.to_dict()
            elif isinstance(val, list):
                result[key] = [
                    item.to_dict() if isinstance(item, DotDict) else item
                    for item in val
                ]
            else:
                result[key] = val
        return result

    def keys(self) -> KeysView[str]:
        return self.dict().keys()

    def values(self) -> ValuesView[Any]:
        return self.dict().values()

    def items(self) -> ItemsView[str, Any]:
        return self.dict().items()

    def __contains__(self, key: Any) -> bool:
        return isinstance(key, str) and not key.startswith("_") and key in self.__dict__

    def __getitem__(self, key: str) -> Any:
        """Dictionary-style access; None when the key doesn't exist."""
        return getattr(self, key) if key in self else None

    def __setitem__(self, key: str, val: Any) -> None:
        if key in self.__dict__:
            delattr(self, key)
        self._set_item(key, val)

    def __len__(self) -> int:
        return len(self._public_items())

    def __str__(self) -> str:
        return str(self.dict())

    def has(self, path: str) -> bool:
        """
        Check if a dot-separated path exists in the object.

        Args:
            path: Dot-separated path to check (e.g., "pairs.span")
        """
        sentinel = object()
        return bool(path) and self.get(path, sentinel) is not sentinel

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get value by dot-separated path.

        Follows dict.get() semantics: returns default if path not found.

        Args:
            path: Dot-separated path to get (e.g., "pairs.pacing.producer")
            default: Value returned when the path does not exist
        """
        if not path:
            return default

        cur: Any = self
        for item in [p for p in path.split(".") if p]:
            if not isinstance(cur, DotDict) or item not in cur:
                return default
            cur = getattr(cur, item)
        return cur


class DotDictPathNotFoundError(Exception):
    """Raised when a referenced path is not found in a DotDict."""

    def __init__(self, obj: DotDict, path: str) -> None:
        self.obj = obj
        self.path = path
        super().__init__(f"Path '{path}' not found")
