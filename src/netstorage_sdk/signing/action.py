"""
Action model for the storage API

An Action is one API call: the operation name plus the typed parameters that
are serialized into the X-Akamai-ACS-Action header. Parameters are described
by an explicit table mapping each field to its wire name and formatter.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from ..exceptions import ValidationError, ErrorCodes
from .formatters import (
    ValueFormatter,
    format_default,
    format_timestamp,
    format_bytes,
    format_flag,
)

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = 1

QUICK_DELETE_CONFIRMATION = "imreallyreallysure"


@dataclass(frozen=True)
class ParameterSpec:
    """
    Declaration of one action parameter

    Attributes:
        field: Python-side field name
        wire_name: Key used in the serialized action
        formatter: Maps the value to its wire string (None means omit)
        include_null: Emit an empty value instead of omitting an unset field
    """
    field: str
    wire_name: str
    formatter: ValueFormatter = format_default
    include_null: bool = False


ACTION_PARAMETERS: Tuple[ParameterSpec, ...] = (
    ParameterSpec("format", "format"),
    ParameterSpec("quick_delete", "quick-delete"),
    ParameterSpec("destination", "destination"),
    ParameterSpec("target", "target"),
    ParameterSpec("mtime", "mtime", format_timestamp),
    ParameterSpec("size", "size"),
    ParameterSpec("md5", "md5", format_bytes),
    ParameterSpec("sha1", "sha1", format_bytes),
    ParameterSpec("sha256", "sha256", format_bytes),
    ParameterSpec("index_zip", "index-zip", format_flag),
)

_FIELDS = {spec.field: spec for spec in ACTION_PARAMETERS}


def _check_str(name: str, value: Any) -> Any:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", details={"field": name})
    return value


def _check_timestamp(name: str, value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (datetime, int, float)):
        raise ValidationError(
            f"{name} must be a datetime or epoch seconds",
            details={"field": name}
        )
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number", details={"field": name})
    return value


def _check_bytes(name: str, value: Any) -> Any:
    if not isinstance(value, (bytes, bytearray)):
        raise ValidationError(f"{name} must be bytes", details={"field": name})
    return bytes(value)


def _check_size(name: str, value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer", details={"field": name})
    if value < 0:
        raise ValidationError(f"{name} must be non-negative", details={"field": name})
    return value


def _check_flag(name: str, value: Any) -> Any:
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be a boolean", details={"field": name})
    # false is stored as unset, there is no false encoding on the wire
    return True if value else None


_VALIDATORS = {
    "format": _check_str,
    "quick_delete": _check_str,
    "destination": _check_str,
    "target": _check_str,
    "mtime": _check_timestamp,
    "size": _check_size,
    "md5": _check_bytes,
    "sha1": _check_bytes,
    "sha256": _check_bytes,
    "index_zip": _check_flag,
}


class Action:
    """
    One storage API action and its parameters.

    Fields are set through the fluent ``with_*`` methods (or keyword
    arguments to the constructor) and validated by type. An action is sealed
    the first time it is serialized; later changes raise ValidationError.
    """

    def __init__(self, action: str, additional_params: Optional[Mapping[str, str]] = None, **params: Any):
        if not isinstance(action, str) or not action:
            raise ValidationError("action cannot be empty", details={"field": "action"})

        self._action = action
        self._values: Dict[str, Any] = {}
        self._additional_params: Dict[str, str] = {}
        self._sealed = False

        for name, value in params.items():
            self.set(name, value)
        if additional_params:
            self.with_additional_params(additional_params)

    @property
    def version(self) -> int:
        return PROTOCOL_VERSION

    @property
    def action(self) -> str:
        return self._action

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def additional_params(self) -> Dict[str, str]:
        return dict(self._additional_params)

    def get(self, name: str) -> Any:
        """Return the current value of a declared parameter (None when unset)."""
        if name not in _FIELDS:
            raise ValidationError(f"Unknown action parameter: {name}", details={"field": name})
        return self._values.get(name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name not in _FIELDS:
            raise AttributeError(name)
        return self._values.get(name)

    def set(self, name: str, value: Any) -> "Action":
        """
        Set a declared parameter by field name.

        Args:
            name: Field name from ACTION_PARAMETERS
            value: Typed value, or None to unset

        Returns:
            Action: Self for method chaining

        Raises:
            ValidationError: If the field is unknown, the value has the wrong
                type, or the action was already serialized
        """
        self._check_not_sealed()
        if name not in _FIELDS:
            raise ValidationError(f"Unknown action parameter: {name}", details={"field": name})

        if value is not None:
            value = _VALIDATORS[name](name, value)

        if value is None:
            self._values.pop(name, None)
        else:
            self._values[name] = value

        if name in ("size", "index_zip"):
            self._reset_size_if_needed()
        return self

    def with_format(self, format: Optional[str]) -> "Action":
        return self.set("format", format)

    def with_quick_delete(self, confirmation: Optional[str] = QUICK_DELETE_CONFIRMATION) -> "Action":
        return self.set("quick_delete", confirmation)

    def with_destination(self, destination: Optional[str]) -> "Action":
        return self.set("destination", destination)

    def with_target(self, target: Optional[str]) -> "Action":
        return self.set("target", target)

    def with_mtime(self, mtime) -> "Action":
        return self.set("mtime", mtime)

    def of_size(self, size: Optional[int]) -> "Action":
        return self.set("size", size)

    def with_md5(self, checksum: Optional[bytes]) -> "Action":
        return self.set("md5", checksum)

    def with_sha1(self, checksum: Optional[bytes]) -> "Action":
        return self.set("sha1", checksum)

    def with_sha256(self, checksum: Optional[bytes]) -> "Action":
        return self.set("sha256", checksum)

    def with_index_zip(self, index_zip: bool) -> "Action":
        return self.set("index_zip", index_zip)

    def with_additional_params(self, params: Optional[Mapping[str, str]]) -> "Action":
        """
        Merge caller supplied parameters (e.g. custom metadata headers).

        These are emitted verbatim and win over declared parameters with the
        same wire name.
        """
        self._check_not_sealed()
        for key, value in (params or {}).items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValidationError(
                    "additional params must map strings to strings",
                    details={"field": "additional_params", "key": key}
                )
            self._additional_params[key] = value
        return self

    def seal(self) -> "Action":
        """Freeze the action; serialization does this implicitly."""
        self._sealed = True
        return self

    def as_query_params(self) -> Dict[str, str]:
        """
        Resolve every parameter to its wire name and formatted value.

        Returns:
            dict: Unordered wire parameters including version and action
        """
        self.seal()
        result = {"version": str(PROTOCOL_VERSION), "action": self._action}

        for spec in ACTION_PARAMETERS:
            value = self._values.get(spec.field)
            formatted = spec.formatter(value) if value is not None else None
            if formatted is not None:
                result[spec.wire_name] = formatted
            elif spec.include_null:
                result[spec.wire_name] = ""

        result.update(self._additional_params)
        return result

    def _reset_size_if_needed(self) -> None:
        # index-zip rewrites the uploaded archive, so a declared size would not match
        if self._values.get("size") is not None and self._values.get("index_zip"):
            logger.debug(f"Dropping size from '{self._action}' action because index-zip is enabled")
            del self._values["size"]

    def _check_not_sealed(self) -> None:
        if self._sealed:
            raise ValidationError(
                "Action cannot be modified after it has been serialized",
                ErrorCodes.ACTION_SEALED,
                {"action": self._action}
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return (
            self._action == other._action
            and self._values == other._values
            and self._additional_params == other._additional_params
        )

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in sorted(self._values.items()))
        return f"Action(action={self._action!r}{', ' if fields else ''}{fields})"
