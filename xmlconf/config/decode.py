"""
Structural decoding of configuration mappings into dataclasses.

Keys are matched to field names case-insensitively (``-`` and ``_`` are
equivalent). Scalar strings are coerced to the annotated field type since
XML carries no type information: ``<port>8080</port>`` is the string "8080".
"""

import dataclasses
import logging
import types
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Union

from .base import DecodeError, ConfigError, parse_bool

logger = logging.getLogger(__name__)


@dataclass
class DecoderConfig:
    """Decoder behaviour switches, mutated by decode options."""
    weakly_typed_input: bool = True
    error_unused: bool = False


DecodeOption = Callable[[DecoderConfig], None]


def error_unused() -> DecodeOption:
    """Reject keys that do not match any field."""
    def apply(cfg: DecoderConfig):
        cfg.error_unused = True
    return apply


def weakly_typed(enabled: bool = True) -> DecodeOption:
    """Enable or disable coercion of scalar strings into numbers and booleans."""
    def apply(cfg: DecoderConfig):
        cfg.weakly_typed_input = enabled
    return apply


def _normalize(name: str) -> str:
    return name.replace("-", "_").lower()


def decode(data: Dict[str, Any], target: Any, *options: DecodeOption) -> Any:
    """
    Decode a mapping into a dataclass.

    Args:
        data: Source mapping
        target: Dataclass type (a new instance is built) or instance (updated in place)
        *options: Decode options such as ``error_unused()``

    Returns:
        The populated dataclass instance

    Raises:
        DecodeError: If a value cannot be converted or a required field is missing
    """
    cfg = DecoderConfig()
    for option in options:
        option(cfg)

    if isinstance(target, type):
        if not dataclasses.is_dataclass(target):
            raise DecodeError(f"decode target must be a dataclass, got {target.__name__}")
        return _decode_dataclass(data, target, cfg, "")

    if not dataclasses.is_dataclass(target):
        raise DecodeError(f"decode target must be a dataclass, got {type(target).__name__}")

    decoded = _decode_dataclass(data, type(target), cfg, "", partial=True)
    for name, value in decoded.items():
        setattr(target, name, value)
    return target


def _decode_dataclass(data: Any, cls: type, cfg: DecoderConfig, path: str, partial: bool = False):
    if not isinstance(data, dict):
        raise DecodeError(f"'{path or cls.__name__}': expected a mapping, got {type(data).__name__}")

    hints = typing.get_type_hints(cls)
    fields = {_normalize(f.name): f for f in dataclasses.fields(cls) if f.init}
    values: Dict[str, Any] = {}

    for key, raw in data.items():
        field = fields.get(_normalize(key))
        if field is None:
            if cfg.error_unused:
                raise DecodeError(f"'{path or cls.__name__}' has invalid key: {key}")
            logger.debug(f"Ignoring unused key '{key}' while decoding {cls.__name__}")
            continue
        field_path = f"{path}.{field.name}" if path else field.name
        values[field.name] = _decode_value(raw, hints.get(field.name, Any), cfg, field_path)

    if partial:
        return values

    for field in fields.values():
        if field.name in values:
            continue
        if field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING:
            field_path = f"{path}.{field.name}" if path else field.name
            raise DecodeError(f"'{field_path}' is required but missing")

    return cls(**values)


def _decode_value(raw: Any, hint: Any, cfg: DecoderConfig, path: str) -> Any:
    if hint is Any:
        return raw

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if origin is Union or origin is getattr(types, "UnionType", Union):
        non_none = [a for a in args if a is not type(None)]
        if raw is None and len(non_none) < len(args):
            return None
        errors = []
        for candidate in non_none:
            try:
                return _decode_value(raw, candidate, cfg, path)
            except DecodeError as e:
                errors.append(str(e))
        raise DecodeError(f"'{path}': no matching type in {hint}: {'; '.join(errors)}")

    if origin in (list, List):
        item_hint = args[0] if args else Any
        items = raw if isinstance(raw, list) else [raw]
        return [_decode_value(item, item_hint, cfg, f"{path}[{i}]") for i, item in enumerate(items)]

    if origin in (dict, Dict):
        if not isinstance(raw, dict):
            raise DecodeError(f"'{path}': expected a mapping, got {type(raw).__name__}")
        value_hint = args[1] if len(args) == 2 else Any
        return {k: _decode_value(v, value_hint, cfg, f"{path}.{k}") for k, v in raw.items()}

    if dataclasses.is_dataclass(hint):
        return _decode_dataclass(raw, hint, cfg, path)

    if hint in (str, int, float, bool):
        return _decode_scalar(raw, hint, cfg, path)

    if isinstance(hint, type) and not isinstance(raw, hint):
        raise DecodeError(f"'{path}': expected {hint.__name__}, got {type(raw).__name__}")
    return raw


def _decode_scalar(raw: Any, hint: type, cfg: DecoderConfig, path: str) -> Any:
    # bool is an int subclass, check it before the generic isinstance test
    if isinstance(raw, hint) and not (hint is int and isinstance(raw, bool)):
        return raw
    if isinstance(raw, (dict, list)):
        raise DecodeError(f"'{path}': expected {hint.__name__}, got {type(raw).__name__}")
    if not cfg.weakly_typed_input:
        raise DecodeError(f"'{path}': expected {hint.__name__}, got {type(raw).__name__}")

    try:
        if hint is bool:
            return parse_bool(raw)
        if hint is str:
            return str(raw)
        return hint(raw)
    except (ConfigError, TypeError, ValueError) as e:
        raise DecodeError(f"'{path}': cannot parse {raw!r} as {hint.__name__}") from e


__all__ = ["decode", "DecoderConfig", "DecodeOption", "error_unused", "weakly_typed"]
