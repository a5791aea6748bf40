"""Raw signal values and the coercion rules shared by the feature pipeline.

Callers hand the pipeline a sparse mapping of feature name to scalar. Each
scalar is wrapped in one of three value types so that the coercion rules live
in one place instead of being spread across isinstance checks:

* ``NumberValue``  - ints and floats
* ``BoolValue``    - flags, encoded as 0/1 when used numerically
* ``StringValue``  - category labels, or numbers that arrived as text
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union


@dataclass(frozen=True)
class NumberValue:
    value: float


@dataclass(frozen=True)
class BoolValue:
    value: bool


@dataclass(frozen=True)
class StringValue:
    value: str


SignalValue = Union[NumberValue, BoolValue, StringValue]
RawSignalMap = Mapping[str, SignalValue]


def to_signal(value: Any) -> Optional[SignalValue]:
    """Wrap a plain Python scalar; returns None for values that carry no signal."""
    if isinstance(value, (NumberValue, BoolValue, StringValue)):
        return value
    # bool is a subclass of int, so it has to be checked first.
    if isinstance(value, bool):
        return BoolValue(value)
    if isinstance(value, (int, float)):
        return NumberValue(float(value))
    if isinstance(value, str):
        return StringValue(value)
    return None


def to_signal_map(values: Mapping[str, Any]) -> Dict[str, SignalValue]:
    """Build a raw signal map from plain values, dropping None and unsupported types."""
    signals: Dict[str, SignalValue] = {}
    for key, value in values.items():
        signal = to_signal(value)
        if signal is not None:
            signals[key] = signal
    return signals


def to_plain(signals: RawSignalMap) -> Dict[str, Any]:
    """Unwrap a raw signal map into JSON-ready values."""
    return {key: signal.value for key, signal in signals.items()}


def _finite_or(value: float, fallback: float) -> float:
    return value if math.isfinite(value) else fallback


def coerce_number(signal: Optional[SignalValue], fallback: float) -> float:
    """Coerce a signal to a float, returning ``fallback`` when it is not numeric."""
    if isinstance(signal, BoolValue):
        return 1.0 if signal.value else 0.0
    if isinstance(signal, NumberValue):
        return _finite_or(float(signal.value), fallback)
    if isinstance(signal, StringValue):
        try:
            return _finite_or(float(signal.value.strip()), fallback)
        except ValueError:
            return fallback
    return fallback


def coerce_category(signal: Optional[SignalValue], fallback: str) -> str:
    """Return the category label carried by a string signal, else ``fallback``."""
    if isinstance(signal, StringValue):
        return signal.value
    return fallback


def is_truthy(signal: Optional[SignalValue]) -> bool:
    """Flag semantics used by recommendation rules; text never counts as set."""
    if isinstance(signal, BoolValue):
        return signal.value
    if isinstance(signal, NumberValue):
        return signal.value != 0
    return False
