"""Named strategies for folding a multiplier into a hole's point total."""

from typing import Callable, Dict

from scoring.exceptions import ConfigurationError


def multiply(total: float, value: float) -> float:
    return total * value


def add(total: float, value: float) -> float:
    return total + value


COMBINATIONS: Dict[str, Callable[[float, float], float]] = {
    "multiply": multiply,
    "multiplicative": multiply,
    "add": add,
    "additive": add,
}


def get_combination(name: str) -> Callable[[float, float], float]:
    try:
        return COMBINATIONS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown multiplier combination '{name}'") from None


def combine(name: str, total: float, value: float) -> float:
    return get_combination(name)(total, value)
