from ._registry import Descriptor

TRUE = frozenset({"TRUE", "YES", "ON", "1"})
FALSE = frozenset({"FALSE", "NO", "OFF", "0"})


def is_bool(text: str) -> bool:
    return text.upper() in TRUE | FALSE


def to_bool(text: str) -> bool:
    return text.upper() in TRUE


def from_bool(value: bool) -> str:
    return "true" if value else "false"


DESCRIPTOR = Descriptor("bool", bool, is_bool, to_bool, from_bool)
