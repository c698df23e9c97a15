"""Decode row properties into label strings"""
from typing import Dict, Iterable
from logging_config import get_logger


logger = get_logger(__name__)


def _to_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    # bool before int, bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return ""
    return ""


def decode(row, property_name: str) -> str:
    """Return the textual value of a property, or "" when it cannot be read"""
    try:
        value = row.get_property(property_name)
    except Exception as e:
        logger.debug("Property read failed", property=property_name, error=str(e))
        return ""
    return _to_text(value)


def decode_row(row, property_names: Iterable[str]) -> Dict[str, str]:
    """Decode several properties of one row"""
    return {name: decode(row, name) for name in property_names}
