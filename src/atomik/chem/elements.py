from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from importlib import resources
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_ATOMIC_NUMBER = 6  # Carbon

_REQUIRED_FIELDS = ("atomicNumber", "symbol", "name", "atomicMass", "shells")


class ElementDataError(ValueError):
    """Raised when an element record is missing fields or is internally inconsistent."""


class ElementCategory(str, Enum):
    ALKALI_METAL = "Alkali Metal"
    ALKALINE_EARTH_METAL = "Alkaline Earth Metal"
    TRANSITION_METAL = "Transition Metal"
    POST_TRANSITION_METAL = "Post-transition Metal"
    METALLOID = "Metalloid"
    REACTIVE_NONMETAL = "Reactive Nonmetal"
    NOBLE_GAS = "Noble Gas"
    LANTHANIDE = "Lanthanide"
    ACTINIDE = "Actinide"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: object) -> "ElementCategory":
        text = str(value or "").strip()
        for category in cls:
            if category.value.lower() == text.lower():
                return category
        return cls.UNKNOWN


@dataclass(frozen=True)
class ElementRecord:
    atomic_number: int
    symbol: str
    name: str
    atomic_mass: float
    category: ElementCategory
    group: int
    period: int
    block: str
    electron_configuration: str
    shells: tuple[int, ...]
    summary: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "ElementRecord":
        missing = [key for key in _REQUIRED_FIELDS if data.get(key) in (None, "")]
        if missing:
            raise ElementDataError(f"Element record is missing fields: {', '.join(missing)}")
        try:
            return cls(
                atomic_number=int(data["atomicNumber"]),
                symbol=str(data["symbol"]).strip(),
                name=str(data["name"]).strip(),
                atomic_mass=float(data["atomicMass"]),
                category=ElementCategory.parse(data.get("category")),
                group=int(data.get("group") or 0),
                period=int(data.get("period") or 0),
                block=str(data.get("block") or "").strip().lower(),
                electron_configuration=str(data.get("electronConfiguration") or ""),
                shells=tuple(int(count) for count in data["shells"]),
                summary=str(data.get("summary") or ""),
            )
        except (TypeError, ValueError) as exc:
            raise ElementDataError(f"Malformed element record {data.get('symbol')!r}: {exc}") from exc

    @property
    def electron_count(self) -> int:
        return sum(self.shells)

    def label(self) -> str:
        return f"{self.atomic_number}. {self.name} ({self.symbol})"


def validate_record(record: ElementRecord) -> None:
    """Check the numeric consistency of a record.

    Raises ElementDataError for a non-positive atomic number or mass, a
    negative shell occupancy, or shells that do not add up to the atomic
    number of the neutral atom.
    """
    if record.atomic_number <= 0:
        raise ElementDataError(f"{record.symbol}: atomic number must be positive")
    if record.atomic_mass <= 0:
        raise ElementDataError(f"{record.symbol}: atomic mass must be positive")
    if any(count < 0 for count in record.shells):
        raise ElementDataError(f"{record.symbol}: shell occupancies must be non-negative")
    if record.electron_count != record.atomic_number:
        raise ElementDataError(
            f"{record.symbol}: shells hold {record.electron_count} electrons, "
            f"expected {record.atomic_number}"
        )


def _read_resource_text(filename: str) -> str:
    try:
        return resources.files("atomik.data").joinpath(filename).read_text(encoding="utf-8")
    except (FileNotFoundError, ModuleNotFoundError):
        path = Path(__file__).resolve().parents[1] / "data" / filename
        return path.read_text(encoding="utf-8")


def parse_elements(rows: list[dict]) -> tuple[ElementRecord, ...]:
    records = [ElementRecord.from_dict(row) for row in rows]
    return tuple(sorted(records, key=lambda record: record.atomic_number))


@lru_cache(maxsize=1)
def load_elements() -> tuple[ElementRecord, ...]:
    data = json.loads(_read_resource_text("elements.json"))
    elements = parse_elements(data.get("elements", []))
    logger.debug("Loaded %d elements", len(elements))
    return elements


@lru_cache(maxsize=1)
def _element_index() -> tuple[dict[int, ElementRecord], dict[str, ElementRecord]]:
    by_number: dict[int, ElementRecord] = {}
    by_symbol: dict[str, ElementRecord] = {}
    for element in load_elements():
        by_number[element.atomic_number] = element
        by_symbol[element.symbol.lower()] = element
    return by_number, by_symbol


def get_element(z: int) -> ElementRecord:
    by_number, _ = _element_index()
    try:
        return by_number[int(z)]
    except KeyError:
        raise KeyError(f"No element with atomic number {z}") from None


def get_element_by_symbol(symbol: str) -> ElementRecord:
    _, by_symbol = _element_index()
    try:
        return by_symbol[str(symbol or "").strip().lower()]
    except KeyError:
        raise KeyError(f"No element with symbol {symbol!r}") from None


def default_element() -> ElementRecord:
    return get_element(DEFAULT_ATOMIC_NUMBER)
