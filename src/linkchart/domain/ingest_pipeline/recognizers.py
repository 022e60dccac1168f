"""Semantic type recognizers and the registry that ranks them.

A recognizer is a capability record rather than a class hierarchy: a tag, the
field-name aliases that hint at the type, a value pattern check, a
canonicalization function and a validity check for canonical values.

Canonicalizers raise ``ValueError`` when a value cannot be brought into the
canonical form; the normalizer turns that into an invalid cell plus a warning.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import UTC
from typing import cast

from dateutil import parser as dateparser

from linkchart.domain.model import SemanticType, UnknownRecognizerError, is_empty, name_tokens

type PatternCheck = Callable[[object, str | None], bool]
type Canonicalizer = Callable[[object, str | None], object]
type Validator = Callable[[object], bool]

NAME_AND_PATTERN_CONFIDENCE = 1.0
NAME_ONLY_CONFIDENCE = 0.7
PATTERN_ONLY_CONFIDENCE = 0.5


def _compact(name: str) -> str:
    return "".join(name_tokens(name))


def _always_valid(_value: object) -> bool:
    return True


def _never_matches(_value: object, _field_name: str | None) -> bool:
    return False


@dataclass(frozen=True, slots=True, kw_only=True)
class Recognizer:
    tag: str
    field_names: frozenset[str] = frozenset()
    pattern: PatternCheck = _never_matches
    canonicalizer: Canonicalizer
    validator: Validator = _always_valid
    _aliases: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        aliases = frozenset(_compact(alias) for alias in self.field_names)
        object.__setattr__(self, "_aliases", aliases)

    def matches_field_name(self, name: str | None) -> bool:
        if not name or not self._aliases:
            return False
        tokens = name_tokens(name)
        if "".join(tokens) in self._aliases:
            return True
        return any(token in self._aliases for token in tokens)

    def matches_pattern(self, value: object, *, field_name: str | None = None) -> bool:
        if is_empty(value):
            return False
        try:
            return self.pattern(value, field_name)
        except (TypeError, ValueError):
            return False

    def get_confidence(self, name: str | None, value: object) -> float:
        name_match = self.matches_field_name(name)
        pattern_match = self.matches_pattern(value, field_name=name)
        if name_match and pattern_match:
            return NAME_AND_PATTERN_CONFIDENCE
        if name_match:
            return NAME_ONLY_CONFIDENCE
        if pattern_match:
            return PATTERN_ONLY_CONFIDENCE
        return 0.0

    def canonicalize(self, value: object, *, field_name: str | None = None) -> object:
        return self.canonicalizer(value, field_name)

    def validate(self, canonical: object) -> bool:
        return self.validator(canonical)


# --- email -------------------------------------------------------------------

_EMAIL = re.compile(r"^[A-Za-z0-9._%+'-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
_PLACEHOLDER_EMAIL_DOMAINS = frozenset({"example.com", "test.com"})


def _email_pattern(value: object, _field_name: str | None) -> bool:
    return isinstance(value, str) and _EMAIL.match(value.strip()) is not None


def _email_canonical(value: object, _field_name: str | None) -> object:
    if not _email_pattern(value, None):
        raise ValueError(f"not an email address: {value!r}")
    return cast(str, value).strip().lower()


def _email_valid(canonical: object) -> bool:
    if not isinstance(canonical, str) or "@" not in canonical:
        return False
    return canonical.rsplit("@", 1)[1] not in _PLACEHOLDER_EMAIL_DOMAINS


# --- phone -------------------------------------------------------------------

_PHONE_CHARS = re.compile(r"^\+?[\d\s().\-]+$")
_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_DECIMAL = re.compile(r"^-?\d+\.\d+$")
_NON_DIGIT = re.compile(r"\D")


def _phone_digits(value: object) -> str | None:
    if isinstance(value, bool) or not isinstance(value, str | int):
        return None
    text = str(value).strip()
    if not _PHONE_CHARS.match(text) or _ISO_DATE_PREFIX.match(text) or _DECIMAL.match(text):
        return None
    digits = _NON_DIGIT.sub("", text)
    if not 7 <= len(digits) <= 15:
        return None
    return digits


def _phone_pattern(value: object, _field_name: str | None) -> bool:
    return _phone_digits(value) is not None


def _phone_canonical(value: object, _field_name: str | None) -> object:
    digits = _phone_digits(value)
    if digits is None:
        raise ValueError(f"not a phone number: {value!r}")
    # NANP numbers keep one canonical spelling with or without the trunk prefix
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return f"+{digits}"


# --- address -----------------------------------------------------------------

_STREET_KEYWORDS = re.compile(
    r"\b(st|street|ave|avenue|blvd|boulevard|rd|road|ln|lane|way|pl|place|dr|drive"
    r"|cir|circle|ct|court|pkwy|parkway|hwy|highway|sq|square)\b\.?",
    re.IGNORECASE,
)
_HOUSE_NUMBER = re.compile(r"^\d+[A-Za-z]?\s+[A-Za-z]")
_ZIP_CODE = re.compile(r"\b\d{5}(?:-\d{4})?\b")


def _address_pattern(value: object, _field_name: str | None) -> bool:
    if not isinstance(value, str):
        return False
    text = value.strip()
    if _STREET_KEYWORDS.search(text) is None:
        return False
    return _HOUSE_NUMBER.match(text) is not None or _ZIP_CODE.search(text) is not None or (
        "," in text
    )


def _address_canonical(value: object, _field_name: str | None) -> object:
    if not isinstance(value, str | int | float) or isinstance(value, bool):
        raise ValueError(f"not an address: {value!r}")
    return " ".join(str(value).split())


# --- coordinates -------------------------------------------------------------

_DECIMAL_PAIR = re.compile(
    r"^\s*\(?\s*(-?\d{1,3}(?:\.\d+)?)\s*[,;]\s*(-?\d{1,3}(?:\.\d+)?)\s*\)?\s*$"
)
_DMS_PAIR = re.compile(
    r"(\d{1,3})°\s*(\d{1,2})['′]\s*(\d{1,2}(?:\.\d+)?)[\"″]?\s*([NS])"
    r"[\s,]*"
    r"(\d{1,3})°\s*(\d{1,2})['′]\s*(\d{1,2}(?:\.\d+)?)[\"″]?\s*([EW])",
    re.IGNORECASE,
)
_LATITUDE_KEYS = ("latitude", "lat")
_LONGITUDE_KEYS = ("longitude", "lng", "lon")
_LATITUDE_NAMES = frozenset({"lat", "latitude"})
_LONGITUDE_NAMES = frozenset({"lng", "lon", "long", "longitude"})


def _axis_for(field_name: str | None) -> str | None:
    if not field_name:
        return None
    tokens = set(name_tokens(field_name))
    if tokens & _LATITUDE_NAMES:
        return "latitude"
    if tokens & _LONGITUDE_NAMES:
        return "longitude"
    return None


def _axis_limit(axis: str) -> float:
    return 90.0 if axis == "latitude" else 180.0


def _pick(mapping: Mapping[str, object], keys: tuple[str, ...]) -> object:
    for key in keys:
        if key in mapping:
            return mapping[key]
    return None


def _as_float(value: object) -> float:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"not a coordinate component: {value!r}")
    return float(cast(str | float, value))


def _dms_to_decimal(degrees: str, minutes: str, seconds: str, hemisphere: str) -> float:
    decimal = int(degrees) + int(minutes) / 60 + float(seconds) / 3600
    return -decimal if hemisphere.upper() in {"S", "W"} else decimal


def _parse_coordinates(value: object) -> tuple[float, float] | None:
    if isinstance(value, Mapping):
        mapping = cast(Mapping[str, object], value)
        latitude = _pick(mapping, _LATITUDE_KEYS)
        longitude = _pick(mapping, _LONGITUDE_KEYS)
        if latitude is None or longitude is None:
            return None
        return _as_float(latitude), _as_float(longitude)
    if not isinstance(value, str):
        return None
    if match := _DECIMAL_PAIR.match(value):
        return float(match.group(1)), float(match.group(2))
    if match := _DMS_PAIR.search(value):
        return (
            _dms_to_decimal(*match.group(1, 2, 3, 4)),
            _dms_to_decimal(*match.group(5, 6, 7, 8)),
        )
    return None


def _coordinates_pattern(value: object, field_name: str | None) -> bool:
    pair = _parse_coordinates(value)
    if pair is not None:
        return _coordinates_valid({"latitude": pair[0], "longitude": pair[1]})
    axis = _axis_for(field_name)
    if axis is None or isinstance(value, Mapping):
        return False
    return abs(_as_float(value)) <= _axis_limit(axis)


def _coordinates_canonical(value: object, field_name: str | None) -> object:
    pair = _parse_coordinates(value)
    if pair is not None:
        return {"latitude": pair[0], "longitude": pair[1]}
    axis = _axis_for(field_name)
    if axis is None or isinstance(value, Mapping):
        raise ValueError(f"not a coordinate pair: {value!r}")
    component = _as_float(value)
    if abs(component) > _axis_limit(axis):
        raise ValueError(f"{axis} {component} outside ±{_axis_limit(axis):g}")
    return component


def _coordinates_valid(canonical: object) -> bool:
    if isinstance(canonical, Mapping):
        mapping = cast(Mapping[str, object], canonical)
        latitude = mapping.get("latitude")
        longitude = mapping.get("longitude")
        if not isinstance(latitude, float | int) or not isinstance(longitude, float | int):
            return False
        return -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0
    return isinstance(canonical, float | int) and -180.0 <= canonical <= 180.0


# --- date --------------------------------------------------------------------

_DATE_PATTERNS = (
    re.compile(r"^\d{4}-\d{1,2}-\d{1,2}(?:[T ]\d{1,2}:\d{2}(?::\d{2}(?:\.\d+)?)?)?(?:Z|[+-]\d{2}:?\d{2})?$"),
    re.compile(r"^\d{1,2}[/.-]\d{1,2}[/.-]\d{2,4}$"),
    re.compile(r"^\d{4}/\d{1,2}/\d{1,2}$"),
    re.compile(r"^[A-Za-z]{3,9}\.? \d{1,2}(?:st|nd|rd|th)?,? \d{4}$"),
    re.compile(r"^\d{1,2} [A-Za-z]{3,9}\.?,? \d{4}$"),
)


def _date_pattern(value: object, _field_name: str | None) -> bool:
    if not isinstance(value, str):
        return False
    text = value.strip()
    return any(pattern.match(text) for pattern in _DATE_PATTERNS)


def _date_canonical(value: object, _field_name: str | None) -> object:
    if not isinstance(value, str):
        raise ValueError(f"not a date: {value!r}")
    try:
        parsed = dateparser.parse(value.strip())
    except OverflowError as exc:
        raise ValueError(f"date out of range: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC).isoformat()


# --- number ------------------------------------------------------------------

_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def _number_pattern(value: object, _field_name: str | None) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int | float):
        return True
    return isinstance(value, str) and _NUMBER.match(value.strip()) is not None


def _number_canonical(value: object, _field_name: str | None) -> object:
    if not _number_pattern(value, None):
        raise ValueError(f"not a number: {value!r}")
    return float(cast(str | float, value))


# --- string ------------------------------------------------------------------


def text_value(value: object) -> str | None:
    """Render a scalar cell as trimmed text; integral floats lose their ``.0``."""

    if is_empty(value):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _string_canonical(value: object, _field_name: str | None) -> object:
    if isinstance(value, Mapping):
        return value
    return text_value(value)


EMAIL = Recognizer(
    tag=SemanticType.EMAIL,
    field_names=frozenset({"email", "mail", "e_mail"}),
    pattern=_email_pattern,
    canonicalizer=_email_canonical,
    validator=_email_valid,
)
PHONE = Recognizer(
    tag=SemanticType.PHONE,
    field_names=frozenset({"phone", "tel", "telephone", "mobile", "cell"}),
    pattern=_phone_pattern,
    canonicalizer=_phone_canonical,
)
COORDINATES = Recognizer(
    tag=SemanticType.COORDINATES,
    field_names=frozenset({"lat", "lng", "lon", "latitude", "longitude", "coord", "coordinates"}),
    pattern=_coordinates_pattern,
    canonicalizer=_coordinates_canonical,
    validator=_coordinates_valid,
)
ADDRESS = Recognizer(
    tag=SemanticType.ADDRESS,
    field_names=frozenset({"address", "street", "location"}),
    pattern=_address_pattern,
    canonicalizer=_address_canonical,
)
DATE = Recognizer(
    tag=SemanticType.DATE,
    field_names=frozenset({"date", "when", "timestamp"}),
    pattern=_date_pattern,
    canonicalizer=_date_canonical,
)
NUMBER = Recognizer(
    tag=SemanticType.NUMBER,
    pattern=_number_pattern,
    canonicalizer=_number_canonical,
)
STRING = Recognizer(tag=SemanticType.STRING, canonicalizer=_string_canonical)

BUILTIN_RECOGNIZERS: tuple[Recognizer, ...] = (EMAIL, PHONE, COORDINATES, ADDRESS, DATE, NUMBER)


@dataclass(slots=True)
class RecognizerRegistry:
    """Recognizers keyed by tag; iteration order is tie-break priority."""

    _recognizers: dict[str, Recognizer] = field(default_factory=dict[str, Recognizer])
    fallback: Recognizer = STRING

    def __iter__(self) -> Iterator[Recognizer]:
        return iter(self._recognizers.values())

    def __contains__(self, tag: object) -> bool:
        return tag in self._recognizers or tag == self.fallback.tag

    def __len__(self) -> int:
        return len(self._recognizers)

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._recognizers)

    @property
    def recognizers(self) -> tuple[Recognizer, ...]:
        return tuple(self._recognizers.values())

    def register(self, recognizer: Recognizer, *, replace: bool = False) -> None:
        """Add ``recognizer`` after every recognizer already registered."""

        if recognizer.tag == self.fallback.tag:
            raise ValueError(f"{recognizer.tag!r} is reserved for the fallback recognizer")
        if recognizer.tag in self._recognizers and not replace:
            raise ValueError(f"Recognizer {recognizer.tag!r} is already registered")
        self._recognizers[recognizer.tag] = recognizer

    def get(self, tag: str) -> Recognizer:
        if tag == self.fallback.tag:
            return self.fallback
        try:
            return self._recognizers[tag]
        except KeyError:
            raise UnknownRecognizerError(tag) from None


def default_registry() -> RecognizerRegistry:
    registry = RecognizerRegistry()
    for recognizer in BUILTIN_RECOGNIZERS:
        registry.register(recognizer)
    return registry
