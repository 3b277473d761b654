"""Arabic amount-in-words rendering and parsing.

``to_words`` produces the canonical form printed on contracts and price
schedules. Groups of three digits are rendered separately and joined with
the conjunction " و ". Scale words agree with their count: singular for
one, dual for two, plural for three to ten, singular again from eleven on
with the ones digit spoken before the tens.

``parse_words`` reads that canonical form back. It also accepts the
accusative scale forms (ألفًا, مليونًا, مليارًا) and the spelling مئتان.
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from pricedesk.domain.errors import (
    InvalidInputError,
    NumeralParseError,
    negative_value,
    not_finite,
    unknown_numeral_token,
)

logger = logging.getLogger(__name__)

CONJUNCTION = " و "
ZERO_WORD = "صفر"
LEGAL_SUFFIX = "فقط لا غير"
MAX_AMOUNT = 10**12 - 1


@dataclass(frozen=True)
class Currency:
    """Major and minor unit names of a currency."""

    name: str
    subunit: str
    subunits_per_unit: int = 100


EGP = Currency(name="جنيه", subunit="قرش")

ONES = ["", "واحد", "اثنان", "ثلاثة", "أربعة", "خمسة", "ستة", "سبعة", "ثمانية", "تسعة"]
TEENS = [
    "عشرة", "أحد عشر", "اثنا عشر", "ثلاثة عشر", "أربعة عشر",
    "خمسة عشر", "ستة عشر", "سبعة عشر", "ثمانية عشر", "تسعة عشر",
]
TENS = ["", "عشرة", "عشرون", "ثلاثون", "أربعون", "خمسون", "ستون", "سبعون", "ثمانون", "تسعون"]
HUNDREDS = [
    "", "مائة", "مائتان", "ثلاثمائة", "أربعمائة", "خمسمائة",
    "ستمائة", "سبعمائة", "ثمانمائة", "تسعمائة",
]


@dataclass(frozen=True)
class Scale:
    value: int
    singular: str
    dual: str
    plural: str


SCALES = [
    Scale(10**9, "مليار", "ملياران", "مليارات"),
    Scale(10**6, "مليون", "مليونان", "ملايين"),
    Scale(10**3, "ألف", "ألفان", "آلاف"),
]


def _group_words(n: int) -> str:
    """Render 1..999."""
    parts = []
    hundreds, rest = divmod(n, 100)
    if hundreds:
        parts.append(HUNDREDS[hundreds])
    if 10 <= rest < 20:
        parts.append(TEENS[rest - 10])
    elif rest >= 20:
        tens, ones = divmod(rest, 10)
        if ones:
            parts.append(ONES[ones])
        parts.append(TENS[tens])
    elif rest:
        parts.append(ONES[rest])
    return CONJUNCTION.join(parts)


def _scaled_group_words(count: int, scale: Scale) -> str:
    if count == 1:
        return scale.singular
    if count == 2:
        return scale.dual
    # From a hundred upwards the last two digits decide the form.
    tail = count % 100 if count >= 100 else count
    noun = scale.plural if 3 <= tail <= 10 else scale.singular
    return f"{_group_words(count)} {noun}"


def integer_to_words(n: int) -> str:
    """Render a non-negative integer as Arabic cardinal words."""
    if n < 0:
        raise InvalidInputError(negative_value("Amount", n))
    if n > MAX_AMOUNT:
        raise InvalidInputError(f"Amount {n} exceeds the supported range")
    if n == 0:
        return ZERO_WORD

    parts = []
    remainder = n
    for scale in SCALES:
        count, remainder = divmod(remainder, scale.value)
        if count:
            parts.append(_scaled_group_words(count, scale))
    if remainder:
        parts.append(_group_words(remainder))
    return CONJUNCTION.join(parts)


def to_words(amount, currency: Currency = EGP, suffix: bool = False) -> str:
    """Render a money amount in Arabic words.

    Args:
        amount: Non-negative amount (Decimal, int or numeric string)
        currency: Currency whose unit names are used
        suffix: If True, append the legal closing phrase "فقط لا غير"

    Returns:
        Words such as "ألف و مائتان جنيه و خمسون قرش"

    Raises:
        InvalidInputError: If the amount is not finite, negative or out of range
    """
    value = Decimal(str(amount))
    if not value.is_finite():
        raise InvalidInputError(not_finite("Amount", amount))
    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if value < 0:
        raise InvalidInputError(negative_value("Amount", amount))

    whole = int(value)
    fraction = int((value - whole) * currency.subunits_per_unit)

    text = f"{integer_to_words(whole)} {currency.name}"
    if fraction:
        text += f"{CONJUNCTION}{integer_to_words(fraction)} {currency.subunit}"
    if suffix:
        text += f" {LEGAL_SUFFIX}"
    return text


# Word values for parsing. Multi-word teens are handled additively:
# "ثلاثة عشر" reads as 3 + 10.
WORD_VALUES = {ZERO_WORD: 0, "عشر": 10, "أحد": 1, "اثنا": 2, "مئتان": 200}
WORD_VALUES.update({word: i for i, word in enumerate(ONES) if word})
WORD_VALUES.update({word: i * 10 for i, word in enumerate(TENS) if word})
WORD_VALUES.update({word: i * 100 for i, word in enumerate(HUNDREDS) if word})

MULTIPLIERS = {}
DUALS = {}
for _scale in SCALES:
    MULTIPLIERS[_scale.singular] = _scale.value
    MULTIPLIERS[_scale.plural] = _scale.value
    MULTIPLIERS[_scale.singular + "ًا"] = _scale.value
    MULTIPLIERS[_scale.singular + "ا"] = _scale.value
    DUALS[_scale.dual] = _scale.value


def _parse_integer(text: str) -> int:
    total = 0
    current = 0
    for chunk in text.split(CONJUNCTION):
        for word in chunk.split():
            if word in WORD_VALUES:
                current += WORD_VALUES[word]
            elif word in MULTIPLIERS:
                total += (current or 1) * MULTIPLIERS[word]
                current = 0
            elif word in DUALS:
                if current:
                    raise NumeralParseError(unknown_numeral_token(word))
                total += 2 * DUALS[word]
            else:
                raise NumeralParseError(unknown_numeral_token(word))
    return total + current


def parse_words(words: str, currency: Currency = EGP) -> Decimal:
    """Parse canonical amount-in-words back into a Decimal.

    Raises:
        NumeralParseError: If the text contains a word outside the grammar
    """
    text = re.sub(r"\s+", " ", words or "").strip()
    if not text:
        raise NumeralParseError("Empty amount text")
    if text.endswith(LEGAL_SUFFIX):
        text = text[: -len(LEGAL_SUFFIX)].strip()

    fraction_text = ""
    if f" {currency.name}" in f" {text} ":
        whole_text, _, fraction_text = f" {text} ".partition(f" {currency.name} ")
        whole_text = whole_text.strip()
        fraction_text = fraction_text.strip()
    else:
        whole_text = text

    whole = _parse_integer(whole_text) if whole_text else 0

    fraction = 0
    if fraction_text:
        if not fraction_text.startswith(CONJUNCTION.strip() + " "):
            raise NumeralParseError(unknown_numeral_token(fraction_text.split()[0]))
        fraction_text = fraction_text[2:].strip()
        if fraction_text.endswith(currency.subunit):
            fraction_text = fraction_text[: -len(currency.subunit)].strip()
        fraction = _parse_integer(fraction_text)
        if fraction >= currency.subunits_per_unit:
            raise NumeralParseError(f"Subunit value {fraction} is out of range")

    return Decimal(whole) + Decimal(fraction) / currency.subunits_per_unit


def to_number(words: str, currency: Currency = EGP) -> Optional[Decimal]:
    """Best-effort inverse of ``to_words``.

    Returns:
        The parsed amount, or None if the text is not in the canonical grammar
    """
    try:
        return parse_words(words, currency)
    except NumeralParseError as e:
        logger.debug("Could not parse amount words", extra={"error": str(e)})
        return None
