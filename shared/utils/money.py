# shared/utils/money.py
"""
Amount parsing for fees and payments.
Amounts are taken as given: no currency conversion, no rounding policy.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Parse a user-supplied amount.

    Accepts numbers and numeric strings, with either "." or a single ","
    as the decimal separator ("120,50"). Returns None when the value does
    not parse to a finite number.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if ',' in text and '.' not in text and text.count(',') == 1:
            text = text.replace(',', '.')
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None

    if not amount.is_finite():
        return None
    return amount
