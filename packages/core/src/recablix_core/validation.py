"""Validation helpers for taxpayer identity and location data.

CUIT (Clave Única de Identificación Tributaria) has the format
XX-XXXXXXXX-X; the last digit is a modulo 11 check digit.
"""

import re
from typing import NamedTuple, Optional

from .exceptions import ValidationError

CUIT_PATTERN = re.compile(r"^\d{2}-\d{8}-\d$")
CUIT_MULTIPLIERS = (5, 4, 3, 2, 7, 6, 5, 4, 3, 2)

PROVINCES = {
    "901": "CABA",
    "902": "Buenos Aires",
    "903": "Catamarca",
    "904": "Córdoba",
    "905": "Corrientes",
    "906": "Chaco",
    "907": "Chubut",
    "908": "Entre Ríos",
    "909": "Formosa",
    "910": "Jujuy",
    "911": "La Pampa",
    "912": "La Rioja",
    "913": "Mendoza",
    "914": "Misiones",
    "915": "Neuquén",
    "916": "Río Negro",
    "917": "Salta",
    "918": "San Juan",
    "919": "San Luis",
    "920": "Santa Cruz",
    "921": "Santa Fe",
    "922": "Santiago del Estero",
    "923": "Tierra del Fuego",
    "924": "Tucumán",
}


class CuitValidation(NamedTuple):
    """Outcome of a CUIT check."""

    valid: bool
    error: Optional[str] = None


def cuit_check_digit(digits: str) -> int:
    """Compute the check digit for the first ten digits of a CUIT."""
    total = sum(int(d) * m for d, m in zip(digits[:10], CUIT_MULTIPLIERS))
    expected = 11 - (total % 11)
    if expected == 11:
        return 0
    if expected == 10:
        return 9
    return expected


def validate_cuit(cuit: Optional[str]) -> CuitValidation:
    """Validate format and check digit of a CUIT.

    An empty value is valid: the CUIT is optional on a client profile.

    Args:
        cuit: CUIT in XX-XXXXXXXX-X format

    Returns:
        CuitValidation with the error message when invalid
    """
    if cuit is None or not cuit.strip():
        return CuitValidation(valid=True)

    trimmed = cuit.strip()
    if not CUIT_PATTERN.match(trimmed):
        return CuitValidation(
            valid=False,
            error="Formato inválido. Debe ser XX-XXXXXXXX-X (11 dígitos)",
        )

    digits = trimmed.replace("-", "")
    expected = cuit_check_digit(digits)
    if expected != int(digits[10]):
        return CuitValidation(
            valid=False,
            error=f"Dígito verificador inválido (esperado: {expected})",
        )

    return CuitValidation(valid=True)


def is_valid_cuit(cuit: Optional[str]) -> bool:
    return validate_cuit(cuit).valid


def require_valid_cuit(cuit: str) -> str:
    """Return the trimmed CUIT or raise ValidationError."""
    check = validate_cuit(cuit)
    if not check.valid:
        raise ValidationError(
            check.error or "Invalid CUIT",
            field="cuit",
            value=cuit,
            constraint="XX-XXXXXXXX-X with modulo 11 check digit",
        )
    return cuit.strip()


def format_cuit_input(value: str) -> str:
    """Format typed digits as a CUIT while the user types.

    Example: "20123456789" -> "20-12345678-9"
    """
    digits = re.sub(r"\D", "", value)[:11]
    if len(digits) <= 2:
        return digits
    if len(digits) <= 10:
        return f"{digits[:2]}-{digits[2:]}"
    return f"{digits[:2]}-{digits[2:10]}-{digits[10]}"


def province_name(code: str) -> Optional[str]:
    """Name of the province with the given code, None if unknown."""
    return PROVINCES.get(code)
