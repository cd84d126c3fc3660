"""
Fehlerklassen für die Hex-Konvertierung
Werden innerhalb der Decoder geworfen und am Decoder-Rand in das Ergebnis übernommen
"""


class ConversionError(Exception):
    """Basisklasse aller Konvertierungsfehler."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ConversionError):
    """Leere oder fehlende Eingabe am Router."""


class UnsupportedLogicError(ConversionError):
    """Logic ID ist weder 1 noch 2."""


class FormatError(ConversionError):
    """Eingabe enthält unzulässige Zeichen."""


class LengthError(ConversionError):
    """Eingabe hat die falsche Länge."""


class DecodeError(ConversionError):
    """Unerwarteter Fehler während der Dekodierung."""
