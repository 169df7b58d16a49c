from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import qrcode
import qrcode.constants
import qrcode.exceptions
import segno

DEFAULT_ERROR_CORRECTION = "M"
DEFAULT_BACKEND = "qrcode"

_QRCODE_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


class EncodingError(ValueError):
    message = "Unable to encode 'data' as a QR code."

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


@dataclass(frozen=True)
class ModuleGrid:
    size: int
    cells: Tuple[Tuple[bool, ...], ...]

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[bool]]) -> "ModuleGrid":
        cells = tuple(tuple(bool(cell) for cell in row) for row in rows)
        if any(len(row) != len(cells) for row in cells):
            raise ValueError("module grid must be square")
        return cls(size=len(cells), cells=cells)

    def cell(self, i: int, j: int) -> bool:
        return self.cells[i][j]


def normalize_error_correction(level: str) -> str:
    normalized = str(level).strip().upper()
    if normalized not in _QRCODE_LEVELS:
        raise ValueError(f"error correction must be one of L, M, Q, H (got {level!r})")
    return normalized


def _encode_qrcode(text: str, level: str) -> ModuleGrid:
    qr = qrcode.QRCode(
        version=None,  # smallest version that fits
        error_correction=_QRCODE_LEVELS[level],
        border=0,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except (qrcode.exceptions.DataOverflowError, ValueError) as exc:
        # qrcode 8 reports overflow as an invalid version 41.
        raise EncodingError() from exc
    return ModuleGrid.from_rows(qr.modules)


def _encode_segno(text: str, level: str) -> ModuleGrid:
    try:
        qr = segno.make_qr(text, error=level.lower(), boost_error=False)
    except segno.DataOverflowError as exc:
        raise EncodingError() from exc
    return ModuleGrid.from_rows(qr.matrix_iter(scale=1, border=0))


_BACKENDS = {
    "qrcode": _encode_qrcode,
    "segno": _encode_segno,
}


def available_backends() -> Tuple[str, ...]:
    return tuple(sorted(_BACKENDS))


def encode(
    text: str,
    error_correction: str = DEFAULT_ERROR_CORRECTION,
    backend: str = DEFAULT_BACKEND,
) -> ModuleGrid:
    """Encode ``text`` into the module grid of a full-size QR symbol.

    Raises EncodingError when the text does not fit any QR version at the
    requested error correction level.
    """
    if backend not in _BACKENDS:
        raise ValueError(f"unknown QR encoder backend {backend!r}")
    level = normalize_error_correction(error_correction)
    return _BACKENDS[backend](text, level)
