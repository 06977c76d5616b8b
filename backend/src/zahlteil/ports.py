"""
Interfaces of the collaborators around the QR-bill core.

The core produces payload text and keyed validation messages. Turning them
into something visible is done by implementations of these protocols:
- SymbolGenerator: payload text -> QR code module matrix
- MessageCatalog: message key + locale -> display template
- Canvas: vector drawing surface for rendering the payment part
"""

from collections.abc import Sequence
from typing import Protocol


class SymbolGenerator(Protocol):
    """Turns payload text into a square matrix of dark (True) modules."""

    def __call__(self, text: str) -> Sequence[Sequence[bool]]:
        ...


class MessageCatalog(Protocol):
    """
    Looks up localized display text for a message key.

    Templates use positional placeholders {0}, {1}, ... for the message
    parameters.
    """

    def lookup(self, message_key: str, locale: str) -> str | None:
        ...


class Canvas(Protocol):
    """
    Vector drawing surface.

    Coordinates are in millimeters with the origin at the bottom left and
    the y-axis pointing up.
    """

    def set_transformation(
        self,
        translate_x: float,
        translate_y: float,
        rotate: float,
        scale_x: float,
        scale_y: float,
    ) -> None:
        ...

    def move_to(self, x: float, y: float) -> None:
        ...

    def line_to(self, x: float, y: float) -> None:
        ...

    def cubic_curve_to(self, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> None:
        ...

    def add_rectangle(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def fill_path(self, color: int) -> None:
        ...

    def stroke_path(self, stroke_width: float, color: int) -> None:
        ...

    def put_text(self, text: str, x: float, y: float, font_size: int, is_bold: bool) -> None:
        ...
