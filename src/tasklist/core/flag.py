# src/tasklist/core/flag.py

from __future__ import annotations

from collections.abc import Callable


class BooleanFlag:
    """
    On/off cell.

    toggle/set_true/set_false are plain closures built once in __init__, so
    `flag.toggle is flag.toggle` holds for the cell's whole lifetime and they
    can be handed to anything that compares callbacks by identity.
    """

    def __init__(self, initial: bool = False, on_change: Callable[[bool], None] | None = None) -> None:
        self._value = bool(initial)
        self._on_change = on_change

        def toggle() -> None:
            self._set(not self._value)

        def set_true() -> None:
            self._set(True)

        def set_false() -> None:
            self._set(False)

        self.toggle = toggle
        self.set_true = set_true
        self.set_false = set_false

    @property
    def value(self) -> bool:
        return self._value

    def __bool__(self) -> bool:
        return self._value

    def _set(self, new_value: bool) -> None:
        if new_value == self._value:
            return
        self._value = new_value
        if self._on_change is not None:
            self._on_change(new_value)
