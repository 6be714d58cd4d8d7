from contextlib import contextmanager
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Sequence


@dataclass(frozen=True)
class ColumnSpec:
    key: str
    label: str
    min_width: int = 80
    init_width: int = 160
    mono: bool = False
    force_one_line: bool = False


# order here is both the display order and the export order
COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec('time', 'Time', init_width=170, mono=True, force_one_line=True),
    ColumnSpec('asset', 'Asset', init_width=100),
    ColumnSpec('route', 'Route', init_width=160, mono=True, force_one_line=True),
    ColumnSpec('state', 'State', init_width=190),
    ColumnSpec('amount', 'Amount', init_width=160, mono=True, force_one_line=True),
    ColumnSpec('fee', 'Fee', init_width=180, mono=True, force_one_line=True),
    ColumnSpec('sourceAddress', 'Source Address', init_width=420, mono=True, force_one_line=True),
    ColumnSpec('destinationAddress', 'Destination Address', init_width=420, mono=True, force_one_line=True),
    ColumnSpec('protocolAddress', 'Protocol Address', init_width=420, mono=True, force_one_line=True),
    ColumnSpec('sourceTxHash', 'Source Tx', init_width=520, mono=True, force_one_line=True),
    ColumnSpec('destinationTxHash', 'Destination Tx', init_width=520, mono=True, force_one_line=True),
)


@dataclass(frozen=True)
class _Drag:
    key: str
    start_x: float
    start_width: int


class ColumnLayout:
    """
    column widths plus a drag-to-resize state machine:
    idle -> dragging(key, start_x, start_width) -> idle

    pointer positions and widths share the same unit (pixels),
    and a width never drops below its column's min_width
    """

    def __init__(self, columns: Sequence[ColumnSpec] = COLUMNS):
        self.columns = tuple(columns)
        self._specs = {c.key: c for c in self.columns}
        self._widths = {c.key: max(c.min_width, c.init_width) for c in self.columns}
        self._drag: _Drag | None = None

    @property
    def widths(self) -> Mapping[str, int]:
        return MappingProxyType(dict(self._widths))

    def width(self, key: str) -> int:
        return self._widths[key]

    def spec(self, key: str) -> ColumnSpec:
        return self._specs[key]

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    @property
    def active_key(self) -> str | None:
        return self._drag.key if self._drag else None

    def resize_start(self, key: str, pointer_x: float):
        if key not in self._specs:
            raise KeyError(f'unknown column {key!r}')
        # a new drag silently replaces any active one
        self._drag = _Drag(key, pointer_x, self._widths[key])

    def resize_move(self, pointer_x: float):
        if self._drag is None:
            return
        drag = self._drag
        min_width = self._specs[drag.key].min_width
        self._widths[drag.key] = max(
            min_width, int(round(drag.start_width + (pointer_x - drag.start_x))))

    def resize_end(self):
        self._drag = None

    @contextmanager
    def drag(self, key: str, pointer_x: float) -> Iterator['ColumnLayout']:
        """
        wraps one drag gesture, always ends it even if the caller raises
        """
        self.resize_start(key, pointer_x)
        try:
            yield self
        finally:
            self.resize_end()

    def resize_to(self, key: str, width: float):
        """
        one-shot drag from the current width to the requested one
        """
        current = self._widths[key]
        with self.drag(key, current):
            self.resize_move(width)

    def reset(self):
        self.resize_end()
        self._widths = {c.key: max(c.min_width, c.init_width) for c in self.columns}
