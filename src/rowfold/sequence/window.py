"""Overlapping time windows over a time-ordered sequence.

A window function splits one sequence, already sorted ascending by its time
column, into windows of ``window_size``, a new one starting every
``window_separation``. Windows overlap when the size exceeds the separation
(e.g. a one day window produced every hour) and leave gaps when it is
smaller.

Window starts lie on the grid ``offset + k * window_separation``. Each window
covers the half-open interval ``[start, start + window_size)``: a row exactly
at a window's end belongs to later windows only.

Example with a window size of 12 hours and a separation of 1 hour:
    (0:00 to 12:00), (1:00 to 13:00), (2:00 to 14:00) and so on.
With an offset of 15 minutes:
    (0:15 to 12:15), (1:15 to 13:15), (2:15 to 14:15) and so on.

Windows need not contain any rows; empty windows are produced for gaps in
the data unless ``exclude_empty_windows`` is set.
"""

from __future__ import annotations

from dataclasses import dataclass

from rowfold.core.logging import get_logger
from rowfold.core.models.base import ColumnType, ConfigurationError
from rowfold.core.values import Row, Sequence, Value
from rowfold.schema.metadata import TimeMetaData
from rowfold.schema.models import ColumnSpec, Schema, SequenceSchema
from rowfold.sequence.config import WindowConfig, build_window_config

logger = get_logger(__name__)

WINDOW_START_COLUMN = "windowStartTime"
WINDOW_END_COLUMN = "windowEndTime"


def floor_to_grid(time: int, separation: int, offset: int) -> int:
    """Latest grid line ``offset + k * separation`` at or before ``time``."""
    return time - ((time - offset) % separation)


def ceil_to_grid(time: int, separation: int, offset: int) -> int:
    """Earliest grid line ``offset + k * separation`` at or after ``time``."""
    return time + ((offset - time) % separation)


@dataclass(frozen=True)
class Window:
    """One window: its boundaries and the rows that fell inside them."""

    start: int
    end: int
    rows: Sequence

    def __len__(self) -> int:
        return len(self.rows)


class OverlappingTimeWindowFunction:
    """Segment sequences into (possibly overlapping) time windows.

    Args:
        config: Validated window configuration
        input_schema: Optional sequence schema to bind immediately

    Raises:
        ConfigurationError: if ``input_schema`` is given and invalid
    """

    def __init__(self, config: WindowConfig, input_schema: Schema | None = None):
        self.config = config
        self._input_schema: SequenceSchema | None = None
        self._time_idx: int | None = None
        self.time_zone: str | None = None
        if input_schema is not None:
            self.set_input_schema(input_schema)

    @classmethod
    def build(
        cls, input_schema: Schema | None = None, **params: object
    ) -> OverlappingTimeWindowFunction:
        """Validate ``params`` as a WindowConfig and construct the function.

        Raises:
            ConfigurationError: if any window parameter is missing or invalid
        """
        config = build_window_config(**params).unwrap(ConfigurationError)  # type: ignore[arg-type]
        return cls(config, input_schema)

    # --- schema ---

    def set_input_schema(self, schema: Schema) -> None:
        """Bind and validate the schema of the sequences to segment."""
        column = self.config.time_column
        if not isinstance(schema, SequenceSchema):
            raise ConfigurationError(
                "Invalid schema: OverlappingTimeWindowFunction can only operate on SequenceSchema"
            )
        if not schema.has_column(column):
            raise ConfigurationError(f'Input schema does not have a column with name "{column}"')
        spec = schema.column(column)
        if spec.type is not ColumnType.TIME:
            raise ConfigurationError(
                f'Invalid column: column "{column}" is not of type {ColumnType.TIME.value}; '
                f"is {spec.type.value}"
            )

        self._input_schema = schema
        self._time_idx = schema.index_of(column)
        self.time_zone = spec.metadata.time_zone  # type: ignore[union-attr]
        logger.debug(
            "window_function_configured",
            description=str(self),
            time_zone=self.time_zone,
        )

    @property
    def input_schema(self) -> SequenceSchema | None:
        return self._input_schema

    def transform_schema(self, schema: Schema) -> Schema:
        """Schema of the window sequences, with any requested time columns appended."""
        extra = []
        if self.config.add_window_start_column:
            extra.append(ColumnSpec(WINDOW_START_COLUMN, TimeMetaData()))
        if self.config.add_window_end_column:
            extra.append(ColumnSpec(WINDOW_END_COLUMN, TimeMetaData()))
        if not extra:
            return schema
        return schema.with_columns(*extra)

    # --- segmentation ---

    def windows(self, sequence: Sequence) -> list[Window]:
        """Split ``sequence`` into windows, in window start order.

        The sequence must be sorted ascending by the time column; this is
        assumed, not checked.
        """
        if self._time_idx is None:
            raise ConfigurationError("Input schema not set on OverlappingTimeWindowFunction")
        if not sequence:
            return []

        cfg = self.config
        size = cfg.window_size_millis
        separation = cfg.window_separation_millis
        offset = cfg.offset_millis
        idx = self._time_idx

        times = [row[idx].to_long() for row in sequence]
        n = len(times)

        # First window: earliest grid start whose window ends after the first row
        start = ceil_to_grid(times[0] - size + 1, separation, offset)
        # Last window: latest grid start at or before the last row
        last_start = floor_to_grid(times[-1], separation, offset)

        out: list[Window] = []
        cursor = 0
        while start <= last_start:
            end = start + size
            next_start = start + separation

            # Rows falling in the gap before this window belong to no window
            while cursor < n and times[cursor] < start:
                cursor += 1

            rows: Sequence = []
            next_cursor: int | None = None
            i = cursor
            while i < n and times[i] < end:
                if next_cursor is None and times[i] >= next_start:
                    next_cursor = i
                rows.append(self._place(sequence[i], start, end))
                i += 1
            cursor = next_cursor if next_cursor is not None else i

            if rows or not cfg.exclude_empty_windows:
                out.append(Window(start=start, end=end, rows=rows))

            if not rows and cfg.exclude_empty_windows and cursor < n:
                # Jump straight to the first window that can hold the next row
                start = max(next_start, ceil_to_grid(times[cursor] - size + 1, separation, offset))
            else:
                start = next_start

        return out

    def segment(self, sequence: Sequence) -> list[Sequence]:
        """Split ``sequence`` into window sequences, in window start order."""
        return [window.rows for window in self.windows(sequence)]

    def _place(self, row: Row, start: int, end: int) -> Row:
        cfg = self.config
        if not (cfg.add_window_start_column or cfg.add_window_end_column):
            return row
        extra: list[Value] = []
        if cfg.add_window_start_column:
            extra.append(Value.time(start))
        if cfg.add_window_end_column:
            extra.append(Value.time(end))
        return (*row, *extra)

    def __str__(self) -> str:
        cfg = self.config
        offset_unit = cfg.offset_unit.value if cfg.offset != 0 and cfg.offset_unit else ""
        return (
            f'OverlappingTimeWindowFunction(column="{cfg.time_column}",'
            f"windowSize={cfg.window_size}{cfg.window_size_unit.value},"
            f"windowSeparation={cfg.window_separation}{cfg.window_separation_unit.value},"
            f"offset={cfg.offset}{offset_unit}"
            + (",addWindowStartTimeColumn=true" if cfg.add_window_start_column else "")
            + (",addWindowEndTimeColumn=true" if cfg.add_window_end_column else "")
            + (",excludeEmptyWindows=true" if cfg.exclude_empty_windows else "")
            + ")"
        )
