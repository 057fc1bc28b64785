"""pymemmap - Textual application showing one process memory snapshot."""

from enum import Enum

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import DataTable, Footer, Static

from pymemmap.config import DEFAULT_TOP_N
from pymemmap.models import DetailedMemoryRegion, Process, format_size, printable
from pymemmap.ranking import DEFAULT_COUNTER, Ranking, rank_regions

BAR_WIDTH = 20
OTHER_LABEL = "[other]"


class CounterKey(Enum):
    """smaps counters the user can cycle through."""

    RSS = "Rss"
    PSS = "Pss"
    SWAP = "Swap"
    PRIVATE_DIRTY = "Private_Dirty"
    SIZE = "Size"


def next_counter(counter: str) -> str:
    """Return the counter after the given one, wrapping around."""
    keys = [key.value for key in CounterKey]
    if counter not in keys:
        return keys[0]
    return keys[(keys.index(counter) + 1) % len(keys)]


def format_kib(value: int) -> str:
    """Format a KiB counter as a human-readable size."""
    return format_size(value * 1024)


def usage_bar(ratio: float, width: int = BAR_WIDTH) -> Text:
    """Render a ratio in [0, 1] as a fixed width bar."""
    filled = min(int(ratio * width), width)
    return Text.assemble(("█" * filled, "green"), ("░" * (width - filled), "dim"))


class ProcessHeader(Static):
    """Header line with the pid and command line."""

    DEFAULT_CSS = """
    ProcessHeader {
        height: auto;
        padding: 0 1;
        background: $surface;
    }
    """

    def __init__(self, process: Process, *args, **kwargs) -> None:
        """Initialize ProcessHeader."""
        super().__init__(self.describe(process), *args, **kwargs)

    @staticmethod
    def describe(process: Process) -> Text:
        return Text.assemble(
            (f" Process: {process.pid}: ", "yellow"),
            (process.cmd_line, "white"),
        )


class CategoryTable(Container):
    """Ranked mapping categories for the selected counter."""

    DEFAULT_CSS = """
    CategoryTable {
        height: auto;
        max-height: 50%;
        border: solid $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize CategoryTable."""
        super().__init__(*args, **kwargs)
        self._labels: list[str] = []

    @property
    def labels(self) -> list[str]:
        """Labels of the displayed rows, in display order."""
        return list(self._labels)

    def compose(self) -> ComposeResult:
        """Compose the category table."""
        yield DataTable(id="category-table")

    def on_mount(self) -> None:
        """Configure the table when mounted."""
        table = self.query_one("#category-table", DataTable)
        table.cursor_type = "row"
        if not table.columns:
            self._add_columns(table)

    def _add_columns(self, table: DataTable) -> None:
        table.add_column("Mapping", key="label")
        table.add_column("Value", key="value", width=12)
        table.add_column("Share", key="share", width=7)
        table.add_column("", key="bar", width=BAR_WIDTH)
        table.add_column("Regions", key="regions", width=8)

    def update_ranking(self, ranking: Ranking) -> None:
        """Replace the rows with a new ranking."""
        table = self.query_one("#category-table", DataTable)
        if not table.columns:
            self._add_columns(table)
        table.clear()
        self._labels = []

        for group in ranking.groups:
            table.add_row(
                Text(printable(group.label)),
                format_kib(group.value),
                f"{group.ratio * 100:5.1f}%",
                usage_bar(group.ratio),
                str(group.regions),
                key=group.label,
            )
            self._labels.append(group.label)

        remainder = ranking.remainder
        if ranking.truncated and remainder > 0:
            ratio = remainder / ranking.total
            table.add_row(
                Text(OTHER_LABEL, style="dim"),
                format_kib(remainder),
                f"{ratio * 100:5.1f}%",
                usage_bar(ratio),
                str(ranking.group_count - len(ranking.groups)),
            )
            self._labels.append(OTHER_LABEL)


class RegionTable(Container):
    """Every region of the snapshot, in address order."""

    DEFAULT_CSS = """
    RegionTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the region table."""
        yield DataTable(id="region-table")

    def on_mount(self) -> None:
        """Configure the table when mounted."""
        table = self.query_one("#region-table", DataTable)
        table.cursor_type = "row"

    def update_regions(self, regions: tuple[DetailedMemoryRegion, ...], counter: str) -> None:
        """Rebuild the table; the counter column follows the selected counter."""
        table = self.query_one("#region-table", DataTable)
        table.clear(columns=True)

        table.add_column("Address", key="address", width=27)
        table.add_column("Perm", key="perms", width=5)
        table.add_column("Offset", key="offset", width=9)
        table.add_column("Size", key="size", width=10)
        table.add_column("Dev", key="device", width=6)
        table.add_column("Inode", key="inode", width=9)
        table.add_column(counter, key="counter", width=10)
        table.add_column("Mapping", key="path")

        for region in regions:
            major, minor = region.region.device
            table.add_row(
                f"{region.start:012x}-{region.end:012x}",
                str(region.permissions),
                f"{region.region.offset:08x}",
                format_size(region.size),
                f"{major:02x}:{minor:02x}",
                str(region.region.inode),
                format_kib(region.counter(counter)),
                Text(printable(str(region.path_type))),
            )


class MemmapApp(App):
    """Main pymemmap application."""

    TITLE = "pymemmap"
    SUB_TITLE = "Process Memory Map"

    CSS = """
    Screen {
        layout: vertical;
    }

    #process-header {
        dock: top;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("c", "cycle_counter", "Counter"),
    ]

    def __init__(
        self,
        process: Process,
        counter: str = DEFAULT_COUNTER,
        top_n: int | None = DEFAULT_TOP_N,
    ) -> None:
        """
        Initialize the MemmapApp.

        Args:
            process: The snapshot to display. It is never re-read.
            counter: smaps counter used for ranking.
            top_n: Number of categories to list; None lists all.
        """
        super().__init__()
        self._process = process
        self._counter = counter
        self._top_n = top_n
        self._ranking = rank_regions(process.regions, counter, top_n)

    @property
    def counter(self) -> str:
        return self._counter

    @property
    def ranking(self) -> Ranking:
        return self._ranking

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield ProcessHeader(self._process, id="process-header")
        yield CategoryTable()
        yield RegionTable()
        yield Footer()

    def on_mount(self) -> None:
        """Fill the tables from the snapshot."""
        self._refresh_tables()

    def _refresh_tables(self) -> None:
        self.query_one(CategoryTable).update_ranking(self._ranking)
        self.query_one(RegionTable).update_regions(self._process.regions, self._counter)
        self.sub_title = f"{self.SUB_TITLE} - {self._counter}: {format_kib(self._ranking.total)}"

    def action_cycle_counter(self) -> None:
        """Re-rank the same snapshot by the next counter."""
        self._counter = next_counter(self._counter)
        self._ranking = rank_regions(self._process.regions, self._counter, self._top_n)
        self._refresh_tables()
        self.notify(f"Counter: {self._counter}")
