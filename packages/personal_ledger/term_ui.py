"""Full-screen terminal dashboard (prompt_toolkit-based).

Layout
------
- top left: record list (one fixed-width line per record, selection marked);
- top right: expense totals per category as horizontal bars;
- bottom: balance over time;
- status line with the last result or validation error;
- floating popups for the add/edit form and the help screen.

All state lives in :class:`~personal_ledger.controller.LedgerController`; this
module only wires key presses to controller intents and renders its state.
Storage commands run as background tasks on the application's event loop. A
``FatalStorageError`` raised by one of them exits the application with that
exception so the caller can report it.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any

from prompt_toolkit.application import Application, get_app
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import (
    ConditionalContainer,
    Float,
    FloatContainer,
    HSplit,
    Layout,
    VSplit,
    Window,
)
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.output import Output
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from .charts import balance_series, category_bars, x_labels, y_bounds
from .controller import FocusedWidget, LedgerController
from .input_state import FIELD_COUNT, FIELD_TITLES, InputMode
from .ledger import FatalStorageError
from .logging_setup import get_logger

_logger = get_logger("personal_ledger.term_ui")

HELP_TEXT = """\
 q          quit
 Tab/S-Tab  cycle focused panel
 Up/Down    move selection in the record list
 a          add a record
 Enter      edit the selected record
 Delete     delete the selected record
 h          show this help

 In the form:
 Tab/S-Tab  next/previous field
 Backspace  delete last character
 Enter      save
 Esc        cancel

 Esc or q closes this help.
"""

STYLE = Style.from_dict(
    {
        "frame.border": "#888888",
        "focused frame.border": "#00d7ff bold",
        "record": "",
        "record.selected": "bg:#d75fd7 #000000 bold",
        "record.selected.unfocused": "reverse",
        "bar": "#ff5f5f",
        "bar.label": "",
        "plot": "#ffd75f bold",
        "axis": "#888888",
        "status": "reverse",
        "status.error": "bg:#ff5f5f #000000 bold",
        "field": "bg:#000000 #ffffff",
        "field.active": "bg:#000000 #ffff00 bold",
        "popup": "bg:#000000",
    }
)

_BAR_BLOCK = "█"
_PLOT_DOT = "•"


# ----------------------------------------------------------------------------
# Rendering helpers
# ----------------------------------------------------------------------------


def _records_fragments(controller: LedgerController) -> StyleAndTextTuples:
    lines = controller.records.format_all()
    if not lines:
        return [("class:record", " No records. Press 'a' to add one.")]
    focused = controller.focus is FocusedWidget.RECORDS
    out: StyleAndTextTuples = []
    for i, line in enumerate(lines):
        if i == controller.selected:
            style = "class:record.selected" if focused else "class:record.selected.unfocused"
            # Lets the window scroll the selection into view.
            out.append(("[SetCursorPosition]", ""))
            out.append((style, f">{line}"))
        else:
            out.append(("class:record", f" {line}"))
        out.append(("", "\n"))
    return out


def _bars_fragments(controller: LedgerController, width: int) -> StyleAndTextTuples:
    bars = category_bars(controller.records)
    peak = max((v for _, v in bars), default=0)
    label_w = max(len(label) for label, _ in bars)
    room = max(1, width - label_w - 12)
    out: StyleAndTextTuples = []
    for label, value in bars:
        length = 0 if peak <= 0 else round(room * value / peak)
        out.append(("class:bar.label", f" {label:<{label_w}} "))
        out.append(("class:bar", _BAR_BLOCK * length))
        out.append(("class:bar.label", f" {value}\n"))
    return out


def plot_lines(
    series: list[tuple[Any, float]], labels: list[str], width: int, height: int
) -> list[str]:
    """Render ``series`` as a dot plot of ``height`` rows with axis labels."""

    if not series:
        return ["No records"]
    lo, hi = y_bounds(series)
    y_labels = [f"{hi:.2f}", f"{(lo + hi) / 2:.2f}", f"{lo:.2f}"]
    gutter = max(len(s) for s in y_labels) + 1
    cols = max(2, width - gutter - 1)
    rows = max(3, height)

    grid = [[" "] * cols for _ in range(rows)]
    n = len(series)
    for i, (_, value) in enumerate(series):
        x = 0 if n == 1 else round(i * (cols - 1) / (n - 1))
        frac = 0.5 if hi == lo else (value - lo) / (hi - lo)
        y = rows - 1 - round(frac * (rows - 1))
        grid[y][x] = _PLOT_DOT

    out: list[str] = []
    for r, row in enumerate(grid):
        if r == 0:
            tag = y_labels[0]
        elif r == rows // 2:
            tag = y_labels[1]
        elif r == rows - 1:
            tag = y_labels[2]
        else:
            tag = ""
        out.append(f"{tag:>{gutter - 1}} |" + "".join(row))
    out.append(" " * gutter + "+" + "-" * cols)
    out.append(" " * (gutter + 1) + "  ".join(labels))
    return out


def _balance_fragments(controller: LedgerController, width: int) -> StyleAndTextTuples:
    series = balance_series(controller.records)
    labels = x_labels(controller.records, max(1, width // 20))
    lines = plot_lines(series, labels, width - 2, 6)
    out: StyleAndTextTuples = []
    for line in lines:
        out.append(("class:plot" if _PLOT_DOT in line else "class:axis", line + "\n"))
    return out


def _status_fragments(controller: LedgerController) -> StyleAndTextTuples:
    m = controller.records
    summary = (
        f" Balance {m.balance():.2f}  Income {m.total_income():.2f}  "
        f"Expenses {m.total_expenses():.2f}"
    )
    if controller.status:
        style = "class:status.error" if controller.status.startswith("Error") else "class:status"
        return [("class:status", summary + "  | "), (style, controller.status)]
    return [("class:status", summary + "  | h: help")]


def _terminal_width() -> int:
    try:
        return get_app().output.get_size().columns
    except Exception:  # pragma: no cover - no running app
        return 80


def _field_window(controller: LedgerController, index: int) -> Frame:
    def _text() -> StyleAndTextTuples:
        style = "class:field.active" if controller.input.cursor == index else "class:field"
        return [(style, controller.input.buffers[index] if controller.input.active else "")]

    return Frame(
        Window(FormattedTextControl(_text), height=1),
        title=FIELD_TITLES[index],
        style="class:popup",
    )


# ----------------------------------------------------------------------------
# Application
# ----------------------------------------------------------------------------


def _panel(
    controller: LedgerController, widget: FocusedWidget, body: Window, title: str
) -> HSplit:
    # Frame only takes a fixed style; the wrapper carries the focus class
    # down to the frame border.
    return HSplit(
        [Frame(body, title=title)],
        style=lambda: "class:focused" if controller.focus is widget else "",
    )


def _build_key_bindings(controller: LedgerController) -> KeyBindings:
    kb = KeyBindings()

    input_mode = Condition(lambda: controller.input.active)
    help_mode = Condition(lambda: controller.input.help_visible) & ~input_mode
    normal_mode = ~input_mode & ~help_mode

    def _spawn(event, factory: Callable[[], Coroutine[Any, Any, None]]) -> None:
        app = event.app

        async def _task() -> None:
            try:
                await factory()
            except FatalStorageError as e:
                _logger.error("term_ui:fatal_storage_error error=%s", e)
                app.exit(exception=e)
                return
            app.invalidate()

        app.create_background_task(_task())

    # ---- normal mode ---------------------------------------------------------

    @kb.add("q", filter=normal_mode)
    def _(event) -> None:
        controller.quit()
        event.app.exit()

    @kb.add("tab", filter=normal_mode)
    def _(event) -> None:
        controller.focus_next()

    @kb.add("s-tab", filter=normal_mode)
    def _(event) -> None:
        controller.focus_previous()

    @kb.add("up", filter=normal_mode)
    def _(event) -> None:
        controller.select_previous()

    @kb.add("down", filter=normal_mode)
    def _(event) -> None:
        controller.select_next()

    @kb.add("delete", filter=normal_mode)
    def _(event) -> None:
        _spawn(event, controller.delete_selected)

    @kb.add("a", filter=normal_mode)
    def _(event) -> None:
        controller.begin_add()

    @kb.add("enter", filter=normal_mode)
    def _(event) -> None:
        controller.begin_edit()

    @kb.add("h", filter=normal_mode)
    def _(event) -> None:
        controller.show_help()

    # ---- help overlay --------------------------------------------------------

    @kb.add("escape", filter=help_mode, eager=True)
    @kb.add("q", filter=help_mode)
    def _(event) -> None:
        controller.hide_help()

    # ---- form ----------------------------------------------------------------

    @kb.add("backspace", filter=input_mode)
    def _(event) -> None:
        controller.backspace()

    @kb.add("tab", filter=input_mode)
    def _(event) -> None:
        controller.next_field()

    @kb.add("s-tab", filter=input_mode)
    def _(event) -> None:
        controller.previous_field()

    @kb.add("escape", filter=input_mode, eager=True)
    def _(event) -> None:
        controller.cancel_input()

    @kb.add("enter", filter=input_mode)
    def _(event) -> None:
        # The form closes right away; only the storage command runs async.
        mutation = controller.submit()
        if mutation is not None:
            _spawn(event, lambda: controller.commit(mutation))

    @kb.add(Keys.Any, filter=input_mode)
    def _(event) -> None:
        data = getattr(event, "data", "") or ""
        # Only printable characters go into the field.
        if data and data.isprintable():
            controller.type_char(data)

    @kb.add("c-c")
    def _(event) -> None:
        controller.quit()
        event.app.exit()

    return kb


def build_application(
    controller: LedgerController,
    *,
    input: Input | None = None,
    output: Output | None = None,
) -> Application[None]:
    """Create the dashboard application around ``controller``."""

    records_frame = _panel(
        controller,
        FocusedWidget.RECORDS,
        Window(
            FormattedTextControl(lambda: _records_fragments(controller), focusable=True),
            wrap_lines=False,
        ),
        "Records",
    )
    bars_frame = _panel(
        controller,
        FocusedWidget.CATEGORY_CHART,
        Window(
            FormattedTextControl(
                lambda: _bars_fragments(controller, _terminal_width() // 2 - 2)
            ),
        ),
        "Expenses",
    )
    balance_frame = _panel(
        controller,
        FocusedWidget.BALANCE_CHART,
        Window(
            FormattedTextControl(lambda: _balance_fragments(controller, _terminal_width() - 2)),
            height=Dimension(min=6, preferred=10),
        ),
        "Balance over time",
    )
    status_bar = Window(FormattedTextControl(lambda: _status_fragments(controller)), height=1)

    body = HSplit(
        [
            VSplit([records_frame, bars_frame], height=Dimension(weight=7)),
            HSplit([balance_frame], height=Dimension(weight=3)),
            status_bar,
        ]
    )

    form = Frame(
        HSplit([_field_window(controller, i) for i in range(FIELD_COUNT)]),
        title=lambda: "Edit record"
        if controller.input.mode is InputMode.EDITING
        else "New record",
        style="class:popup",
        width=Dimension(preferred=70),
    )
    help_box = Frame(
        Window(FormattedTextControl(HELP_TEXT), width=Dimension(preferred=48)),
        title="Help",
        style="class:popup",
    )

    root = FloatContainer(
        content=body,
        floats=[
            Float(
                ConditionalContainer(form, filter=Condition(lambda: controller.input.active))
            ),
            Float(
                ConditionalContainer(
                    help_box,
                    filter=Condition(
                        lambda: controller.input.help_visible and not controller.input.active
                    ),
                )
            ),
        ],
    )

    return Application(
        layout=Layout(root),
        key_bindings=_build_key_bindings(controller),
        style=STYLE,
        full_screen=True,
        mouse_support=False,
        refresh_interval=1.0,
        input=input,
        output=output,
    )


def run_dashboard(controller: LedgerController) -> None:
    """Run the dashboard until the user quits.

    Raises ``FatalStorageError`` when a storage command fails.
    """

    app = build_application(controller)
    try:
        app.run()
    finally:
        controller.close()


__all__ = ["HELP_TEXT", "build_application", "plot_lines", "run_dashboard"]
