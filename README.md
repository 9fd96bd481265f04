# nvgrid

`nvgrid` is the editor-state core of a graphical Neovim front end. It takes
the UI `redraw` notifications that Neovim sends, decodes them into typed
events, applies them to an in-memory model of every grid window, the cursor
and the highlight styles, and produces batches of draw commands that a
renderer can turn into pixels.

It has no dependencies outside the standard library.

## Installation

```
pip install nvgrid
```

## Modules

- `nvgrid.events`: `parse_redraw_event(value)` decodes one
  `[name, args, args, ...]` batch from a `redraw` notification into a list of
  `RedrawEvent` objects (`Resize`, `GridLine`, `CursorGoto`, `Scroll`,
  `HighlightAttributesDefine`, `Flush`, `WindowFloatPosition`, `MessageShow`
  and the rest). Unknown event names are skipped; malformed events raise
  `ParseError`. Also provides `parse_style`, `unpack_color`,
  `parse_message_kind`, and the `WindowAnchor`, `EditorMode`, `MessageKind`
  and `GuiOption` types.
- `nvgrid.channels`: decodes the channel list Neovim reports
  (`parse_channel_list`, `parse_channel_info`, `parse_client_info`, ...) and
  `find_channel_id(channels, name)` returns the id of the first channel whose
  client has that name.
- `nvgrid.editor`: `Editor` applies redraw events; `start_editor` runs one on
  a daemon thread, reading events from a queue until it gets `None`.
- `nvgrid.window`: `Window` holds one grid's cells and position and emits draw
  commands for the cells that change; `AnchorInfo` describes a floating
  window's anchor.
- `nvgrid.grid`: `CharacterGrid`, a fixed-size grid of `(text, style)` cells.
- `nvgrid.cursor`: `Cursor`, `CursorMode`, `CursorShape`.
- `nvgrid.style`: `Color`, `Colors` and `Style`, with foreground, background
  and special colour resolution that honours reverse video.
- `nvgrid.draw_commands`: the commands sent to the renderer (`WindowDraw`
  wrapping `Position`, `Cell`, `ScrollRegion`, `ClearWindow`, ...;
  `UpdateCursor`, `FontChanged`, `DefaultStyleChanged`, `ModeChanged`,
  `CloseWindow`) and to the operating-system window (`TitleChanged`,
  `SetMouseEnabled`).
- `nvgrid.batcher`: `DrawCommandBatcher` collects draw commands and puts them
  on a queue as one list per `send_batch()`.
- `nvgrid.scheduler`: `RedrawScheduler` decides whether the next frame needs
  drawing; `default_extra_buffer_frames(arguments)` gives 60 when the
  arguments contain `--extraBufferFrames` and 1 otherwise.

## Example

```python
import queue

from nvgrid.editor import Editor
from nvgrid.events import parse_redraw_event

batches, window_commands = queue.Queue(), queue.Queue()
editor = Editor(batches, window_commands)

notification = [
    ["grid_resize", [1, 80, 24]],
    ["grid_line", [1, 0, 0, [["h", 0], ["i"]]]],
    ["grid_cursor_goto", [1, 0, 2]],
    ["flush", []],
]
for batch in notification:
    for event in parse_redraw_event(batch):
        editor.handle_redraw_event(event)

for command in batches.get():
    print(command)
```

A `flush` event sends everything queued since the previous one as a single
list, ending with an `UpdateCursor` command, and queues the next frame on the
editor's `RedrawScheduler`.

Any object with a `put` method can receive batches and window commands;
`start_editor` needs an object with a `get` method for its events.

## What it does not do

This package does not start or connect to a Neovim process, speak msgpack-rpc,
send keyboard or mouse input, or draw anything on screen, and it installs no
command. Feeding it `redraw` notifications and rendering the draw commands it
produces are left to the program that uses it.