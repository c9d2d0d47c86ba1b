"""Interactive terminal client for the kata catalog.

This package contains:
- stateful_list: Cyclic cursor list used by every selectable collection
- input_field: Cursor-aware text buffer with suggestions
- autocomplete: Path completion for the download destination
- settings: Persisted editor/path defaults
- download: Download pipeline with preinstall/postinstall steps
- state_machine: Interaction state machine driving the UI
- console_ui: Curses front end
- app: Entry point
"""

__all__ = [
    "app",
    "autocomplete",
    "console_ui",
    "download",
    "input_field",
    "settings",
    "state_machine",
    "stateful_list",
]
