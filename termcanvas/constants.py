"""Constants used across termcanvas.

User-tunable values live in termcanvas.config; these are their defaults and
the fixed conventions shared by host and canvas processes.
"""

# Environment marker set by tmux inside every pane
TMUX_ENV_VAR = "TMUX"

# Pane identity store (single well-known file, empty string means "no pane")
DEFAULT_PANE_FILE = "/tmp/claude-canvas-pane-id"

# Per-invocation file naming under the socket directory
DEFAULT_SOCKET_DIR = "/tmp"
SOCKET_NAME_TEMPLATE = "canvas-{id}.sock"
CONFIG_NAME_TEMPLATE = "canvas-config-{id}.json"

# Pane lifecycle
DEFAULT_SPLIT_PERCENT = 50  # canvas gets half the width (1:1 with the host pane)
REUSE_SETTLE_DELAY_S = 0.15  # heuristic: lets the interrupted process unwind before new keystrokes
BROWSER_KILL_DELAY_S = 0.2  # browsh ignores C-c, so it is pkill'ed and given this long to exit
BROWSER_BINARY = "browsh"
BROWSER_PANE_TITLE = "^L URL | Bksp Back | Alt+→ Fwd | ^R Reload | ^Q Quit"

# IPC
DEFAULT_CONNECT_TIMEOUT_S = 10.0
DEFAULT_CONNECT_POLL_INTERVAL_S = 0.1
IPC_MAX_LINE_BYTES = 1024 * 1024
IPC_CLOSE_GRACE_S = 0.5  # how long stop() waits for the final message to flush

# Spawn command
DEFAULT_RUNNER = "termcanvas"
