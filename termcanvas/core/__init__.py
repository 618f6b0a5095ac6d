"""tmux pane management for canvases."""
