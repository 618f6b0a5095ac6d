"""Canvas process: interaction rules and the Textual app that hosts them."""
