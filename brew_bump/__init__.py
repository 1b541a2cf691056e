"""Update Homebrew formulae and casks from GitHub releases."""

__version__ = "0.1.0"
