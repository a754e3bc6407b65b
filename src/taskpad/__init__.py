"""taskpad: a single-user task list with suggestions, icons and a console front-end."""

__version__ = "0.1.0"
