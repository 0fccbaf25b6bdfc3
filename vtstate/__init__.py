"""Terminal state: escape-sequence parser, control functions and framebuffer."""

__version__ = "0.1.0"

__all__ = [
    "actions",
    "cells",
    "dispatcher",
    "framebuffer",
    "functions",
    "parser",
    "states",
    "userinput",
]