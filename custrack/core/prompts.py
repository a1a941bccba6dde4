"""
Validated console input.

Blocking reads that re-prompt until the operator enters something
usable. These are the only points where custrack waits on a human.
"""

from typing import Optional

import typer

from custrack.core.text import blank_to_none, trim_whitespace


def get_int(text: str) -> int:
    """Read an integer, re-prompting on anything that does not parse."""
    return typer.prompt(text, type=int)


def get_int_between(text: str, minimum: int, maximum: int) -> int:
    """Read an integer inside the inclusive range [minimum, maximum]."""
    while True:
        value = get_int(text)
        if minimum <= value <= maximum:
            return value
        typer.echo(f"Please enter a number between {minimum} and {maximum}.")


def get_yes_no(text: str) -> bool:
    """Read a y/n answer. Blank input is not accepted."""
    return typer.confirm(text, default=None)


def read_required(text: str) -> str:
    """Read a trimmed, non-blank string."""
    while True:
        value = trim_whitespace(typer.prompt(text))
        if value:
            return value
        typer.echo("A value is required.")


def read_optional(text: str) -> Optional[str]:
    """Read a trimmed string, or None when left blank."""
    return blank_to_none(typer.prompt(f"{text} (blank for NULL)", default="", show_default=False))
