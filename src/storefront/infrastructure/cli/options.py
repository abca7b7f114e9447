"""Parsing helpers shared by CLI commands."""

from __future__ import annotations

import click


def parse_variants(pairs: tuple[str, ...]) -> dict[str, str]:
    """Parse ('size=L', 'color=Blue') into {'size': 'L', 'color': 'Blue'}."""
    variants: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid variant '{pair}'. Expected 'dimension=choice'."
            )
        name, choice = pair.split("=", 1)
        variants[name.strip()] = choice.strip()
    return variants
