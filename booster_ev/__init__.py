"""Booster EV - expected value and bargain ranking for MTG sealed product."""

__version__ = "0.1.0"
