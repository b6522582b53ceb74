"""Teensy in one command: scaffold, build and flash Rust firmware."""

__version__ = "0.2.0"
