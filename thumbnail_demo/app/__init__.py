"""Presentation-facing state objects.

Views bind to `RunState` properties (output / image / running) and their
change signals; they never mutate state directly.
"""
