"""Dobles utilizados pelos testes de integração do pipeline."""

from __future__ import annotations

from .recording_components import FixedClock, RecordingLogger  # noqa: F401

__all__ = ["FixedClock", "RecordingLogger"]
