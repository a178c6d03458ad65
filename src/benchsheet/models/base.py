# Copyright (c) Syntropy Systems
"""Shared Pydantic model helpers for benchsheet."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class BenchsheetModel(BaseModel):
    """Base model with shared config for benchsheet schemas.

    Results are produced by the execution engine and never mutated here,
    so every model is frozen.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )
