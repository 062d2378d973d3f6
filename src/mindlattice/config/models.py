"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``mindlattice.toml`` only
carries overrides. An empty file (or none at all) is a valid setup.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mindlattice.lattice.renderer import DEFAULT_INDENT
from mindlattice.lattice.store import DEFAULT_CAPACITY, MAX_NODE_DEPTH


class LatticeConfig(BaseModel):
    """[lattice] section."""

    model_config = {"frozen": True}

    capacity: int = Field(default=DEFAULT_CAPACITY, ge=0)
    max_depth: int = Field(default=MAX_NODE_DEPTH, ge=0)


class RenderConfig(BaseModel):
    """[render] section."""

    model_config = {"frozen": True}

    indent: str = DEFAULT_INDENT
    max_depth: int = Field(default=MAX_NODE_DEPTH, ge=0)


class ExportConfig(BaseModel):
    """[export] section."""

    model_config = {"frozen": True}

    indent: int = Field(default=2, ge=0)
    default_format: str = "json"


class MindLatticeConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    lattice: LatticeConfig = Field(default_factory=LatticeConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
