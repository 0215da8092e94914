"""Genome model — genes, expression modifiers, mutations and the checksum.

A gene's ``type`` is the discriminator of a tagged union. Only parameter
(numeric) and switch (boolean) genes carry a mutation rule; the other kinds
are inherited unchanged.
"""

from __future__ import annotations

import hashlib
import random
from datetime import datetime, timezone
from typing import Annotated, Any, Iterable, Literal, Union

from pydantic import BaseModel, Field, computed_field
from pydantic_core import to_json

from ontogenesis.types import GeneId, MutationType

MUTATION_SIGMA = 0.1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Genes ─────────────────────────────────────────────────────────────────────


class _GeneBase(BaseModel):
    id: GeneId
    name: str = ""
    mutable: bool = True
    expression_level: float = 1.0

    def mutate(self, rng: random.Random, sigma: float = MUTATION_SIGMA) -> float | None:
        """Apply this gene kind's mutation rule in place.

        Returns the mutation magnitude, or None for kinds that have no rule.
        """
        return None


class ParameterGene(_GeneBase):
    type: Literal["parameter"] = "parameter"
    value: float

    def mutate(self, rng: random.Random, sigma: float = MUTATION_SIGMA) -> float | None:
        delta = rng.gauss(0.0, sigma)
        self.value = min(1.0, max(0.0, self.value + delta))
        return abs(delta)


class SwitchGene(_GeneBase):
    type: Literal["switch"] = "switch"
    value: bool

    def mutate(self, rng: random.Random, sigma: float = MUTATION_SIGMA) -> float | None:
        self.value = not self.value
        return 1.0


class SelectorGene(_GeneBase):
    type: Literal["selector"] = "selector"
    value: str
    options: list[str] = Field(default_factory=list)


class SequenceGene(_GeneBase):
    type: Literal["sequence"] = "sequence"
    value: list[Any] = Field(default_factory=list)


class StructureGene(_GeneBase):
    type: Literal["structure"] = "structure"
    value: dict[str, Any] = Field(default_factory=dict)


Gene = Annotated[
    Union[ParameterGene, SwitchGene, SelectorGene, SequenceGene, StructureGene],
    Field(discriminator="type"),
]


# ── Genome ────────────────────────────────────────────────────────────────────


class ExpressionModifier(BaseModel):
    target_gene: GeneId
    condition: str = ""
    modifier: float = 1.0


def _canonical(value: Any) -> Any:
    """Order-independent form of a gene value: sorted mappings and sets."""
    if isinstance(value, dict):
        return {
            str(k): _canonical(v)
            for k, v in sorted(value.items(), key=lambda item: str(item[0]))
        }
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_canonical(v) for v in value), key=lambda v: to_json(v, fallback=str))
    return value


def genome_checksum(core_genes: Iterable[_GeneBase], regulatory_genes: Iterable[_GeneBase]) -> str:
    """Order-sensitive structural hash over the (id, value) pairs of both gene lists.

    Values are canonicalized first; integers of any width are encoded exactly.
    """
    payload = to_json(
        {
            "core": [[g.id, _canonical(g.value)] for g in core_genes],
            "reg": [[g.id, _canonical(g.value)] for g in regulatory_genes],
        },
        fallback=str,
    )
    return hashlib.blake2b(payload, digest_size=8).hexdigest()


class Genome(BaseModel):
    """A kernel's tunable configuration.

    The checksum is derived from the gene lists on every read, so a genome
    is never observed with a stale checksum after a gene changes.
    """

    core_genes: list[Gene] = Field(default_factory=list)
    regulatory_genes: list[Gene] = Field(default_factory=list)
    expression_modifiers: list[ExpressionModifier] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def checksum(self) -> str:
        return genome_checksum(self.core_genes, self.regulatory_genes)


# ── Mutations ─────────────────────────────────────────────────────────────────


class Mutation(BaseModel):
    id: str
    type: MutationType
    target: GeneId
    magnitude: float = Field(ge=0)
    timestamp: datetime = Field(default_factory=utcnow)
