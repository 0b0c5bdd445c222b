#!/usr/bin/env python3
"""
Consensus Blender
=================
Reduces competing source values for one quantity to a single value.

BLENDING RULE:
- No candidates: unknown
- One candidate: used as-is
- Two or more: scan pairs (i, j), i < j, in priority order; the first pair
  that agrees within the relative threshold is averaged
- No agreeing pair: the first (highest priority) candidate wins

Agreement is relative to the pair mean (default ±20%), so the same threshold
works for temperatures and for pollutant concentrations.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from collectors.source_readings import Candidate

DEFAULT_AGREEMENT_THRESHOLD = 0.20

# Blend methods
METHOD_NONE = "none"
METHOD_SINGLE = "single"
METHOD_CONSENSUS = "consensus"
METHOD_PRIORITY = "priority"


def values_agree(v1: float, v2: float, threshold: float = DEFAULT_AGREEMENT_THRESHOLD) -> bool:
    """
    True when two values are within `threshold` of their mean

    A zero mean only agrees when both values are exactly zero.
    """
    avg = (v1 + v2) / 2
    if avg == 0:
        return v1 == 0 and v2 == 0
    return abs(v1 - v2) / abs(avg) <= threshold


@dataclass(frozen=True)
class BlendResult:
    """Blended value plus how it was reached"""
    value: Optional[float]
    method: str
    sources: Tuple[str, ...] = field(default_factory=tuple)            # every candidate
    agreeing_sources: Tuple[str, ...] = field(default_factory=tuple)   # pair that was averaged

    @property
    def is_consensus(self) -> bool:
        return self.method == METHOD_CONSENSUS


class ConsensusBlender:
    """
    Pairwise-agreement blender with source-priority fallback
    """

    def __init__(self, threshold: float = DEFAULT_AGREEMENT_THRESHOLD):
        self.threshold = threshold

    def find_agreeing_pair(self, candidates: Sequence[Candidate]) -> Optional[Tuple[Candidate, Candidate]]:
        """First agreeing pair in (i, j), i < j order"""
        for i in range(len(candidates) - 1):
            for j in range(i + 1, len(candidates)):
                if values_agree(candidates[i].value, candidates[j].value, self.threshold):
                    return candidates[i], candidates[j]
        return None

    def blend(self, candidates: Sequence[Candidate]) -> BlendResult:
        sources = tuple(c.source_name for c in candidates)

        if not candidates:
            return BlendResult(value=None, method=METHOD_NONE)

        if len(candidates) == 1:
            return BlendResult(value=candidates[0].value, method=METHOD_SINGLE, sources=sources)

        pair = self.find_agreeing_pair(candidates)
        if pair is None:
            return BlendResult(value=candidates[0].value, method=METHOD_PRIORITY, sources=sources)

        first, second = pair
        return BlendResult(
            value=(first.value + second.value) / 2,
            method=METHOD_CONSENSUS,
            sources=sources,
            agreeing_sources=(first.source_name, second.source_name),
        )


def blend_values(candidates: Sequence[Candidate], threshold: float = DEFAULT_AGREEMENT_THRESHOLD) -> Optional[float]:
    """Blend candidates to a single value (None when there are none)"""
    return ConsensusBlender(threshold).blend(candidates).value


def first_available(candidates: Sequence[Candidate]) -> BlendResult:
    """Simple fallback rule: the first candidate wins outright"""
    sources = tuple(c.source_name for c in candidates)
    if not candidates:
        return BlendResult(value=None, method=METHOD_NONE)
    method = METHOD_SINGLE if len(candidates) == 1 else METHOD_PRIORITY
    return BlendResult(value=candidates[0].value, method=method, sources=sources)


def contributing_sources(results: List[BlendResult]) -> List[str]:
    """Source names across blend results, in order of first appearance"""
    seen = []
    for result in results:
        for name in result.sources:
            if name not in seen:
                seen.append(name)
    return seen
