"""
Gene vector to visual traits.

Renderers build a creature's look from these traits once per spawn; the
mesh construction itself lives with the renderer.
"""

import math
from typing import Sequence

from .data_types import Phenotype

PHENOTYPE_GENES = 6


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def decode_phenotype(genes: Sequence[float]) -> Phenotype:
    """
    Decode the first six genes into visual traits.

    Gene layout:
        0 -> size in [0.5, 1.8]
        1 -> squish (vertical scale) in [0.6, 1.4]
        2 -> hue in [0, 1]
        3 -> roughness in [0.0, 0.6] (0 = wet/glossy)
        4 -> nucleus count in 1..5 (6 only at gene value 1.0)
        5 -> tentacle length in [0, 1.5]

    Raises:
        ValueError: If fewer than six genes are given
    """
    if len(genes) < PHENOTYPE_GENES:
        raise ValueError(f"Need at least {PHENOTYPE_GENES} genes for a phenotype, got {len(genes)}")

    return Phenotype(
        size=lerp(0.5, 1.8, genes[0]),
        squish=lerp(0.6, 1.4, genes[1]),
        hue=float(genes[2]),
        roughness=lerp(0.0, 0.6, genes[3]),
        nucleus_count=int(math.floor(lerp(1, 6, genes[4]))),
        tentacle_length=lerp(0.0, 1.5, genes[5])
    )
