"""Measure how evenly the elected validators are backed.

The security of an NPoS validator set is bounded by its least backed member,
so election methods aim to maximize the minimal backing and to spread the
stake evenly among the winners. These functions summarize a ranking produced
by :func:`npospredict.evaluate.rank.seq_phragmen` to compare forecasts, for
example with and without equalization.

All results are exact fractions regardless of the number policy used by the
election, so that they can be compared across policies.
"""

from fractions import Fraction
from typing import Dict, List, Optional

from npospredict.evaluate.rank import NominatorInfo, ValidatorInfo


def elected_stakes(ranking: List[ValidatorInfo]) -> List[Fraction]:
    """Return the backed stakes of the elected validators as fractions."""
    return [Fraction(info.backed_stake) for info in ranking if info.elected]


def minimal_backing(ranking: List[ValidatorInfo]) -> Optional[Fraction]:
    """Return the backed stake of the least backed elected validator.

    :returns: None if nobody is elected.
    """
    stakes = elected_stakes(ranking)
    return min(stakes) if stakes else None


def backing_spread(ranking: List[ValidatorInfo]) -> Fraction:
    """Return the difference between the highest and lowest elected backing.

    Zero if fewer than two validators are elected.
    """
    stakes = elected_stakes(ranking)
    if not stakes:
        return Fraction(0)
    return max(stakes) - min(stakes)


def backing_variance(ranking: List[ValidatorInfo]) -> Fraction:
    """Compute the population variance of the elected validators' backing.

    Zero if nobody is elected.
    """
    stakes = elected_stakes(ranking)
    if not stakes:
        return Fraction(0)
    mean = Fraction(sum(stakes), len(stakes))
    return Fraction(sum((stake - mean) ** 2 for stake in stakes), len(stakes))


def committed_stake(nominators: List[NominatorInfo]) -> Dict[str, Fraction]:
    """Return the stake each nominator assigned to validators in total."""
    return {
        nom.nominator_id: sum(
            (Fraction(weight) for weight in nom.weights.values()),
            Fraction(0)
        )
        for nom in nominators
    }


def total_backing(ranking: List[ValidatorInfo]) -> Fraction:
    """Return the sum of the elected validators' backing."""
    return sum(elected_stakes(ranking), Fraction(0))
