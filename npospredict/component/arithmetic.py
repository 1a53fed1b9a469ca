'''Exact number policies for stake and score computations.

The election repeats divisions and multiplications on large base-unit
balances over many rounds; with binary floating point the accumulated drift
changes which candidate has the minimal score, so floats are never used.
Two policies are provided:

-   ``fraction`` (:class:`FractionArithmetic`, the default) keeps every
    value as an exact rational number (:class:`fractions.Fraction`).
-   ``decimal`` (:class:`DecimalArithmetic`) keeps values as
    :class:`decimal.Decimal`, where additions, subtractions and
    multiplications are exact and every division is rounded half up to
    a fixed number of decimal places (20 by default). This reproduces the
    numbers shown by the staking dashboard that this library forecasts for.
    Divisions splitting a stake into shares (:meth:`Arithmetic.divide_down`)
    round toward zero instead, so that the shares never exceed the stake.

All supported policies are assembled in the ``ARITHMETICS`` dictionary keyed
by their name. ``get()`` retrieves the class from this dictionary by string
key; ``construct()`` also instantiates it and passes custom instances
through.
'''

import abc
import contextlib
import decimal
import math
from decimal import Decimal
from fractions import Fraction
from typing import Callable, ContextManager, Union
from numbers import Number

import npospredict.component.core
from npospredict.persist import simple_serialization


ARITHMETICS = {}

arithmetic_mark, get, construct = (
    npospredict.component.core.register_components(ARITHMETICS, 'arithmetic')
)

ExactNumber = Union[Fraction, Decimal]

_EXACT_CONTEXT = decimal.Context(
    prec=decimal.MAX_PREC,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
    rounding=decimal.ROUND_HALF_UP,
)


def round_half_up(value: Union[Fraction, Decimal, int]) -> int:
    '''Round an exact number to the nearest integer, halves away from zero.'''
    frac = Fraction(value)
    whole, rest = divmod(abs(frac.numerator), frac.denominator)
    if 2 * rest >= frac.denominator:
        whole += 1
    return whole if frac >= 0 else -whole


class Arithmetic(metaclass=abc.ABCMeta):
    '''An abstract base class for number policies.

    Values created by :meth:`number` support the ``+``, ``-`` and ``*``
    operators and comparisons exactly as long as the computation runs inside
    :meth:`context`; division must go through :meth:`divide`.
    '''
    name: str = NotImplemented

    @abc.abstractmethod
    def number(self, value: Union[int, Number]) -> ExactNumber:
        '''Convert an integer (or an exact number) to the policy's type.'''
        raise NotImplementedError

    @abc.abstractmethod
    def divide(self, dividend: Number, divisor: Number) -> ExactNumber:
        '''Divide two numbers. The divisor must not be zero.'''
        raise NotImplementedError

    def divide_down(self, dividend: Number, divisor: Number) -> ExactNumber:
        '''Divide two numbers, rounding an inexact result toward zero.

        Used to split a stake into shares, which must never add up to more
        than the stake itself.
        '''
        return self.divide(dividend, divisor)

    def context(self) -> ContextManager:
        '''Return a context manager to run computations in.'''
        return contextlib.nullcontext()

    def zero(self) -> ExactNumber:
        return self.number(0)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}>'


@arithmetic_mark
@simple_serialization
class FractionArithmetic(Arithmetic):
    '''Exact rational arithmetic. Divisions never lose precision.'''
    name = 'fraction'

    def number(self, value: Union[int, Number]) -> Fraction:
        return Fraction(value)

    def divide(self, dividend: Number, divisor: Number) -> Fraction:
        return Fraction(dividend) / Fraction(divisor)


@arithmetic_mark
@simple_serialization
class DecimalArithmetic(Arithmetic):
    '''Decimal arithmetic with divisions rounded to fixed decimal places.

    :param decimal_places: Number of decimal places kept by each division.
        Halves are rounded away from zero.
    '''
    name = 'decimal'

    def __init__(self, decimal_places: int = 20):
        if decimal_places < 0:
            raise ValueError(
                f'decimal places must be non-negative, got {decimal_places}'
            )
        self.decimal_places = decimal_places
        self._scale = 10 ** decimal_places

    def number(self, value: Union[int, Number]) -> Decimal:
        if isinstance(value, Fraction):
            return self._from_fraction(value)
        return Decimal(value)

    def divide(self, dividend: Number, divisor: Number) -> Decimal:
        return self._from_fraction(Fraction(dividend) / Fraction(divisor))

    def divide_down(self, dividend: Number, divisor: Number) -> Decimal:
        return self._from_fraction(
            Fraction(dividend) / Fraction(divisor), rounder=math.trunc
        )

    def context(self) -> ContextManager:
        # additions and multiplications of finite decimals are exact at this
        # precision; only divisions round, and they go through _from_fraction
        return decimal.localcontext(_EXACT_CONTEXT)

    def _from_fraction(self,
                       value: Fraction,
                       rounder: Callable[[Fraction], int] = round_half_up,
                       ) -> Decimal:
        scaled = rounder(value * self._scale)
        return Decimal(scaled).scaleb(
            -self.decimal_places, context=_EXACT_CONTEXT
        )
