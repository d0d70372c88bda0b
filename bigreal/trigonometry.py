#
# Trigonometric functions to a requested number of decimal places
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import logging
import math
from functools import lru_cache

from .approximations import (
    GUARD_DIGITS, decimals_or_default, epsilon, exact_root, trim, try_calculate_as_double,
)
from .bigreal import (
    NaN, One, OneHalf, Pi, Tau, Zero, CONSTANT_DECIMALS, decimal_digits, operand,
)
from .errors import DomainError
from .formats import ROUND_HALF_EVEN
from .spigots import calculate_pi, calculate_tau

__all__ = ('sin', 'cos', 'tan', 'sec', 'cosec', 'cot', 'asin', 'acos', 'atan', 'atan2',
           'sin_pi', 'cos_pi', 'tan_pi', 'radians_to_degrees', 'degrees_to_radians')

logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def _pi(digits):
    '''Return π to at least digits decimal places.'''
    if digits <= CONSTANT_DECIMALS:
        return Pi
    return calculate_pi(digits + 1)


@lru_cache(maxsize=16)
def _tau(digits):
    if digits <= CONSTANT_DECIMALS:
        return Tau
    return calculate_tau(digits + 1)


def _reduce(x, digits):
    '''Return x less the nearest multiple of τ, so that it lies in [-π, π].'''
    if x.abs() <= _pi(digits):
        return x
    # Subtracting the multiple cancels as many digits as the quotient has
    quotient_digits = decimal_digits(x.to_integer())
    tau = _tau(digits + quotient_digits)
    x -= tau * (x / tau).round(0, ROUND_HALF_EVEN)
    return trim(x, digits)


def _sin(x, digits):
    '''Return sin(x) for finite x by summing its Maclaurin series.'''
    work = digits + 2
    eps = epsilon(work)
    x = _reduce(x, work)
    x_squared = trim(x * x, work)

    total = term = x
    count = 1
    while True:
        term = trim(-term * x_squared / ((count + 1) * (count + 2)), work)
        count += 2
        total = trim(total + term, work)
        if term.abs() <= eps:
            break

    logger.debug('sin: %d series terms at %d places', count // 2, work)
    return trim(total, digits)


def _cos(x, digits):
    '''Return cos(x) for finite x by summing its Maclaurin series.'''
    work = digits + 2
    eps = epsilon(work)
    x = _reduce(x, work)
    x_squared = trim(x * x, work)

    total = term = One
    count = 0
    while True:
        term = trim(-term * x_squared / ((count + 1) * (count + 2)), work)
        count += 2
        total = trim(total + term, work)
        if term.abs() <= eps:
            break

    logger.debug('cos: %d series terms at %d places', count // 2, work)
    return trim(total, digits)


def _trig(name, function, exact, x, decimals):
    x = operand(x, name)
    decimals = decimals_or_default(decimals)
    if not x.is_finite():
        return NaN
    result = try_calculate_as_double(function, decimals, x)
    if result is not None:
        return result
    return trim(exact(x, decimals + GUARD_DIGITS), decimals)


def sin(x, decimals=None):
    '''Return the sine of x radians correct to decimals places.  Non-finite x gives NaN.'''
    return _trig('sin', math.sin, _sin, x, decimals)


def cos(x, decimals=None):
    '''Return the cosine of x radians correct to decimals places.  Non-finite x gives NaN.'''
    return _trig('cos', math.cos, _cos, x, decimals)


# The ratios are undefined at their poles: the result there is an infinity or a large
# value depending on how the denominator rounds.

def _tan(x, digits):
    return _sin(x, digits) / _cos(x, digits)


def _sec(x, digits):
    return One / _cos(x, digits)


def _cosec(x, digits):
    return One / _sin(x, digits)


def _cot(x, digits):
    return _cos(x, digits) / _sin(x, digits)


def _fast_sec(x):
    return 1.0 / math.cos(x)


def _fast_cosec(x):
    return 1.0 / math.sin(x)


def _fast_cot(x):
    return math.cos(x) / math.sin(x)


def tan(x, decimals=None):
    '''Return the tangent of x radians correct to decimals places.'''
    return _trig('tan', math.tan, _tan, x, decimals)


def sec(x, decimals=None):
    '''Return the secant of x radians correct to decimals places.'''
    return _trig('sec', _fast_sec, _sec, x, decimals)


def cosec(x, decimals=None):
    '''Return the cosecant of x radians correct to decimals places.'''
    return _trig('cosec', _fast_cosec, _cosec, x, decimals)


def cot(x, decimals=None):
    '''Return the cotangent of x radians correct to decimals places.'''
    return _trig('cot', _fast_cot, _cot, x, decimals)


##
## Inverse functions
##

def _atan(x, digits):
    '''Return atan(x) for finite x.'''
    work = digits + 2
    if x.abs() > One:
        # atan(x) = ±π/2 - atan(1/x)
        half_pi = _pi(work).right_shift()
        if x.is_negative():
            half_pi = half_pi.negate()
        return trim(half_pi - _atan(x.inverse(), work), digits)

    # atan(x) = 2 atan(x / (1 + sqrt(1 + x²))); halve until the series converges quickly
    doublings = 0
    while x.abs() > OneHalf.right_shift(2):
        x = trim(x / (One + exact_root(One + x * x, 2, work + 2)), work + 2)
        doublings += 1
    work += doublings

    eps = epsilon(work)
    x_squared = trim(x * x, work)
    total = power = x
    count = 1
    while True:
        count += 2
        power = trim(-power * x_squared, work)
        term = power / count
        total = trim(total + term, work)
        if term.abs() <= eps:
            break

    logger.debug('atan: %d series terms after %d halvings', count // 2, doublings)
    return trim(total.left_shift(doublings), digits)


def _atan2(y, x, digits):
    '''Return atan2(y, x) for finite y and x, not both zero.'''
    if x.is_positive():
        return _atan(y / x, digits)
    pi = _pi(digits + 2)
    if x.is_negative():
        if y.is_negative():
            return trim(_atan(y / x, digits + 2) - pi, digits)
        return trim(_atan(y / x, digits + 2) + pi, digits)
    half_pi = trim(pi.right_shift(), digits)
    return half_pi if y.is_positive() else half_pi.negate()


def atan(x, decimals=None):
    '''Return the arc tangent of x in radians correct to decimals places.  Non-finite x gives
    NaN.'''
    x = operand(x, 'atan')
    decimals = decimals_or_default(decimals)
    if not x.is_finite():
        return NaN
    if x.is_zero():
        return Zero
    result = try_calculate_as_double(math.atan, decimals, x)
    if result is not None:
        return result
    return trim(_atan(x, decimals + GUARD_DIGITS), decimals)


def atan2(y, x, decimals=None):
    '''Return the angle in radians in (-π, π] of the point (x, y) correct to decimals places.
    The angle of the origin, and of any non-finite coordinate, is NaN.'''
    y = operand(y, 'atan2')
    x = operand(x, 'atan2')
    decimals = decimals_or_default(decimals)
    if not (y.is_finite() and x.is_finite()):
        return NaN
    if y.is_zero() and x.is_zero():
        return NaN
    result = try_calculate_as_double(math.atan2, decimals, y, x)
    if result is not None:
        return result
    return trim(_atan2(y, x, decimals + GUARD_DIGITS), decimals)


def _check_unit_interval(x, name):
    if x.is_nan():
        return False
    if x.abs() > One:
        raise DomainError((name, x), f'{name} argument {x.to_string(6)} is outside [-1, 1]')
    return True


def asin(x, decimals=None):
    '''Return the arc sine of x in radians correct to decimals places.

    Raises DomainError if |x| > 1.
    '''
    x = operand(x, 'asin')
    decimals = decimals_or_default(decimals)
    if not _check_unit_interval(x, 'asin'):
        return NaN
    if x.is_zero():
        return Zero
    if x.is_one() or x.is_negative_one():
        half_pi = trim(_pi(decimals + 1).right_shift(), decimals)
        return half_pi if x.is_one() else half_pi.negate()
    result = try_calculate_as_double(math.asin, decimals, x)
    if result is not None:
        return result
    work = decimals + GUARD_DIGITS
    cosine = exact_root((One + x) * (One - x), 2, work + 2)
    return trim(_atan2(x, cosine, work), decimals)


def acos(x, decimals=None):
    '''Return the arc cosine of x in radians correct to decimals places.

    Raises DomainError if |x| > 1.
    '''
    x = operand(x, 'acos')
    decimals = decimals_or_default(decimals)
    if not _check_unit_interval(x, 'acos'):
        return NaN
    if x.is_one():
        return Zero
    if x.is_negative_one():
        return trim(_pi(decimals + 1), decimals)
    if x.is_zero():
        return trim(_pi(decimals + 1).right_shift(), decimals)
    result = try_calculate_as_double(math.acos, decimals, x)
    if result is not None:
        return result
    work = decimals + GUARD_DIGITS
    sine = exact_root((One + x) * (One - x), 2, work + 2)
    return trim(_atan2(sine, x, work), decimals)


##
## Multiples of π and angle conversion
##

def _half_turns(x):
    '''Return x less the nearest even integer, so that it lies in [-1, 1].'''
    return x - (x / 2).round(0, ROUND_HALF_EVEN) * 2


def sin_pi(x, decimals=None):
    '''Return sin(πx) correct to decimals places.  The result is exactly zero at integers.'''
    x = operand(x, 'sin_pi')
    decimals = decimals_or_default(decimals)
    if not x.is_finite():
        return NaN
    x = _half_turns(x)
    if x.is_integer():
        return Zero
    work = decimals + GUARD_DIGITS
    return trim(_sin(x * _pi(work + 1), work), decimals)


def cos_pi(x, decimals=None):
    '''Return cos(πx) correct to decimals places.  The result is exactly zero at odd
    multiples of one half.'''
    x = operand(x, 'cos_pi')
    decimals = decimals_or_default(decimals)
    if not x.is_finite():
        return NaN
    x = _half_turns(x)
    if x.abs() == OneHalf:
        return Zero
    work = decimals + GUARD_DIGITS
    return trim(_cos(x * _pi(work + 1), work), decimals)


def tan_pi(x, decimals=None):
    '''Return tan(πx) correct to decimals places.'''
    x = operand(x, 'tan_pi')
    decimals = decimals_or_default(decimals)
    if not x.is_finite():
        return NaN
    work = decimals + GUARD_DIGITS
    return trim(sin_pi(x, work) / cos_pi(x, work), decimals)


def radians_to_degrees(x, decimals=None):
    '''Return x radians in degrees correct to decimals places.'''
    x = operand(x, 'radians_to_degrees')
    decimals = decimals_or_default(decimals)
    if not x.is_finite():
        return x
    magnitude = decimal_digits(x.to_integer())
    return trim(x * 180 / _pi(decimals + GUARD_DIGITS + magnitude), decimals)


def degrees_to_radians(x, decimals=None):
    '''Return x degrees in radians correct to decimals places.'''
    x = operand(x, 'degrees_to_radians')
    decimals = decimals_or_default(decimals)
    if not x.is_finite():
        return x
    magnitude = decimal_digits(x.to_integer())
    return trim(x * _pi(decimals + GUARD_DIGITS + magnitude) / 180, decimals)
