#
# Roots, powers, exponentials and logarithms to a requested number of decimal places
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import logging
import math
import sys
from functools import lru_cache

from .bigreal import (
    BigReal, E, NaN, One, PositiveInfinity, NegativeInfinity, Zero, CONSTANT_DECIMALS,
    decimal_digits, operand,
)
from .context import get_context
from .formats import ROUND_HALF_EVEN
from .spigots import calculate_e

__all__ = ('exp', 'log', 'log2', 'log10', 'root', 'sqrt', 'cbrt', 'hypot', 'power',
           'GUARD_DIGITS')

logger = logging.getLogger(__name__)

# Extra decimal places carried by the exact path beyond those requested
GUARD_DIGITS = 10
# The most decimal places the fast path is trusted with
DOUBLE_DECIMALS = 15
# Significant decimal digits of a double, counting a possibly inexact last digit
DOUBLE_DIGITS = 16
DOUBLE_MAX = BigReal.from_float(sys.float_info.max)


def decimals_or_default(decimals):
    '''Return decimals, or the context's decimals if it is None.'''
    if decimals is None:
        return get_context().decimals
    if not isinstance(decimals, int) or decimals < 0:
        raise ValueError(f'decimals must be a non-negative integer: {decimals!r}')
    return decimals


def trim(value, digits):
    '''Round value to digits decimal places.  The exact path does this to its intermediate
    results, otherwise their denominators grow without bound.'''
    return value.round(digits, ROUND_HALF_EVEN)


def epsilon(digits):
    return BigReal(1, 10 ** digits)


def try_calculate_as_double(function, decimals, *args):
    '''The fast path.  If every argument is within the range of a double and the result can
    carry decimals correct places, return function's result on doubles rounded to decimals
    places.  Otherwise return None and the caller takes the exact path.
    '''
    if decimals > DOUBLE_DECIMALS:
        return None
    if not all(arg.is_finite() and arg.abs() <= DOUBLE_MAX for arg in args):
        return None
    try:
        result = function(*(arg.to_double() for arg in args))
    except (OverflowError, ValueError, ZeroDivisionError):
        return None
    # Integral digits of the result consume the precision of a double
    if not math.isfinite(result) or abs(result) >= 10.0 ** (DOUBLE_DIGITS - decimals):
        return None
    logger.debug('%s: fast path for %d decimals', function.__name__, decimals)
    return trim(BigReal.from_float(result), decimals)


##
## Exponentials
##

def exact_exp(x, digits):
    '''Return e^x for finite x to digits decimal places.'''
    if x.is_zero():
        return One
    if x.is_negative():
        # e^x >= 1 so the error of its reciprocal is no worse
        return trim(One / exact_exp(x.negate(), digits), digits)

    # Halve x until it is at most one; the series converges quickly there and the result
    # is squared back up.  Each squaring doubles the relative error, and every digit of the
    # result's integral part needs a further place.
    whole = x.to_integer()
    halvings = 0
    while x > One:
        x = x.right_shift()
        halvings += 1
    work = digits + whole * 4343 // 10000 + 1 + halvings // 3 + 1
    eps = epsilon(work)

    total = term = One
    count = 0
    while True:
        count += 1
        term = trim(term * x / count, work)
        total = trim(total + term, work)
        if term.abs() <= eps:
            break
    for _ in range(halvings):
        total = trim(total * total, work)

    logger.debug('exp: %d series terms and %d squarings at %d places', count, halvings, work)
    return trim(total, digits)


def _e(decimals):
    if decimals <= CONSTANT_DECIMALS:
        return trim(E, decimals)
    return trim(calculate_e(decimals + 1), decimals)


def exp(power, decimals=None):
    '''Return e raised to power, correct to decimals places.'''
    power = operand(power, 'exp')
    decimals = decimals_or_default(decimals)

    if power.is_nan():
        return NaN
    if power.is_positive_infinity():
        return PositiveInfinity
    if power.is_negative_infinity():
        return Zero
    if power.is_zero():
        return One
    if power.is_one():
        return _e(decimals)

    result = try_calculate_as_double(math.exp, decimals, power)
    if result is not None:
        return result
    return trim(exact_exp(power, decimals + GUARD_DIGITS), decimals)


##
## Logarithms
##

def _log_series(value, digits):
    '''Return ln(value) for value in (0.5, 2) by summing the series of 2 artanh((x-1)/(x+1)).'''
    eps = epsilon(digits)
    y = trim((value - One) / (value + One), digits)
    y_squared = trim(y * y, digits)

    total = power = y
    count = 1
    while True:
        count += 2
        power = trim(power * y_squared, digits)
        new_total = trim(total + power / count, digits)
        if (new_total - total).abs() <= eps:
            break
        total = new_total

    logger.debug('log: %d series terms at %d places', count // 2, digits)
    return new_total.left_shift(1)


@lru_cache(maxsize=16)
def _ln2(digits):
    return _log_series(BigReal(2), digits)


def exact_log(value, digits):
    '''Return ln(value) for finite positive value to digits decimal places.'''
    if value.is_one():
        return Zero
    # value = m * 2^k with m in (0.5, 2)
    numerator, denominator = value.simplify_signs()
    k = numerator.bit_length() - denominator.bit_length()
    work = digits + 2
    result = _log_series(value.right_shift(k), work)
    if k:
        result += _ln2(work + decimal_digits(k)) * k
    return trim(result, digits)


def _log_special(value):
    '''Return the logarithm of a value for which it is trivial, otherwise None.'''
    if value.is_nan() or value.is_negative():
        return NaN
    if value.is_zero():
        return NegativeInfinity
    if value.is_positive_infinity():
        return PositiveInfinity
    if value.is_one():
        return Zero
    return None


def log(value, base=None, decimals=None):
    '''Return the logarithm of value to base, or the natural logarithm if base is None,
    correct to decimals places.  The logarithm of a negative value is NaN.'''
    value = operand(value, 'log')
    decimals = decimals_or_default(decimals)
    if base is not None:
        return _log_to_base(value, operand(base, 'log'), decimals, math.log)

    result = _log_special(value)
    if result is not None:
        return result
    result = try_calculate_as_double(math.log, decimals, value)
    if result is not None:
        return result
    return trim(exact_log(value, decimals + GUARD_DIGITS), decimals)


def _log_to_base(value, base, decimals, function):
    if not base.is_finite() or not base.is_positive():
        return NaN
    special = _log_special(value)
    if special is not None and not special.is_infinity():
        return special
    if special is None:
        result = try_calculate_as_double(function, decimals, value, base)
        if result is not None:
            return result
    work = decimals + GUARD_DIGITS
    numerator = exact_log(value, work) if special is None else special
    # A base of one has a zero logarithm and gives an infinite or NaN quotient
    return trim(numerator / exact_log(base, work), decimals)


def log2(value, decimals=None):
    '''Return the base-2 logarithm of value correct to decimals places.'''
    value = operand(value, 'log2')
    return _log_to_base(value, BigReal(2), decimals_or_default(decimals),
                        lambda x, _base: math.log2(x))


def log10(value, decimals=None):
    '''Return the base-10 logarithm of value correct to decimals places.'''
    value = operand(value, 'log10')
    return _log_to_base(value, BigReal(10), decimals_or_default(decimals),
                        lambda x, _base: math.log10(x))


##
## Roots and powers
##

def _integer_root(value, n):
    '''Return the greatest integer whose nth power does not exceed the non-negative integer
    value.'''
    if value < 2:
        return value
    if n == 2:
        return math.isqrt(value)
    # Newton's method from above decreases monotonically to the root
    guess = 1 << -(-value.bit_length() // n)
    steps = 0
    while True:
        steps += 1
        better = ((n - 1) * guess + value // guess ** (n - 1)) // n
        if better >= guess:
            break
        guess = better
    logger.debug('root: %d Newton steps for an order %d root', steps, n)
    return guess


def exact_root(value, n, digits):
    '''Return the positive nth root of the finite positive value truncated to digits decimal
    places.'''
    numerator, denominator = value.simplify_signs()
    scaled = numerator * 10 ** (n * digits) // denominator
    return BigReal(_integer_root(scaled, n), 10 ** digits)


def root(value, n, decimals=None):
    '''Return the nth root of value correct to decimals places.

    The root of a negative value is NaN for even n; for odd n it is the negated root of
    the magnitude.  A negative n gives the root of the reciprocal.  The zeroth root is NaN.
    '''
    value = operand(value, 'root')
    if not isinstance(n, int):
        raise TypeError('the order of a root must be an integer')
    decimals = decimals_or_default(decimals)

    if value.is_nan() or n == 0:
        return NaN
    if n < 0:
        return root(value.inverse(), -n, decimals)
    if n == 1:
        return value
    if value.is_negative():
        if n % 2 == 0:
            return NaN
        return root(value.negate(), n, decimals).negate()
    if value.is_zero():
        return Zero
    if value.is_positive_infinity():
        return PositiveInfinity

    if n == 2:
        result = try_calculate_as_double(math.sqrt, decimals, value)
    else:
        def nth_root(x):
            return x ** (1.0 / n)
        result = try_calculate_as_double(nth_root, decimals, value)
    if result is not None:
        return result
    return trim(exact_root(value, n, decimals + 2), decimals)


def sqrt(value, decimals=None):
    '''Return the square root of value correct to decimals places.'''
    return root(value, 2, decimals)


def cbrt(value, decimals=None):
    '''Return the cube root of value correct to decimals places.'''
    return root(value, 3, decimals)


def hypot(x, y, decimals=None):
    '''Return sqrt(x*x + y*y) correct to decimals places.'''
    x = operand(x, 'hypot')
    y = operand(y, 'hypot')
    decimals = decimals_or_default(decimals)
    if x.is_infinity() or y.is_infinity():
        return PositiveInfinity
    if x.is_nan() or y.is_nan():
        return NaN
    result = try_calculate_as_double(math.hypot, decimals, x, y)
    if result is not None:
        return result
    return root(x * x + y * y, 2, decimals)


def power(value, exponent, decimals=None):
    '''Return value raised to exponent correct to decimals places.

    Integral exponents are computed exactly.  Otherwise a negative value has no real power
    and the result is NaN, as it is for an infinite exponent.  The exact path evaluates
    e^(exponent * ln(value)).
    '''
    value = operand(value, 'power')
    exponent = operand(exponent, 'power')
    decimals = decimals_or_default(decimals)

    if exponent.is_integer():
        return value.pow(exponent.to_integer())
    if value.is_nan() or not exponent.is_finite() or value.is_negative():
        return NaN
    if value.is_zero():
        return Zero if exponent.is_positive() else PositiveInfinity
    if value.is_positive_infinity():
        return PositiveInfinity if exponent.is_positive() else Zero
    if value.is_one():
        return One

    result = try_calculate_as_double(math.pow, decimals, value, exponent)
    if result is not None:
        return result

    # The error of the logarithm is scaled by the exponent, and then by the magnitude of
    # the result; estimate both in decimal digits from the bit lengths
    numerator, denominator = value.simplify_signs()
    bits = abs(numerator.bit_length() - denominator.bit_length()) + 1
    magnitude = exponent.abs().ceiling().to_integer()
    extra = magnitude * bits * 30103 // 100000 + decimal_digits(magnitude) + 1
    product = exponent * exact_log(value, decimals + GUARD_DIGITS + extra)
    return trim(exact_exp(product, decimals + GUARD_DIGITS), decimals)
