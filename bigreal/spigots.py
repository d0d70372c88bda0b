#
# Digit-by-digit generation of the mathematical constants
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import logging
import math
from itertools import islice

from .bigreal import BigReal

__all__ = ('pi_digits', 'e_digits', 'calculate_pi', 'calculate_e', 'calculate_tau')

logger = logging.getLogger(__name__)


def pi_digits():
    '''Generate the decimal digits of π, starting with the 3, without end.

    This is Gibbons' unbounded spigot: the state is a linear fractional transformation held
    as four integers, and a digit is emitted once the transformation pins it down.
    '''
    q, r, t, k, n, l = 1, 0, 1, 1, 3, 3
    while True:
        if 4 * q + r - t < n * t:
            yield n
            q, r, n = 10 * q, 10 * (r - n * t), (10 * (3 * q + r)) // t - 10 * n
        else:
            q, r, t, k, n, l = (q * k, (2 * q + r) * l, t * l, k + 1,
                                (q * (7 * k + 2) + r * l) // (t * l), l + 2)


def _mixed_radix_places(count):
    '''Return the number of factorial-base places needed for count decimal digits of e.'''
    places = 2
    log_factorial = math.log10(2)
    while log_factorial <= count + 5:
        places += 1
        log_factorial += math.log10(places)
    return places


def e_digits(count):
    '''Generate count decimal digits of the fractional part of e.

    e - 2 is 0.1111... written in the factorial number system, where place i has radix i.
    Each multiplication by ten of that representation carries one decimal digit out of
    the second place.
    '''
    places = _mixed_radix_places(count)
    accumulators = [1] * (places + 1)
    for _ in range(count):
        carry = 0
        for radix in range(places, 1, -1):
            carry, accumulators[radix] = divmod(accumulators[radix] * 10 + carry, radix)
        yield carry


def _collect(digits, value=0):
    for digit in digits:
        value = value * 10 + digit
    return value


def calculate_pi(decimals):
    '''Return π truncated to decimals decimal places.'''
    if not isinstance(decimals, int) or decimals < 0:
        raise ValueError(f'decimals must be a non-negative integer: {decimals!r}')
    logger.debug('generating %d digits of pi', decimals + 1)
    return BigReal(_collect(islice(pi_digits(), decimals + 1)), 10 ** decimals)


def calculate_e(decimals):
    '''Return e truncated to decimals decimal places.'''
    if not isinstance(decimals, int) or decimals < 0:
        raise ValueError(f'decimals must be a non-negative integer: {decimals!r}')
    logger.debug('generating %d digits of e', decimals + 1)
    return BigReal(_collect(e_digits(decimals), 2), 10 ** decimals)


def calculate_tau(decimals):
    '''Return τ = 2π truncated to decimals decimal places.'''
    if not isinstance(decimals, int) or decimals < 0:
        raise ValueError(f'decimals must be a non-negative integer: {decimals!r}')
    # Doubling can carry into the last place, so generate some spare digits of π
    spare = 10
    pi = _collect(islice(pi_digits(), decimals + spare + 1))
    return BigReal(2 * pi // 10 ** spare, 10 ** decimals)
