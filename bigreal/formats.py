#
# Number formats: locale text symbols, IEEE-754 binary layouts and fixed-width integers
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import locale
from collections import namedtuple
from decimal import Decimal
from enum import IntEnum
from struct import Struct
from typing import NamedTuple

import attr

from .errors import UnsupportedRounding

__all__ = ('Compare', 'NumberFormat', 'InvariantFormat', 'CommaFormat',
           'BinaryFormat', 'BinaryTuple', 'IEEEhalf', 'IEEEsingle', 'IEEEdouble',
           'IntegerFormat', 'int8', 'uint8', 'int16', 'uint16', 'int32', 'uint32',
           'int64', 'uint64', 'int128', 'uint128',
           'DECIMAL_MAX', 'DECIMAL_PRECISION',
           'ROUND_CEILING', 'ROUND_FLOOR', 'ROUND_DOWN', 'ROUND_UP',
           'ROUND_HALF_EVEN', 'ROUND_HALF_UP', 'ROUND_HALF_DOWN', 'ALL_ROUNDINGS')


# Rounding modes
ROUND_CEILING   = 'ROUND_CEILING'       # Towards +infinity
ROUND_FLOOR     = 'ROUND_FLOOR'         # Towards -infinity
ROUND_DOWN      = 'ROUND_DOWN'          # Towards zero
ROUND_UP        = 'ROUND_UP'            # Away from zero
ROUND_HALF_EVEN = 'ROUND_HALF_EVEN'     # To nearest with ties towards even
ROUND_HALF_DOWN = 'ROUND_HALF_DOWN'     # To nearest with ties towards zero
ROUND_HALF_UP   = 'ROUND_HALF_UP'       # To nearest with ties away from zero

ALL_ROUNDINGS = frozenset((ROUND_CEILING, ROUND_FLOOR, ROUND_DOWN, ROUND_UP,
                           ROUND_HALF_EVEN, ROUND_HALF_DOWN, ROUND_HALF_UP))


# Four-way result of the compare() operation.
class Compare(IntEnum):
    LESS_THAN = 0
    EQUAL = 1
    GREATER_THAN = 2
    UNORDERED = 3


# When precision is lost during a calculation these indicate what fraction of the unit in
# the last place the lost part represented.
LF_EXACTLY_ZERO = 0
LF_LESS_THAN_HALF = 1
LF_EXACTLY_HALF = 2
LF_MORE_THAN_HALF = 3


def check_rounding(rounding, op_tuple):
    '''Raise UnsupportedRounding unless rounding is one of the ROUND_ constants.'''
    if rounding not in ALL_ROUNDINGS:
        raise UnsupportedRounding(op_tuple, f'unsupported rounding mode: {rounding!r}')


def lost_fraction(remainder, divisor):
    '''Return the lost fraction when a division by divisor leaves remainder, both
    non-negative.'''
    if remainder == 0:
        return LF_EXACTLY_ZERO
    twice = remainder * 2
    if twice < divisor:
        return LF_LESS_THAN_HALF
    if twice == divisor:
        return LF_EXACTLY_HALF
    return LF_MORE_THAN_HALF


def round_up(rounding, lost_fraction, sign, is_odd):
    '''Return True if, when an operation is inexact, the result should be rounded up (i.e.,
    away from zero by incrementing the magnitude).

    sign is True for negative numbers, and is_odd indicates if the LSB of the truncated
    magnitude is set, which is needed for ties-to-even rounding.
    '''
    if lost_fraction == LF_EXACTLY_ZERO:
        return False

    if rounding == ROUND_HALF_EVEN:
        if lost_fraction == LF_EXACTLY_HALF:
            return is_odd
        else:
            return lost_fraction == LF_MORE_THAN_HALF
    elif rounding == ROUND_CEILING:
        return not sign
    elif rounding == ROUND_FLOOR:
        return sign
    elif rounding == ROUND_DOWN:
        return False
    elif rounding == ROUND_UP:
        return True
    elif rounding == ROUND_HALF_DOWN:
        return lost_fraction == LF_MORE_THAN_HALF
    elif rounding == ROUND_HALF_UP:
        return lost_fraction != LF_LESS_THAN_HALF
    raise UnsupportedRounding(('round_up', rounding), f'unsupported rounding mode: {rounding!r}')


@attr.s(slots=True, kw_only=True, frozen=True)
class NumberFormat:
    '''The culture-provided symbols used when parsing and formatting numbers.'''

    # Separates the whole part from the fraction
    decimal_separator = attr.ib(default='.')
    # Leading signs accepted on input; negative_sign is also used for output
    negative_sign = attr.ib(default='-')
    positive_sign = attr.ib(default='+')
    # Symbols for the non-finite values.  They are matched case-insensitively.
    positive_infinity_symbol = attr.ib(default='Infinity')
    negative_infinity_symbol = attr.ib(default='-Infinity')
    nan_symbol = attr.ib(default='NaN')
    # Introduces a power-of-ten exponent, matched case-insensitively
    exponent_marker = attr.ib(default='e')

    @classmethod
    def from_localeconv(cls, conv=None):
        '''Return a NumberFormat using the decimal point and signs of the current locale, or of
        conv if given (a dictionary as returned by locale.localeconv()).'''
        conv = conv or locale.localeconv()
        negative_sign = conv.get('negative_sign') or '-'
        return cls(decimal_separator=conv.get('decimal_point') or '.',
                   negative_sign=negative_sign,
                   positive_sign=conv.get('positive_sign') or '+',
                   negative_infinity_symbol=negative_sign + 'Infinity')

    def leading_sign(self, negative):
        '''Return the leading sign string.'''
        return self.negative_sign if negative else ''

    def split_sign(self, text):
        '''Return a (negative, rest) pair, removing at most one leading sign from text.'''
        if text.startswith(self.negative_sign):
            return True, text[len(self.negative_sign):]
        if text.startswith(self.positive_sign):
            return False, text[len(self.positive_sign):]
        return False, text

    def match_non_finite(self, text):
        '''Return 'inf', '-inf', 'nan' if text names a non-finite value, otherwise None.
        text must already be stripped of surrounding whitespace.'''
        folded = text.casefold()
        if folded == self.positive_infinity_symbol.casefold():
            return 'inf'
        if folded == self.negative_infinity_symbol.casefold():
            return '-inf'
        if folded == self.nan_symbol.casefold():
            return 'nan'

        negative, rest = self.split_sign(text)
        if rest is text:
            return None
        folded = rest.casefold()
        if folded == self.positive_infinity_symbol.casefold():
            return '-inf' if negative else 'inf'
        if folded == self.nan_symbol.casefold():
            return 'nan'
        return None


# The invariant culture
InvariantFormat = NumberFormat()

# Cultures writing the decimal separator as a comma
CommaFormat = NumberFormat(decimal_separator=',')


BinaryTuple = namedtuple('BinaryTuple', 'sign exponent significand')


class BinaryFormat(NamedTuple):
    '''An IEEE-754 binary interchange format.  Only instantiate indirectly through the
    from_IEEE constructor.

    precision is the number of bits in the significand including the implicit integer bit.

    e_max is largest e such that 2^e is representable; the largest representable number
    is then 2^e_max * (2 - 2^(1 - precision)) when the significand is all ones.

    e_min is the smallest e such that 2^e is not a subnormal number.  The smallest
    subnormal number is then 2^(e_min - (precision - 1)).
    '''

    precision: int
    e_max: int
    e_min: int

    # All a function of the 3 values above
    e_bias: int
    int_bit: int
    max_significand: int
    fmt_width: int
    # The struct module format character for a value of this width
    struct_code: str

    @classmethod
    def from_IEEE(cls, fmt_width):
        '''The IEEE-754 format for the given width, which must be 16, 32 or 64 as only those
        have a Python float equivalent.'''
        codes = {16: ('e', 11), 32: ('f', 24), 64: ('d', 53)}
        if fmt_width not in codes:
            raise ValueError(f'no native binary format has width {fmt_width}')
        struct_code, precision = codes[fmt_width]
        e_width = fmt_width - precision
        e_max = (1 << (e_width - 1)) - 1
        e_min = 1 - e_max
        return cls(precision, e_max, e_min, 1 - e_min, 1 << (precision - 1),
                   (1 << precision) - 1, fmt_width, struct_code)

    def __repr__(self):
        return f'BinaryFormat(precision={self.precision}, e_max={self.e_max}, e_min={self.e_min})'

    @property
    def max_exponent_field(self):
        '''The biased exponent of infinities and NaNs.'''
        return self.e_max * 2 + 1

    @property
    def largest_finite(self):
        '''The (numerator, denominator) pair of the largest finite value.'''
        return self.max_significand << (self.e_max - (self.precision - 1)), 1

    def pack(self, sign, exponent, significand, endianness='little'):
        '''Packs the IEEE parts of a floating point number as bytes of the given endianness.

        exponent is the biased exponent in the IEEE sense, i.e., it is zero for zeroes and
        subnormals and e_max * 2 + 1 for NaNs and infinites.  significand must not include
        the integer bit.
        '''
        if not 0 <= significand < self.int_bit:
            raise ValueError('significand out of range')
        if not 0 <= exponent <= self.max_exponent_field:
            raise ValueError('biased exponent out of range')

        value = exponent
        if sign:
            value += (self.e_max + 1) * 2
        value = (value << (self.precision - 1)) + significand
        return value.to_bytes(self.fmt_width // 8, endianness)

    def unpack(self, raw, endianness='little'):
        '''Decode a binary encoding and return a BinaryTuple.

        Exponent is the biased exponent in the IEEE sense, i.e., it is zero for zeroes and
        subnormals and e_max * 2 + 1 for NaNs and infinites.  significand does not include
        the integer bit.
        '''
        size = self.fmt_width // 8
        if len(raw) != size:
            raise ValueError(f'expected {size} bytes to unpack; got {len(raw)}')

        value = int.from_bytes(raw, endianness)

        significand = value & (self.int_bit - 1)
        value >>= self.precision - 1
        exponent = value & self.max_exponent_field
        sign = value != exponent

        return BinaryTuple(sign, exponent, significand)

    def pack_float(self, value):
        '''Return the little-endian encoding of a Python float rounded to this format.'''
        return Struct('<' + self.struct_code).pack(value)

    def unpack_float(self, raw):
        '''Return the Python float that a little-endian encoding represents.'''
        result, = Struct('<' + self.struct_code).unpack(raw)
        return result

    def round_ratio(self, sign, numerator, denominator, rounding):
        '''Return a BinaryTuple (IEEE fields) of the value ± numerator / denominator correctly
        rounded to this format.  numerator and denominator must be positive.
        '''
        assert numerator > 0 and denominator > 0

        # The exponent of the LSB of the integer significand.  The estimate puts the
        # quotient in [2^(precision - 1), 2^(precision + 1)); subnormal numbers cannot
        # shift below e_min.
        exponent = numerator.bit_length() - denominator.bit_length() - self.precision
        exponent = max(exponent, self.e_min - (self.precision - 1))

        while True:
            if exponent >= 0:
                significand, remainder = divmod(numerator, denominator << exponent)
                divisor = denominator << exponent
            else:
                significand, remainder = divmod(numerator << -exponent, denominator)
                divisor = denominator
            if significand <= self.max_significand:
                break
            exponent += 1

        fraction = lost_fraction(remainder, divisor)
        if round_up(rounding, fraction, sign, bool(significand & 1)):
            significand += 1
            # If the significand now overflows, halve it and increment the exponent
            if significand > self.max_significand:
                significand >>= 1
                exponent += 1

        if significand < self.int_bit:
            # Subnormal or zero
            return BinaryTuple(sign, 0, significand)

        e_biased = exponent + (self.precision - 1) + self.e_bias
        if e_biased >= self.max_exponent_field:
            return BinaryTuple(sign, self.max_exponent_field, 0)
        return BinaryTuple(sign, e_biased, significand - self.int_bit)


IEEEhalf = BinaryFormat.from_IEEE(16)
IEEEsingle = BinaryFormat.from_IEEE(32)
IEEEdouble = BinaryFormat.from_IEEE(64)


class IntegerFormat(namedtuple('IntegerFormat', 'name min_int max_int')):
    '''A fixed-width two's complement or unsigned integer type.'''

    @classmethod
    def from_width(cls, width, signed):
        if signed:
            return cls(f'int{width}', -(1 << (width - 1)), (1 << (width - 1)) - 1)
        return cls(f'uint{width}', 0, (1 << width) - 1)

    def __repr__(self):
        return self.name


int8 = IntegerFormat.from_width(8, True)
uint8 = IntegerFormat.from_width(8, False)
int16 = IntegerFormat.from_width(16, True)
uint16 = IntegerFormat.from_width(16, False)
int32 = IntegerFormat.from_width(32, True)
uint32 = IntegerFormat.from_width(32, False)
int64 = IntegerFormat.from_width(64, True)
uint64 = IntegerFormat.from_width(64, False)
int128 = IntegerFormat.from_width(128, True)
uint128 = IntegerFormat.from_width(128, False)

# A 96-bit unsigned coefficient with a power-of-ten scale of at most 28, as carried by
# fixed-width decimal types.
DECIMAL_MAX = Decimal((1 << 96) - 1)
DECIMAL_PRECISION = 28
