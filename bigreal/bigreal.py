#
# An arbitrary-precision rational number type with exact arithmetic
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import re
from collections import namedtuple
from decimal import Decimal
from fractions import Fraction
from math import gcd

from .context import get_context
from .errors import ConversionOverflow, DomainError, ParseError
from .formats import (
    Compare, IEEEdouble, IEEEhalf, IEEEsingle, DECIMAL_MAX, DECIMAL_PRECISION,
    ROUND_CEILING, ROUND_DOWN, ROUND_FLOOR, ROUND_HALF_EVEN,
    check_rounding, lost_fraction, round_up,
)

__all__ = ('BigReal', 'compare', 'lerp', 'inverse_lerp',
           'One', 'Zero', 'NegativeOne', 'OneHalf', 'Ten', 'E', 'Pi', 'Tau',
           'NaN', 'PositiveInfinity', 'NegativeInfinity',
           'AdditiveIdentity', 'MultiplicativeIdentity',
           'OP_ADD', 'OP_SUBTRACT', 'OP_MULTIPLY', 'OP_DIVIDE', 'OP_REMAINDER',
           'OP_POW', 'OP_PARSE', 'OP_ROUND', 'OP_TO_FLOAT', 'OP_TO_DECIMAL', 'OP_TO_INTEGER')


# Operation names
OP_ADD = 'add'
OP_SUBTRACT = 'subtract'
OP_MULTIPLY = 'multiply'
OP_DIVIDE = 'divide'
OP_REMAINDER = 'remainder'
OP_POW = 'pow'
OP_PARSE = 'parse'
OP_ROUND = 'round'
OP_TO_FLOAT = 'to_float'
OP_TO_DECIMAL = 'to_decimal'
OP_TO_INTEGER = 'to_integer'


def _rational(numerator, denominator):
    '''Make a BigReal from a pair of integers without validation.'''
    return tuple.__new__(BigReal, (numerator, denominator))


# CPython refuses int <-> str conversions of more than a few thousand digits.  Decimal
# converts integers of any size so longer values go through it.
SHORT_DIGITS = 4000


def int_to_str(value):
    '''Return the decimal text of an integer of any size.'''
    if value.bit_length() < SHORT_DIGITS * 3:
        return str(value)
    return str(Decimal(value))


def str_to_int(digits):
    '''Return the integer value of a string of ASCII digits of any length.'''
    if len(digits) < SHORT_DIGITS:
        return int(digits)
    return int(Decimal(digits))


def decimal_digits(value):
    '''Return the number of decimal digits in the magnitude of an integer, or one more.'''
    return abs(value).bit_length() * 30103 // 100000 + 1


def _divide_toward_zero(numerator, denominator):
    '''Return (quotient, remainder) of integer division with the quotient truncated towards
    zero, so the remainder has the sign of the numerator.'''
    quotient, remainder = divmod(abs(numerator), abs(denominator))
    if (numerator < 0) != (denominator < 0):
        quotient = -quotient
    if numerator < 0:
        remainder = -remainder
    return quotient, remainder


def _parse_fixed_point(text, number_format):
    '''Parse an optionally signed run of digits with at most one decimal separator.  Return
    None if the text is not of that form.'''
    negative, digits = number_format.split_sign(text)
    point = digits.find(number_format.decimal_separator)
    if point >= 0:
        digits = digits[:point] + digits[point + len(number_format.decimal_separator):]

    if not (digits.isascii() and digits.isdigit()):
        return None
    numerator = str_to_int(digits)
    if negative:
        numerator = -numerator

    if point < 0:
        return _rational(numerator, 1)
    return _rational(numerator, 10 ** (len(digits) - point))


class BigReal(namedtuple('BigReal', 'numerator denominator')):
    '''Internal Representation
       -----------------------

    A value is the quotient of two Python integers, stored exactly as given.  The pair is
    not reduced to lowest terms by construction or by arithmetic; simplify() does that on
    request, as the GCD of large integers is expensive and rarely needed.

    A denominator of zero encodes the non-finite values:

          0 / 0     NaN
        +ve / 0     +Infinity
        -ve / 0     -Infinity

    The sign of a value is the XOR of the signs of its numerator and denominator, so
    BigReal(-1, -1) is one without first being normalized.

    BigReal() with no arguments is NaN, not zero.  A single argument of type int, float,
    Decimal, Fraction or str is converted exactly (strings are parsed).
    '''

    __slots__ = ()

    def __new__(cls, numerator=None, denominator=None):
        '''Validate and create a rational number with the given numerator and denominator.'''
        if denominator is None:
            if numerator is None:
                return tuple.__new__(cls, (0, 0))
            if isinstance(numerator, BigReal):
                return tuple.__new__(cls, numerator)
            if isinstance(numerator, str):
                return cls.parse(numerator)
            value = convert_for_arith(numerator)
            if value is None:
                raise TypeError(f'cannot construct a BigReal from {type(numerator).__name__}')
            return value
        if not isinstance(numerator, int):
            raise TypeError('numerator must be an integer')
        if not isinstance(denominator, int):
            raise TypeError('denominator must be an integer')
        return tuple.__new__(cls, (numerator, denominator))

    ##
    ## Exact construction
    ##

    @classmethod
    def from_int(cls, value):
        '''Return the integer value as a BigReal.'''
        if not isinstance(value, int):
            raise TypeError('from_int requires an integer')
        return _rational(value, 1)

    @classmethod
    def from_float(cls, value, fmt=IEEEdouble):
        '''Return the exact value of a Python float once rounded to the binary format fmt,
        which is one of IEEEhalf, IEEEsingle or IEEEdouble.'''
        if not isinstance(value, float):
            raise TypeError('from_float requires a float')
        try:
            raw = fmt.pack_float(value)
        except OverflowError:
            raise ConversionOverflow(('from_float', value, fmt),
                                     f'{value!r} is out of range for {fmt!r}') from None
        return cls.from_bytes(raw, fmt)

    @classmethod
    def from_bytes(cls, raw, fmt=IEEEdouble, endianness='little'):
        '''Decode a binary interchange encoding of the format fmt and return its exact value.
        The significand and exponent are read from the bit pattern; no decimal text is
        involved.'''
        sign, exponent, significand = fmt.unpack(raw, endianness)

        # NaNs and infinities
        if exponent == fmt.max_exponent_field:
            if significand:
                return NaN
            return NegativeInfinity if sign else PositiveInfinity

        if exponent == 0:
            # Zeroes of both signs are zero
            if significand == 0:
                return Zero
            # Subnormals have no integer bit and the exponent of the smallest normal
            exponent = fmt.e_min
        else:
            significand += fmt.int_bit
            exponent -= fmt.e_bias

        # The exponent of the LSB of the significand read as an integer
        exponent -= fmt.precision - 1
        if sign:
            significand = -significand
        if exponent >= 0:
            return _rational(significand << exponent, 1)
        return _rational(significand, 1 << -exponent)

    @classmethod
    def from_decimal(cls, value):
        '''Return the exact value of a Decimal.  The coefficient becomes the numerator, scaled by
        the power of ten the exponent gives.'''
        if not isinstance(value, Decimal):
            raise TypeError('from_decimal requires a Decimal instance')
        if value.is_nan():
            return NaN
        if value.is_infinite():
            return NegativeInfinity if value.is_signed() else PositiveInfinity
        sign, digits, exponent = value.as_tuple()
        coefficient = 0
        for digit in digits:
            coefficient = coefficient * 10 + digit
        if sign:
            coefficient = -coefficient
        if exponent >= 0:
            return _rational(coefficient * 10 ** exponent, 1)
        return _rational(coefficient, 10 ** -exponent)

    @classmethod
    def from_fraction(cls, value):
        '''Return the value of a Fraction.'''
        if not isinstance(value, Fraction):
            raise TypeError('from_fraction requires a Fraction instance')
        return _rational(value.numerator, value.denominator)

    ##
    ## Parsing and formatting
    ##

    @classmethod
    def parse(cls, text, number_format=None):
        '''Convert text to a BigReal.

        Surrounding whitespace is ignored.  The non-finite symbols of number_format are
        recognised case-insensitively with an optional leading sign.  Otherwise the text is
        an optionally signed run of digits with at most one decimal separator, optionally
        followed by an exponent marker and an exponent.  The exponent has the same form
        without a further exponent marker, so "2e2.5" is 2 * 10^2.5 but "1e2e3" is an error;
        fractional exponents are evaluated to the context's decimals.

        Raises ParseError if the text is not a number.
        '''
        if not isinstance(text, str):
            raise TypeError('parse requires a string')
        number_format = number_format or get_context().number_format
        op_tuple = (OP_PARSE, text)

        stripped = text.strip()
        special = number_format.match_non_finite(stripped)
        if special == 'inf':
            return PositiveInfinity
        if special == '-inf':
            return NegativeInfinity
        if special == 'nan':
            return NaN

        exponent = None
        match = re.search(re.escape(number_format.exponent_marker), stripped, re.IGNORECASE)
        if match:
            exponent = _parse_fixed_point(stripped[match.end():].strip(), number_format)
            if exponent is None:
                raise ParseError(op_tuple, f'invalid exponent: {text!r}')
            stripped = stripped[:match.start()]

        value = _parse_fixed_point(stripped, number_format)
        if value is None:
            raise ParseError(op_tuple, f'invalid number: {text!r}')
        if exponent is not None:
            value = value._scale_by_power_of_ten(exponent)
        return value

    @classmethod
    def try_parse(cls, text, number_format=None):
        '''As parse(), but return a (success, value) pair instead of raising.  On failure the
        value is NaN.'''
        try:
            return True, cls.parse(text, number_format)
        except (ArithmeticError, ValueError, TypeError):
            return False, NaN

    def _scale_by_power_of_ten(self, exponent):
        '''Return self * 10^exponent for a finite BigReal exponent.'''
        if exponent.is_integer():
            return self.left_shift(int(exponent), 10)
        # Irrational in general; approximate to the context's decimals
        from .approximations import power
        return self * power(Ten, exponent)

    def to_string(self, decimals=None, number_format=None, pad_decimal=None):
        '''Return the value as decimal text, truncated after decimals decimal places with
        trailing zeroes removed.  If pad_decimal is True an integral value is followed by the
        decimal separator and a zero.  Arguments left as None take their context defaults.
        '''
        context = get_context()
        decimals = context.string_decimals if decimals is None else decimals
        number_format = number_format or context.number_format
        pad_decimal = context.pad_decimal if pad_decimal is None else pad_decimal
        if not isinstance(decimals, int) or decimals < 0:
            raise ValueError(f'decimals must be a non-negative integer: {decimals!r}')

        if self.denominator == 0:
            if self.numerator > 0:
                return number_format.positive_infinity_symbol
            if self.numerator < 0:
                return number_format.negative_infinity_symbol
            return number_format.nan_symbol

        numerator, denominator = self.simplify_signs()
        magnitude = abs(numerator)
        whole, remainder = divmod(magnitude, denominator)

        fraction = ''
        if remainder and decimals:
            # The fraction as a scaled integer, e.g. 123.45 -> 4500000 for 7 decimals
            scale = 10 ** decimals
            scaled = (magnitude * scale) // denominator % scale
            fraction = int_to_str(scaled).zfill(decimals).rstrip('0')

        text = int_to_str(whole)
        if fraction:
            text = f'{text}{number_format.decimal_separator}{fraction}'
        elif pad_decimal:
            text = f'{text}{number_format.decimal_separator}0'

        # The sign is restored for values like -0.5 whose whole part is zero
        negative = numerator < 0 and (whole or fraction)
        return number_format.leading_sign(negative) + text

    def to_rational_string(self, number_format=None):
        '''Return the value in lowest terms as "numerator / denominator".'''
        if self.denominator == 0:
            return self.to_string(number_format=number_format)
        numerator, denominator = self.simplify()
        return f'{int_to_str(numerator)} / {int_to_str(denominator)}'

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return f'BigReal({int_to_str(self.numerator)}, {int_to_str(self.denominator)})'

    ##
    ## Non-computational operations
    ##

    @property
    def sign(self):
        '''Return 1 for positive values including +Infinity, -1 for negative values including
        -Infinity, and 0 for zeroes and NaN.'''
        if self.numerator == 0:
            return 0
        return -1 if (self.numerator < 0) != (self.denominator < 0) else 1

    def is_nan(self):
        '''Return True if the value is NaN.'''
        return self.numerator == 0 and self.denominator == 0

    def is_finite(self):
        '''Return True if the value is neither an infinity nor NaN.'''
        return self.denominator != 0

    def is_infinity(self):
        '''Return True if the value is infinite of either sign.'''
        return self.numerator != 0 and self.denominator == 0

    def is_positive_infinity(self):
        return self.numerator > 0 and self.denominator == 0

    def is_negative_infinity(self):
        return self.numerator < 0 and self.denominator == 0

    def is_zero(self):
        '''Return True if the value is zero.  NaN is not zero.'''
        return self.numerator == 0 and self.denominator != 0

    def is_one(self):
        return self.numerator == self.denominator and self.denominator != 0

    def is_negative_one(self):
        return self.numerator == -self.denominator and self.denominator != 0

    def is_positive(self):
        '''Return True if the value is greater than zero, including +Infinity.'''
        return self.sign > 0

    def is_negative(self):
        '''Return True if the value is less than zero, including -Infinity.'''
        return self.sign < 0

    def is_integer(self):
        '''Return True if the value is finite and a whole number.'''
        return self.denominator != 0 and self.numerator % self.denominator == 0

    def is_even_integer(self):
        return self.is_integer() and (self.numerator // self.denominator) % 2 == 0

    def is_odd_integer(self):
        return self.is_integer() and (self.numerator // self.denominator) % 2 == 1

    def is_canonical(self):
        '''Return True if the value is in lowest terms with a non-negative denominator, as
        simplify() returns it.'''
        if self.is_nan():
            return True
        return self.denominator >= 0 and gcd(self.numerator, self.denominator) == 1

    def as_integer_ratio(self):
        '''Return a pair (n, d) of integers that represent the value as a fraction in lowest
        terms and with a positive denominator.'''
        if self.denominator == 0:
            op_tuple = ('as_integer_ratio', self)
            if self.numerator:
                raise ConversionOverflow(op_tuple, 'cannot convert an infinity to an integer '
                                         'ratio')
            raise DomainError(op_tuple, 'cannot convert a NaN to an integer ratio')
        return tuple(self.simplify())

    ##
    ## Quiet computational operations.  These only rearrange the numerator and
    ## denominator.
    ##

    def simplify_signs(self):
        '''Return an equal value with a non-negative denominator.'''
        if self.denominator < 0:
            return _rational(-self.numerator, -self.denominator)
        return self

    def simplify(self):
        '''Return the value in canonical form: numerator and denominator divided by their
        greatest common divisor, with a positive denominator.  Non-finite values become
        their canonical sentinels.

        This factorization can be slow for large integers, so only call it when a canonical
        form is needed.
        '''
        if self.denominator == 0:
            if self.numerator > 0:
                return PositiveInfinity
            if self.numerator < 0:
                return NegativeInfinity
            return NaN
        factor = gcd(self.numerator, self.denominator)
        if self.denominator < 0:
            factor = -factor
        if factor == 1:
            return self
        return _rational(self.numerator // factor, self.denominator // factor)

    factorize = simplify

    def negate(self):
        '''Return the value with the opposite sign.'''
        return _rational(-self.numerator, self.denominator)

    def abs(self):
        '''Return the magnitude of the value.'''
        return _rational(abs(self.numerator), abs(self.denominator))

    def inverse(self):
        '''Return the reciprocal.  The reciprocal of zero is an infinity and that of an
        infinity is zero.'''
        return _rational(self.denominator, self.numerator)

    def increment(self):
        '''Return the value plus one.'''
        if self.denominator == 0:
            return self
        return _rational(self.numerator + self.denominator, self.denominator)

    def decrement(self):
        '''Return the value minus one.'''
        if self.denominator == 0:
            return self
        return _rational(self.numerator - self.denominator, self.denominator)

    def left_shift(self, shift=1, base=2):
        '''Return the value multiplied by base^shift.  A negative shift shifts right.'''
        if not isinstance(shift, int):
            raise TypeError('shift must be an integer')
        if self.denominator == 0:
            return self
        if shift < 0:
            return self.right_shift(-shift, base)
        return _rational(self.numerator * base ** shift, self.denominator)

    def right_shift(self, shift=1, base=2):
        '''Return the value divided by base^shift.  A negative shift shifts left.'''
        if not isinstance(shift, int):
            raise TypeError('shift must be an integer')
        if self.denominator == 0:
            return self
        if shift < 0:
            return self.left_shift(-shift, base)
        return _rational(self.numerator, self.denominator * base ** shift)

    ##
    ## General computational operations.  A non-finite operand absorbs: the leftmost
    ## non-finite operand is the result, its sign adjusted where the operation implies it.
    ##

    def _absorb(self, rhs, op_name):
        '''Return the result of an operation where at least one operand is non-finite, or None
        if both are finite.'''
        if self.denominator and rhs.denominator:
            return None
        if self.denominator == 0:
            result, other = self, rhs
        else:
            result, other = rhs, self
            if op_name == OP_SUBTRACT:
                result = result.negate()
        # Infinities take the sign of a product or quotient
        if op_name in (OP_MULTIPLY, OP_DIVIDE) and result.numerator and other.sign < 0:
            result = result.negate()
        return result

    def add(self, rhs):
        '''Return the sum self + rhs.'''
        rhs = operand(rhs, OP_ADD)
        result = self._absorb(rhs, OP_ADD)
        if result is not None:
            return result
        return _rational(self.numerator * rhs.denominator + rhs.numerator * self.denominator,
                         self.denominator * rhs.denominator)

    def subtract(self, rhs):
        '''Return the difference self - rhs.'''
        rhs = operand(rhs, OP_SUBTRACT)
        result = self._absorb(rhs, OP_SUBTRACT)
        if result is not None:
            return result
        return _rational(self.numerator * rhs.denominator - rhs.numerator * self.denominator,
                         self.denominator * rhs.denominator)

    def multiply(self, rhs):
        '''Return the product self * rhs.'''
        rhs = operand(rhs, OP_MULTIPLY)
        result = self._absorb(rhs, OP_MULTIPLY)
        if result is not None:
            return result
        return _rational(self.numerator * rhs.numerator, self.denominator * rhs.denominator)

    def divide(self, rhs):
        '''Return the quotient self / rhs.  Dividing by zero gives a zero denominator, and so
        an infinity with the sign of the dividend, or NaN for 0 / 0.'''
        rhs = operand(rhs, OP_DIVIDE)
        result = self._absorb(rhs, OP_DIVIDE)
        if result is not None:
            return result
        return _rational(self.numerator * rhs.denominator, self.denominator * rhs.numerator)

    def _floor_quotient(self, rhs):
        '''Return floor(self / rhs) as an integer.  Both are finite and rhs is not zero.'''
        return (self.numerator * rhs.denominator) // (self.denominator * rhs.numerator)

    def remainder(self, rhs):
        '''Return self - floor(self / rhs) * rhs.  The result is zero or has the sign of rhs,
        as for Python's % operator.  The remainder on division by zero is NaN, and a finite
        value divided by an infinity leaves itself as the remainder.'''
        rhs = operand(rhs, OP_REMAINDER)
        if self.denominator == 0:
            return self
        if rhs.denominator == 0:
            return rhs if rhs.is_nan() else self
        if rhs.numerator == 0:
            return NaN
        quotient = self._floor_quotient(rhs)
        return _rational(self.numerator * rhs.denominator
                         - quotient * rhs.numerator * self.denominator,
                         self.denominator * rhs.denominator)

    def divrem(self, rhs):
        '''Return a (quotient, remainder) pair where the quotient is floor(self / rhs) and the
        remainder is as for remainder().  quotient * rhs + remainder == self.'''
        rhs = operand(rhs, OP_REMAINDER)
        return self.divide(rhs).floor(), self.remainder(rhs)

    def pow(self, exponent):
        '''Return self raised to an integer power.  Numerator and denominator are raised
        independently; negative exponents swap them.'''
        if not isinstance(exponent, int):
            raise TypeError('pow requires an integer exponent')
        numerator, denominator = self

        if denominator == 0:
            if numerator == 0:
                return NaN
            if exponent == 0:
                return One
            if exponent < 0:
                return Zero
            if numerator < 0 and exponent & 1:
                return NegativeInfinity
            return PositiveInfinity

        if exponent == 0:
            return One
        if exponent == 1:
            return self
        if exponent == 2:
            return _rational(numerator * numerator, denominator * denominator)
        if exponent == 3:
            return _rational(numerator * numerator * numerator,
                             denominator * denominator * denominator)
        if exponent == -1:
            return _rational(denominator, numerator)
        if exponent == -2:
            return _rational(denominator * denominator, numerator * numerator)
        if exponent == -3:
            return _rational(denominator * denominator * denominator,
                             numerator * numerator * numerator)
        if exponent > 0:
            return _rational(numerator ** exponent, denominator ** exponent)
        return _rational(denominator ** -exponent, numerator ** -exponent)

    def max(self, rhs):
        '''Return the greater of self and rhs.  If they are unordered rhs is returned.'''
        rhs = operand(rhs, 'max')
        return self if self > rhs else rhs

    def min(self, rhs):
        '''Return the lesser of self and rhs.  If they are unordered rhs is returned.'''
        rhs = operand(rhs, 'min')
        return self if self < rhs else rhs

    ##
    ## Rounding
    ##

    def _to_int(self, rounding):
        '''Round our finite value to an integer, rounding as specified, and return it as a
        Python integer.'''
        numerator, denominator = self.simplify_signs()
        sign = numerator < 0
        quotient, remainder = divmod(abs(numerator), denominator)
        if round_up(rounding, lost_fraction(remainder, denominator), sign, bool(quotient & 1)):
            quotient += 1
        return -quotient if sign else quotient

    def floor(self):
        '''Return the greatest integer not greater than the value.'''
        if self.denominator == 0:
            return self
        return _rational(self._to_int(ROUND_FLOOR), 1)

    def ceiling(self):
        '''Return the least integer not less than the value.'''
        if self.denominator == 0:
            return self
        return _rational(self._to_int(ROUND_CEILING), 1)

    def truncate(self):
        '''Return the integer part, rounding towards zero.'''
        if self.denominator == 0:
            return self
        return _rational(self._to_int(ROUND_DOWN), 1)

    def round(self, ndigits=0, rounding=None):
        '''Return the value rounded to ndigits decimal places (to a multiple of 10^-ndigits, so
        negative ndigits round to tens, hundreds, ...).  rounding is one of the ROUND_
        constants; if None the context's rounding mode is used.

        Rounding is done by scaling by 10^ndigits, rounding to an integer and unscaling.
        '''
        if not isinstance(ndigits, int):
            raise TypeError('ndigits must be an integer')
        if rounding is None:
            rounding = get_context().rounding
        check_rounding(rounding, (OP_ROUND, self, ndigits, rounding))

        if self.denominator == 0:
            return self
        if ndigits == 0:
            return _rational(self._to_int(rounding), 1)
        scale = 10 ** abs(ndigits)
        if ndigits > 0:
            return _rational(_rational(self.numerator * scale, self.denominator)
                             ._to_int(rounding), scale)
        return _rational(_rational(self.numerator, self.denominator * scale)
                         ._to_int(rounding) * scale, 1)

    def whole_part(self):
        '''Return the integer part of the value, truncated towards zero.'''
        return self.truncate()

    def fractional_part(self):
        '''Return the value less its whole part.  It has the sign of the value.'''
        if self.denominator == 0:
            return self
        _quotient, remainder = _divide_toward_zero(self.numerator, self.denominator)
        return _rational(remainder, self.denominator)

    ##
    ## Narrowing conversions
    ##

    def _check_range(self, op_tuple, largest, target):
        if self.abs() > largest:
            raise ConversionOverflow(op_tuple, f'{self.to_string(6)} is out of range for '
                                     f'{target}')

    def to_float(self, fmt=IEEEdouble, rounding=ROUND_HALF_EVEN):
        '''Return the value correctly rounded to the binary format fmt as a Python float.
        fmt is one of IEEEhalf, IEEEsingle or IEEEdouble.

        Raises ConversionOverflow if the magnitude exceeds the largest finite value of fmt.
        '''
        op_tuple = (OP_TO_FLOAT, self, fmt)
        check_rounding(rounding, op_tuple)
        if self.denominator == 0:
            if self.numerator > 0:
                return float('inf')
            if self.numerator < 0:
                return float('-inf')
            return float('nan')
        if self.numerator == 0:
            return 0.0

        self._check_range(op_tuple, _rational(*fmt.largest_finite), repr(fmt))
        numerator, denominator = self.simplify_signs()
        fields = fmt.round_ratio(numerator < 0, abs(numerator), denominator, rounding)
        return fmt.unpack_float(fmt.pack(*fields))

    def to_half(self):
        return self.to_float(IEEEhalf)

    def to_single(self):
        return self.to_float(IEEEsingle)

    def to_double(self):
        return self.to_float(IEEEdouble)

    def to_decimal(self):
        '''Return the value as a Decimal with at most 28 decimal places and a coefficient of at
        most 96 bits, the limits of a fixed-width decimal.'''
        op_tuple = (OP_TO_DECIMAL, self)
        if self.denominator == 0:
            if self.numerator > 0:
                return Decimal('Infinity')
            if self.numerator < 0:
                return Decimal('-Infinity')
            return Decimal('NaN')

        self._check_range(op_tuple, BigReal.from_decimal(DECIMAL_MAX), 'decimal')
        # Round the exact value once at each scale, giving up places until the coefficient
        # fits.  The range check means scale zero always fits.
        scale = DECIMAL_PRECISION
        while True:
            coefficient = _rational(self.numerator * 10 ** scale,
                                    self.denominator)._to_int(ROUND_HALF_EVEN)
            if abs(coefficient) <= DECIMAL_MAX or scale == 0:
                break
            scale -= 1
        # Constructing from text is exact whatever the context precision
        return Decimal(f'{coefficient}E-{scale}')

    def to_integer(self, fmt=None):
        '''Return the value truncated towards zero as a Python integer.  If fmt is an
        IntegerFormat the result must lie in its range.

        Raises DomainError for NaN and ConversionOverflow for infinities and out-of-range
        values.
        '''
        op_tuple = (OP_TO_INTEGER, self, fmt)
        if self.denominator == 0:
            if self.numerator == 0:
                raise DomainError(op_tuple, 'cannot convert a NaN to an integer')
            raise ConversionOverflow(op_tuple, 'cannot convert an infinity to an integer')
        result = self._to_int(ROUND_DOWN)
        if fmt is not None and not fmt.min_int <= result <= fmt.max_int:
            raise ConversionOverflow(op_tuple, f'{int_to_str(result)} is out of range for '
                                     f'{fmt!r}')
        return result

    ##
    ## Comparisons
    ##

    def equals(self, other):
        '''Structural equality: as ==, except that NaN equals NaN.'''
        other = convert_for_arith(other)
        if other is None:
            return False
        if self.is_nan() and other.is_nan():
            return True
        return compare(self, other) == Compare.EQUAL

    def compare_to(self, other):
        '''Return -1, 0 or 1 as self is less than, equal to or greater than other.  Unlike the
        comparison operators this is a total order: NaN equals NaN and is less than every
        other value.  None is less than every value.'''
        if other is None:
            return 1
        rhs = operand(other, 'compare_to')
        if self.is_nan():
            return 0 if rhs.is_nan() else -1
        if rhs.is_nan():
            return 1
        return compare(self, rhs) - 1

    ##
    ## Python support - make it feel like a Python numeric data type.
    ##

    def __eq__(self, other):
        rhs = convert_for_arith(other)
        if rhs is None:
            # Never let tuple equality compare our numerator and denominator
            return False if isinstance(other, tuple) else NotImplemented
        return compare(self, rhs) == Compare.EQUAL

    def __ne__(self, other):
        rhs = convert_for_arith(other)
        if rhs is None:
            return True if isinstance(other, tuple) else NotImplemented
        return compare(self, rhs) != Compare.EQUAL

    def __lt__(self, other):
        rhs = convert_for_arith(other)
        if rhs is None:
            return _unordered_operand(other, '<')
        return compare(self, rhs) == Compare.LESS_THAN

    def __le__(self, other):
        rhs = convert_for_arith(other)
        if rhs is None:
            return _unordered_operand(other, '<=')
        return compare(self, rhs) in (Compare.EQUAL, Compare.LESS_THAN)

    def __ge__(self, other):
        rhs = convert_for_arith(other)
        if rhs is None:
            return _unordered_operand(other, '>=')
        return compare(self, rhs) in (Compare.EQUAL, Compare.GREATER_THAN)

    def __gt__(self, other):
        rhs = convert_for_arith(other)
        if rhs is None:
            return _unordered_operand(other, '>')
        return compare(self, rhs) == Compare.GREATER_THAN

    def __hash__(self):
        '''Python hash.  Must hash equally to other types with the same value.'''
        if self.denominator == 0:
            # Follow the behaviour of the Decimal package for non-finite values
            if self.numerator == 0:
                return 0
            return -314159 if self.numerator < 0 else 314159
        return hash(Fraction(self.numerator, self.denominator))

    def __bool__(self):
        return not self.is_zero()

    def __int__(self):
        return self.to_integer()

    def __float__(self):
        return self.to_float()

    def __trunc__(self):
        return self.to_integer()

    def __floor__(self):
        self.to_integer()
        return self._to_int(ROUND_FLOOR)

    def __ceil__(self):
        self.to_integer()
        return self._to_int(ROUND_CEILING)

    def __round__(self, ndigits=None):
        '''If ndigits is None, round to an integer under ROUND_HALF_EVEN.  Otherwise round to
        ndigits decimal places with ROUND_HALF_EVEN and the result is a BigReal.'''
        if ndigits is None:
            self.to_integer()
            return self._to_int(ROUND_HALF_EVEN)
        return self.round(ndigits, ROUND_HALF_EVEN)

    def __neg__(self):
        return self.negate()

    def __pos__(self):
        return self

    def __abs__(self):
        return self.abs()

    def __invert__(self):
        '''Unary ~ is the reciprocal.'''
        return self.inverse()

    def __lshift__(self, shift):
        if not isinstance(shift, int):
            return NotImplemented
        return self.left_shift(shift)

    def __rshift__(self, shift):
        if not isinstance(shift, int):
            return NotImplemented
        return self.right_shift(shift)

    def __add__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.divide(other)

    def __mod__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.remainder(other)

    def __floordiv__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.divide(other).floor()

    def __divmod__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.divrem(other)

    def __pow__(self, other):
        '''Integral exponents are exact.  Other exponents are evaluated to the context's
        decimals.'''
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        if other.is_integer():
            return self.pow(other._to_int(ROUND_DOWN))
        from .approximations import power
        return power(self, other)

    def __radd__(self, other):
        return self.__add__(other)

    def __rsub__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return other.subtract(self)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __rtruediv__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return other.divide(self)

    def __rmod__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return other.remainder(self)

    def __rfloordiv__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return other.divide(self).floor()

    def __rdivmod__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return other.divrem(self)

    def __rpow__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return other.__pow__(self)


def convert_for_arith(value):
    '''Convert value to something capable of doing arithmetic with a BigReal.

    BigReal values are returned unmodified.  Python ints, floats, Fractions and Decimals are
    converted exactly.  Otherwise None is returned.
    '''
    if isinstance(value, BigReal):
        return value
    if isinstance(value, int):
        return _rational(value, 1)
    if isinstance(value, float):
        return BigReal.from_float(value)
    if isinstance(value, Fraction):
        return BigReal.from_fraction(value)
    if isinstance(value, Decimal):
        return BigReal.from_decimal(value)
    return None


def operand(value, op_name):
    '''As convert_for_arith() but raise TypeError if value cannot be converted.'''
    result = convert_for_arith(value)
    if result is None:
        raise TypeError(f'{op_name} cannot use an operand of type {type(value).__name__}')
    return result


def _unordered_operand(value, symbol):
    '''The result of an ordering comparison with a value convert_for_arith() rejects.  Plain
    tuples raise rather than fall back to ordering our numerator and denominator.'''
    if isinstance(value, tuple):
        raise TypeError(f"'{symbol}' not supported between instances of 'BigReal' and "
                        f"'{type(value).__name__}'")
    return NotImplemented


def compare(lhs, rhs):
    '''Return lhs vs rhs as one of the four comparison constants.  Comparisons involving NaN
    are unordered.

    Denominators are made positive before cross-multiplying, otherwise a negative
    denominator would invert the result.
    '''
    lhs = operand(lhs, 'compare')
    rhs = operand(rhs, 'compare')
    if lhs.is_nan() or rhs.is_nan():
        return Compare.UNORDERED

    if lhs.denominator == 0 or rhs.denominator == 0:
        # At least one infinity.  Rank -Infinity, finite and +Infinity as -1, 0 and 1.
        lhs_rank = lhs.sign if lhs.denominator == 0 else 0
        rhs_rank = rhs.sign if rhs.denominator == 0 else 0
        if lhs_rank == rhs_rank:
            return Compare.EQUAL
        return Compare.LESS_THAN if lhs_rank < rhs_rank else Compare.GREATER_THAN

    lhs = lhs.simplify_signs()
    rhs = rhs.simplify_signs()
    left = lhs.numerator * rhs.denominator
    right = rhs.numerator * lhs.denominator
    if left < right:
        return Compare.LESS_THAN
    if left > right:
        return Compare.GREATER_THAN
    return Compare.EQUAL


def lerp(a, b, t):
    '''Return the linear interpolation between a and b by t.'''
    a = operand(a, 'lerp')
    return a + (operand(b, 'lerp') - a) * operand(t, 'lerp')


def inverse_lerp(a, b, value):
    '''Return t such that lerp(a, b, t) == value.'''
    a = operand(a, 'inverse_lerp')
    return (operand(value, 'inverse_lerp') - a) / (operand(b, 'inverse_lerp') - a)


#
# Constants
#

NaN = BigReal()
PositiveInfinity = _rational(1, 0)
NegativeInfinity = _rational(-1, 0)
Zero = _rational(0, 1)
One = _rational(1, 1)
NegativeOne = _rational(-1, 1)
OneHalf = _rational(1, 2)
Ten = _rational(10, 1)

AdditiveIdentity = Zero
MultiplicativeIdentity = One

# 100 decimal places of e, π and τ = 2π, truncated.  The iterative engine uses these unless
# a caller asks for more places.
E = BigReal.parse('2.7182818284590452353602874713526624977572470936999595749669676277240766'
                  '303535475945713821785251664274')
Pi = BigReal.parse('3.141592653589793238462643383279502884197169399375105820974944592307816'
                   '4062862089986280348253421170679')
Tau = BigReal.parse('6.283185307179586476925286766559005768394338798750211641949889184615632'
                    '8125724179972560696506842341359')
CONSTANT_DECIMALS = 100
