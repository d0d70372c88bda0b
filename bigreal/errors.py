#
# Exceptions raised by arbitrary-precision rational arithmetic
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

__all__ = ('BigRealError', 'DomainError', 'ConversionOverflow', 'ParseError',
           'UnsupportedRounding')


class BigRealError(ArithmeticError):
    '''All exceptions raised by this package subclass from this.

    BigRealError expects two arguments:

         def __init__(self, op_tuple, message):

    op_tuple is a tuple of the operation name and operands that failed.  message is a
    human-readable description of the failure.

    Exceptions derived from BigRealError must have a linear inheritance from it through
    their first base class; the second base class is the builtin exception a caller
    unfamiliar with this package would expect to catch.
    '''

    def __init__(self, op_tuple, message):
        super().__init__(op_tuple, message)

    @property
    def op_tuple(self):
        return self.args[0]

    @property
    def message(self):
        return self.args[1]

    def __str__(self):
        return self.message


class DomainError(BigRealError, ValueError):
    '''Raised when an operand lies outside the domain of a function, for example asin(2), or
    when a NaN is converted to an integer.'''


class ConversionOverflow(BigRealError, OverflowError):
    '''Raised when a narrowing conversion is asked for a value outside the representable
    range of the destination type.'''


class ParseError(BigRealError, ValueError):
    '''Raised when text does not describe a number.'''


class UnsupportedRounding(BigRealError, NotImplementedError):
    '''Raised when a rounding mode is not one of the ROUND_ constants.'''
