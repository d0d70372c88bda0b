#
# Thread-local defaults for arbitrary-precision rational arithmetic
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import copy
import threading

from .formats import ROUND_HALF_EVEN, InvariantFormat, check_rounding

__all__ = ('Context', 'DefaultContext', 'get_context', 'set_context', 'local_context')


class Context:
    '''The defaults applied when an operation is not given an explicit argument.  Carries the
    precision of transcendental functions, the number of decimals output by str(), the
    rounding mode of round(), and the locale symbols used for text conversion.

    Values never consult the context after construction; it only fills in omitted
    arguments.
    '''

    __slots__ = ('decimals', 'string_decimals', 'rounding', 'number_format', 'pad_decimal')

    def __init__(self, *, decimals=15, string_decimals=100, rounding=ROUND_HALF_EVEN,
                 number_format=InvariantFormat, pad_decimal=False):
        '''decimals is the number of correct decimal places transcendental functions deliver.
        string_decimals is the maximum number of decimal places str() outputs.  rounding
        is one of the ROUND_ constants.  number_format is a NumberFormat.  If pad_decimal
        is True integers are output with a trailing decimal separator and zero.
        '''
        if not isinstance(decimals, int) or decimals < 0:
            raise ValueError(f'decimals must be a non-negative integer: {decimals!r}')
        if not isinstance(string_decimals, int) or string_decimals < 0:
            raise ValueError(f'string_decimals must be a non-negative integer: '
                             f'{string_decimals!r}')
        check_rounding(rounding, ('context', rounding))
        self.decimals = decimals
        self.string_decimals = string_decimals
        self.rounding = rounding
        self.number_format = number_format
        self.pad_decimal = pad_decimal

    def copy(self):
        '''Return a copy of the context.'''
        return copy.copy(self)

    def __repr__(self):
        return (f'<Context decimals={self.decimals} string_decimals={self.string_decimals} '
                f'rounding={self.rounding} pad_decimal={self.pad_decimal}>')


DefaultContext = Context()
tls = threading.local()


def get_context():
    try:
        return tls.context
    except AttributeError:
        tls.context = DefaultContext.copy()
        return tls.context


def set_context(context):
    '''Sets the current thread's context to context (not a copy of it).'''
    if not isinstance(context, Context):
        raise TypeError('context must be a Context instance')
    tls.context = context


class LocalContext:
    '''A context manager that will set the current context for the active thread to a copy of
    context on entry to the with-statement and restore the previous context on exit.  If
    no context is specified a copy of the current context is taken instead.
    '''

    def __init__(self, context=None):
        self.saved_context = None
        self.context_to_set = context

    def __enter__(self):
        self.saved_context = get_context()
        context = (self.context_to_set or self.saved_context).copy()
        set_context(context)
        return context

    def __exit__(self, etype, value, traceback):
        set_context(self.saved_context)


local_context = LocalContext
