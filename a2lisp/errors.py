

class LispError(Exception):
    """ Base class for all a2lisp errors"""
    pass

class LispSyntaxError(LispError):
    """ Raised when the reader meets a character it cannot start a datum with"""

class LispInvalidSymbol(LispSyntaxError):
    """ Raised when a symbol spelling is empty, too long, or a symbol is required"""

class LispUnboundSymbol(LispError):
    """ Raised when a symbol is used before it is bound"""

class LispArityError(LispError):
    """ Raised when the number of arguments passed to a procedure is incorrect"""

class LispTypeError(LispError):
    """ Raised when a value of the wrong kind is used"""

class LispNotCallable(LispTypeError):
    """ Raised when something other than a procedure is applied"""

class LispArithmeticError(LispError):
    """ Raised on integer division by zero"""

class LispAllocationExhausted(LispError):
    """ Raised when the heap cannot satisfy an allocation even after collecting.

    Unrecoverable: the read-eval-print loop lets it escape and the process exits.
    """
