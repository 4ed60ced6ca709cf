"""Exceptions raised by templadoc"""


class TemplaDocError(RuntimeError):
    """Base class for templadoc failures"""


class HostPreconditionError(TemplaDocError):
    """The source model can't satisfy a request.

    Raised when no container is found, when an edit is attempted outside a
    write transaction, or when a second transaction is opened on a document
    that already has one. Aborts the whole apply or sync pass.
    """
