"""Dynamically-typed values.

A Value holds one of:

- an object of a basic type (see ``pyvariant.basic``),
- another Value, as a variant with signature ``v``,
- a Dict, with signature ``a{..}``.
"""

from . import basic
from .errors import IncorrectTypeError
from .signature import Signature, variant_code


variant_signature = Signature.from_str_unchecked(variant_code)


class Value(object):
    """A value together with its own signature."""

    __slots__ = ("_signature", "_payload", "_basic")

    def __init__(self, obj, types=None):
        from .dictionary import Dict
        if isinstance(obj, Value):
            self._signature = variant_signature
            self._payload = obj
            self._basic = None
        elif isinstance(obj, Dict):
            self._signature = obj.signature()
            self._payload = obj
            self._basic = None
        else:
            definition = basic.lookup(type(obj), types)
            payload = definition.convert(obj)
            if payload is None:
                raise IncorrectTypeError(
                    "%r can not be represented with signature %r." %
                    (obj, definition.signature_str))
            self._signature = definition.signature()
            self._payload = payload
            self._basic = definition

    @property
    def basic(self):
        """The Basic definition of the payload, or None for variants and
        containers."""
        return self._basic

    @property
    def payload(self):
        return self._payload

    def value_signature(self):
        return self._signature

    def downcast_ref(self, cls, types=None):
        """Return the payload as an instance of *cls*, or None if the
        signature of this value does not describe *cls* or the payload
        can not be converted without loss of information.

        An object of the exact class *cls* is returned without copying.
        """
        from .dictionary import Dict
        signature = self._signature
        if cls is Value:
            if signature == variant_signature:
                return self._payload
            return None
        if isinstance(cls, type) and issubclass(cls, Dict):
            if isinstance(self._payload, cls):
                return self._payload
            return None
        if self._basic is None:
            return None
        try:
            definition = basic.lookup(cls, types)
        except IncorrectTypeError:
            return None
        if definition.signature_str != signature:
            return None
        obj = definition.convert(self._payload)
        if obj is None or type(obj) is cls:
            return obj
        # cls inherits its definition from a registered base class.
        return basic.coercer(cls)(obj)

    def extract(self, cls, types=None):
        """Return the payload as an instance of *cls*.

        This method raises IncorrectTypeError where ``downcast_ref()``
        returns None."""
        obj = self.downcast_ref(cls, types)
        if obj is None:
            raise IncorrectTypeError(
                "Value with signature %r can not be extracted as %s." %
                (str(self._signature), getattr(cls, "__name__", cls)))
        return obj

    def to_owned(self):
        """Return a copy of this value that does not borrow from any
        caller-owned buffer."""
        copy = Value.__new__(Value)
        copy._signature = self._signature.to_owned()
        copy._basic = self._basic
        payload = self._payload
        if hasattr(payload, "to_owned"):
            payload = payload.to_owned()
            if self._basic is not None and payload is not self._payload:
                copy._basic = basic.alias(type(payload), self._basic)
        copy._payload = payload
        return copy

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return (self._signature == other._signature and
                self._payload == other._payload)

    __hash__ = None

    def __repr__(self):
        return "Value(%r)" % (self._payload,)


def wrap(obj, types=None):
    """Lift the native object *obj* into a Value."""
    return Value(obj, types)


def signature_of(value):
    """Return the signature of the Value *value*."""
    return value.value_signature()


def signature_of_object(obj, types=None):
    """Return the signature *obj* would have once wrapped in a Value,
    without wrapping it."""
    from .dictionary import Dict
    if isinstance(obj, Value):
        return variant_signature
    if isinstance(obj, Dict):
        return obj.signature()
    return basic.signature(type(obj), types)


def downcast_ref(value, cls, types=None):
    return value.downcast_ref(cls, types)


def extract(value, cls, types=None):
    return value.extract(cls, types)
