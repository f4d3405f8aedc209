"""
Signature registry for basic types.

Each basic type has a one-character signature code and an alignment,
which is the byte boundary the encoded value must start on:

==== ======== ========= ===========================
Code Class    Alignment Notes
==== ======== ========= ===========================
y    Byte     1
b    bool     4
n    Int16    2
q    UInt16   2
i    Int32    4
u    UInt32   4
x    Int64    8
t    UInt64   8
d    Double   8
s    str      4         Also StrRef.
n    Int8     2         No 8-bit signed type on the
                        wire, encoded as Int16.
d    Float    8         No 32-bit float on the wire,
                        encoded as Double.
s    Char     4         Encoded as a string.
i    int      4         Python int is an Int32.
d    float    8         Python float is a Double.
==== ======== ========= ===========================
"""

from collections import namedtuple
from math import isnan
from struct import Struct

from .errors import IncorrectTypeError
from .signature import Signature


float_struct = Struct('>f')


valid_alignments = frozenset([1, 2, 4, 8])


class SizedInteger(int):
    """Base class of the fixed-width integer types.

    Subclasses set ``minimum`` and ``maximum``. Construction raises a
    TypeError if the value can not be coerced to int without loss of
    information and a ValueError if it is out of range."""

    minimum = None
    maximum = None

    def __new__(cls, value=0):
        if int(value) != value:
            raise TypeError(
                "Object must be coercible to int without loss of "
                "information.")
        if not (value >= cls.minimum and value <= cls.maximum):
            raise ValueError(
                "Integer must be in the range of %s." % cls.__name__)
        return int.__new__(cls, value)

    def __repr__(self):
        return "%s(%d)" % (type(self).__name__, self)


class Byte(SizedInteger):
    minimum, maximum = 0, 0xff


class Int8(SizedInteger):
    minimum, maximum = -0x80, 0x7f


class Int16(SizedInteger):
    minimum, maximum = -0x8000, 0x7fff


class UInt16(SizedInteger):
    minimum, maximum = 0, 0xffff


class Int32(SizedInteger):
    minimum, maximum = -0x80000000, 0x7fffffff


class UInt32(SizedInteger):
    minimum, maximum = 0, 0xffffffff


class Int64(SizedInteger):
    minimum, maximum = -0x8000000000000000, 0x7fffffffffffffff


class UInt64(SizedInteger):
    minimum, maximum = 0, 0xffffffffffffffff


class Double(float):
    """A 64-bit IEEE floating point number."""

    def __repr__(self):
        return "Double(%r)" % float(self)


class Float(float):
    """A 32-bit IEEE floating point number.

    The value is rounded to single precision on construction."""

    def __new__(cls, value=0.0):
        rounded = float_struct.unpack(float_struct.pack(float(value)))[0]
        return float.__new__(cls, rounded)

    def __repr__(self):
        return "Float(%r)" % float(self)


class Char(str):
    """A single Unicode scalar value."""

    def __new__(cls, value):
        value = str(value)
        if len(value) != 1:
            raise ValueError("Char must hold exactly one character.")
        return str.__new__(cls, value)


class StrRef(object):
    """A UTF-8 string borrowed from a caller-owned buffer.

    *buffer* is any object supporting the buffer protocol (``bytes``,
    ``bytearray``, ``memoryview``); *start* and *stop* select the bytes
    that hold the string. No bytes are copied, so the string reads
    whatever the buffer holds at the time of access. Use ``to_owned()``
    to copy it into a ``str`` that outlives the buffer. A ``str``
    argument is encoded into a private buffer.
    """

    __slots__ = ("_view",)

    def __init__(self, buffer, start=0, stop=None):
        if isinstance(buffer, str):
            buffer = buffer.encode("utf_8")
        view = memoryview(buffer)[start:stop]
        # Fail early on invalid UTF-8.
        str(view, "utf_8")
        self._view = view

    def __str__(self):
        return str(self._view, "utf_8")

    def __len__(self):
        return len(str(self))

    def __eq__(self, other):
        if isinstance(other, (StrRef, str)):
            return str(self) == str(other)
        return NotImplemented

    def __hash__(self):
        return hash(str(self))

    def __repr__(self):
        return "StrRef(%r)" % str(self)

    def to_owned(self):
        return str(self)


class Basic(namedtuple(
        "Basic",
        ["type", "signature_char", "signature_str", "alignment", "convert"])):
    """Signature definition for a basic type.

    ``convert`` is called with a stored object and returns it as an
    instance of ``type``, or None if that would lose information."""

    def __init__(self, *args, **kwargs):
        validate_basic_definition(self)

    def signature(self):
        """Return the signature of this type as a Signature."""
        return Signature.from_str_unchecked(self.signature_str)


def validate_basic_definition(basic):
    if not isclassinfo(basic.type):
        raise TypeError(
            "Basic definition has an invalid 'type' field: %s" % (basic.type,))
    if not (isinstance(basic.signature_char, str) and
            len(basic.signature_char) == 1):
        raise TypeError(
            "Basic definition has an invalid 'signature_char' field: %r" %
            (basic.signature_char,))
    if basic.signature_str != basic.signature_char:
        raise ValueError(
            "Basic definition has a 'signature_str' field that differs from "
            "its 'signature_char' field: %r" % (basic.signature_str,))
    if basic.alignment not in valid_alignments:
        raise ValueError(
            "Basic definition has an invalid 'alignment' field: %r" %
            (basic.alignment,))
    if not callable(basic.convert):
        raise TypeError(
            "Basic definition has a non-callable 'convert' field: %s" %
            (basic.convert,))


def isclassinfo(classinfo):
    """Test whether an object is a valid second argument to the
    `isinstance` builtin function."""
    if isinstance(classinfo, tuple):
        return all(map(isclassinfo, classinfo))
    else:
        return isinstance(classinfo, type)


def coercer(cls):
    """Return a function that converts an object to an instance of
    *cls*.

    The returned function returns the object itself if its class is
    exactly *cls*. Otherwise it calls *cls* on the object and returns
    the result if it compares equal to the object (NaN is let through),
    or None if the call fails or loses information.
    """
    def convert(obj):
        if type(obj) is cls:
            return obj
        try:
            converted = cls(obj)
        except (TypeError, ValueError, OverflowError):
            return None
        if converted == obj or _is_nan(converted):
            return converted
        return None
    return convert


def _is_nan(obj):
    return isinstance(obj, float) and isnan(obj)


def define(cls, signature_char, alignment, convert=None):
    """Define the signature of the basic type *cls*."""
    if convert is None:
        convert = coercer(cls)
    return Basic(cls, signature_char, signature_char, alignment, convert)


def alias(cls, target, convert=None):
    """Define *cls* as a basic type that is encoded like the basic type
    described by *target*.

    The signature code and alignment are taken from *target*, so the
    alias follows any change to it."""
    if convert is None:
        convert = coercer(cls)
    return Basic(
        cls, target.signature_char, target.signature_str, target.alignment,
        convert)


def _convert_int(obj):
    converted = coercer(Int32)(obj)
    if converted is None:
        return None
    return int(converted)


def _convert_float(obj):
    return float(obj)


byte_basic = define(Byte, 'y', 1)
boolean_basic = define(bool, 'b', 4)
int16_basic = define(Int16, 'n', 2)
uint16_basic = define(UInt16, 'q', 2)
int32_basic = define(Int32, 'i', 4)
uint32_basic = define(UInt32, 'u', 4)
int64_basic = define(Int64, 'x', 8)
uint64_basic = define(UInt64, 't', 8)
double_basic = define(Double, 'd', 8)
string_basic = define(str, 's', 4)
string_ref_basic = define(StrRef, 's', 4)


basic_types = (
    byte_basic,
    boolean_basic,
    int16_basic,
    uint16_basic,
    int32_basic,
    uint32_basic,
    int64_basic,
    uint64_basic,
    double_basic,
    string_basic,
    string_ref_basic,
    # The wire format has no 8-bit signed integer, no 32-bit float and
    # no character type.
    alias(Int8, int16_basic),
    alias(Float, double_basic),
    alias(Char, string_ref_basic),
    # Builtin Python numbers.
    alias(int, int32_basic, _convert_int),
    alias(float, double_basic, _convert_float),
    )


def lookup(cls, types=None):
    """Return the Basic definition for the class *cls*.

    The classes in the method resolution order of *cls* are tried in
    turn, so a subclass of a basic type is encoded like its base. This
    function raises IncorrectTypeError if no definition is found.
    """
    if types is None:
        types = basic_types
    for klass in getattr(cls, "__mro__", ()):
        for basic in types:
            if klass in _classes(basic.type):
                return basic
    raise IncorrectTypeError("%r is not a basic type." % (cls,))


def _classes(classinfo):
    if isinstance(classinfo, tuple):
        return classinfo
    return (classinfo,)


def signature_char(cls, types=None):
    return lookup(cls, types).signature_char


def signature_str(cls, types=None):
    return lookup(cls, types).signature_str


def alignment(cls, types=None):
    return lookup(cls, types).alignment


def signature(cls, types=None):
    """Return the signature of the basic type *cls* as a Signature."""
    return lookup(cls, types).signature()
