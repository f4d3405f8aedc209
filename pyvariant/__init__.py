"""
=========
pyvariant
=========

Typed values for the D-Bus/GVariant wire format.

Every value of the format carries a signature, a short string that
describes its wire shape. A basic value has a one-character signature
and an alignment, the byte boundary its encoding must start on:

==== ==================== =========
Code Type                 Alignment
==== ==================== =========
y    An unsigned byte.    1
b    A boolean.           4
n    A 16-bit integer.    2
q    A 16-bit unsigned    2
     integer.
i    A 32-bit integer.    4
u    A 32-bit unsigned    4
     integer.
x    A 64-bit integer.    8
t    A 64-bit unsigned    8
     integer.
d    A double.            8
s    A UTF-8 string.      4
==== ==================== =========

Containers build longer signatures out of these codes:

==== =====================================
Code Container
==== =====================================
v    A variant, a value that carries its
     own signature.
a    An array of the complete type that
     follows.
a{}  A dictionary, an array of dict
     entries. ``a{sv}`` maps strings to
     variants.
==== =====================================

``pyvariant.basic`` maps Python classes to basic signatures,
``pyvariant.value.Value`` holds any value with its signature, and
``pyvariant.dictionary.Dict`` holds key-value entries that all share a
key signature and a value signature. The byte-level encoding itself is
done by a separate codec, which reads Dict objects through
``pyvariant.serialization``.
"""

import logging

from .version import __version__
from .errors import Error, IncorrectTypeError, SignatureError
from .signature import Signature
from .basic import (
    Basic, Byte, Int8, Int16, UInt16, Int32, UInt32, Int64, UInt64, Double,
    Float, Char, StrRef, basic_types, lookup, signature)
from .value import Value, wrap
from .dictionary import Dict, DictEntry


logging.getLogger(__name__).addHandler(logging.NullHandler())
