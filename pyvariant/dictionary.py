import logging
from collections import namedtuple

from . import basic
from .errors import IncorrectTypeError, SignatureError
from .signature import Signature, basic_codes, validate_complete_type
from .value import Value, signature_of_object, variant_signature


logger = logging.getLogger(__name__)


class DictEntry(namedtuple("DictEntry", ["key", "value"])):
    """A key and a value, both Value instances."""

    def to_owned(self):
        return DictEntry(self.key.to_owned(), self.value.to_owned())


class Dict(object):
    """An ordered sequence of key-value entries in which every key has
    the same signature and every value has the same signature.

    Entries are kept in insertion order. Keys are not deduplicated: a
    Dict may hold several entries with equal keys, and ``get()`` returns
    the first of them. Use ``to_mapping()`` to build a hash-based map
    when lookup speed matters.
    """

    def __init__(self, key_signature, value_signature, types=None):
        self._key_signature = Signature(key_signature)
        self._value_signature = Signature(value_signature)
        if self._key_signature not in basic_codes:
            raise SignatureError(
                "Dict key signature must be a basic type, not %r." %
                str(self._key_signature))
        validate_complete_type(self._value_signature)
        self._entries = []
        self.types = types

    @property
    def key_signature(self):
        return self._key_signature

    @property
    def value_signature(self):
        return self._value_signature

    @property
    def entries(self):
        return tuple(self._entries)

    def append(self, key, value):
        """Append the Value instances *key* and *value* as a new entry.

        This method raises IncorrectTypeError, leaving the Dict
        unchanged, if the signature of *key* differs from the key
        signature or the signature of *value* differs from the value
        signature of this Dict.
        """
        if not (isinstance(key, Value) and isinstance(value, Value)):
            raise IncorrectTypeError("Key and value must be Value instances.")
        key_signature = key.value_signature()
        value_signature = value.value_signature()
        if (key_signature != self._key_signature or
                value_signature != self._value_signature):
            logger.debug(
                "Rejected entry with signatures %r, %r in %s",
                str(key_signature), str(value_signature),
                str(self.signature()))
            raise IncorrectTypeError(
                "Entry with signatures %r, %r does not fit %r." %
                (str(key_signature), str(value_signature),
                 str(self.signature())))
        self._entries.append(DictEntry(key, value))

    def add(self, key, value):
        """Add the native objects *key* and *value* as a new entry.

        *key* must be a hashable object of a basic type. *value* may be
        an object of a basic type, a Value (stored as a variant) or a
        Dict. This method raises IncorrectTypeError, leaving the Dict
        unchanged, if the signature of either class does not match.
        """
        key_signature = basic.signature(type(key), self.types)
        hash(key)
        value_signature = signature_of_object(value, self.types)
        if (key_signature != self._key_signature or
                value_signature != self._value_signature):
            logger.debug(
                "Rejected %s, %s for %s",
                type(key).__name__, type(value).__name__,
                str(self.signature()))
            raise IncorrectTypeError(
                "%s, %s do not fit %r." %
                (type(key).__name__, type(value).__name__,
                 str(self.signature())))
        entry = DictEntry(Value(key, self.types), Value(value, self.types))
        self._entries.append(entry)

    def get(self, key, value_type, key_type=None):
        """Return the value of the first entry whose key equals *key*,
        as an instance of *value_type*, or None if no key matches.

        Stored keys are viewed as instances of *key_type*, which
        defaults to the class of *key*. This method raises
        IncorrectTypeError if a stored key can not be viewed as
        *key_type* or the matching value can not be viewed as
        *value_type*.
        """
        if key_type is None:
            key_type = type(key)
        for entry in self._entries:
            entry_key = entry.key.downcast_ref(key_type, self.types)
            if entry_key is None:
                raise IncorrectTypeError(
                    "Key with signature %r is not a %s." %
                    (str(entry.key.value_signature()), key_type.__name__))
            if entry_key == key:
                entry_value = entry.value.downcast_ref(value_type, self.types)
                if entry_value is None:
                    raise IncorrectTypeError(
                        "Value with signature %r is not a %s." %
                        (str(entry.value.value_signature()),
                         value_type.__name__))
                return entry_value
        return None

    def signature(self):
        """Return the signature of this Dict, ``a{KV}``."""
        return Signature.from_str_unchecked(
            "a{%s%s}" % (self._key_signature, self._value_signature))

    def to_owned(self):
        """Return a deep copy that does not borrow from any
        caller-owned buffer."""
        copy = type(self).__new__(type(self))
        copy._key_signature = self._key_signature.to_owned()
        copy._value_signature = self._value_signature.to_owned()
        copy._entries = [entry.to_owned() for entry in self._entries]
        copy.types = self.types
        return copy

    @classmethod
    def from_mapping(cls, mapping, key_type=None, value_type=None,
                     types=None):
        """Build a Dict from the native mapping *mapping*.

        The signatures are those of *key_type* and *value_type*, which
        default to the classes of the first item. Keys and values that
        are not of an explicitly given class are cast to it without loss
        of information. Items that do not have the signature of an
        inferred class are not cast. Either failure raises
        IncorrectTypeError. Entries follow the iteration order of
        *mapping*.
        """
        items = list(mapping.items())
        cast_keys = key_type is not None
        cast_values = value_type is not None
        if key_type is None or value_type is None or _is_dict_class(
                value_type):
            if not items:
                raise IncorrectTypeError(
                    "Can not infer the signatures of an empty mapping.")
            first_key, first_value = items[0]
            if key_type is None:
                key_type = type(first_key)
            if value_type is None:
                value_type = type(first_value)
        if _is_dict_class(value_type):
            value_signature = signature_of_object(items[0][1], types)
        elif value_type is Value:
            value_signature = variant_signature
        else:
            value_signature = basic.signature(value_type, types)
        d = cls(basic.signature(key_type, types), value_signature, types)
        for (k, v) in items:
            # add() rejects items whose signature differs from the
            # inferred one.
            if cast_keys:
                k = _cast(k, key_type, types)
            if cast_values:
                v = _cast(v, value_type, types)
            d.add(k, v)
        return d

    def to_mapping(self, key_type, value_type, mapping_type=dict):
        """Convert to a native mapping built by *mapping_type*.

        Entries are inserted in order, so a later entry overwrites an
        earlier entry with an equal key. This method raises
        IncorrectTypeError, and returns nothing, if any key can not be
        extracted as *key_type* or any value as *value_type*.
        """
        basic.lookup(key_type, self.types)
        mapping = mapping_type()
        for entry in self._entries:
            try:
                k = entry.key.extract(key_type, self.types)
                v = entry.value.extract(value_type, self.types)
            except IncorrectTypeError:
                logger.debug(
                    "Conversion of %s to %s failed",
                    str(self.signature()), mapping_type.__name__)
                raise
            mapping[k] = v
        return mapping

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def __eq__(self, other):
        if not isinstance(other, Dict):
            return NotImplemented
        return (self._key_signature == other._key_signature and
                self._value_signature == other._value_signature and
                self._entries == other._entries)

    __hash__ = None

    def __repr__(self):
        return "Dict(%r, %r, %r)" % (
            str(self._key_signature), str(self._value_signature),
            [(e.key.payload, e.value.payload) for e in self._entries])


def _is_dict_class(cls):
    return isinstance(cls, type) and issubclass(cls, Dict)


def _cast(obj, cls, types=None):
    """Return *obj* as an instance of *cls* for ``Dict.from_mapping()``."""
    if isinstance(obj, cls):
        return obj
    if cls is Value:
        return Value(obj, types)
    converted = basic.coercer(cls)(obj)
    if converted is None:
        raise IncorrectTypeError(
            "%r can not be converted to %s." % (obj, cls.__name__))
    return converted
