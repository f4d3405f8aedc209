from .errors import SignatureError


# Signature codes of basic types. Only basic types may be used as the
# key of a dict entry.
basic_codes = frozenset("ybnqiuxtdsogh")

variant_code = "v"
array_code = "a"

max_signature_length = 255


class Signature(str):
    """An immutable signature string, such as ``"s"`` or ``"a{sv}"``.

    Calling the class validates the string. Use ``from_str_unchecked()``
    for constants that are known to be well-formed."""

    __slots__ = ()

    def __new__(cls, value=""):
        if isinstance(value, Signature):
            return value
        if not isinstance(value, str):
            raise TypeError(
                "Signature must be built from a str, not %s" %
                type(value).__name__)
        validate_signature(value)
        return str.__new__(cls, value)

    @classmethod
    def from_str_unchecked(cls, value):
        """Build a signature from *value* without validating it."""
        return str.__new__(cls, value)

    def to_owned(self):
        """Return a signature that does not borrow from another buffer.

        Python strings always own their characters, so this is the
        signature itself."""
        return self

    def __repr__(self):
        return "Signature(%s)" % str.__repr__(self)


def validate_signature(text):
    """Raise SignatureError unless *text* is a sequence of complete
    types."""
    if len(text) > max_signature_length:
        raise SignatureError(
            "Signature is longer than %d characters." % max_signature_length)
    pos = 0
    while pos < len(text):
        pos = _skip_complete_type(text, pos)


def validate_complete_type(text):
    """Raise SignatureError unless *text* is exactly one complete
    type."""
    validate_signature(text)
    if not text or _skip_complete_type(text, 0) != len(text):
        raise SignatureError(
            "Signature %r is not a single complete type." % text)


def _skip_complete_type(text, pos):
    """Return the position just past the complete type at *pos*."""
    if pos >= len(text):
        raise SignatureError("Signature %r ends early." % text)
    code = text[pos]
    if code in basic_codes or code == variant_code:
        return pos + 1
    if code == array_code:
        if text[pos + 1:pos + 2] == "{":
            return _skip_dict_entry(text, pos + 1)
        return _skip_complete_type(text, pos + 1)
    if code == "(":
        pos += 1
        if text[pos:pos + 1] == ")":
            raise SignatureError("Empty structure in signature %r." % text)
        while text[pos:pos + 1] != ")":
            pos = _skip_complete_type(text, pos)
        return pos + 1
    raise SignatureError(
        "Unexpected character %r at position %d of signature %r." %
        (code, pos, text))


def _skip_dict_entry(text, pos):
    # text[pos] is the opening brace.
    key = text[pos + 1:pos + 2]
    if key not in basic_codes:
        raise SignatureError(
            "Dict entry key must be a basic type in signature %r." % text)
    pos = _skip_complete_type(text, pos + 2)
    if text[pos:pos + 1] != "}":
        raise SignatureError(
            "Dict entry must hold exactly one value type in signature %r." %
            text)
    return pos + 1
