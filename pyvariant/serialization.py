"""Record-sequence view of Dict and Value objects for wire codecs.

A Dict is presented to a codec as a stream of events. For the Dict
``{"a": 1, "b": 2}`` with signature ``a{su}`` the stream is::

    BeginSequence(None, 'a{su}', 2)
      BeginRecord('DictEntry', 2)
        Element('Key', 's', 4, 'a')
        Element('Value', 'u', 4, 1)
      EndRecord()
      BeginRecord('DictEntry', 2)
        Element('Key', 's', 4, 'b')
        Element('Value', 'u', 4, 2)
      EndRecord()
    EndSequence()

Entries are emitted in insertion order, so the same sequence of
``add()`` calls always produces the same stream. Padding, length
prefixes and byte order are left to the codec.
"""

from collections import namedtuple

from .dictionary import Dict
from .value import Value


BeginSequence = namedtuple("BeginSequence", ["name", "signature", "size"])
EndSequence = namedtuple("EndSequence", [])
BeginRecord = namedtuple("BeginRecord", ["name", "size"])
EndRecord = namedtuple("EndRecord", [])
BeginVariant = namedtuple("BeginVariant", ["name", "signature"])
EndVariant = namedtuple("EndVariant", [])
Element = namedtuple("Element", ["name", "signature", "alignment", "value"])


dict_entry_name = "DictEntry"
key_field_name = "Key"
value_field_name = "Value"


def iterevents(obj, name=None):
    """Generator function that yields the events describing *obj*, a
    Dict or a Value."""
    if isinstance(obj, Dict):
        return _iterdict(obj, name)
    elif isinstance(obj, Value):
        return _itervalue(obj, name)
    else:
        raise TypeError("Object is not a Dict or a Value.")


def _iterdict(obj, name):
    yield BeginSequence(name, obj.signature(), len(obj))
    for entry in obj:
        yield BeginRecord(dict_entry_name, 2)
        for event in _itervalue(entry.key, key_field_name):
            yield event
        for event in _itervalue(entry.value, value_field_name):
            yield event
        yield EndRecord()
    yield EndSequence()


def _itervalue(value, name):
    payload = value.payload
    if isinstance(payload, Dict):
        for event in _iterdict(payload, name):
            yield event
    elif isinstance(payload, Value):
        yield BeginVariant(name, payload.value_signature())
        for event in _itervalue(payload, value_field_name):
            yield event
        yield EndVariant()
    else:
        yield Element(
            name, value.value_signature(), value.basic.alignment, payload)


def dump(obj, serializer):
    """Send the events describing *obj* to the coroutine *serializer*,
    one event per ``send()`` call."""
    for event in iterevents(obj):
        serializer.send(event)


def iterdump(consumer):
    """Coroutine function that calls *consumer* with every event it is
    sent.

    This function returns the coroutine after "priming" it by calling
    ``next()`` on it once.
    """
    def _forward_events():
        while True:
            event = (yield)
            consumer(event)
    cr = _forward_events()
    next(cr)
    return cr
