import gc
import unittest
from collections import OrderedDict

from pyvariant.basic import Byte, UInt16, Int32, UInt32, Double, StrRef
from pyvariant.dictionary import Dict, DictEntry
from pyvariant.errors import IncorrectTypeError, SignatureError
from pyvariant.signature import Signature
from pyvariant.value import Value


class DictTestCase(unittest.TestCase):

    def test_new_dict_is_empty(self):
        d = Dict("s", "u")
        self.assertEqual(0, len(d))
        self.assertEqual([], list(d))
        self.assertIsInstance(d.key_signature, Signature)
        self.assertEqual("s", d.key_signature)
        self.assertEqual("u", d.value_signature)

    def test_signature(self):
        self.assertEqual("a{su}", Dict("s", "u").signature())
        self.assertEqual("a{sv}", Dict("s", "v").signature())
        self.assertEqual("a{sa{ix}}", Dict("s", "a{ix}").signature())
        d = Dict("y", "s")
        d.add(Byte(1), "spam")
        self.assertEqual("a{ys}", d.signature())
        self.assertIsInstance(d.signature(), Signature)

    def test_invalid_signatures(self):
        self.assertRaises(SignatureError, Dict, "ss", "u")
        self.assertRaises(SignatureError, Dict, "v", "u")
        self.assertRaises(SignatureError, Dict, "as", "u")
        self.assertRaises(SignatureError, Dict, "s", "uu")
        self.assertRaises(SignatureError, Dict, "s", "")
        self.assertEqual("a{sa{sv}}", Dict("s", "a{sv}").signature())

    def test_append_and_get(self):
        d = Dict("s", "u")
        d.append(Value("a"), Value(UInt32(1)))
        self.assertEqual(1, len(d))
        self.assertEqual(UInt32(1), d.get("a", UInt32))
        self.assertIsNone(d.get("b", UInt32))

    def test_append_with_wrong_signature(self):
        d = Dict("s", "u")
        d.append(Value("a"), Value(UInt32(1)))
        self.assertRaises(
            IncorrectTypeError, d.append, Value("b"), Value(Int32(2)))
        self.assertRaises(
            IncorrectTypeError, d.append, Value(UInt32(2)), Value(UInt32(2)))
        self.assertRaises(IncorrectTypeError, d.append, "b", Value(UInt32(2)))
        self.assertEqual(1, len(d))

    def test_add_with_wrong_key_type(self):
        d = Dict("i", "u")
        self.assertRaises(IncorrectTypeError, d.add, "x", UInt32(5))
        self.assertEqual(0, len(d))

    def test_add_with_wrong_value_type(self):
        d = Dict("s", "u")
        self.assertRaises(IncorrectTypeError, d.add, "x", 5)
        self.assertRaises(IncorrectTypeError, d.add, "x", [5])
        self.assertRaises(IncorrectTypeError, d.add, [1], UInt32(5))
        self.assertEqual(0, len(d))

    def test_first_match_wins(self):
        d = Dict("s", "u")
        d.add("a", UInt32(1))
        d.add("b", UInt32(2))
        d.add("a", UInt32(3))
        self.assertEqual(3, len(d))
        self.assertEqual(UInt32(1), d.get("a", UInt32))
        self.assertEqual(UInt32(2), d.get("b", UInt32))
        keys = [entry.key.downcast_ref(str) for entry in d]
        self.assertEqual(["a", "b", "a"], keys)

    def test_get_with_wrong_types(self):
        d = Dict("s", "u")
        d.add("a", UInt32(1))
        self.assertRaises(IncorrectTypeError, d.get, UInt32(1), UInt32)
        self.assertRaises(IncorrectTypeError, d.get, "a", str)
        # The value is only looked at when the key matches.
        self.assertIsNone(d.get("b", str))

    def test_get_with_explicit_key_type(self):
        d = Dict("i", "d")
        d.add(Int32(3), Double(0.5))
        self.assertEqual(0.5, d.get(3, Double, key_type=Int32))
        self.assertEqual(0.5, d.get(3, Double))

    def test_variant_values(self):
        d = Dict("s", "v")
        d.add("name", Value("spam"))
        d.add("count", Value(UInt32(3)))
        self.assertEqual("spam", d.get("name", Value).downcast_ref(str))
        self.assertEqual(3, d.get("count", Value).downcast_ref(UInt32))
        self.assertRaises(IncorrectTypeError, d.add, "bare", "spam")

    def test_nested_dict_values(self):
        inner = Dict("s", "u")
        inner.add("a", UInt32(1))
        outer = Dict("s", "a{su}")
        outer.add("inner", inner)
        self.assertIs(inner, outer.get("inner", Dict))
        self.assertRaises(IncorrectTypeError, outer.add, "other",
                          Dict("s", "i"))

    def test_equality(self):
        d1 = Dict("s", "u")
        d2 = Dict("s", "u")
        self.assertEqual(d1, d2)
        d1.add("a", UInt32(1))
        self.assertNotEqual(d1, d2)
        d2.add("a", UInt32(1))
        self.assertEqual(d1, d2)
        self.assertNotEqual(Dict("s", "u"), Dict("s", "i"))

    def test_entries(self):
        d = Dict("s", "u")
        d.add("a", UInt32(1))
        self.assertEqual(
            (DictEntry(Value("a"), Value(UInt32(1))),), d.entries)

    def test_custom_types(self):
        class Celsius(float):
            pass

        from pyvariant import basic
        custom_types = basic.basic_types + (
            basic.alias(Celsius, basic.double_basic),)
        d = Dict("s", "d", custom_types)
        d.add("kitchen", Celsius(21.5))
        self.assertEqual(Celsius(21.5), d.get("kitchen", Celsius))
        self.assertIs(Celsius, type(d.get("kitchen", Celsius)))


class DictOwnershipTestCase(unittest.TestCase):

    def test_to_owned_keeps_the_class(self):
        class Properties(Dict):
            pass

        d = Properties("s", "u")
        d.add("a", UInt32(1))
        owned = d.to_owned()
        self.assertIs(Properties, type(owned))
        self.assertEqual(d, owned)

    def test_to_owned_outlives_the_buffer(self):
        buf = bytearray(b"keyvalue")
        d = Dict("s", "s")
        d.add(StrRef(buf, 0, 3), StrRef(buf, 3))
        owned = d.to_owned()
        self.assertEqual(d, owned)
        buf[:] = b"\x00" * len(buf)
        del d, buf
        gc.collect()
        self.assertEqual("value", owned.get("key", str))
        self.assertEqual("a{ss}", owned.signature())
        for entry in owned:
            self.assertIs(str, type(entry.key.payload))
            self.assertIs(str, type(entry.value.payload))

    def test_borrowed_dict_reads_the_buffer(self):
        buf = bytearray(b"key")
        d = Dict("s", "u")
        d.add(StrRef(buf), UInt32(1))
        buf[:] = b"yek"
        self.assertIsNone(d.get("key", UInt32))
        self.assertEqual(1, d.get("yek", UInt32))


class DictMappingTestCase(unittest.TestCase):

    def test_round_trip(self):
        expected = {"a": UInt32(1), "b": UInt32(2), "c": UInt32(3)}
        d = Dict.from_mapping(expected)
        self.assertEqual("a{su}", d.signature())
        self.assertEqual(expected, d.to_mapping(str, UInt32))

    def test_from_mapping_with_explicit_types(self):
        d = Dict.from_mapping({"a": 1, "b": 2}, str, UInt32)
        self.assertEqual("a{su}", d.signature())
        self.assertEqual(UInt32(2), d.get("b", UInt32))
        self.assertIs(UInt32, type(d.get("b", UInt32)))

    def test_from_mapping_follows_iteration_order(self):
        mapping = OrderedDict([("z", 1), ("a", 2), ("m", 3)])
        d = Dict.from_mapping(mapping)
        keys = [entry.key.payload for entry in d]
        self.assertEqual(["z", "a", "m"], keys)

    def test_from_mapping_with_lossy_values(self):
        self.assertRaises(
            IncorrectTypeError, Dict.from_mapping, {"a": -1}, str, UInt32)
        self.assertRaises(
            IncorrectTypeError, Dict.from_mapping, {"a": 1, "b": "2"})

    def test_from_mixed_mapping(self):
        """Test that items which do not share the signature of the first
        item are rejected rather than cast."""
        self.assertRaises(
            IncorrectTypeError, Dict.from_mapping, {"a": True, "b": 1})
        self.assertRaises(
            IncorrectTypeError, Dict.from_mapping, {"a": 1, "b": 2.0})
        self.assertRaises(
            IncorrectTypeError, Dict.from_mapping, {"a": 1, 2: 1})
        d = Dict.from_mapping({"a": 1, StrRef(b"b"): 2})
        self.assertEqual("a{si}", d.signature())
        self.assertEqual({"a": 1, "b": 2}, d.to_mapping(str, int))

    def test_from_empty_mapping(self):
        self.assertRaises(IncorrectTypeError, Dict.from_mapping, {})
        d = Dict.from_mapping({}, str, Byte)
        self.assertEqual("a{sy}", d.signature())
        self.assertEqual({}, d.to_mapping(str, Byte))

    def test_from_mapping_of_variants_and_dicts(self):
        d = Dict.from_mapping({"a": "spam", "b": UInt32(1)}, str, Value)
        self.assertEqual("a{sv}", d.signature())
        self.assertEqual({"a": Value("spam"), "b": Value(UInt32(1))},
                         d.to_mapping(str, Value))
        inner = Dict.from_mapping({"x": 1.5})
        outer = Dict.from_mapping({"inner": inner})
        self.assertEqual("a{sa{sd}}", outer.signature())

    def test_subclass_of_a_basic_type(self):
        d = Dict.from_mapping({"http": Port(80), "ssh": Port(22)})
        self.assertEqual("a{sq}", d.signature())
        self.assertIs(Port, type(d.get("http", Port)))
        self.assertEqual(Port(80), d.get("http", Port))
        mapping = d.to_mapping(str, Port)
        self.assertEqual({"http": 80, "ssh": 22}, mapping)
        for port in mapping.values():
            self.assertIs(Port, type(port))

    def test_to_mapping_keeps_the_last_duplicate(self):
        d = Dict("s", "u")
        d.add("a", UInt32(1))
        d.add("a", UInt32(3))
        self.assertEqual({"a": 3}, d.to_mapping(str, UInt32))
        self.assertEqual(1, d.get("a", UInt32))

    def test_to_mapping_is_all_or_nothing(self):
        d = Dict("s", "d")
        d.add("a", Double(0.5))
        d.add("b", Double(0.1))
        from pyvariant.basic import Float
        self.assertRaises(IncorrectTypeError, d.to_mapping, str, Float)
        self.assertRaises(IncorrectTypeError, d.to_mapping, UInt32, Double)
        self.assertRaises(IncorrectTypeError, d.to_mapping, list, Double)

    def test_to_mapping_type(self):
        d = Dict("s", "u")
        d.add("b", UInt32(2))
        d.add("a", UInt32(1))
        mapping = d.to_mapping(str, UInt32, OrderedDict)
        self.assertIsInstance(mapping, OrderedDict)
        self.assertEqual(["b", "a"], list(mapping))

    def test_to_mapping_of_string_references(self):
        d = Dict("s", "u")
        d.add(StrRef(b"a"), UInt32(1))
        mapping = d.to_mapping(str, UInt32)
        self.assertEqual({"a": 1}, mapping)
        self.assertIs(str, type(list(mapping)[0]))


class Port(UInt16):
    pass


if __name__ == "__main__":
    unittest.main()
