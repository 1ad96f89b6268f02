"""
Tests for und_core.encoder — varints, amino primitives, timestamps and
canonical JSON sign bytes.
"""

import struct
import unittest
from datetime import datetime, timezone

from und_core.encoder import (
    UVarInt,
    convert_object_to_sign_bytes,
    encode_bool,
    encode_bytes,
    encode_number,
    encode_string,
    encode_time,
    sort_object,
)
from und_core.errors import ValidationError


class TestNumbers(unittest.TestCase):

    def test_encode_number_vector(self):
        self.assertEqual(encode_number(100000).hex(), "a08d06")

    def test_encode_big_number(self):
        self.assertEqual(encode_number(10 ** 18).hex(), "808090bbbad6adf00d")

    def test_encode_big_number_from_string(self):
        self.assertEqual(encode_number("1000000000000000000").hex(), "808090bbbad6adf00d")

    def test_encode_number_beyond_uint64(self):
        n = 2 ** 70 + 5
        value, consumed = UVarInt.decode(encode_number(n))
        self.assertEqual(value, n)
        self.assertEqual(consumed, len(encode_number(n)))

    def test_encode_zero(self):
        self.assertEqual(encode_number(0), b"\x00")

    def test_encode_negative_raises(self):
        with self.assertRaises(ValidationError):
            encode_number(-100000)

    def test_encode_fraction_raises(self):
        with self.assertRaises(ValidationError):
            encode_number("1.5")
        with self.assertRaises(ValidationError):
            encode_number(1.5)

    def test_integral_float_accepted(self):
        self.assertEqual(encode_number(100000.0).hex(), "a08d06")

    def test_encode_bool_rejected_as_number(self):
        with self.assertRaises(ValidationError):
            encode_number(True)

    def test_non_numeric_string_raises(self):
        with self.assertRaises(ValidationError):
            encode_number("abc")

    def test_uvarint_17(self):
        self.assertEqual(UVarInt.encode(17).hex(), "11")

    def test_uvarint_decode_at_offset(self):
        data = b"\xff" + UVarInt.encode(300)
        self.assertEqual(UVarInt.decode(data, 1), (300, 2))

    def test_uvarint_truncated(self):
        with self.assertRaises(ValidationError):
            UVarInt.decode(b"\x80\x80")


class TestPrimitives(unittest.TestCase):

    def test_encode_bool(self):
        self.assertEqual(encode_bool(True).hex(), "01")
        self.assertEqual(encode_bool(False).hex(), "00")

    def test_encode_string_vector(self):
        self.assertEqual(
            encode_string("You are beautiful").hex(),
            "11596f75206172652062656175746966756c",
        )

    def test_encode_string_counts_utf8_bytes(self):
        encoded = encode_string("ü")
        self.assertEqual(encoded, b"\x02" + "ü".encode("utf-8"))

    def test_encode_empty_string(self):
        self.assertEqual(encode_string(""), b"\x00")

    def test_encode_bytes(self):
        self.assertEqual(encode_bytes(b"\x01\x02\x03"), b"\x03\x01\x02\x03")

    def test_encode_long_bytes_uses_varint_prefix(self):
        data = b"a" * 200
        self.assertEqual(encode_bytes(data)[:2], UVarInt.encode(200))


class TestTime(unittest.TestCase):

    def test_encode_time_vector(self):
        self.assertEqual(
            encode_time("1973-11-29T21:33:09.123456789Z").hex(),
            "0915cd5b07000000001515cd5b07",
        )

    def test_layout(self):
        out = encode_time("1970-01-01T00:00:10.5Z")
        self.assertEqual(out[0], 0x09)
        self.assertEqual(struct.unpack("<Q", out[1:9])[0], 10)
        self.assertEqual(out[9], 0x15)
        self.assertEqual(struct.unpack("<I", out[10:14])[0], 500_000_000)

    def test_no_fraction(self):
        out = encode_time("1973-11-29T21:33:09Z")
        self.assertEqual(struct.unpack("<I", out[10:14])[0], 0)

    def test_offset_timezone(self):
        self.assertEqual(
            encode_time("1973-11-29T22:33:09.123456789+01:00"),
            encode_time("1973-11-29T21:33:09.123456789Z"),
        )

    def test_datetime_input(self):
        dt = datetime(1973, 11, 29, 21, 33, 9, 123456, tzinfo=timezone.utc)
        out = encode_time(dt)
        self.assertEqual(struct.unpack("<Q", out[1:9])[0], 123456789)
        self.assertEqual(struct.unpack("<I", out[10:14])[0], 123456000)

    def test_invalid_string(self):
        with self.assertRaises(ValidationError):
            encode_time("yesterday")

    def test_before_epoch_rejected(self):
        with self.assertRaises(ValidationError):
            encode_time("1969-12-31T23:59:59Z")


class TestCanonicalJSON(unittest.TestCase):

    def test_sorts_top_level_keys(self):
        self.assertEqual(
            convert_object_to_sign_bytes({"sender": 2, "symbol": 3, "address": 1}),
            b'{"address":1,"sender":2,"symbol":3}',
        )

    def test_sorts_nested_objects_in_arrays(self):
        obj = {
            "sender": 2,
            "symbol": 3,
            "zlast": [{"z": "z", "a": "z"}, {"z": "a", "a": "z"}],
            "address": 1,
        }
        self.assertEqual(
            convert_object_to_sign_bytes(obj),
            b'{"address":1,"sender":2,"symbol":3,"zlast":[{"a":"z","z":"z"},{"a":"z","z":"a"}]}',
        )

    def test_insertion_order_irrelevant(self):
        a = {"b": {"y": 1, "x": [1, 2]}, "a": "s"}
        b = {"a": "s", "b": {"x": [1, 2], "y": 1}}
        self.assertEqual(convert_object_to_sign_bytes(a), convert_object_to_sign_bytes(b))

    def test_arrays_keep_order(self):
        self.assertEqual(convert_object_to_sign_bytes({"k": [3, 1, 2]}), b'{"k":[3,1,2]}')

    def test_utf8_not_escaped(self):
        self.assertEqual(
            convert_object_to_sign_bytes({"memo": "héllo"}),
            '{"memo":"héllo"}'.encode("utf-8"),
        )

    def test_floats_rejected(self):
        with self.assertRaises(ValidationError):
            convert_object_to_sign_bytes({"fee": {"amount": [{"amount": 1.5}]}})

    def test_non_string_keys_rejected(self):
        with self.assertRaises(ValidationError):
            convert_object_to_sign_bytes({1: "x"})

    def test_sort_object_returns_new_structure(self):
        original = {"b": [{"d": 1, "c": 2}], "a": None}
        result = sort_object(original)
        self.assertEqual(list(result), ["a", "b"])
        self.assertEqual(list(result["b"][0]), ["c", "d"])
        self.assertEqual(list(original), ["b", "a"])


if __name__ == "__main__":
    unittest.main()
