# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

import unittest

from keyimport.convertutils import b64_to_int, int_to_b64, int_to_twos_complement


class TestConvertUtils(unittest.TestCase):
    def test_int_to_twos_complement(self):
        """
        GIVEN positive and negative integers
        WHEN they are converted to two's-complement bytes
        THEN the minimal encoding is returned, with a leading zero byte if the highest bit is set
        """
        self.assertEqual(int_to_twos_complement(0), b"\x00")
        self.assertEqual(int_to_twos_complement(127), b"\x7f")
        self.assertEqual(int_to_twos_complement(128), b"\x00\x80")
        self.assertEqual(int_to_twos_complement(65537), b"\x01\x00\x01")
        self.assertEqual(int_to_twos_complement(-128), b"\x80")
        self.assertEqual(int_to_twos_complement(-129), b"\xff\x7f")

    def test_int_to_b64(self):
        """
        GIVEN the common RSA public exponent and a value with the highest bit set
        WHEN they are encoded
        THEN the web-safe Base64 without padding is returned
        """
        self.assertEqual(int_to_b64(65537), "AQAB")
        self.assertEqual(int_to_b64(128), "AIA")
        self.assertEqual(int_to_b64(0xFBFF), "APv_")

    def test_b64_to_int(self):
        """
        GIVEN encoded integers with and without padding
        WHEN they are decoded
        THEN the integer values are returned
        """
        self.assertEqual(b64_to_int("AQAB"), 65537)
        self.assertEqual(b64_to_int("AIA="), 128)
        self.assertEqual(b64_to_int(b"APv_"), 0xFBFF)

    def test_b64_to_int_invalid(self):
        """
        GIVEN an empty string and data with invalid characters
        WHEN they are decoded
        THEN a ValueError is raised
        """
        for data in ["", "===", "A*B"]:
            with self.subTest(data=data):
                with self.assertRaises(ValueError):
                    b64_to_int(data)

    def test_large_modulus(self):
        """
        GIVEN a 2048-bit integer with the highest bit set
        WHEN it is encoded and decoded
        THEN the value is unchanged
        """
        value = (1 << 2047) | 0xF00F
        self.assertEqual(b64_to_int(int_to_b64(value)), value)


if __name__ == "__main__":
    unittest.main()
