# SPDX-FileCopyrightText: Copyright 2025 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

import contextlib
import io
import json
import os
import tempfile
import unittest

from keyimport.cli import main
from unit_tests.utils_for_test import dsa_certificate_der, rsa_certificate_der


class TestCli(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.rsa_path = os.path.join(self.tmp_dir.name, "rsa-cert.der")
        self.dsa_path = os.path.join(self.tmp_dir.name, "dsa-cert.der")
        with open(self.rsa_path, "wb") as f:
            f.write(rsa_certificate_der())
        with open(self.dsa_path, "wb") as f:
            f.write(dsa_certificate_der())

    def tearDown(self):
        self.tmp_dir.cleanup()

    def _run(self, argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main(argv)
        return code, out.getvalue()

    def test_import_rsa_certificate(self):
        """
        GIVEN an RSA certificate file
        WHEN the CLI imports it with a padding
        THEN the metadata and the key are printed and the exit code is 0
        """
        code, output = self._run(["--purpose", "encrypt_decrypt", "--padding", "pkcs", self.rsa_path])
        self.assertEqual(code, 0)

        meta_line, key_line = output.strip().splitlines()
        self.assertEqual(json.loads(meta_line)["type"], "RSA_PUB")
        self.assertEqual(json.loads(key_line)["padding"], "PKCS")

    def test_pretty_output(self):
        """
        GIVEN a DSA certificate file
        WHEN the CLI imports it with pretty printing
        THEN the output is indented JSON
        """
        code, output = self._run(["--purpose", "VERIFY", "--pretty", self.dsa_path])
        self.assertEqual(code, 0)
        self.assertIn('  "type": "DSA_PUB"', output)

    def test_import_fails(self):
        """
        GIVEN a DSA certificate with a padding, and a missing file
        WHEN the CLI imports them
        THEN nothing is printed and the exit code is 1
        """
        cases = [
            ["--purpose", "verify", "--padding", "oaep", self.dsa_path],
            ["--purpose", "verify", os.path.join(self.tmp_dir.name, "missing.der")],
        ]
        for argv in cases:
            with self.subTest(argv=argv):
                code, output = self._run(argv)
                self.assertEqual(code, 1)
                self.assertEqual(output, "")


if __name__ == "__main__":
    unittest.main()
