import unittest

from apps.shopping.commands import ProductRequestCommand


class ProductRequestCommandTests(unittest.TestCase):
    def test_reads_id_product_key(self):
        cmd = ProductRequestCommand.from_raw({"idProduct": 3, "quantity": 2})
        self.assertEqual(cmd.product_id, 3)
        self.assertEqual(cmd.quantity, 2)

    def test_accepts_alternate_keys_and_numeric_strings(self):
        cmd = ProductRequestCommand.from_raw({"product_id": "8", "quantity": "4"})
        self.assertEqual(cmd.product_id, 8)
        self.assertEqual(cmd.quantity, 4)

    def test_unparseable_values_become_none(self):
        cmd = ProductRequestCommand.from_raw({"productId": "x", "quantity": True})
        self.assertIsNone(cmd.product_id)
        self.assertIsNone(cmd.quantity)

    def test_non_mapping_payload(self):
        cmd = ProductRequestCommand.from_raw([1, 2])
        self.assertIsNone(cmd.product_id)
        self.assertIsNone(cmd.quantity)
