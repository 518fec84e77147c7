"""Tests for menu row kinds and list builders."""

from __future__ import annotations

import unittest

from lambdactl.api.models import Instance, InstanceQuote, Title
from lambdactl.rows import InstanceRow, OfferRow, RemovedRow, SSHKeyRow, TextRow, offer_rows, ssh_key_rows


class RowTests(unittest.TestCase):
    def test_offer_row_identity_is_title_text(self) -> None:
        row = OfferRow(Title("us-east-1", "gpu_1x_a10"), InstanceQuote(name="gpu_1x_a10", price_cents_per_hour=75))

        self.assertEqual(row.identity(), "us-east-1/gpu_1x_a10")
        self.assertEqual(row.fields(), ["gpu_1x_a10", "us-east-1", " 0.75"])

    def test_instance_row_uses_placeholders_for_missing_values(self) -> None:
        instance = Instance(id="i-1", status="booting", region="us-west-1", quote=InstanceQuote(name="gpu_1x_a100"))

        row = InstanceRow(instance)

        self.assertEqual(row.identity(), "i-1")
        self.assertEqual(row.fields(), ["-", "-", "booting", "us-west-1", "gpu_1x_a100"])

    def test_removed_row_has_no_fields(self) -> None:
        self.assertIsNone(RemovedRow("i-1").fields())
        self.assertEqual(RemovedRow("i-1").identity(), "i-1")

    def test_text_row(self) -> None:
        self.assertEqual(TextRow("hello").fields(), ["hello"])

    def test_offer_rows_sorted_by_region_then_model(self) -> None:
        quote = InstanceQuote(name="m")
        offers = {Title("us-west-1", "a"): quote, Title("asia-south-1", "z"): quote, Title("asia-south-1", "b"): quote}

        rows = offer_rows(offers)

        self.assertEqual([row.identity() for row in rows], ["asia-south-1/b", "asia-south-1/z", "us-west-1/a"])

    def test_ssh_key_rows_prefer_local_keys_and_skip_long_names(self) -> None:
        cloud = {
            "ssh-ed25519 AAA": ["work", "zed"],
            "ssh-rsa BBB": ["alpha", "a-name-that-is-way-too-long"],
        }
        local = {"ssh-ed25519 AAA": "~/.ssh/id_ed25519.pub"}

        rows = ssh_key_rows(cloud, local)

        self.assertEqual(
            rows,
            [
                SSHKeyRow("work", "~/.ssh/id_ed25519.pub"),
                SSHKeyRow("zed", "~/.ssh/id_ed25519.pub"),
                SSHKeyRow("alpha", "-"),
            ],
        )


if __name__ == "__main__":
    unittest.main()
