from __future__ import annotations

import base64
import io
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from raffle.errors import UnsupportedImageError
from raffle.images import encode_image, image_extension, is_valid_image_type
from raffle.models import Winner
from raffle.report import export_winners_pdf, render_winners_html
from raffle.roster import load_roster, parse_roster


def _image_bytes(fmt: str) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(180, 14, 38)).save(buffer, format=fmt)
    return buffer.getvalue()


class RosterTests(unittest.TestCase):
    def test_parses_two_column_roster(self) -> None:
        text = "Full name,Position\n Ana Torres , Manager \n\nLuis Ramirez,Technician\n"
        result = parse_roster(text, now_ms=123)
        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        self.assertEqual(
            [(p.id, p.full_name, p.position) for p in result.participants],
            [
                ("participant-0-123", "Ana Torres", "Manager"),
                ("participant-1-123", "Luis Ramirez", "Technician"),
            ],
        )

    def test_rows_missing_a_value_are_dropped(self) -> None:
        result = parse_roster("Name,Position\nAna,\n,Tech\nLuis,Tech\n", now_ms=1)
        self.assertEqual([p.full_name for p in result.participants], ["Luis"])

    def test_wrong_column_count_is_an_error(self) -> None:
        result = parse_roster("Name,Position,Area\nAna,Manager,Ops\n")
        self.assertFalse(result.success)
        self.assertEqual(result.participants, [])
        self.assertIn("exactly 2 columns", result.error)
        self.assertIn("Found 3", result.error)

    def test_empty_roster_is_an_error(self) -> None:
        for text in ("", "Name,Position\n"):
            result = parse_roster(text)
            self.assertFalse(result.success)
            self.assertIn("empty", result.error)

    def test_no_valid_rows_is_an_error(self) -> None:
        result = parse_roster("Name,Position\n ,Manager\nAna, \n")
        self.assertFalse(result.success)
        self.assertIn("No valid participants", result.error)

    def test_load_roster_handles_bom_and_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "roster.csv"
            path.write_text("\ufeffNombre,Cargo\nMaría,Analista\n", encoding="utf-8")
            result = load_roster(path)
            self.assertTrue(result.success)
            self.assertEqual(result.participants[0].full_name, "María")

            missing = load_roster(Path(tmpdir) / "missing.csv")
            self.assertFalse(missing.success)
            self.assertIn("Could not read", missing.error)


class ImageEncodingTests(unittest.TestCase):
    def test_png_and_jpeg_become_data_urls(self) -> None:
        png = _image_bytes("PNG")
        encoded = encode_image(png)
        self.assertTrue(encoded.startswith("data:image/png;base64,"))
        self.assertEqual(base64.b64decode(encoded.split(",", 1)[1]), png)
        self.assertTrue(encode_image(_image_bytes("JPEG")).startswith("data:image/jpeg;base64,"))

    def test_reads_from_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "prize.png"
            path.write_bytes(_image_bytes("PNG"))
            self.assertTrue(encode_image(path).startswith("data:image/png"))
            with self.assertRaises(UnsupportedImageError):
                encode_image(Path(tmpdir) / "missing.png")

    def test_other_formats_are_rejected(self) -> None:
        with self.assertRaises(UnsupportedImageError):
            encode_image(_image_bytes("GIF"))
        with self.assertRaises(UnsupportedImageError):
            encode_image(b"definitely not an image")

    def test_upload_name_is_checked(self) -> None:
        png = _image_bytes("PNG")
        self.assertTrue(encode_image(png, "stage.PNG").startswith("data:image/png"))
        with self.assertRaises(UnsupportedImageError) as ctx:
            encode_image(png, "prize.gif")
        self.assertIn("prize.gif", str(ctx.exception))
        with self.assertRaises(UnsupportedImageError) as ctx:
            encode_image(b"broken", "prize.jpg")
        self.assertIn("prize.jpg", str(ctx.exception))

    def test_mime_type_helpers(self) -> None:
        self.assertTrue(is_valid_image_type("image/jpg"))
        self.assertTrue(is_valid_image_type("IMAGE/PNG"))
        self.assertFalse(is_valid_image_type("image/gif"))
        self.assertEqual(image_extension("image/png"), "png")
        self.assertEqual(image_extension("image/jpeg"), "jpg")


class WinnersReportTests(unittest.TestCase):
    def _winner(self, winner_id: str, name: str, prize: str, timestamp: int) -> Winner:
        return Winner(
            id=winner_id,
            participant_id=f"pt-{winner_id}",
            full_name=name,
            position="Staff",
            prize_id=prize.lower(),
            prize_name=prize,
            timestamp=timestamp,
        )

    def test_groups_follow_draw_order_and_escape_names(self) -> None:
        html = render_winners_html(
            [
                self._winner("w1", "Ana", "Zebra Mug", 1),
                self._winner("w2", "<b>Luis</b>", "Apple Watch", 2),
                self._winner("w3", "Carmen", "Zebra Mug", 3),
            ],
            title="Year-end Raffle",
        )
        self.assertIn("<title>Year-end Raffle</title>", html)
        self.assertLess(html.index("Zebra Mug"), html.index("Apple Watch"))
        self.assertLess(html.index("Ana"), html.index("Carmen"))
        self.assertIn("&lt;b&gt;Luis&lt;/b&gt;", html)
        self.assertIn("3 winners", html)

    def test_pdf_export_requires_winners(self) -> None:
        with self.assertRaises(ValueError):
            export_winners_pdf([])


if __name__ == "__main__":
    unittest.main()
