import unittest
import json

from raffle.models import Page, Participant, Prize, SessionAggregate, Winner


class SerializationTestCase(unittest.TestCase):
    def test_prize_to_json_uses_persisted_field_names(self):
        prize = Prize(id="p1", name="TV", quantity=1, initial_quantity=3, image_base64="data:x")
        d = prize.to_json()
        self.assertEqual(
            d,
            {
                "id": "p1",
                "name": "TV",
                "quantity": 1,
                "initialQuantity": 3,
                "imageBase64": "data:x",
            },
        )

    def test_aggregate_survives_json_encoding(self):
        aggregate = SessionAggregate(
            participants=[Participant(id="a", full_name="Ana Núñez", position="Jefa")],
            prizes=[Prize(id="p1", name="TV", quantity=0, initial_quantity=1)],
            winners=[
                Winner(
                    id="winner-5",
                    participant_id="b",
                    full_name="Luis",
                    position="Técnico",
                    prize_id="p1",
                    prize_name="TV",
                    timestamp=5,
                )
            ],
            current_page=Page.WINNERS,
            is_configured=True,
        )
        payload = json.dumps(aggregate.to_json())
        restored = SessionAggregate.from_json(json.loads(payload))
        self.assertEqual(restored, aggregate)
        self.assertIs(restored.current_page, Page.WINNERS)
        self.assertIsNone(restored.selected_prize_id)

    def test_missing_sections_default_to_empty(self):
        restored = SessionAggregate.from_json({})
        self.assertEqual(restored, SessionAggregate.initial())

    def test_malformed_payloads_raise(self):
        with self.assertRaises(TypeError):
            SessionAggregate.from_json([])
        with self.assertRaises(KeyError):
            SessionAggregate.from_json({"participants": [{"id": "a"}]})
        with self.assertRaises(ValueError):
            SessionAggregate.from_json({"currentPage": "settings"})
        with self.assertRaises(ValueError):
            SessionAggregate.from_json(
                {"prizes": [{"id": "p", "name": "P", "quantity": 4, "initialQuantity": 1}]}
            )


if __name__ == "__main__":
    unittest.main()
