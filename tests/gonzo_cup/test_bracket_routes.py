"""
Tests for the Gonzo Cup API: seeding, match games and winner advancement.
Uses the Flask test client against an in-memory SQLite database.
"""
import unittest

from scoreboard import create_app, db
from scoreboard.gonzo_cup.models import BracketSlot
from scoreboard.models import LogEntry


def _create_test_app():
    return create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SECRET_KEY": "test",
        "DELETE_PIN": "1324",
    })


class GonzoCupTestCase(unittest.TestCase):

    def setUp(self):
        self.app = _create_test_app()
        self.ctx = self.app.app_context()
        self.ctx.push()
        db.create_all()
        self.client = self.app.test_client()

        names = ["East One", "East Two", "East Three", "East Four",
                 "West One", "West Two", "West Three", "West Four"]
        ids = [self.client.post("/api/teams", json={"name": name}).get_json()["id"] for name in names]
        self.east, self.west = ids[:4], ids[4:]

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.ctx.pop()

    def init_bracket(self):
        r = self.client.post("/api/gonzo-cup/bracket/init", json={"east": self.east, "west": self.west})
        self.assertEqual(r.status_code, 200, r.get_json())
        return r.get_json()

    def slot(self, round_number, position):
        return BracketSlot.query.filter_by(round=round_number, position=position).one()

    def start_match(self, position, round_number=3):
        r = self.client.post(f"/api/gonzo-cup/bracket/{position}/game", json={"round": round_number})
        self.assertEqual(r.status_code, 200, r.get_json())
        return r.get_json()

    def advanced_count(self):
        return LogEntry.query.filter_by(project="gonzo_cup", category="Winner Advanced").count()


class TestBracketSetup(GonzoCupTestCase):

    def test_empty_bracket(self):
        data = self.client.get("/api/gonzo-cup/bracket").get_json()
        self.assertFalse(data["malformed"])
        self.assertEqual(data["rounds"], [])
        self.assertEqual(data["slots"], [])

    def test_init_creates_fourteen_slots(self):
        data = self.init_bracket()
        self.assertTrue(data["success"])
        self.assertEqual(len(data["slots"]), 14)

        r = self.client.get("/api/gonzo-cup/bracket")
        quarterfinals = r.get_json()["rounds"][0]["matches"]
        pairs = [(m["top"]["teamId"], m["bottom"]["teamId"]) for m in quarterfinals]
        self.assertEqual(pairs, [
            (self.east[0], self.east[3]),
            (self.east[1], self.east[2]),
            (self.west[0], self.west[3]),
            (self.west[1], self.west[2]),
        ])
        self.assertTrue(all(m["state"] == "paired" for m in quarterfinals))

    def test_init_replaces_existing_bracket(self):
        self.init_bracket()
        self.init_bracket()
        self.assertEqual(BracketSlot.query.count(), 14)

    def test_init_requires_four_per_division(self):
        r = self.client.post("/api/gonzo-cup/bracket/init", json={"east": self.east[:3], "west": self.west})
        self.assertEqual(r.status_code, 400)
        self.assertIn("Exactly 4 teams", r.get_json()["error"])

    def test_init_unknown_team(self):
        r = self.client.post("/api/gonzo-cup/bracket/init", json={"east": self.east[:3] + [999], "west": self.west})
        self.assertEqual(r.status_code, 404)
        self.assertEqual(BracketSlot.query.count(), 0)

    def test_reset(self):
        self.init_bracket()
        r = self.client.delete("/api/gonzo-cup/bracket")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(BracketSlot.query.count(), 0)

    def test_update_slot(self):
        self.init_bracket()
        semi = self.slot(2, 0)
        r = self.client.patch(f"/api/gonzo-cup/bracket/{semi.id}",
                              json={"teamId": self.east[0], "scheduledTime": "Sat 2pm"})
        data = r.get_json()
        self.assertEqual(data["teamId"], self.east[0])
        self.assertEqual(data["scheduledTime"], "Sat 2pm")

        # Explicit null clears, absent keys are left alone
        r = self.client.patch(f"/api/gonzo-cup/bracket/{semi.id}", json={"teamId": None})
        data = r.get_json()
        self.assertIsNone(data["teamId"])
        self.assertEqual(data["scheduledTime"], "Sat 2pm")

    def test_update_unknown_slot(self):
        r = self.client.patch("/api/gonzo-cup/bracket/999", json={"scheduledTime": "now"})
        self.assertEqual(r.status_code, 404)


class TestMatchGames(GonzoCupTestCase):

    def test_create_match_game(self):
        self.init_bracket()
        game = self.start_match(1)
        self.assertTrue(game["isTournament"])
        self.assertEqual(game["homeTeamId"], self.east[1])
        self.assertEqual(game["awayTeamId"], self.east[2])
        self.assertEqual(self.slot(3, 2).game_id, game["id"])

        tournament_games = self.client.get("/api/gonzo-cup/games").get_json()
        self.assertEqual([g["id"] for g in tournament_games], [game["id"]])

    def test_uninitialized_bracket(self):
        r = self.client.post("/api/gonzo-cup/bracket/0/game", json={"round": 3})
        self.assertEqual(r.status_code, 404)

    def test_match_needs_both_teams(self):
        self.init_bracket()
        r = self.client.post("/api/gonzo-cup/bracket/0/game", json={"round": 2})
        self.assertEqual(r.status_code, 400)

    def test_duplicate_match_game(self):
        self.init_bracket()
        self.start_match(0)
        r = self.client.post("/api/gonzo-cup/bracket/0/game", json={"round": 3})
        self.assertEqual(r.status_code, 400)

    def test_round_out_of_range(self):
        self.init_bracket()
        r = self.client.post("/api/gonzo-cup/bracket/0/game", json={"round": 4})
        self.assertEqual(r.status_code, 400)

    def test_deleting_game_unlinks_slot(self):
        self.init_bracket()
        game = self.start_match(0)
        self.client.delete(f"/api/games/{game['id']}", json={"pin": "1324"})
        self.assertIsNone(self.slot(3, 0).game_id)
        # The match can be started again
        self.start_match(0)


class TestAdvancement(GonzoCupTestCase):

    def test_elam_target_advances_winner_once(self):
        self.init_bracket()
        game = self.start_match(0)
        game_id = game["id"]

        self.client.post("/api/game/elam/activate", json={"gameId": game_id, "targetScore": 10})
        self.client.post("/api/game/score", json={"gameId": game_id, "team": "away", "points": 6})
        r = self.client.post("/api/game/score", json={"gameId": game_id, "team": "home", "points": 10})
        data = r.get_json()
        self.assertEqual(data["status"], "completed")
        self.assertFalse(data["clockRunning"])
        self.assertEqual(self.slot(2, 0).team_id, self.east[0])
        self.assertEqual(self.advanced_count(), 1)

        # Later corrections and an explicit end do not advance again
        self.client.post("/api/game/score", json={"gameId": game_id, "team": "away", "points": 10})
        self.client.post("/api/game/end", json={"gameId": game_id})
        self.assertEqual(self.slot(2, 0).team_id, self.east[0])
        self.assertEqual(self.advanced_count(), 1)

    def test_elam_target_below_leader_rejected(self):
        self.init_bracket()
        game = self.start_match(0)
        game_id = game["id"]
        self.client.post("/api/game/score", json={"gameId": game_id, "team": "home", "points": 20})
        self.client.post("/api/game/score", json={"gameId": game_id, "team": "away", "points": 25})

        r = self.client.post("/api/game/elam/activate", json={"gameId": game_id, "targetScore": 10})
        self.assertEqual(r.status_code, 400)
        self.assertIn("leading score", r.get_json()["error"])

        r = self.client.post("/api/game/score", json={"gameId": game_id, "team": "home", "points": 1})
        data = r.get_json()
        self.assertEqual(data["status"], "active")
        self.assertFalse(data["elamEndingActive"])
        self.assertIsNone(self.slot(2, 0).team_id)
        self.assertEqual(self.advanced_count(), 0)

        # A valid target still lets the leader win and advance
        self.client.post("/api/game/elam/activate", json={"gameId": game_id, "targetScore": 27})
        self.client.post("/api/game/score", json={"gameId": game_id, "team": "away", "points": 2})
        bracket = self.client.get("/api/gonzo-cup/bracket").get_json()
        self.assertEqual(bracket["rounds"][0]["matches"][0]["winnerTeamId"], self.east[3])
        self.assertEqual(self.slot(2, 0).team_id, self.east[3])

    def test_end_game_advances_leader(self):
        self.init_bracket()
        game = self.start_match(3)
        self.client.post("/api/game/score", json={"gameId": game["id"], "team": "away", "points": 5})
        self.client.post("/api/game/end", json={"gameId": game["id"]})
        self.assertEqual(self.slot(2, 3).team_id, self.west[2])

    def test_tied_end_advances_nobody(self):
        self.init_bracket()
        game = self.start_match(0)
        r = self.client.post("/api/game/end", json={"gameId": game["id"]})
        self.assertEqual(r.get_json()["status"], "completed")
        self.assertIsNone(self.slot(2, 0).team_id)
        self.assertEqual(self.advanced_count(), 0)

    def test_semifinal_pairing_and_champion(self):
        self.init_bracket()
        for position in (0, 1):
            game = self.start_match(position)
            self.client.post("/api/game/score", json={"gameId": game["id"], "team": "home", "points": 2})
            self.client.post("/api/game/end", json={"gameId": game["id"]})

        bracket = self.client.get("/api/gonzo-cup/bracket").get_json()
        east_semi = bracket["rounds"][1]["matches"][0]
        self.assertEqual(east_semi["state"], "paired")
        self.assertEqual((east_semi["top"]["teamId"], east_semi["bottom"]["teamId"]),
                         (self.east[0], self.east[1]))
        final = bracket["rounds"][2]["matches"][0]
        self.assertEqual(final["top"]["pending"], [self.east[0], self.east[1]])

        semi = self.start_match(0, round_number=2)
        self.client.post("/api/game/score", json={"gameId": semi["id"], "team": "away", "points": 3})
        self.client.post("/api/game/end", json={"gameId": semi["id"]})
        self.assertEqual(self.slot(1, 0).team_id, self.east[1])

        # Fill the West side of the final by hand and play it
        self.client.patch(f"/api/gonzo-cup/bracket/{self.slot(1, 1).id}", json={"teamId": self.west[0]})
        final_game = self.start_match(0, round_number=1)
        self.client.post("/api/game/score", json={"gameId": final_game["id"], "team": "home", "points": 1})
        self.client.post("/api/game/end", json={"gameId": final_game["id"]})

        bracket = self.client.get("/api/gonzo-cup/bracket").get_json()
        self.assertEqual(bracket["champion"], self.east[1])
        self.assertEqual(LogEntry.query.filter_by(category="Champion").count(), 1)

    def test_malformed_bracket_skips_advancement(self):
        self.init_bracket()
        game = self.start_match(0)

        # Break the wiring: a semifinal slot no longer feeds the final
        broken = self.slot(2, 3)
        broken.next_slot_id = None
        db.session.commit()

        bracket = self.client.get("/api/gonzo-cup/bracket").get_json()
        self.assertTrue(bracket["malformed"])
        self.assertIsNone(bracket["rounds"])
        self.assertEqual(len(bracket["slots"]), 14)

        self.client.post("/api/game/score", json={"gameId": game["id"], "team": "home", "points": 2})
        r = self.client.post("/api/game/end", json={"gameId": game["id"]})
        self.assertEqual(r.get_json()["status"], "completed")
        self.assertIsNone(self.slot(2, 0).team_id)
        self.assertEqual(LogEntry.query.filter_by(category="Advancement Skipped").count(), 1)

        r = self.client.post("/api/gonzo-cup/bracket/1/game", json={"round": 3})
        self.assertEqual(r.status_code, 400)
        self.assertIn("malformed", r.get_json()["error"])


class TestShowBracketCommand(GonzoCupTestCase):

    def test_uninitialized(self):
        result = self.app.test_cli_runner().invoke(args=["gonzo-cup", "show-bracket"])
        self.assertIn("not been initialized", result.output)

    def test_lists_rounds(self):
        self.init_bracket()
        result = self.app.test_cli_runner().invoke(args=["gonzo-cup", "show-bracket"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Quarterfinals:", result.output)
        self.assertIn("East One vs East Four [paired]", result.output)


if __name__ == "__main__":
    unittest.main()
