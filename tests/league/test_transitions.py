"""
Unit tests for the game transition engine (no database).
"""
import unittest

from scoreboard.errors import InvalidOperation, ValidationError
from scoreboard.league.core import transitions
from scoreboard.league.core.constants import GameStatus


def _state(**overrides):
    state = transitions.new_game_state(1, 2)
    state.update(overrides)
    return state


class TestNewGame(unittest.TestCase):

    def test_defaults(self):
        state = transitions.new_game_state(7, 9, is_tournament=True)
        self.assertEqual(state["home_team_id"], 7)
        self.assertEqual(state["away_team_id"], 9)
        self.assertEqual(state["period"], 1)
        self.assertEqual(state["time_remaining"], 1200)
        self.assertEqual(state["possession"], "home")
        self.assertEqual(state["home_timeouts"], 3)
        self.assertEqual(state["away_timeouts"], 3)
        self.assertIsNone(state["target_score"])
        self.assertFalse(state["clock_running"])
        self.assertEqual(state["status"], GameStatus.active)
        self.assertTrue(state["is_tournament"])


class TestScoreAndFouls(unittest.TestCase):

    def test_score_adds_points(self):
        updates, winner = transitions.score(_state(home_score=10), "home", 3)
        self.assertEqual(updates, {"home_score": 13})
        self.assertIsNone(winner)

    def test_score_correction_floors_at_zero(self):
        updates, _ = transitions.score(_state(away_score=1), "away", -3)
        self.assertEqual(updates["away_score"], 0)

    def test_invalid_side_rejected(self):
        with self.assertRaises(ValidationError):
            transitions.score(_state(), "visitors", 2)

    def test_foul_floors_at_zero(self):
        self.assertEqual(transitions.foul(_state(home_fouls=4), "home"), {"home_fouls": 5})
        self.assertEqual(transitions.foul(_state(home_fouls=0), "home", -1), {"home_fouls": 0})


class TestElamCompletion(unittest.TestCase):

    def _elam_state(self, **overrides):
        return _state(is_tournament=True, elam_ending_active=True, target_score=50,
                      home_score=44, away_score=48, clock_running=True, **overrides)

    def test_reaching_target_completes_tournament_game(self):
        updates, winner = transitions.score(self._elam_state(), "away", 2)
        self.assertEqual(updates["away_score"], 50)
        self.assertEqual(updates["status"], GameStatus.completed)
        self.assertFalse(updates["clock_running"])
        self.assertEqual(winner, 2)

    def test_passing_target_completes(self):
        updates, winner = transitions.score(self._elam_state(), "home", 8)
        self.assertEqual(updates["status"], GameStatus.completed)
        self.assertEqual(winner, 1)

    def test_below_target_stays_active(self):
        updates, winner = transitions.score(self._elam_state(), "away", 1)
        self.assertNotIn("status", updates)
        self.assertIsNone(winner)

    def test_league_game_never_auto_completes(self):
        state = self._elam_state()
        state["is_tournament"] = False
        updates, winner = transitions.score(state, "away", 5)
        self.assertNotIn("status", updates)
        self.assertIsNone(winner)

    def test_completed_game_does_not_complete_again(self):
        state = self._elam_state(status=GameStatus.completed)
        state["away_score"] = 50
        updates, winner = transitions.score(state, "away", 2)
        self.assertNotIn("status", updates)
        self.assertIsNone(winner)


class TestClock(unittest.TestCase):

    def test_toggle(self):
        self.assertEqual(transitions.toggle_clock(_state(clock_running=False)), {"clock_running": True})
        self.assertEqual(transitions.toggle_clock(_state(clock_running=True)), {"clock_running": False})

    def test_explicit_set_pauses_and_clamps(self):
        updates = transitions.set_clock(_state(clock_running=True), -5)
        self.assertEqual(updates, {"time_remaining": 0, "clock_running": False})

    def test_set_without_pause_keeps_clock_running(self):
        updates = transitions.set_clock(_state(clock_running=True), 600, pause=False)
        self.assertEqual(updates, {"time_remaining": 600})

    def test_tick_decrements_without_pausing(self):
        updates = transitions.tick_clock(_state(time_remaining=1, clock_running=True))
        self.assertEqual(updates, {"time_remaining": 0})

    def test_reset_is_idempotent(self):
        state = _state(time_remaining=33, clock_running=True)
        once = transitions.apply_updates(state, transitions.reset_clock(state))
        twice = transitions.apply_updates(once, transitions.reset_clock(once))
        self.assertEqual(once, twice)
        self.assertEqual(once["time_remaining"], 1200)
        self.assertFalse(once["clock_running"])


class TestPeriodAndPossession(unittest.TestCase):

    def test_next_period_resets_team_fouls(self):
        updates = transitions.change_period(_state(period=2, home_fouls=7, away_fouls=9), "next")
        self.assertEqual(updates, {"period": 3, "home_fouls": 0, "away_fouls": 0})

    def test_previous_period_floors_at_one(self):
        self.assertEqual(transitions.change_period(_state(period=1), "prev"), {"period": 1})
        self.assertEqual(transitions.change_period(_state(period=3), "prev"), {"period": 2})

    def test_previous_period_keeps_fouls(self):
        updates = transitions.change_period(_state(period=2, home_fouls=4), "prev")
        self.assertNotIn("home_fouls", updates)

    def test_unknown_direction_rejected(self):
        with self.assertRaises(ValidationError):
            transitions.change_period(_state(), "sideways")

    def test_toggle_possession(self):
        self.assertEqual(transitions.toggle_possession(_state(possession="home")), {"possession": "away"})
        self.assertEqual(transitions.toggle_possession(_state(possession="away")), {"possession": "home"})


class TestTimeouts(unittest.TestCase):

    def test_subtract(self):
        self.assertEqual(transitions.adjust_timeout(_state(), "away"), {"away_timeouts": 2})

    def test_add_has_no_cap(self):
        self.assertEqual(transitions.adjust_timeout(_state(home_timeouts=3), "home", "add"),
                         {"home_timeouts": 4})

    def test_subtract_at_zero_rejected(self):
        with self.assertRaises(InvalidOperation) as ctx:
            transitions.adjust_timeout(_state(home_timeouts=0), "home", "subtract")
        self.assertEqual(ctx.exception.message, "No timeouts remaining for home team")

    def test_unknown_action_rejected(self):
        with self.assertRaises(ValidationError):
            transitions.adjust_timeout(_state(), "home", "double")


class TestSwapTeams(unittest.TestCase):

    def test_swap_exchanges_paired_fields(self):
        state = _state(home_score=20, away_score=31, home_fouls=2, away_fouls=5,
                       home_timeouts=1, away_timeouts=3, possession="home")
        updates = transitions.swap_teams(state)
        self.assertEqual(updates["home_team_id"], 2)
        self.assertEqual(updates["away_team_id"], 1)
        self.assertEqual(updates["home_score"], 31)
        self.assertEqual(updates["away_score"], 20)
        self.assertEqual(updates["home_fouls"], 5)
        self.assertEqual(updates["away_timeouts"], 1)
        self.assertEqual(updates["possession"], "away")

    def test_swap_twice_restores_state(self):
        state = _state(home_score=20, away_score=31, home_fouls=2, away_timeouts=0, possession="away")
        swapped = transitions.apply_updates(state, transitions.swap_teams(state))
        restored = transitions.apply_updates(swapped, transitions.swap_teams(swapped))
        self.assertEqual(restored, state)


class TestElamToggle(unittest.TestCase):

    def test_default_target_is_leader_plus_eight(self):
        updates = transitions.activate_elam(_state(home_score=40, away_score=45, clock_running=True))
        self.assertEqual(updates, {"elam_ending_active": True, "target_score": 53, "clock_running": False})

    def test_explicit_target(self):
        updates = transitions.activate_elam(_state(home_score=40), target_score=60)
        self.assertEqual(updates["target_score"], 60)

    def test_target_at_or_below_leading_score_rejected(self):
        state = _state(home_score=20, away_score=25)
        for target in (10, 25):
            with self.assertRaises(InvalidOperation):
                transitions.activate_elam(state, target_score=target)
        self.assertEqual(transitions.activate_elam(state, target_score=26)["target_score"], 26)

    def test_deactivate_clears_target(self):
        state = _state(elam_ending_active=True, target_score=53, clock_running=True)
        updates = transitions.deactivate_elam(state)
        self.assertEqual(updates, {"elam_ending_active": False, "target_score": None, "clock_running": False})

    def test_end_game(self):
        self.assertEqual(transitions.end_game(_state(clock_running=True)),
                         {"status": GameStatus.completed, "clock_running": False})


if __name__ == "__main__":
    unittest.main()
