"""
Static utility tests.
"""

import unittest

from env import CombatState, Roster, create_duel_scenario
from env.core import Side
from env.entities import Unit
from env.mechanics import LOSS_UTILITY, WIN_UTILITY, evaluate, evaluate_features
from env.mechanics.evaluation import enemy_mobility, route_deficit
from env.world import Grid


def footman(uid, pos, hp=10, attack=2):
    return Unit(id=uid, side=Side.CONTROLLED, pos=pos, hp=hp, attack=attack)


def archer(uid, pos, hp=4, attack=1):
    return Unit(id=uid, side=Side.OPPOSING, pos=pos, hp=hp, attack=attack)


def make_state(grid, controlled, opposing, depth=0, routes=None):
    rosters = {Side.CONTROLLED: Roster(controlled), Side.OPPOSING: Roster(opposing)}
    return CombatState(grid, rosters, depth=depth, routes=routes or {})


class TestUtility(unittest.TestCase):
    def test_duel_root_value(self) -> None:
        state = create_duel_scenario().build_state()
        features = evaluate_features(state)

        self.assertEqual(features.route_deficit, 0)
        self.assertEqual(features.enemy_hp, 4)
        self.assertEqual(features.enemy_count, 1)
        self.assertEqual(features.own_hp, 10)
        self.assertEqual(features.own_count, 1)
        self.assertEqual(features.enemy_mobility, 2)
        # -20*4 - 20*1 + 3*10 + 3*1 - 7*2
        self.assertEqual(state.utility, -81.0)
        self.assertEqual(evaluate(state), state.utility)

    def test_win_when_no_opponents(self) -> None:
        state = make_state(Grid(3, 1), [footman(1, (0, 0))], [])
        self.assertEqual(state.utility, WIN_UTILITY)

    def test_loss_when_no_controlled_units(self) -> None:
        state = make_state(Grid(3, 1), [], [archer(2, (0, 0))])
        self.assertEqual(state.utility, LOSS_UTILITY)

    def test_win_checked_before_loss(self) -> None:
        state = make_state(Grid(3, 1), [], [])
        self.assertEqual(state.utility, WIN_UTILITY)

    def test_sentinels_are_finite_and_ordered(self) -> None:
        self.assertLess(LOSS_UTILITY, 0)
        self.assertGreater(WIN_UTILITY, 1e300)
        self.assertEqual(LOSS_UTILITY, -WIN_UTILITY)

    def test_features_to_dict(self) -> None:
        data = create_duel_scenario().build_state().features.to_dict()
        self.assertEqual(data["utility"], -81.0)


class TestRouteDeficit(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = Grid(6, 3)
        self.route = ((0, 0), (1, 0), (2, 0))

    def test_waypoint_follows_depth(self) -> None:
        state = make_state(self.grid, [footman(1, (0, 0))], [archer(9, (5, 2))],
                           depth=2, routes={1: self.route})
        self.assertEqual(route_deficit(state), 2)

    def test_waypoint_clamped_to_route_end(self) -> None:
        state = make_state(self.grid, [footman(1, (0, 0))], [archer(9, (5, 2))],
                           depth=7, routes={1: self.route})
        self.assertEqual(route_deficit(state), 2)

    def test_empty_route_counts_as_zero(self) -> None:
        state = make_state(
            self.grid,
            [footman(1, (0, 0)), footman(2, (0, 2))],
            [archer(9, (5, 2))],
            depth=1,
            routes={1: self.route, 2: ()},
        )
        self.assertEqual(route_deficit(state), 0.5)


class TestEnemyMobility(unittest.TestCase):
    def test_blocked_by_obstacles_units_and_edges(self) -> None:
        grid = Grid(3, 3, obstacles=frozenset({(1, 0)}))
        state = make_state(grid, [footman(1, (0, 1))], [archer(2, (1, 1))])
        # North is an obstacle, west is a footman: east and south stay open
        self.assertEqual(enemy_mobility(state), 2)

    def test_mean_over_opponents(self) -> None:
        grid = Grid(3, 1)
        state = make_state(grid, [footman(1, (1, 0))], [archer(2, (0, 0)), archer(3, (2, 0))])
        self.assertEqual(enemy_mobility(state), 0)

    def test_other_opponents_do_not_block(self) -> None:
        grid = Grid(3, 1)
        state = make_state(grid, [footman(1, (2, 0))], [archer(2, (0, 0)), archer(3, (1, 0))])
        # (0, 0) sees east open; (1, 0) sees west open and the footman east
        self.assertEqual(enemy_mobility(state), 1.0)


if __name__ == "__main__":
    unittest.main()
