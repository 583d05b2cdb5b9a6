"""
Scenario serialization, snapshot validation, actions and settings.
"""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from agents import AgentSpec, MinimaxAgent
from env import Scenario, SnapshotError, create_duel_scenario, create_skirmish_scenario
from env.core import Attack, Move, MoveDir, Side, action_from_dict, serialize_joint_action
from env.entities import Unit
from infra.config import Settings, get_settings


class TestScenarioSerialization(unittest.TestCase):
    def test_dict_round_trip_keeps_agent_and_units(self) -> None:
        scenario = create_skirmish_scenario()
        restored = Scenario.from_dict(scenario.to_dict())

        self.assertEqual(restored.to_dict(), scenario.to_dict())
        self.assertEqual(restored.agent.type, "minimax")
        self.assertEqual(restored.agent.init_params, {"plies": 2})

    def test_clone_is_independent(self) -> None:
        scenario = create_duel_scenario()
        clone = scenario.clone()
        clone.units[0].hp = 1
        self.assertEqual(scenario.units[0].hp, 10)

    def test_json_file_round_trip(self) -> None:
        scenario = create_duel_scenario()
        with tempfile.TemporaryDirectory() as tmpdir:
            path = scenario.save_json(Path(tmpdir) / "duel.json")
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            loaded = Scenario.load_json(path)

        self.assertEqual(raw["config"]["grid_width"], 5)
        self.assertEqual(len(loaded.units), 2)
        self.assertIs(loaded.units[1].side, Side.OPPOSING)

    def test_accepts_unit_objects(self) -> None:
        unit = Unit(id=7, side=Side.CONTROLLED, pos=(0, 0), hp=5, attack=1)
        scenario = Scenario.from_dict({"config": {"grid_width": 2, "grid_height": 2}, "units": [unit]})
        self.assertIsNot(scenario.units[0], unit)
        self.assertEqual(scenario.units[0].id, 7)


class TestMalformedSnapshots(unittest.TestCase):
    def base(self):
        return create_duel_scenario().to_dict()

    def test_missing_config(self) -> None:
        with self.assertRaises(SnapshotError):
            Scenario.from_dict({"units": []})

    def test_bad_extents(self) -> None:
        data = self.base()
        data["config"]["grid_width"] = 0
        with self.assertRaises(SnapshotError):
            Scenario.from_dict(data)

    def test_non_numeric_extents(self) -> None:
        data = self.base()
        data["config"]["grid_height"] = "tall"
        with self.assertRaises(SnapshotError):
            Scenario.from_dict(data)

    def test_unit_missing_field(self) -> None:
        data = self.base()
        del data["units"][0]["hp"]
        with self.assertRaises(SnapshotError):
            Scenario.from_dict(data)

    def test_unit_unknown_side(self) -> None:
        data = self.base()
        data["units"][0]["side"] = "NEUTRAL"
        with self.assertRaises(SnapshotError):
            Scenario.from_dict(data)

    def test_negative_hit_points(self) -> None:
        data = self.base()
        data["units"][1]["hp"] = -3
        with self.assertRaises(SnapshotError):
            Scenario.from_dict(data)

    def test_bad_agent_side(self) -> None:
        data = self.base()
        data["agent"]["side"] = "BLUE"
        with self.assertRaises(SnapshotError):
            Scenario.from_dict(data)

    def test_short_position(self) -> None:
        data = self.base()
        data["units"][0]["pos"] = [1]
        with self.assertRaises(SnapshotError):
            Scenario.from_dict(data)

    def test_units_not_a_list(self) -> None:
        data = self.base()
        data["units"] = 5
        with self.assertRaises(SnapshotError):
            Scenario.from_dict(data)

    def test_fractional_hit_points(self) -> None:
        data = self.base()
        data["units"][0]["hp"] = 2.5
        with self.assertRaises(SnapshotError):
            Scenario.from_dict(data)

    def test_unit_record_not_a_dict(self) -> None:
        data = self.base()
        data["units"].append("footman")
        with self.assertRaises(SnapshotError):
            Scenario.from_dict(data)


class TestActionSerialization(unittest.TestCase):
    def test_serialize_joint_action(self) -> None:
        payload = serialize_joint_action({1: Move(MoveDir.EAST), 2: Attack(5)})
        self.assertEqual(
            payload,
            [
                {"unit_id": 1, "type": "MOVE", "params": {"dir": "EAST"}, "label": "MOVE(EAST)"},
                {"unit_id": 2, "type": "ATTACK", "params": {"target_id": 5}, "label": "ATTACK(#5)"},
            ],
        )

    def test_action_from_dict(self) -> None:
        self.assertEqual(action_from_dict(Move(MoveDir.NORTH).to_dict()), Move(MoveDir.NORTH))
        self.assertEqual(action_from_dict(Attack(3).to_dict()), Attack(3))

    def test_action_from_dict_rejects_garbage(self) -> None:
        for data in ({"type": "WAIT"}, {"type": "MOVE", "params": {"dir": "UP"}},
                     {"type": "ATTACK", "params": {"target_id": "x"}}):
            with self.assertRaises(ValueError):
                action_from_dict(data)


class TestUnit(unittest.TestCase):
    def test_kind_follows_side(self) -> None:
        unit = Unit(id=1, side=Side.OPPOSING, pos=(0, 0), hp=3, attack=1)
        self.assertEqual(unit.kind.value, "ranged")
        self.assertEqual(Unit.from_json(unit.to_json()).to_dict(), unit.to_dict())

    def test_damage_floors_at_zero(self) -> None:
        unit = Unit(id=1, side=Side.CONTROLLED, pos=(0, 0), hp=3, attack=1)
        self.assertFalse(unit.take_damage(2))
        self.assertTrue(unit.take_damage(5))
        self.assertEqual(unit.hp, 0)
        self.assertFalse(unit.alive)

    def test_rejects_non_integer_fields(self) -> None:
        bad_fields = [
            {"hp": 2.5},
            {"hp": True},
            {"attack": 1.0},
            {"pos": (1.5, 0)},
            {"pos": (1,)},
            {"pos": 3},
        ]
        for overrides in bad_fields:
            fields = {"id": 1, "side": Side.CONTROLLED, "pos": (0, 0), "hp": 3, "attack": 1}
            fields.update(overrides)
            with self.assertRaises(ValueError, msg=str(overrides)):
                Unit(**fields)


class TestAgentSpec(unittest.TestCase):
    def test_round_trip(self) -> None:
        spec = AgentSpec(type="minimax", name="planner", init_params={"plies": 3})
        self.assertEqual(AgentSpec.from_dict(spec.to_dict()), spec)

    def test_rejects_unknown_side(self) -> None:
        with self.assertRaises(ValueError):
            AgentSpec.from_dict({"type": "minimax", "side": "RED"})


class TestSettings(unittest.TestCase):
    def tearDown(self) -> None:
        get_settings.cache_clear()

    def test_defaults(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.plies, 2)
        self.assertEqual(settings.port, 8000)
        self.assertFalse(settings.log_json)

    def test_environment_overrides(self) -> None:
        env = {"SKIRMISH_PLIES": "3", "SKIRMISH_LOG_JSON": "true", "SKIRMISH_PORT": "9001"}
        with mock.patch.dict(os.environ, env, clear=True):
            get_settings.cache_clear()
            settings = get_settings()
        self.assertEqual(settings.plies, 3)
        self.assertTrue(settings.log_json)
        self.assertEqual(settings.port, 9001)

    def test_reads_env_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            env_file = Path(tmpdir) / ".env"
            env_file.write_text("SKIRMISH_PLIES=4\nSKIRMISH_HOST=0.0.0.0\n", encoding="utf-8")
            with mock.patch.dict(os.environ, {}, clear=True):
                settings = Settings(_env_file=env_file)
        self.assertEqual(settings.plies, 4)
        self.assertEqual(settings.host, "0.0.0.0")

    def test_rejects_bad_values(self) -> None:
        for raw in ("deep", "0", "-2"):
            with mock.patch.dict(os.environ, {"SKIRMISH_PLIES": raw}, clear=True):
                with self.assertRaises(ValueError):
                    Settings(_env_file=None)

    def test_agent_uses_configured_depth(self) -> None:
        with mock.patch.dict(os.environ, {"SKIRMISH_PLIES": "3"}, clear=True):
            get_settings.cache_clear()
            agent = MinimaxAgent()
        self.assertEqual(agent.plies, 3)


if __name__ == "__main__":
    unittest.main()
