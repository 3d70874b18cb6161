import contextlib
import io
import unittest
from unittest.mock import patch

from agent2048.brain import AgentBrain, Direction
from agent2048.config import SearchConfig
from agent2048.errors import InvalidSnapshotError
from agent2048.evaluator import evaluate_grid
from agent2048.expectimax import ExpectimaxAgent, expectimax, pick_best, score_moves, select_move
from agent2048.game import Game2048
import demo_expectimax

STUCK_BOARD = [
    [2, 4, 2, 4],
    [4, 2, 4, 2],
    [2, 4, 2, 4],
    [4, 2, 4, 2]
]

OPENING_BOARD = [
    [2, 2, 0, 0],
    [0, 0, 0, 0],
    [0, 0, 0, 0],
    [0, 0, 0, 0]
]

CROWDED_BOARD = [
    [2, 4, 8, 16],
    [4, 8, 16, 32],
    [8, 16, 0, 64],
    [16, 0, 64, 0]
]


def snapshot_for(rows):
    return {'dimension': len(rows), 'cells': rows}


def brain_for(rows):
    return AgentBrain.from_snapshot(snapshot_for(rows))


class TestExpectimax(unittest.TestCase):

    def setUp(self):
        self.config = SearchConfig(depth_limit=2)

    def test_depth_zero_is_static_evaluation(self):
        brain = brain_for(CROWDED_BOARD)
        expected = evaluate_grid(brain.grid, self.config)
        self.assertEqual(expectimax(brain, True, 0, self.config), expected)
        self.assertEqual(expectimax(brain, False, 0, self.config), expected)

    def test_chance_layer_is_weighted_average(self):
        brain = brain_for(CROWDED_BOARD)
        empties = brain.grid.available_cells()
        self.assertEqual(len(empties), 3)

        expected = 0.0
        for cell in empties:
            for value, prob in ((2, 0.9), (4, 0.1)):
                child = brain.clone()
                child.add_tile(cell, value)
                expected += prob / len(empties) * evaluate_grid(child.grid, self.config)

        self.assertAlmostEqual(expectimax(brain, True, 1, self.config), expected)

    def test_chance_layer_on_full_board(self):
        brain = brain_for(STUCK_BOARD)
        self.assertEqual(expectimax(brain, True, 3, self.config), evaluate_grid(brain.grid, self.config))

    def test_decision_layer_without_moves_is_zero(self):
        self.assertEqual(expectimax(brain_for(STUCK_BOARD), False, 3, self.config), 0.0)

    def test_decision_layer_takes_best_move(self):
        brain = brain_for(CROWDED_BOARD)
        expected = []
        for direction in Direction:
            child = brain.clone()
            if child.move(direction):
                expected.append(evaluate_grid(child.grid, self.config))
        self.assertAlmostEqual(expectimax(brain, False, 1, self.config), max(expected))

    def test_search_leaves_brain_untouched(self):
        brain = brain_for(CROWDED_BOARD)
        before = brain.grid.serialize()
        expectimax(brain, False, 3, self.config)
        expectimax(brain, True, 3, self.config)
        self.assertEqual(brain.grid.serialize(), before)
        self.assertEqual(brain.score, 0)

    def test_custom_spawn_values(self):
        brain = brain_for(CROWDED_BOARD)
        only_twos = SearchConfig(depth_limit=1, spawn_values=((2, 1.0),))
        empties = brain.grid.available_cells()
        expected = 0.0
        for cell in empties:
            child = brain.clone()
            child.add_tile(cell, 2)
            expected += evaluate_grid(child.grid, only_twos) / len(empties)
        self.assertAlmostEqual(expectimax(brain, True, 1, only_twos), expected)


class TestSelectMove(unittest.TestCase):

    def setUp(self):
        self.config = SearchConfig(depth_limit=2)

    def test_stuck_board_reports_no_move(self):
        self.assertIsNone(select_move(snapshot_for(STUCK_BOARD), self.config))

    def test_returns_legal_move(self):
        move = select_move(snapshot_for(OPENING_BOARD), self.config)
        self.assertIsInstance(move, Direction)
        self.assertIn(move, brain_for(OPENING_BOARD).legal_moves())

    def test_only_legal_move_is_chosen(self):
        rows = [
            [2, 0, 0, 0],
            [4, 0, 0, 0],
            [8, 0, 0, 0],
            [16, 0, 0, 0]
        ]
        self.assertEqual(brain_for(rows).legal_moves(), [Direction.RIGHT])
        self.assertEqual(select_move(snapshot_for(rows), self.config), Direction.RIGHT)

    def test_scores_match_direct_search(self):
        brain = brain_for(OPENING_BOARD)
        scores = score_moves(brain, self.config)
        for direction, score in scores.items():
            child = brain.clone()
            if child.move(direction):
                self.assertAlmostEqual(score, expectimax(child, True, 2, self.config))
            else:
                self.assertIsNone(score)

    def test_workers_give_same_answer(self):
        threaded = self.config.with_overrides(workers=4)
        brain = brain_for(CROWDED_BOARD)
        self.assertEqual(score_moves(brain, threaded), score_moves(brain, self.config))
        self.assertEqual(select_move(brain, threaded), select_move(brain, self.config))

    def test_accepts_brain_and_array(self):
        brain = brain_for(OPENING_BOARD)
        self.assertEqual(select_move(brain, self.config), select_move(OPENING_BOARD, self.config))

    def test_invalid_snapshot(self):
        with self.assertRaises(InvalidSnapshotError):
            select_move(snapshot_for([[2, 3], [0, 0]]), self.config)
        with self.assertRaises(InvalidSnapshotError):
            select_move({'dimension': -4, 'cells': []}, self.config)

    @patch('agent2048.expectimax.score_moves')
    def test_board_size_must_match_weights(self, mock_score_moves):
        small = [[2, 2, 0], [0, 0, 0], [0, 0, 0]]
        with self.assertRaises(InvalidSnapshotError):
            select_move(snapshot_for(small), self.config)
        with self.assertRaises(InvalidSnapshotError):
            ExpectimaxAgent(self.config).get_move(snapshot_for(small))
        mock_score_moves.assert_not_called()

    def test_small_board_with_matching_weights(self):
        config = SearchConfig(depth_limit=1, position_weights=[[3, 2, 1], [2, 1, 0.5], [1, 0.5, 0.25]])
        move = select_move(snapshot_for([[2, 2, 0], [0, 0, 0], [0, 0, 0]]), config)
        self.assertIn(move, list(Direction))


class TestPickBest(unittest.TestCase):

    def test_highest_score_wins(self):
        scores = {Direction.UP: 1.0, Direction.RIGHT: 3.0, Direction.DOWN: None, Direction.LEFT: 2.0}
        self.assertEqual(pick_best(scores), Direction.RIGHT)

    def test_first_direction_wins_ties(self):
        scores = {Direction.UP: 2.0, Direction.RIGHT: 2.0, Direction.DOWN: None, Direction.LEFT: 1.0}
        self.assertEqual(pick_best(scores), Direction.UP)

    def test_all_zero_falls_back_to_last_legal(self):
        scores = {Direction.UP: 0.0, Direction.RIGHT: 0.0, Direction.DOWN: 0.0, Direction.LEFT: None}
        self.assertEqual(pick_best(scores), Direction.DOWN)

    def test_negative_scores(self):
        scores = {Direction.UP: -4.0, Direction.RIGHT: None, Direction.DOWN: -1.5, Direction.LEFT: None}
        self.assertEqual(pick_best(scores), Direction.DOWN)

    def test_no_legal_move(self):
        self.assertIsNone(pick_best({d: None for d in Direction}))


class TestAgentWithGame(unittest.TestCase):

    def test_agent_plays_legal_moves(self):
        agent = ExpectimaxAgent(SearchConfig(depth_limit=1))
        game = Game2048(seed=11)
        for _ in range(15):
            move = agent.get_move(game)
            self.assertIn(move, game.get_valid_moves())
            self.assertEqual(set(agent.last_scores), set(Direction))
            self.assertTrue(game.move(move))

    def test_agent_on_finished_game(self):
        game = Game2048(seed=1)
        game.board[:] = STUCK_BOARD
        self.assertIsNone(ExpectimaxAgent(SearchConfig(depth_limit=1)).get_move(game))

    def test_play_game_respects_move_limit(self):
        agent = ExpectimaxAgent(SearchConfig(depth_limit=1))
        with contextlib.redirect_stdout(io.StringIO()):
            game = Game2048(seed=5)
            score, moves, top, mean_move = demo_expectimax.play_game(game, agent, max_moves=10)
        self.assertEqual(moves, 10)
        self.assertEqual(score, game.score)
        self.assertEqual(top, game.max_tile())
        self.assertGreaterEqual(mean_move, 0.0)

    @patch('demo_expectimax.logging.basicConfig')
    def test_demo_main_reports_summary(self, mock_basic_config):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            demo_expectimax.main(['--games', '2', '--depth', '1', '--max-moves', '5', '--seed', '3', '--quiet'])
        text = out.getvalue()
        self.assertIn("Game 1: ", text)
        self.assertIn("Game 2: ", text)
        self.assertIn("Average Score", text)
        mock_basic_config.assert_called_once()


if __name__ == "__main__":
    unittest.main()
