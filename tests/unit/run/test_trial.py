"""
Unit tests for Trial class.

Tests cover the generation loop, termination (generation limit and
fitness threshold), output suppression and parallel evaluation.
"""

import pickle

import pytest
from joblib import parallel_config

from neatmesh.phenotype   import NodeMesh
from neatmesh.run.config  import Config
from neatmesh.run.trial   import Trial


# ============================================================================
# Test Fixtures
# ============================================================================

class CountingTrial(Trial):
    """Scores each network by its output and counts the reports."""

    def _reset(self):
        super()._reset()
        self.progress_reports = 0
        self.final_reports    = 0

    def _evaluate_fitness(self, mesh: NodeMesh) -> float:
        return mesh.update([1.0, 0.0])[0]

    def _report_progress(self):
        self.progress_reports += 1

    def _final_report(self):
        self.final_reports += 1


def make_config(**overrides):
    return Config(population_size=10, max_number_generations=3, **overrides)


# ============================================================================
# Tests
# ============================================================================

class TestTrialRun:
    """Test running a trial."""

    def test_abstract(self):
        """Test that Trial cannot be instantiated directly."""
        with pytest.raises(TypeError):
            Trial(make_config())

    def test_generation_limit(self):
        """Test that the trial stops after 'max_number_generations' generations."""
        trial = CountingTrial(make_config(), seed=1)
        trial.run()
        assert trial.generation == 3
        assert trial.failed
        assert trial.progress_reports == 4
        assert trial.final_reports == 1

    def test_fitness_threshold(self):
        """Test that reaching the fitness threshold stops the trial with success."""
        trial = CountingTrial(make_config(fitness_threshold=0.0), seed=1)
        trial.run()
        assert trial.generation == 0
        assert not trial.failed

    def test_unreachable_threshold(self):
        """Test that a threshold never reached leaves the trial failed."""
        trial = CountingTrial(make_config(fitness_threshold=10.0), seed=1)
        trial.run()
        assert trial.generation == 3
        assert trial.failed

    def test_suppress_output(self):
        """Test that no report is produced when output is suppressed."""
        trial = CountingTrial(make_config(), seed=1, suppress_output=True)
        trial.run()
        assert trial.progress_reports == 0
        assert trial.final_reports == 0

    def test_best_genome(self):
        """Test that the best genome belongs to the last evaluated generation."""
        trial = CountingTrial(make_config(), seed=1)
        assert trial.best_genome is None
        assert trial.best_score == 0.0
        trial.run()
        best = trial.best_genome
        assert best.phenotype().update([1.0, 0.0])[0] == pytest.approx(trial.best_score)

    def test_rerun_resets(self):
        """Test that running twice starts over from generation 0."""
        trial = CountingTrial(make_config(), seed=1)
        trial.run()
        first = trial.best_score
        trial.run()
        assert trial.progress_reports == 4
        assert trial.best_score == pytest.approx(first)


class TestParallelEvaluation:
    """Test evaluating the networks with joblib."""

    def test_parallel_matches_serial(self):
        """Test that parallel evaluation gives the same scores as serial evaluation."""
        serial = CountingTrial(make_config(), seed=5)
        serial.run(num_jobs=1)

        parallel = CountingTrial(make_config(), seed=5)
        with parallel_config(backend='threading'):
            parallel.run(num_jobs=2)

        assert parallel.best_score == pytest.approx(serial.best_score)
        assert parallel.generation == serial.generation

    def test_pickled_trial_leaves_population_behind(self):
        """Test that the copy sent to worker processes carries no genomes."""
        trial = CountingTrial(make_config(), seed=5, suppress_output=True)
        trial.run()

        copy = pickle.loads(pickle.dumps(trial))
        assert copy._ga is None
        assert copy._scores == []
        assert trial._ga is not None

        mesh = trial.best_genome.phenotype()
        assert copy._evaluate_fitness(mesh) == pytest.approx(trial.best_score)
