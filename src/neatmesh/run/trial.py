"""
NEAT Trial Module

This module defines the abstract base class for NEAT trials with built-in
support for CPU-based parallelization using joblib.

A trial represents one independent run of the NEAT algorithm, evolving a
population through generations until a solution is found or the maximum
number of generations is reached.
"""

import logging
from abc    import ABC, abstractmethod
from joblib import Parallel, delayed
from typing import TYPE_CHECKING

from neatmesh.pool.population import NeatGA
from neatmesh.run.config      import Config
if TYPE_CHECKING:
    from neatmesh.genotype  import Genome
    from neatmesh.phenotype import NodeMesh

logger = logging.getLogger(__name__)

class Trial(ABC):
    """
    Abstract base class for implementing a NEAT trial.

    A trial represents one independent run of the NEAT algorithm, evolving a
    population through generations until a solution is found or the maximum
    number of generations is reached.

    Subclasses must implement:
    - _evaluate_fitness(mesh): Evaluate the score of a single network
    - _report_progress(): Display progress after each generation
    - _final_report(): Display final results

    Subclasses can override:
    - _reset(): Reset trial-specific state (call super()._reset())
    - _terminate(): Custom termination logic (default: max generations + fitness threshold)

    Public Attributes:
        failed: True unless the fitness threshold was reached

    Public Methods:
        run(num_jobs): Execute a complete NEAT trial

    Parallelization of fitness evaluation:
        num_jobs=1:  Serial evaluation (no parallelization)
        num_jobs>1:  Use specified number of parallel processes
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self, config: Config, seed: int | None = None, suppress_output: bool = False):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            seed:            Seed of the run's random number generator
            suppress_output: If True, suppress progress and final reports
        """
        self._config         : Config        = config
        self._seed           : int | None    = seed
        self._ga             : NeatGA | None = None
        self._scores         : list[float]   = []
        self._suppress_output: bool          = suppress_output
        self.failed          : bool          = True

    @property
    def generation(self) -> int:
        return self._ga.current_generation() if self._ga is not None else 0

    @property
    def best_score(self) -> float:
        """Best score of the generation evaluated last."""
        return max(self._scores) if self._scores else 0.0

    @property
    def best_genome(self) -> 'Genome | None':
        """Highest scoring genome of the generation evaluated last."""
        if not self._scores:
            return None
        best = max(range(len(self._scores)), key=self._scores.__getitem__)
        return self._ga.genomes[best]

    def run(self, num_jobs: int = 1) -> None:
        """
        Run the trial.

        Resets the trial state and runs the evolutionary
        algorithm until the terminate condition is met.

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation
                      1 = serial (no parallelization)
                     -1 = use all available CPU cores
                     >1 = use specified number of processes
        """
        self._reset()

        while True:
            meshes       = self._ga.create_phenotypes()
            self._scores = self._evaluate_fitness_all(meshes, num_jobs)

            if not self._suppress_output:
                self._report_progress()

            if self._terminate():
                break

            # The scores of this generation create the next one
            self._ga.epoch(self._scores)

        logger.debug("trial finished after %d generations, best score %.4f", self.generation, self.best_score)
        if not self._suppress_output:
            self._final_report()

    def _reset(self) -> None:
        """
        Reset the trial state before starting a new run.

        Subclasses should call super()._reset() and then
        initialize their problem-specific data.
        """
        self._ga     = NeatGA(self._config, self._seed)
        self._scores = []
        self.failed  = True

    @abstractmethod
    def _evaluate_fitness(self, mesh: 'NodeMesh') -> float:
        """
        Evaluate and return the score of a network.

        IMPORTANT: The score must be a positive number (or zero).

        Parameters:
            mesh: The network to evaluate

        Returns:
            float: Score of the network (larger is better)
        """
        pass

    def _evaluate_fitness_all(self, meshes: list['NodeMesh'], num_jobs: int) -> list[float]:
        if num_jobs == 1:
            return [self._evaluate_fitness(mesh) for mesh in meshes]
        return list(Parallel(num_jobs)(delayed(self._evaluate_fitness)(mesh) for mesh in meshes))

    def __getstate__(self):
        # Worker processes only evaluate networks; the population stays in the parent
        state = self.__dict__.copy()
        state['_ga']     = None
        state['_scores'] = []
        return state

    @abstractmethod
    def _report_progress(self):
        """
        Report trial progress after each generation.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    @abstractmethod
    def _final_report(self):
        """
        Produce final report at the end of the trial.

        This method is suppressed by setting 'self._suppress_output' to 'True'.
        """
        pass

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        Stops after 'max_number_generations' generations, or as soon as the best
        score of a generation reaches 'fitness_threshold' (if set).

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        terminate = self.generation >= self._config.max_number_generations

        if self._config.fitness_threshold is not None:
            success = self.best_score >= self._config.fitness_threshold
            if success:
                self.failed = False
            terminate = terminate or success

        return terminate
