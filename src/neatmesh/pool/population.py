"""
NEAT Population Module

This module implements the NeatGA class, the top-level orchestrator for the NEAT
evolutionary algorithm. It manages the complete lifecycle of evolution: the
evaluation harness scores the phenotypes of the current generation, and each
call to 'epoch' turns those scores into the next generation.

Classes:
    NeatGA: Top-level evolutionary coordinator managing genomes, species and generations
"""

import logging
import math

from neatmesh.errors          import ScoreCountError
from neatmesh.genotype        import Genome, Topology
from neatmesh.phenotype       import NodeMesh
from neatmesh.pool.species    import Species
from neatmesh.run.config      import Config

logger = logging.getLogger(__name__)

class NeatGA:
    """
    A population of evolving genomes in the NEAT algorithm.

    Usage:
        ga = NeatGA(Config(num_inputs=2, num_outputs=1), seed=42)
        for _ in range(100):
            meshes = ga.create_phenotypes()
            scores = [evaluate(mesh) for mesh in meshes]
            ga.epoch(scores)

    Scores must be non-negative; a larger score is better.

    Public Attributes:
        genomes:    The genomes of the current generation
        species:    The species, sorted by decreasing best score after an epoch
        best_score: Best raw score seen so far
        topology:   The Topology of the run

    Public Methods:
        epoch(scores):                     Create the next generation from the scores of the current one
        create_phenotypes():               Build the networks of the current generation
        best_from_prev_gen():              Build the networks of the elites of the previous generation
        num_species():                     Number of species
        current_generation():              Number of epochs run so far
        tournament_selection(sample_size): Pick a high scoring genome from a random sample
    """

    def __init__(self,
                 config  : Config | None   = None,
                 seed    : int | None      = None,
                 topology: Topology | None = None):
        """
        Parameters:
            config:   Stores configuration parameters (ignored if 'topology' is given)
            seed:     Seed of the run's random number generator (ignored if 'topology' is given)
            topology: An existing Topology to evolve in (e.g. one restored from disk)
        """
        self.topology  : Topology      = topology if topology is not None else Topology(config, seed)
        self._config   : Config        = self.topology.config
        self.genomes   : list[Genome]  = []
        self.species   : list[Species] = []
        self.best_score: float         = 0.0

        self._elites      : list[Genome] = []
        self._generation  : int          = 0
        self._total_shared: float        = 0.0
        self._avg_shared  : float        = 0.0

    @property
    def population_size(self) -> int:
        return self._config.population_size

    def _hatch(self) -> None:
        self.genomes = [self.topology.seed_genome() for _ in range(self.population_size)]

    def create_phenotypes(self) -> list[NodeMesh]:
        """
        Build the network of every genome of the current generation.

        The first call creates the initial population.

        Returns:
            One NodeMesh per genome, in the order of 'genomes'
        """
        if not self.genomes:
            self._hatch()
        return [genome.phenotype() for genome in self.genomes]

    def best_from_prev_gen(self) -> list[NodeMesh]:
        """The networks of the best 'num_elites' genomes of the previous generation."""
        return [genome.phenotype() for genome in self._elites]

    def num_species(self) -> int:
        return len(self.species)

    def current_generation(self) -> int:
        return self._generation

    def epoch(self, scores: list[float]) -> None:
        """
        Create the next generation.

        Steps:
        1. Remove species that have not improved for too long (unless they hold the best
           score ever) and purge the rest
        2. Assign the scores, rank the genomes and remember the elites
        3. Place each genome in the first species whose leader is compatible enough
        4. Share the scores within each species and allot offspring
        5. Breed the next generation species by species, best species first
        6. Fill any remaining places by tournament selection

        Parameters:
            scores: One score per genome, in the order of 'genomes'

        Raises:
            ScoreCountError: If the number of scores differs from the number of genomes
        """
        if not self.genomes:
            self._hatch()
        if len(scores) != len(self.genomes):
            raise ScoreCountError(f"epoch: got {len(scores)} scores for {len(self.genomes)} genomes",
                                  len(scores), len(self.genomes))

        self._cleanse(scores)
        new_generation = self._rejuvenate()

        while len(new_generation) < self.population_size:
            winner = self.tournament_selection(self.population_size // 5)
            new_generation.append(winner.clone(self.topology.allocate_genome_id()))

        self.genomes      = new_generation
        self._generation += 1

        logger.debug("generation %d: best score %.4f, %d species, %d innovations",
                     self._generation, self.best_score, self.num_species(), len(self.topology.registry))

    def _cleanse(self, scores: list[float]) -> None:
        config = self._config

        # Remove stale species
        kept = []
        for species in self.species:
            if species.stale > config.no_improvement_limit and species.best_score < self.best_score:
                logger.debug("species %d removed after %d generations without improvement",
                             species.id, species.stale)
                continue
            species.purge()
            kept.append(species)
        self.species = kept

        # Rank the genomes and remember the best ones
        for genome, score in zip(self.genomes, scores):
            genome.raw_score = score
        self.genomes.sort(key=lambda genome: genome.raw_score, reverse=True)
        self.best_score = max(self.best_score, self.genomes[0].raw_score)
        self._elites    = self.genomes[:config.num_elites]

        # Speciate
        for genome in self.genomes:
            species = next((s for s in self.species
                            if genome.compatibility(s.leader) <= config.compatibility_threshold), None)
            if species is not None:
                species.add_member(genome)
            else:
                species = Species(self.topology, genome)
                self.species.append(species)
                logger.debug("new species %d founded by genome %d", species.id, genome.id)

        # Fitness sharing and offspring allotment
        for species in self.species:
            species.adjust_scores()

        self._total_shared = sum(genome.shared_score for genome in self.genomes)
        self._avg_shared   = self._total_shared / len(self.genomes)
        for genome in self.genomes:
            if self._avg_shared > 0:
                genome.spawn_count = genome.shared_score / self._avg_shared
            else:
                genome.spawn_count = 1.0

        for species in self.species:
            species.calc_spawn_amount()
        self.species.sort(key=lambda species: species.best_score, reverse=True)

    def _crossover(self, mum: Genome, dad: Genome) -> Genome:
        # The fitter parent dominates; ties are decided by a coin flip
        if mum.raw_score > dad.raw_score:
            return mum.crossover_with(dad)
        if mum.raw_score < dad.raw_score:
            return dad.crossover_with(mum)
        if self.topology.rng.random() < 0.5:
            return mum.crossover_with(dad)
        return dad.crossover_with(mum)

    def _rejuvenate(self) -> list[Genome]:
        rng            = self.topology.rng
        new_generation = []

        for species in self.species:
            if len(new_generation) >= self.population_size:
                break

            count = math.floor(species.num_to_spawn() + 0.5)
            for n in range(count):
                if n == 0:
                    # The leader always survives
                    baby = species.leader.clone(self.topology.allocate_genome_id())
                elif species.size() == 1 or rng.random() > self._config.crossover_rate:
                    baby = species.spawn()
                else:
                    mum, dad = species.random_pair(5)
                    if dad is not None:
                        baby = self._crossover(mum, dad)
                    else:
                        baby = mum.clone(self.topology.allocate_genome_id())

                new_generation.append(baby.morph())
                if len(new_generation) == self.population_size:
                    break

        return new_generation

    def tournament_selection(self, sample_size: int) -> Genome:
        """
        Pick 'sample_size' genomes at random and return the one with the highest score.

        Only positive scores compete; if no sampled genome has one, the first genome
        of the current generation is returned.

        Parameters:
            sample_size: Number of genomes sampled (with replacement)
        """
        rng        = self.topology.rng
        chosen     = None
        best_score = 0.0
        for _ in range(sample_size):
            genome = rng.choice(self.genomes)
            if genome.raw_score > best_score:
                chosen     = genome
                best_score = genome.raw_score
        return chosen if chosen is not None else self.genomes[0]
