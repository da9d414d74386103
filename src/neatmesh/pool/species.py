"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar genomes
that compete primarily within their own niche.

Classes:
    Species: Represents a single species with members and score tracking
"""

from typing import TYPE_CHECKING

from neatmesh.errors import EmptySpeciesError
if TYPE_CHECKING:
    from neatmesh.genotype import Genome, Topology

class Species:
    """
    A species representing a cluster of genetically similar genomes in NEAT.

    In NEAT, the population is divided into species based on genetic similarity,
    allowing different evolutionary niches to develop independently. This protects
    innovative structures from being eliminated by competition with more mature
    solutions, as genomes only share their score within their own species.

    Each species keeps a copy of its best genome ever (the leader), which is used
    for compatibility measurements during speciation and is always carried over
    into the next generation.

    Public Attributes:
        id:           Unique species identifier
        leader:       Copy of the best genome this species has produced
        members:      The genomes of the current generation placed in this species
        best_score:   Best raw score ever achieved by a member
        age:          Number of generations this species has existed
        stale:        Number of generations since the best score last improved
        spawn_amount: Number of offspring allotted to this species

    Public Methods:
        adjust_scores():     Apply age bonus/penalty and fitness sharing to the members
        add_member(genome):  Place a genome in this species
        purge():             Forget the members, age the species
        calc_spawn_amount(): Sum the members' spawn counts
        spawn():             Copy a member chosen among the best
        random_pair(tries):  Choose two distinct members among the best

    Life Cycle:
    1. Created when a genome doesn't fit into existing species
    2. Accumulates members during speciation based on compatibility with the leader
    3. Member scores are adjusted and shared, which sets the species' offspring allotment
    4. Purged at the start of every epoch; removed if it stays stale for too long
    """

    def __init__(self, topology: 'Topology', genome: 'Genome'):
        """
        Create a species whose first member (and leader) is 'genome'.

        Parameters:
            topology: The Topology of the run
            genome:   The founding member
        """
        self._topology = topology
        self._config   = topology.config

        self.id          : int              = topology.allocate_species_id()
        self.leader      : 'Genome | None'  = genome.clone()
        self.members     : list['Genome']   = [genome]
        self.best_score  : float            = genome.raw_score
        self.age         : int              = 0
        self.stale       : int              = 0
        self.spawn_amount: float            = 0.0

        genome.species_id = self.id

    def size(self) -> int:
        return len(self.members)

    def num_to_spawn(self) -> float:
        return self.spawn_amount

    def _require_leader(self) -> None:
        if self.leader is None:
            raise EmptySpeciesError(f"species {self.id} has no leader", self.id)

    def adjust_scores(self) -> None:
        """
        Compute the members' shared scores.

        Young species get their scores boosted, old species penalized. Each
        score is then divided by the number of members (fitness sharing), so
        that no species can grow too large.
        """
        config = self._config
        for genome in self.members:
            score = genome.raw_score
            if self.age < config.young_bonus_age:
                score *= config.young_fitness_bonus
            if self.age > config.old_age_threshold:
                score *= config.old_age_penalty
            genome.shared_score = score / len(self.members)

    def add_member(self, genome: 'Genome') -> None:
        if genome.raw_score > self.best_score:
            self.best_score = genome.raw_score
            self.leader     = genome.clone()
            self.stale      = 0
        genome.species_id = self.id
        self.members.append(genome)

    def purge(self) -> None:
        """Forget the members of the last generation; the species gets one generation older."""
        self.members      = []
        self.spawn_amount = 0.0
        self.stale       += 1
        self.age         += 1

    def calc_spawn_amount(self) -> float:
        self.spawn_amount = sum(genome.spawn_count for genome in self.members)
        return self.spawn_amount

    def _survivor_limit(self) -> int:
        # members[0..n] may reproduce
        n = int(self._config.survival_rate * len(self.members)) - 1
        if n < 0:
            n = 1
        if n >= len(self.members):
            n = len(self.members) - 1
        return n

    def spawn(self) -> 'Genome':
        """
        Copy a member chosen at random among the best 'survival_rate' fraction.

        Returns:
            The copy, with a fresh genome ID

        Raises:
            EmptySpeciesError: If the species has no leader or no members
        """
        self._require_leader()
        if not self.members:
            raise EmptySpeciesError(f"species {self.id} has no members to spawn from", self.id)

        rng = self._topology.rng
        if len(self.members) == 1:
            parent = self.members[0]
        else:
            parent = self.members[rng.randint(0, self._survivor_limit())]
        return parent.clone(self._topology.allocate_genome_id())

    def random_pair(self, tries: int = 5) -> tuple['Genome', 'Genome | None']:
        """
        Choose two distinct members at random among the best 'survival_rate' fraction.

        Parameters:
            tries: Attempts made to find a second member distinct from the first

        Returns:
            (first, second), where 'second' is None if no distinct member was found
        """
        self._require_leader()
        if not self.members:
            raise EmptySpeciesError(f"species {self.id} has no members to pair", self.id)

        rng = self._topology.rng
        if len(self.members) == 1:
            return self.members[0], None

        limit  = self._survivor_limit()
        first  = self.members[rng.randint(0, limit)]
        for _ in range(tries):
            second = self.members[rng.randint(0, limit)]
            if second.id != first.id:
                return first, second
        return first, None

    def __repr__(self):
        return (f"Species(id={self.id}, size={self.size()}, best_score={self.best_score:.4f}, "
                f"age={self.age}, stale={self.stale})")
