"""
Unit tests for NeatGA class.

Tests cover population creation, the epoch (speciation, offspring
allotment, reproduction), tournament selection and reproducibility.
"""

import pytest

from neatmesh.errors           import ScoreCountError
from neatmesh.phenotype        import NodeMesh
from neatmesh.pool.population  import NeatGA
from neatmesh.pool.species     import Species
from neatmesh.run.config       import Config


# ============================================================================
# Test Fixtures
# ============================================================================

@pytest.fixture
def ga(small_config):
    return NeatGA(small_config, seed=7)


def linear_scores(ga):
    return [float(i + 1) for i in range(len(ga.genomes))]


# ============================================================================
# Initialization
# ============================================================================

class TestNeatGAInit:
    """Test creating the population."""

    def test_empty_until_first_use(self, ga):
        """Test that no genome exists before the phenotypes are requested."""
        assert ga.genomes == []
        assert ga.species == []
        assert ga.current_generation() == 0

    def test_create_phenotypes_hatches(self, ga, small_config):
        """Test that the first generation is made of seed genomes."""
        meshes = ga.create_phenotypes()
        assert len(meshes) == small_config.population_size
        assert all(isinstance(mesh, NodeMesh) for mesh in meshes)
        assert len({genome.id for genome in ga.genomes}) == small_config.population_size
        assert all(genome.num_links() == 3 for genome in ga.genomes)

    def test_existing_topology(self, topology):
        """Test evolving in a given topology."""
        ga = NeatGA(topology=topology)
        assert ga.topology is topology
        assert ga.population_size == topology.config.population_size


# ============================================================================
# Epoch
# ============================================================================

class TestEpoch:
    """Test creating the next generation."""

    def test_population_size_is_kept(self, ga, small_config):
        """Test that every generation has 'population_size' genomes."""
        ga.create_phenotypes()
        for _ in range(5):
            ga.epoch(linear_scores(ga))
            assert len(ga.genomes) == small_config.population_size

    def test_generation_counter(self, ga):
        """Test that each epoch counts one generation."""
        ga.create_phenotypes()
        ga.epoch(linear_scores(ga))
        ga.epoch(linear_scores(ga))
        assert ga.current_generation() == 2

    def test_score_count_mismatch(self, ga):
        """Test that a score is required for every genome."""
        ga.create_phenotypes()
        with pytest.raises(ScoreCountError):
            ga.epoch([1.0, 2.0])

    def test_epoch_hatches(self, ga, small_config):
        """Test that an epoch on an empty population hatches it first."""
        ga.epoch([1.0] * small_config.population_size)
        assert len(ga.genomes) == small_config.population_size

    def test_best_score(self, ga):
        """Test that the best score ever is remembered."""
        ga.create_phenotypes()
        ga.epoch(linear_scores(ga))
        ga.epoch([0.0] * len(ga.genomes))
        assert ga.best_score == float(len(ga.genomes))

    def test_fresh_ids(self, ga):
        """Test that the next generation's genomes have IDs never used before."""
        ga.create_phenotypes()
        old_ids = {genome.id for genome in ga.genomes}
        ga.epoch(linear_scores(ga))
        new_ids = [genome.id for genome in ga.genomes]
        assert len(set(new_ids)) == len(new_ids)
        assert not old_ids & set(new_ids)

    def test_spawn_amounts_add_up(self, ga, small_config):
        """Test that the species are allotted one offspring per place."""
        ga.create_phenotypes()
        ga.epoch(linear_scores(ga))
        total = sum(species.num_to_spawn() for species in ga.species)
        assert total == pytest.approx(small_config.population_size)

    def test_zero_scores(self, ga, small_config):
        """Test that all genomes are worth one offspring when nobody scores."""
        ga.create_phenotypes()
        previous = list(ga.genomes)
        ga.epoch([0.0] * small_config.population_size)
        assert all(genome.spawn_count == 1.0 for genome in previous)
        assert len(ga.genomes) == small_config.population_size

    def test_species_sorted(self, ga):
        """Test that species are sorted by decreasing best score."""
        ga.create_phenotypes()
        ga.epoch(linear_scores(ga))
        best = [species.best_score for species in ga.species]
        assert best == sorted(best, reverse=True)

    def test_every_genome_in_a_species(self, ga):
        """Test that every scored genome was placed in exactly one species."""
        ga.create_phenotypes()
        previous = list(ga.genomes)
        ga.epoch(linear_scores(ga))
        members = [genome.id for species in ga.species for genome in species.members]
        assert sorted(members) == sorted(genome.id for genome in previous)

    def test_elites(self, ga, small_config):
        """Test that the best genomes of the previous generation are remembered."""
        ga.create_phenotypes()
        ga.epoch(linear_scores(ga))
        elites = ga.best_from_prev_gen()
        assert len(elites) == small_config.num_elites
        assert all(isinstance(mesh, NodeMesh) for mesh in elites)

    def test_stale_species_removed(self, ga):
        """Test that species without improvement for too long die out."""
        ga.create_phenotypes()
        ga.epoch(linear_scores(ga))

        stale = Species(ga.topology, ga.genomes[0].clone())
        stale.best_score = 0.0
        stale.stale      = ga.topology.config.no_improvement_limit + 1
        ga.species.append(stale)

        ga.epoch(linear_scores(ga))
        assert stale not in ga.species

    def test_champion_species_survives(self, ga):
        """Test that the species holding the best score ever is never removed."""
        ga.create_phenotypes()
        ga.epoch(linear_scores(ga))

        champion = ga.species[0]
        champion.stale = ga.topology.config.no_improvement_limit + 1
        ga.epoch([0.0] * len(ga.genomes))
        assert champion in ga.species


# ============================================================================
# Selection & Reproducibility
# ============================================================================

class TestTournamentSelection:
    """Test tournament selection."""

    def test_no_positive_scores(self, ga):
        """Test that the first genome is returned when nobody scored."""
        ga.create_phenotypes()
        assert ga.tournament_selection(5) is ga.genomes[0]

    def test_best_of_sample(self, ga):
        """Test that the winner is the best sampled genome."""
        ga.create_phenotypes()
        for genome in ga.genomes:
            genome.raw_score = 1.0
        ga.genomes[3].raw_score = 100.0
        winner = ga.tournament_selection(500)
        assert winner is ga.genomes[3]


class TestReproducibility:
    """Test that a seed determines the whole run."""

    @staticmethod
    def run(seed):
        ga = NeatGA(Config(population_size=15, add_node_probability=0.3, add_link_probability=0.3), seed)
        for _ in range(4):
            meshes = ga.create_phenotypes()
            ga.epoch([mesh.update([1.0, 0.5])[0] for mesh in meshes])
        return [genome.to_dict() for genome in ga.genomes]

    def test_same_seed(self):
        """Test that two runs with the same seed produce the same genomes."""
        assert self.run(3) == self.run(3)

    def test_different_seed(self):
        """Test that different seeds lead to different runs."""
        assert self.run(3) != self.run(4)
