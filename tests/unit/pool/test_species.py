"""
Unit tests for Species class.

Tests cover membership, leader tracking, score adjustment, purging
and parent selection.
"""

import pytest
from unittest.mock import patch

from neatmesh.errors        import EmptySpeciesError
from neatmesh.pool.species  import Species


# ============================================================================
# Test Fixtures
# ============================================================================

@pytest.fixture
def founder(seed_genome):
    seed_genome.raw_score = 2.0
    return seed_genome


@pytest.fixture
def species(topology, founder):
    return Species(topology, founder)


def scored(topology, score):
    genome = topology.seed_genome()
    genome.raw_score = score
    return genome


# ============================================================================
# Membership
# ============================================================================

class TestSpeciesInit:
    """Test founding a species."""

    def test_founder(self, species, founder):
        """Test that the founder is the first member and the leader."""
        assert species.id == 1
        assert species.members == [founder]
        assert species.leader is not founder
        assert species.leader.to_dict() == founder.to_dict()
        assert species.best_score == 2.0
        assert founder.species_id == species.id

    def test_counters(self, species):
        """Test that a new species is neither old nor stale."""
        assert species.age == 0
        assert species.stale == 0
        assert species.num_to_spawn() == 0.0

    def test_ids_are_sequential(self, topology, species):
        """Test that every species gets a new ID."""
        assert Species(topology, scored(topology, 0.0)).id == species.id + 1


class TestAddMember:
    """Test adding members."""

    def test_weaker_member(self, topology, species):
        """Test that a weaker member leaves the leader alone."""
        leader = species.leader
        genome = scored(topology, 1.0)
        species.add_member(genome)
        assert species.size() == 2
        assert species.leader is leader
        assert genome.species_id == species.id

    def test_stronger_member(self, topology, species):
        """Test that a stronger member becomes the leader and resets staleness."""
        species.stale = 3
        genome = scored(topology, 5.0)
        species.add_member(genome)
        assert species.best_score == 5.0
        assert species.leader.id == genome.id
        assert species.stale == 0


# ============================================================================
# Scores
# ============================================================================

class TestAdjustScores:
    """Test fitness sharing."""

    def test_young_bonus(self, topology, species):
        """Test that young species get their scores boosted and shared."""
        species.add_member(scored(topology, 1.0))
        species.adjust_scores()
        bonus = topology.config.young_fitness_bonus
        assert [g.shared_score for g in species.members] == pytest.approx([2.0 * bonus / 2, 1.0 * bonus / 2])

    def test_no_adjustment(self, species, topology):
        """Test plain sharing for species neither young nor old."""
        species.age = topology.config.young_bonus_age
        species.adjust_scores()
        assert species.members[0].shared_score == pytest.approx(2.0)

    def test_old_penalty(self, species, topology):
        """Test that old species get their scores penalized."""
        species.age = topology.config.old_age_threshold + 1
        species.adjust_scores()
        assert species.members[0].shared_score == pytest.approx(2.0 * topology.config.old_age_penalty)

    def test_spawn_amount(self, topology, species, founder):
        """Test that the spawn amount sums the members' spawn counts."""
        other = scored(topology, 1.0)
        species.add_member(other)
        founder.spawn_count, other.spawn_count = 1.5, 0.75
        assert species.calc_spawn_amount() == pytest.approx(2.25)
        assert species.num_to_spawn() == pytest.approx(2.25)


class TestPurge:
    """Test the end of generation purge."""

    def test_purge(self, species):
        """Test that purging forgets the members and ages the species."""
        species.spawn_amount = 3.0
        species.purge()
        assert species.members == []
        assert species.spawn_amount == 0.0
        assert species.age == 1
        assert species.stale == 1
        assert species.leader is not None


# ============================================================================
# Parent Selection
# ============================================================================

class TestSpawn:
    """Test copying members."""

    def test_single_member(self, species, founder):
        """Test that a lone member is copied with a fresh ID."""
        baby = species.spawn()
        assert baby.id != founder.id
        assert baby.to_dict()["links"] == founder.to_dict()["links"]

    def test_picks_among_survivors(self, topology, species):
        """Test that only the best members reproduce."""
        for score in (1.5, 1.0, 0.5, 0.1):
            species.add_member(scored(topology, score))
        parents = {species.members[0].id, species.members[1].id}
        for _ in range(20):
            baby = species.spawn()
            assert any(baby.to_dict()["links"] == m.to_dict()["links"]
                       for m in species.members if m.id in parents)

    def test_no_members(self, species):
        """Test that a purged species cannot spawn."""
        species.purge()
        with pytest.raises(EmptySpeciesError):
            species.spawn()

    def test_no_leader(self, species):
        """Test that a species without a leader is broken."""
        species.leader = None
        with pytest.raises(EmptySpeciesError):
            species.spawn()


class TestRandomPair:
    """Test choosing two parents."""

    def test_single_member(self, species, founder):
        """Test that a lone member has no partner."""
        assert species.random_pair() == (founder, None)

    def test_distinct_pair(self, topology, species):
        """Test that the partner differs from the first parent."""
        species.add_member(scored(topology, 1.0))
        first, second = species.members
        with patch.object(topology.rng, 'randint', side_effect=[0, 0, 1]):
            assert species.random_pair(5) == (first, second)

    def test_gives_up(self, topology, species, founder):
        """Test that running out of attempts returns no partner."""
        species.add_member(scored(topology, 1.0))
        with patch.object(topology.rng, 'randint', return_value=0):
            assert species.random_pair(3) == (founder, None)

    def test_no_members(self, species):
        """Test that a purged species cannot pair."""
        species.purge()
        with pytest.raises(EmptySpeciesError):
            species.random_pair()
