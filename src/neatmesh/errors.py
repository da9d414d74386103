"""
NEAT Errors Module

This module defines the exceptions raised by the engine.

Running out of attempts while looking for a mutation target (or for a second
parent) is not an error: the operation simply does nothing. The exceptions
below are reserved for broken invariants, which mean that a genome or the
innovation registry has been corrupted, or that the API has been misused.
They are never caught inside the engine.

Classes:
    NeatError:          Base class for all engine errors
    InvariantViolation: A structural invariant does not hold (fatal)
    InvalidIdError:     A zero or negative node/innovation ID
    MissingNodeError:   A link gene references a node absent from its genome
    ScoreCountError:    Number of scores differs from the number of genomes
    EmptySpeciesError:  A species has no leader
    AlignmentError:     Same innovation ID but different link endpoints
"""

class NeatError(Exception):
    """
    Base class for all errors raised by the engine.
    """

class InvariantViolation(NeatError, AssertionError):
    """
    A structural invariant of the engine does not hold.

    Public Attributes:
        ids: The offending IDs (node IDs, innovation IDs, genome IDs ...)
    """

    def __init__(self, message: str, *ids: int):
        super().__init__(message)
        self.ids: tuple = ids

class InvalidIdError(InvariantViolation):
    """A node, innovation or genome ID is zero or negative."""

class MissingNodeError(InvariantViolation):
    """A link gene references a node that is not part of the same genome."""

class ScoreCountError(InvariantViolation):
    """The number of scores passed to an epoch differs from the population size."""

class EmptySpeciesError(InvariantViolation):
    """A species has neither members nor a leader."""

class AlignmentError(InvariantViolation):
    """Two link genes share an innovation ID but not their endpoints."""
