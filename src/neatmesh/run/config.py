"""
NEAT Config Module

This module implements the Config class, which stores every tunable parameter
of the engine. Parameters are read from an INI file; any parameter missing from
the file keeps its default value, so 'Config()' is a complete configuration.

Classes:
    Config: Configuration parameters for a NEAT run
"""

import configparser
import os
from typing import Any

from neatmesh.activations import activations

class Config:
    """
    Configuration parameters for a NEAT run.

    Usage:
        config = Config()                              # all defaults
        config = Config("config_xor.ini")              # read from INI file
        config = Config(population_size=50, bias=-1)   # defaults plus overrides
    """

    # (section, key, type, default)
    _PARAMETERS = [

        # [POPULATION_INIT]

        # The number of genomes in each generation.
        ('POPULATION_INIT', 'population_size', int, 150),

        # The number of input nodes, through which the network receives inputs.
        ('POPULATION_INIT', 'num_inputs', int, 2),

        # The number of output nodes, to which the network delivers outputs.
        ('POPULATION_INIT', 'num_outputs', int, 1),

        # The output value of the bias node.
        ('POPULATION_INIT', 'bias', float, 1.0),

        # [STRUCTURAL_MUTATIONS]

        # The probability, per offspring, that a link will be added.
        ('STRUCTURAL_MUTATIONS', 'add_link_probability', float, 0.07),

        # The probability, per offspring, that a node will be added
        # (splitting an existing link, which gets disabled).
        ('STRUCTURAL_MUTATIONS', 'add_node_probability', float, 0.03),

        # When adding a link, the probability that it loops back onto its node.
        ('STRUCTURAL_MUTATIONS', 'loop_probability', float, 0.0),

        # Number of attempts made to find a node without a self loop.
        ('STRUCTURAL_MUTATIONS', 'loop_tries', int, 5),

        # Number of attempts made to find two unlinked nodes when adding a link.
        ('STRUCTURAL_MUTATIONS', 'add_link_tries', int, 5),

        # Number of attempts made to find an old link to split when adding a node
        # to a small genome (this prevents the 'chaining' of new nodes).
        ('STRUCTURAL_MUTATIONS', 'old_link_tries', int, 5),

        # Maximum number of nodes permitted in a genome.
        ('STRUCTURAL_MUTATIONS', 'max_nodes', int, 100),

        # [CONNECTION]

        # The probability that the weight of each link is mutated.
        ('CONNECTION', 'weight_mutation_rate', float, 0.8),

        # Given a weight mutation, the probability that the weight
        # is replaced by a new random value instead of being perturbed.
        ('CONNECTION', 'weight_replace_probability', float, 0.1),

        # The maximum amount by which a weight can be perturbed.
        ('CONNECTION', 'max_weight_perturbation', float, 0.5),

        # During crossover, the probability that a link disabled in either parent stays disabled.
        ('CONNECTION', 'cancel_link_probability', float, 0.75),

        # [NODE]

        # The probability that the activation response of each node is mutated.
        ('NODE', 'activation_mutation_rate', float, 0.1),

        # The maximum amount by which an activation response can be perturbed.
        ('NODE', 'max_activation_perturbation', float, 0.1),

        # Activation function of hidden nodes (see 'basic_activations.py').
        ('NODE', 'activation_function', str, 'sigmoid'),

        # Activation function of output nodes.
        ('NODE', 'output_activation', str, 'sigmoid'),

        # [SPECIATION]

        # Genomes whose compatibility distance to a species leader
        # does not exceed this threshold join that species.
        # The smaller the number, the more species will be created.
        ('SPECIATION', 'compatibility_threshold', float, 0.26),

        # The coefficients of the excess genes, disjoint genes and average
        # weight difference terms in the compatibility distance.
        ('SPECIATION', 'excess_coeff', float, 1.0),
        ('SPECIATION', 'disjoint_coeff', float, 1.0),
        ('SPECIATION', 'weight_coeff', float, 0.4),

        # Species younger than this get their scores boosted by 'young_fitness_bonus'.
        ('SPECIATION', 'young_bonus_age', int, 10),
        ('SPECIATION', 'young_fitness_bonus', float, 1.3),

        # Species older than this get their scores scaled by 'old_age_penalty'.
        ('SPECIATION', 'old_age_threshold', int, 50),
        ('SPECIATION', 'old_age_penalty', float, 0.7),

        # [REPRODUCTION]

        # The fraction of each species allowed to reproduce (0.2 = 20%).
        ('REPRODUCTION', 'survival_rate', float, 0.0),

        # The probability that an offspring is created by crossover (rather than cloning).
        ('REPRODUCTION', 'crossover_rate', float, 0.7),

        # The number of best genomes remembered from each generation.
        ('REPRODUCTION', 'num_elites', int, 4),

        # [STAGNATION]

        # Species that have not improved in more than this number of
        # generations are removed (unless they hold the best score ever).
        ('STAGNATION', 'no_improvement_limit', int, 15),

        # [TERMINATION]

        # The number of generations after which a trial stops.
        ('TERMINATION', 'max_number_generations', int, 100),

        # A trial stops early when the best score reaches this value ("None" to disable).
        ('TERMINATION', 'fitness_threshold', float, None),
    ]

    def __init__(self, config_file: str | None = None, **overrides: Any):
        """
        Initialize Config from defaults, an optional INI file, and optional overrides.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, all parameters take their default values.
            overrides:   Parameter values applied last (e.g. population_size=50)

        Raises:
            FileNotFoundError: If 'config_file' does not exist
            ValueError:        If a parameter is unknown or has an invalid value
        """
        for _, key, _, default in self._PARAMETERS:
            setattr(self, key, default)

        # The activation lookup table can be extended with custom functions
        self.activation_table = dict(activations)

        if config_file is not None:
            self._read(config_file)

        known = {key for _, key, _, _ in self._PARAMETERS} | {'activation_table'}
        for key, value in overrides.items():
            if key not in known:
                raise ValueError(f"Unknown configuration parameter '{key}'")
            setattr(self, key, value)

        self.validate()

    def _read(self, config_file: str) -> None:
        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Helper function to safely parse values
        def get_value(section, key, value_type, default):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                return default

        for section, key, value_type, default in self._PARAMETERS:
            setattr(self, key, get_value(section, key, value_type, default))

    def validate(self) -> None:
        """
        Check that the parameters are consistent.

        Raises:
            ValueError: If a parameter has an invalid value
        """
        if self.population_size < 1:
            raise ValueError("'population_size' must be at least 1")
        if self.num_inputs < 1 or self.num_outputs < 1:
            raise ValueError("a network needs at least one input and one output node")
        if self.max_nodes < self.num_inputs + self.num_outputs + 1:
            raise ValueError("'max_nodes' is smaller than the seed network")

        for key in ('add_link_probability', 'add_node_probability', 'loop_probability',
                    'weight_mutation_rate', 'weight_replace_probability', 'cancel_link_probability',
                    'activation_mutation_rate', 'survival_rate', 'crossover_rate'):
            value = getattr(self, key)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"'{key}' must be a probability, got {value}")

        for key in ('activation_function', 'output_activation'):
            name = getattr(self, key)
            if name not in self.activation_table:
                raise ValueError(f"Invalid activation function '{name}' for '{key}'")

    def to_dict(self) -> dict:
        """Return the parameter values (the activation table is not included)."""
        return {key: getattr(self, key) for _, key, _, _ in self._PARAMETERS}
