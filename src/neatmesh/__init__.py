"""
neatmesh - NEAT (NeuroEvolution of Augmenting Topologies) in Python.

This package provides an implementation of the NEAT algorithm for evolving
neural networks, including networks with recurrent links, through genetic
algorithms. Fitness is always computed by the caller.

Main components:
- genotype: Genetic encoding (genomes, genes, innovation registry, topology)
- phenotype: Executable networks built from genomes
- pool: Speciation and population management
- run: Configuration and trial execution
- activations: Activation functions for neural networks

Example:
    >>> from neatmesh import Config, NeatGA
    >>> ga = NeatGA(Config(num_inputs=2, num_outputs=1), seed=1)
    >>> meshes = ga.create_phenotypes()
    >>> ga.epoch([score(mesh) for mesh in meshes])
"""

__version__ = "0.1.0"

# Import main classes for convenient access; 'run.config' must come first
from neatmesh.run.config          import Config
from neatmesh.run.trial           import Trial
from neatmesh.genotype.genome     import Genome
from neatmesh.genotype.topology   import Topology
from neatmesh.genotype.node_gene  import NodeGene, NodeType
from neatmesh.genotype.link_gene  import LinkGene
from neatmesh.phenotype.node_mesh import NodeMesh, UpdateMode
from neatmesh.pool.species        import Species
from neatmesh.pool.population     import NeatGA

__all__ = [
    "Config",
    "Trial",
    "Genome",
    "Topology",
    "NodeGene",
    "NodeType",
    "LinkGene",
    "NodeMesh",
    "UpdateMode",
    "Species",
    "NeatGA",
]
