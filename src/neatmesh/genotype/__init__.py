"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm. It provides classes for encoding neural network
structures and parameters at the genetic level.

The NEAT genotype consists of two types of genes:
- Node genes: Encode individual nodes with their layout position and activation
- Link genes: Encode weighted links between nodes; their innovation numbers are
              kept by the run's innovation registry

Modules:
    coordinate:          Coordinate class
    node_gene:           NodeType enumeration and NodeGene class
    link_gene:           LinkGene class
    innovation_registry: InnovationType, InnovationRecord and InnovationRegistry classes
    genome:              Genome class
    topology:            Topology class

Exported Classes:
    Coordinate:         Position of a node in the network layout
    NodeType:           Enumeration for node types (INPUT, BIAS, OUTPUT, HIDDEN)
    NodeGene:           Gene encoding a single network node
    LinkGene:           Gene encoding a weighted link between nodes
    InnovationType:     Kind of structural change (NEW_LINK, NEW_NODE)
    InnovationRecord:   A recorded structural change
    InnovationRegistry: Run-wide history of structural changes
    Genome:             Complete genome representing a neural network
    Topology:           Run-wide context shared by all genomes
"""

# Import order matters: the phenotype package needs the gene modules
from neatmesh.genotype.coordinate          import Coordinate
from neatmesh.genotype.node_gene           import NodeType, NodeGene
from neatmesh.genotype.link_gene           import LinkGene
from neatmesh.genotype.innovation_registry import InnovationType, InnovationRecord, InnovationRegistry
from neatmesh.genotype.genome              import Genome
from neatmesh.genotype.topology            import Topology

__all__ = ['Coordinate',
           'Genome',
           'InnovationRecord',
           'InnovationRegistry',
           'InnovationType',
           'LinkGene',
           'NodeGene',
           'NodeType',
           'Topology']
