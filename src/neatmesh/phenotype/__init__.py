"""
NEAT Phenotype Package

This package implements the phenotype representation for the NEAT (NeuroEvolution
of Augmenting Topologies) algorithm: the executable network expressed by a genome.

Modules:
    node_mesh: Arena-based network supporting recurrent links

Exported Classes:
    UpdateMode: ACTIVE (one pass) or SNAPSHOT (one pass per layer, then reset)
    Link:       A weighted link between two nodes
    Node:       A computational node applying an activation function
    NodeMesh:   An executable network built from a genome
"""

from neatmesh.phenotype.node_mesh import Link, Node, NodeMesh, UpdateMode

__all__ = ['Link',
           'Node',
           'NodeMesh',
           'UpdateMode']
