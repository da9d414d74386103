"""
XOR Problem Implementation for neatmesh

This module implements the classic XOR (exclusive OR) problem as a benchmark
for the NEAT algorithm. XOR is not linearly separable, so the evolved network
needs at least one hidden node.

The XOR Problem:
        Input (0, 0) → Output 0
        Input (0, 1) → Output 1
        Input (1, 0) → Output 1
        Input (1, 1) → Output 0

Fitness Function:
    Fitness = (4.0 - Σ|output - target|)²

    Maximum fitness of 16.0 is achieved when all four XOR cases produce exact
    outputs. Squaring the score widens the gap between good and mediocre
    networks, which speeds up the search.

Classes:
    Trial_XOR: NEAT trial for solving XOR

Usage:
    python examples/trial_xor.py --config examples/config_xor.ini --seed 7
"""

import argparse
import logging
from pathlib import Path

from neatmesh           import Config, NodeMesh, UpdateMode
from neatmesh.run.trial import Trial

XOR_INPUTS  = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
XOR_OUTPUTS = [0.0, 1.0, 1.0, 0.0]

class Trial_XOR(Trial):
    """
    NEAT trial for solving the XOR (exclusive OR) problem.

    Each network is run in SNAPSHOT mode, so every XOR case is evaluated
    independently of the previous one, even once recurrent links appear.

    Implemented Methods:
        _evaluate_fitness(mesh): Test network on all 4 XOR cases
        _report_progress():      Display generation statistics
        _final_report():         Display the XOR truth table of the best network
    """

    def _evaluate_fitness(self, mesh: NodeMesh) -> float:
        """
        Evaluate a network on the four XOR cases.

        Returns:
            Fitness score (maximum 16.0 for a perfect XOR solution)
        """
        error = 0.0
        for inputs, target in zip(XOR_INPUTS, XOR_OUTPUTS):
            output = mesh.update(inputs, UpdateMode.SNAPSHOT)[0]
            error += abs(output - target)
        return (4.0 - error) ** 2

    def _report_progress(self):
        s  = f"GENERATION {self.generation:04d}: "
        s += f"best fitness = {self.best_score:.4f}, "
        s += f"species = {self._ga.num_species()}"
        print(s)

    def _final_report(self):
        best = self.best_genome
        mesh = best.phenotype()

        s  = "===============\n"
        s += "SUCCESS\n" if not self.failed else "FAILED\n"
        s += f"{best}\n\n"
        s += "input         output   target\n"
        s += "-----------------------------\n"
        for inputs, target in zip(XOR_INPUTS, XOR_OUTPUTS):
            output = mesh.update(inputs, UpdateMode.SNAPSHOT)[0]
            s += f"{inputs} -> {output:.4f}   {target}\n"
        print(s)

def main():
    parser = argparse.ArgumentParser(description='Evolve a network solving XOR')
    parser.add_argument('--config', default=str(Path(__file__).parent / 'config_xor.ini'),
                        help='Configuration file')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed of the random number generator')
    parser.add_argument('--num-jobs', type=int, default=1,
                        help='Number of parallel jobs')
    parser.add_argument('--verbose', action='store_true',
                        help='Show the engine debug log')
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    trial = Trial_XOR(Config(args.config), seed=args.seed)
    trial.run(num_jobs=args.num_jobs)

if __name__ == '__main__':
    main()
