"""
Activations Package

This package provides the activation functions a node can apply to its summed input.

Exported:
    activations:      Dictionary mapping activation function names to functions
    activation_codes: Dictionary mapping activation function names to 3-letter codes
    resolve:          Look up an activation function by name, with a sigmoid fallback
    Individual activation functions: identity_activation, clamped_activation,
                                     relu_activation, leaky_relu_activation,
                                     sigmoid_activation, tanh_activation,
                                     step_activation, swish_activation,
                                     softplus_activation, sin_activation,
                                     gauss_activation, abs_activation
"""

from typing import Callable

from neatmesh.activations.basic_activations import (
    activations,
    activation_codes,
    identity_activation,
    clamped_activation,
    relu_activation,
    leaky_relu_activation,
    sigmoid_activation,
    tanh_activation,
    step_activation,
    swish_activation,
    softplus_activation,
    sin_activation,
    gauss_activation,
    abs_activation
)

def resolve(name: str | None,
            table: dict[str, Callable] | None = None,
            default: str | None = None) -> Callable:
    """
    Find the activation function called 'name'.

    Unknown or missing names fall back to 'default', then to the sigmoid.

    Parameters:
        name:    Name of the activation function (may be None)
        table:   Lookup table to search (defaults to 'activations')
        default: Name to try when 'name' is not in the table

    Returns:
        The activation function
    """
    if table is None:
        table = activations
    fn = table.get(name) if name else None
    if fn is None and default:
        fn = table.get(default)
    return fn if fn is not None else sigmoid_activation

__all__ = [
    'activations',
    'activation_codes',
    'resolve',
    'identity_activation',
    'clamped_activation',
    'relu_activation',
    'leaky_relu_activation',
    'sigmoid_activation',
    'tanh_activation',
    'step_activation',
    'swish_activation',
    'softplus_activation',
    'sin_activation',
    'gauss_activation',
    'abs_activation'
]
