import autograd.numpy as np  # type: ignore

def identity_activation(z):
    return z

def clamped_activation(z):
    return np.clip(z, -1.0, 1.0)

def relu_activation(z):
    return np.maximum(0.0, z)

def leaky_relu_activation(z, alpha=0.01):
    return np.where(z > 0, z, alpha * z)

def sigmoid_activation(z):
    z = np.clip(z, -500, 500)   # to prevent overflow when calculating exp
    return 1.0 / (1.0 + np.exp(-z))

def tanh_activation(z):
    return np.tanh(z)

def step_activation(z):
    return np.where(z >= 0, 1.0, 0.0)

def swish_activation(z):
    return z * sigmoid_activation(z)

def softplus_activation(z):
    # log(1 + exp(z)) computed without overflow for large z
    return np.logaddexp(0.0, z)

def sin_activation(z):
    return np.sin(z)

def gauss_activation(z):
    z = np.clip(z, -3.4, 3.4)
    return np.exp(-5.0 * z ** 2)

def abs_activation(z):
    return np.abs(z)

activations = {
    "identity"  : identity_activation,
    "linear"    : identity_activation,
    "clamped"   : clamped_activation,
    "relu"      : relu_activation,
    "leaky_relu": leaky_relu_activation,
    "sigmoid"   : sigmoid_activation,
    "tanh"      : tanh_activation,
    "step"      : step_activation,
    "swish"     : swish_activation,
    "softplus"  : softplus_activation,
    "sin"       : sin_activation,
    "gauss"     : gauss_activation,
    "abs"       : abs_activation
    }

# 3-letter identifiers for each activation function
activation_codes = {
    "identity"  : "IDN",
    "linear"    : "LIN",
    "clamped"   : "CLP",
    "relu"      : "RLU",
    "leaky_relu": "LRL",
    "sigmoid"   : "SIG",
    "tanh"      : "TNH",
    "step"      : "STP",
    "swish"     : "SWS",
    "softplus"  : "SPL",
    "sin"       : "SIN",
    "gauss"     : "GAU",
    "abs"       : "ABS"
    }
