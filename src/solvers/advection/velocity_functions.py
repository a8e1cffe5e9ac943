"""
Analytic velocity models.

Each model is callable as ``model(x, y, t) -> (u, v)`` and broadcasts over
numpy arrays. Models can also be built from a flat parameter vector with
``from_parameters``, which is how case files and ContinuousFlowField pass
custom parameters.
"""

from __future__ import annotations
from dataclasses import astuple, dataclass, fields
from typing import Dict, Optional, Sequence, Tuple, Type
import numpy as np
from numpy.typing import ArrayLike, NDArray


class _ParameterizedModel:
    """Shared construction from an ordered parameter vector."""

    @classmethod
    def from_parameters(cls, parameters: Sequence[float]):
        expected = len(fields(cls))
        if len(parameters) != expected:
            raise ValueError(
                f"{cls.__name__} takes {expected} parameters "
                f"({', '.join(f.name for f in fields(cls))}), got {len(parameters)}"
            )
        return cls(*(float(p) for p in parameters))

    @property
    def parameters(self) -> Tuple[float, ...]:
        return astuple(self)


@dataclass
class DoubleGyreModel(_ParameterizedModel):
    """
    Time-periodic double gyre (Shadden et al., 2005).

    Two counter-rotating gyres on [0, 2] x [0, 1] whose separatrix
    oscillates left and right:

        u = -pi A sin(pi f) cos(pi y)
        v =  pi A cos(pi f) sin(pi y) df/dx

    with f(x, t) = a x² + b x, a = eps sin(w t), b = 1 - 2 eps sin(w t).
    """
    epsilon: float = 0.1
    amplitude: float = 0.1
    omega: float = np.pi / 5

    def __call__(self, x: ArrayLike, y: ArrayLike, t: float = 0.0) -> Tuple[NDArray, NDArray]:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        a = self.epsilon * np.sin(self.omega * t)
        b = 1.0 - 2.0 * self.epsilon * np.sin(self.omega * t)
        f = a * x**2 + b * x
        dfdx = 2.0 * a * x + b

        u = -np.pi * self.amplitude * np.sin(np.pi * f) * np.cos(np.pi * y)
        v = np.pi * self.amplitude * np.cos(np.pi * f) * np.sin(np.pi * y) * dfdx
        return u, v


@dataclass
class BowerModel(_ParameterizedModel):
    """
    Bower (1991) meandering jet, written in the frame moving with the meander.

    Stream function:
        psi = psi0 [1 - tanh((y - yc) / (lambda / cos(alpha)))]
    with yc = A sin(k x), k = 2 pi / L and alpha = atan(A k cos(k x)).
    In the co-moving frame the flow is steady, so ``t`` is ignored.

    Units: km and km/day.
    """
    scale: float = 50.0         # downstream speed at the jet centre
    amplitude: float = 50.0     # meander amplitude
    wavelength: float = 400.0
    phase_speed: float = 10.0
    width: float = 40.0         # jet scale width

    def __call__(self, x: ArrayLike, y: ArrayLike, t: float = 0.0) -> Tuple[NDArray, NDArray]:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        psi0 = self.scale * self.width
        k = 2.0 * np.pi / self.wavelength

        yc = self.amplitude * np.sin(k * x)
        dyc = self.amplitude * k * np.cos(k * x)
        alpha0 = self.width * np.sqrt(dyc**2 + 1.0)
        sech2 = 1.0 / np.cosh((y - yc) / alpha0)**2

        u = -self.phase_speed + psi0 * sech2 / alpha0
        v = -psi0 * ((yc * dyc * k**2 * (y - yc)) / (self.width * (dyc**2 + 1.0)**1.5)
                     - dyc / alpha0) * sech2
        return u, v


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------

VELOCITY_MODELS: Dict[str, Type[_ParameterizedModel]] = {
    "double_gyre": DoubleGyreModel,
    "bower": BowerModel,
}


def get_velocity_model(name: str, parameters: Optional[Sequence[float]] = None):
    """
    Build a registered velocity model.

    Args:
        name: Model name (see VELOCITY_MODELS)
        parameters: Optional parameter vector; defaults are used when None
    """
    try:
        model_cls = VELOCITY_MODELS[name]
    except KeyError:
        raise ValueError(f"Unknown velocity model: {name!r}. Available: {sorted(VELOCITY_MODELS)}")

    if parameters is None:
        return model_cls()
    return model_cls.from_parameters(parameters)
