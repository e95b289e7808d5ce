"""Field of view by recursive shadowcasting."""

from .shadowcast import Octant, OCTANTS, Stance, ShadowCaster, compute_fov

__all__ = ['Octant', 'OCTANTS', 'Stance', 'ShadowCaster', 'compute_fov']
