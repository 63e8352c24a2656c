"""
rosebloom: spiral bouquet layout and ambient particle backdrop.

Renderer-agnostic geometry: stems come out as 3D curves with ornament
metadata, particles as 2D positions per step.
"""

from rosebloom.layout import BouquetConfig, DensityProfile, classify, generate_bouquet
from rosebloom.particles import Bounds, ParticleMode, ParticleSimulator, create_particle_pool

__version__ = "0.1.0"
