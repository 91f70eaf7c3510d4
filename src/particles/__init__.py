"""
Galaxy Hands Particles Module

Particle field simulation, text rasterization and the drawing interface.
"""
from .backend import DrawingBackend
from .text_raster import TextRaster
from .field import ParticleField, Particle, Star, repulsion_impulse

__all__ = [
    'DrawingBackend',
    'TextRaster',
    'ParticleField',
    'Particle',
    'Star',
    'repulsion_impulse',
]
